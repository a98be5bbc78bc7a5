"""Connection commands."""

from __future__ import annotations

from sshv2.config.connection import ConnectionConfig
from sshv2.config.profiles import ProfileStore
from sshv2.operations import probe_connection
from sshv2.operations.dispatcher import SessionFactory
from sshv2.output import emit_record, error, success
from sshv2.ssh.session import SSHSession


def check_connection(
    config: ConnectionConfig,
    as_json: bool = False,
    *,
    session_factory: SessionFactory = SSHSession,
) -> int:
    """Check that the target accepts the configured credentials."""
    result = probe_connection(config, session_factory=session_factory)
    if as_json:
        emit_record(result.record)
    elif result.ok:
        success(f"{result.message} ({config.target})")
    else:
        error(result.message, exit_now=False)
    return 0 if result.ok else 1


def list_profiles(store: ProfileStore) -> int:
    """Print stored profile names."""
    names = store.names()
    if not names:
        print("No profiles configured")
        return 1
    for name in names:
        print(name)
    return 0
