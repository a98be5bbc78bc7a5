"""SSH operations."""

from sshv2.ssh.base import CommandResult, Direction, SessionState, TransferDescriptor
from sshv2.ssh.keys import normalize_private_key
from sshv2.ssh.paths import resolve_remote_path
from sshv2.ssh.session import SSHSession, connect_options
from sshv2.ssh.staging import staging_file, with_staging_file

__all__ = [
    "CommandResult",
    "Direction",
    "SessionState",
    "TransferDescriptor",
    "SSHSession",
    "connect_options",
    "normalize_private_key",
    "resolve_remote_path",
    "staging_file",
    "with_staging_file",
]
