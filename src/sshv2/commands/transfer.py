"""File transfer commands."""

from __future__ import annotations

from pathlib import Path

from sshv2.config.connection import ConnectionConfig
from sshv2.exceptions import TransferError
from sshv2.operations import (
    DownloadFile,
    ErrorPolicy,
    UploadFile,
    run,
    run_one,
)
from sshv2.operations.dispatcher import SessionFactory
from sshv2.operations.requests import UploadSource
from sshv2.output import emit_record, error, success
from sshv2.ssh.session import SSHSession


def download(
    config: ConnectionConfig,
    remote: str,
    local: Path | None = None,
    file_name: str | None = None,
    policy: ErrorPolicy = ErrorPolicy.HALT,
    as_json: bool = False,
    *,
    session_factory: SessionFactory = SSHSession,
) -> int:
    """Download a remote file.

    If local is None or a directory, the file is saved there under its
    file name.
    """
    outcome = run_one(config, DownloadFile(remote, file_name), policy, session_factory=session_factory)
    if not outcome.ok:
        _report_failure(outcome.record, as_json)
        return 1

    binary = outcome.binary
    dest = local if local is not None else Path.cwd()
    if dest.is_dir():
        dest = dest / binary.file_name
    try:
        dest.write_bytes(binary.read())
    except OSError as e:
        raise TransferError(f"Cannot write {dest}: {e.strerror or e}", reason="io") from e

    if as_json:
        emit_record(outcome.record)
    else:
        success(f"Downloaded {outcome.record['remotePath']} -> {dest}")
    return 0


def upload(
    config: ConnectionConfig,
    sources: list[UploadSource],
    remote_dir: str,
    remote_name: str | None = None,
    policy: ErrorPolicy = ErrorPolicy.HALT,
    as_json: bool = False,
    *,
    session_factory: SessionFactory = SSHSession,
) -> int:
    """Upload files or inline content into a remote directory."""
    requests = [UploadFile(remote_dir, source, remote_name) for source in sources]
    outcomes = run(config, requests, policy, session_factory=session_factory)

    failed = False
    for outcome in outcomes:
        if not outcome.ok:
            failed = True
            _report_failure(outcome.record, as_json)
        elif as_json:
            emit_record(outcome.record)
        else:
            success(f"Uploaded {outcome.record['remotePath']}")

    return 1 if failed else 0


def _report_failure(record: dict, as_json: bool) -> None:
    if as_json:
        emit_record(record)
    else:
        error(record["error"], exit_now=False)
