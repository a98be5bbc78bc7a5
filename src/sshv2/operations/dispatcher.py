"""Run operation requests over one SSH session.

Each call to run() is one invocation: connect once, process the requests in
the order given, disconnect once. A failed connect always aborts; errors
inside an item follow the caller's ErrorPolicy.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

from sshv2.config.connection import ConnectionConfig
from sshv2.exceptions import ParameterError, SSHError, Sshv2Error, TransferError
from sshv2.operations.requests import (
    BinaryData,
    ConnectionTestResult,
    DownloadFile,
    ErrorKind,
    ErrorPolicy,
    ExecuteCommand,
    Failure,
    OperationOutcome,
    OperationRequest,
    Success,
    UploadAck,
    UploadFile,
)
from sshv2.output import debug
from sshv2.ssh.paths import resolve_remote_path
from sshv2.ssh.session import SSHSession
from sshv2.ssh.staging import staging_file
from sshv2.utils import guess_mime_type, remote_basename, remote_join

SessionFactory = Callable[[ConnectionConfig], SSHSession]


def run(
    config: ConnectionConfig,
    requests: Sequence[OperationRequest],
    policy: ErrorPolicy = ErrorPolicy.HALT,
    *,
    session_factory: SessionFactory = SSHSession,
) -> list[OperationOutcome]:
    """Execute requests sequentially on a single session.

    Returns one outcome per processed request. Under HALT the first failing
    item's error propagates; under CONTINUE it becomes a Failure outcome,
    including a channel failure on the already open session.

    Raises:
        SSHError: On connection failure, whatever the policy.
    """
    session = session_factory(config)
    session.connect()

    outcomes: list[OperationOutcome] = []
    try:
        for index, request in enumerate(requests):
            try:
                outcomes.append(dispatch(session, request))
            except Sshv2Error as e:
                if policy is not ErrorPolicy.CONTINUE:
                    raise
                debug(f"[run] item {index} failed: {e.message}")
                outcomes.append(Failure(request, ErrorKind.for_error(e), e.message))
    finally:
        session.disconnect()

    return outcomes


def run_one(
    config: ConnectionConfig,
    request: OperationRequest,
    policy: ErrorPolicy = ErrorPolicy.HALT,
    *,
    session_factory: SessionFactory = SSHSession,
) -> OperationOutcome:
    """Single-shot invocation of one request."""
    return run(config, [request], policy, session_factory=session_factory)[0]


def probe_connection(
    config: ConnectionConfig,
    *,
    session_factory: SessionFactory = SSHSession,
) -> ConnectionTestResult:
    """Probe a connection: connect, then disconnect."""
    session = session_factory(config)
    try:
        session.connect()
    except SSHError as e:
        return ConnectionTestResult("Error", e.message)
    session.disconnect()
    return ConnectionTestResult("OK", "Connection successful!")


def dispatch(session: SSHSession, request: OperationRequest) -> Success:
    """Run one request on an open session."""
    if isinstance(request, ExecuteCommand):
        return execute_command(session, request)
    if isinstance(request, DownloadFile):
        return download_file(session, request)
    if isinstance(request, UploadFile):
        return upload_file(session, request)
    raise ParameterError(f"Unsupported operation: {type(request).__name__}")


def execute_command(session: SSHSession, request: ExecuteCommand) -> Success:
    cwd = resolve_remote_path(request.working_directory, session)
    result = session.execute(request.command, cwd)
    record = {
        "stdout": result.stdout,
        "stderr": result.stderr,
        "exitCode": result.exit_code,
        "success": result.succeeded,
        "command": request.command,
        "workingDirectory": cwd,
    }
    return Success(request, result, record)


def download_file(session: SSHSession, request: DownloadFile) -> Success:
    remote_path = resolve_remote_path(request.remote_path, session)
    file_name = request.file_name or remote_basename(remote_path)

    with staging_file() as local_path:
        session.download_file(remote_path, local_path)
        binary = BinaryData(
            data=local_path.read_bytes(),
            file_name=file_name,
            mime_type=guess_mime_type(file_name),
        )

    record = {"success": True, "remotePath": remote_path, "fileName": file_name}
    return Success(request, binary, record)


def upload_file(session: SSHSession, request: UploadFile) -> Success:
    file_name = request.target_name()
    directory = resolve_remote_path(request.remote_directory, session)
    remote_path = remote_join(directory, file_name)

    with staging_file() as local_path:
        materialize(request.source, local_path)
        session.upload_file(local_path, remote_path)

    record = {"success": True, "remotePath": remote_path}
    return Success(request, UploadAck(remote_path), record)


def materialize(source: object, dest: Path) -> None:
    """Write upload content into a staging file.

    Raises ParameterError if the source is missing or empty binary data.
    """
    if source is None:
        raise ParameterError("No binary data found for upload")
    if isinstance(source, BinaryData) and source.is_empty:
        raise ParameterError("Binary data for upload has no content")
    try:
        if isinstance(source, BinaryData):
            source.write_to(dest)
        elif isinstance(source, bytes):
            dest.write_bytes(source)
        elif isinstance(source, str):
            dest.write_text(source, encoding="utf-8")
        else:
            raise ParameterError(f"Unsupported upload content: {type(source).__name__}")
    except OSError as e:
        raise TransferError(f"Cannot stage upload content: {e}", reason="io") from e
