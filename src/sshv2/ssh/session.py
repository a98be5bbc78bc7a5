"""SSH session lifecycle: connect, execute, transfer, disconnect."""

from __future__ import annotations

import secrets
from pathlib import Path
from typing import Any, Callable

import paramiko

from sshv2.config.connection import ConnectionConfig, PasswordSecret
from sshv2.exceptions import ConnectionClosedError, SSHError, TransferError
from sshv2.output import debug
from sshv2.ssh.base import CommandResult, Direction, SessionState, TransferDescriptor
from sshv2.ssh.keys import load_private_key, normalize_private_key
from sshv2.utils import shell_quote

# Errors paramiko raises for transport and SFTP failures
TRANSPORT_ERRORS = (paramiko.SSHException, OSError)

RECV_SIZE = 65536


def connect_options(config: ConnectionConfig) -> dict[str, Any]:
    """Build transport connect options for a config.

    Password mode yields {hostname, port, username, password}. Key mode yields
    {hostname, port, username, private_key} with the key normalized, plus
    passphrase only when one is set.
    """
    options: dict[str, Any] = {
        "hostname": config.host,
        "port": config.port,
        "username": config.username,
    }
    secret = config.secret
    if isinstance(secret, PasswordSecret):
        options["password"] = secret.password
    else:
        options["private_key"] = normalize_private_key(secret.key_material)
        if secret.passphrase:
            options["passphrase"] = secret.passphrase
    return options


class SSHSession:
    """One authenticated SSH connection, owned by a single invocation.

    Lifecycle is UNCONNECTED -> CONNECTED -> CLOSED. Commands and transfers
    are only allowed while CONNECTED; after disconnect() every operation
    raises ConnectionClosedError.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient,
    ):
        self.config = config
        self.state = SessionState.UNCONNECTED
        self._client_factory = client_factory
        self._client: paramiko.SSHClient | None = None
        self._sftp: paramiko.SFTPClient | None = None

    def __enter__(self) -> "SSHSession":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    @property
    def target(self) -> str:
        return self.config.target

    @property
    def is_connected(self) -> bool:
        return self.state is SessionState.CONNECTED

    def connect(self) -> "SSHSession":
        """Open and authenticate the connection.

        Raises:
            SSHError: On network, authentication or host key failure, or if
                the session was already opened once.
        """
        if self.state is SessionState.CLOSED:
            raise ConnectionClosedError(f"SSH session to {self.target} is closed")
        if self.state is SessionState.CONNECTED:
            raise SSHError(f"Already connected to {self.target}")

        options = connect_options(self.config)
        debug(f"[ssh] connect {self.target} ({self.config.auth_mode.value})")

        client = self._client_factory()
        if self.config.strict_host_keys:
            client.load_system_host_keys()
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        kwargs: dict[str, Any] = {
            "hostname": options["hostname"],
            "port": options["port"],
            "username": options["username"],
            # Only the configured secret may be used
            "allow_agent": False,
            "look_for_keys": False,
        }
        timeout = self.config.timeout
        if timeout is not None:
            kwargs.update(timeout=timeout, banner_timeout=timeout, auth_timeout=timeout)

        try:
            if "password" in options:
                kwargs["password"] = options["password"]
            else:
                kwargs["pkey"] = load_private_key(options["private_key"], options.get("passphrase"))
            client.connect(**kwargs)
        except SSHError as e:
            client.close()
            raise SSHError(f"SSH connection failed: {e.message}") from e
        except TRANSPORT_ERRORS as e:
            client.close()
            raise SSHError(f"SSH connection failed: {e}") from e

        self._client = client
        self.state = SessionState.CONNECTED
        debug(f"[ssh] connected {self.target}")
        return self

    def execute(self, command: str, working_directory: str | None = None) -> CommandResult:
        """Run a command and capture stdout, stderr and exit code.

        A non-zero exit is a normal result, not an error.

        Raises:
            SSHError: If the session is not usable or the channel fails.
        """
        client = self._require_client()

        full_command = command
        if working_directory:
            full_command = f"cd {shell_quote(working_directory)} && {command}"
        debug(f"[ssh] exec: {full_command[:100]}{'...' if len(full_command) > 100 else ''}")

        try:
            stdin, stdout, _ = client.exec_command(full_command)
            stdin.close()
            out, err, exit_code = _drain(stdout.channel)
        except TRANSPORT_ERRORS as e:
            raise SSHError(f"Command failed on {self.target}: {e}") from e

        debug(f"[ssh] exit={exit_code}")
        return CommandResult(
            stdout=_decode(out),
            stderr=_decode(err),
            exit_code=exit_code,
        )

    def download_file(self, remote_path: str, local_path: Path) -> Path:
        """Copy a remote file into local_path.

        Raises:
            TransferError: If the remote file is missing or unreadable.
        """
        transfer = TransferDescriptor(Path(local_path), remote_path, Direction.DOWNLOAD)
        sftp = self._open_sftp()
        debug(f"[sftp] get {transfer}")
        try:
            sftp.get(remote_path, str(transfer.local_path))
        except TRANSPORT_ERRORS as e:
            raise _transfer_error(transfer, e) from e
        return transfer.local_path

    def upload_file(self, local_path: Path, remote_path: str) -> None:
        """Write local_path to remote_path, creating or overwriting it.

        Data goes to a temporary sibling first and is renamed into place, so
        a failed upload never leaves a truncated file at remote_path.

        Raises:
            TransferError: If the remote directory is missing or not writable.
        """
        transfer = TransferDescriptor(Path(local_path), remote_path, Direction.UPLOAD)
        sftp = self._open_sftp()
        partial = f"{remote_path}.{secrets.token_hex(4)}.part"
        debug(f"[sftp] put {transfer}")
        try:
            sftp.put(str(transfer.local_path), partial)
            self._move_into_place(sftp, partial, remote_path)
        except TRANSPORT_ERRORS as e:
            self._discard_partial(sftp, partial)
            raise _transfer_error(transfer, e) from e

    def disconnect(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self.state is SessionState.CLOSED:
            return

        sftp, client = self._sftp, self._client
        self._sftp = None
        self._client = None
        self.state = SessionState.CLOSED

        try:
            if sftp is not None:
                sftp.close()
        finally:
            if client is not None:
                client.close()
                debug(f"[ssh] disconnected {self.target}")

    def _require_client(self) -> paramiko.SSHClient:
        if self.state is SessionState.CLOSED:
            raise ConnectionClosedError(f"SSH session to {self.target} is closed")
        if self._client is None:
            raise SSHError(f"Not connected to {self.target}")
        return self._client

    def _open_sftp(self) -> paramiko.SFTPClient:
        client = self._require_client()
        if self._sftp is None:
            try:
                self._sftp = client.open_sftp()
            except TRANSPORT_ERRORS as e:
                raise SSHError(f"SFTP unavailable on {self.target}: {e}") from e
        return self._sftp

    def _move_into_place(self, sftp: paramiko.SFTPClient, partial: str, remote_path: str) -> None:
        """Rename partial over remote_path.

        Servers without the posix-rename extension get a plain rename,
        which can't overwrite, so an existing target is removed first.
        """
        try:
            sftp.posix_rename(partial, remote_path)
            return
        except OSError as e:
            if not _unsupported(e):
                raise
            debug(f"[sftp] posix-rename unsupported on {self.target}, using rename")

        try:
            sftp.remove(remote_path)
        except FileNotFoundError:
            debug(f"[sftp] no existing file at {remote_path}")
        sftp.rename(partial, remote_path)

    def _discard_partial(self, sftp: paramiko.SFTPClient, partial: str) -> None:
        try:
            sftp.remove(partial)
        except TRANSPORT_ERRORS as e:
            # Nothing was written, or the server already dropped it
            debug(f"[sftp] no partial upload removed at {partial}: {e}")


def _drain(channel: paramiko.Channel) -> tuple[bytes, bytes, int]:
    """Read stdout and stderr together until the command exits.

    Both streams share the channel window, so reading one to EOF first can
    stall the remote side on the other.
    """
    out: list[bytes] = []
    err: list[bytes] = []
    while True:
        if channel.recv_ready():
            out.append(channel.recv(RECV_SIZE))
        if channel.recv_stderr_ready():
            err.append(channel.recv_stderr(RECV_SIZE))
        if channel.exit_status_ready() and not channel.recv_ready() and not channel.recv_stderr_ready():
            break
        if not channel.recv_ready() and not channel.recv_stderr_ready() and not channel.exit_status_ready():
            channel.status_event.wait(0.1)
    return b"".join(out), b"".join(err), channel.recv_exit_status()


def _unsupported(exc: OSError) -> bool:
    """True for an SFTP "operation unsupported" status."""
    if isinstance(exc, (FileNotFoundError, PermissionError)):
        return False
    return "unsupported" in str(exc).lower()


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace").strip()


def _transfer_error(transfer: TransferDescriptor, exc: Exception) -> TransferError:
    """Classify a transport exception as not_found, permission or io."""
    verb = "Upload" if transfer.direction is Direction.UPLOAD else "Download"
    path = transfer.remote_path

    if isinstance(exc, FileNotFoundError):
        if transfer.direction is Direction.UPLOAD:
            return TransferError(f"{verb} failed: remote directory for {path} does not exist", reason="not_found")
        return TransferError(f"{verb} failed: remote file not found: {path}", reason="not_found")
    if isinstance(exc, PermissionError):
        return TransferError(f"{verb} failed: permission denied: {path}", reason="permission")
    return TransferError(f"{verb} failed for {path}: {exc}", reason="io")
