"""Shared test fixtures for sshv2."""

from __future__ import annotations

import logging
import threading

import pytest
from pathlib import Path
from unittest.mock import MagicMock

import paramiko

from sshv2.config.connection import ConnectionConfig, PasswordSecret, PrivateKeySecret
from sshv2.ssh.base import CommandResult


class FakeChannel:
    """Channel stand-in that hands out canned output, already exited."""

    def __init__(self, stdout: bytes = b"", stderr: bytes = b"", exit_code: int = 0):
        self._stdout = [stdout] if stdout else []
        self._stderr = [stderr] if stderr else []
        self._exit_code = exit_code
        self.status_event = threading.Event()
        self.status_event.set()

    def recv_ready(self) -> bool:
        return bool(self._stdout)

    def recv(self, nbytes: int) -> bytes:
        return self._stdout.pop(0)

    def recv_stderr_ready(self) -> bool:
        return bool(self._stderr)

    def recv_stderr(self, nbytes: int) -> bytes:
        return self._stderr.pop(0)

    def exit_status_ready(self) -> bool:
        return True

    def recv_exit_status(self) -> int:
        return self._exit_code


def exec_streams(stdout: bytes = b"", stderr: bytes = b"", exit_code: int = 0):
    """Build the (stdin, stdout, stderr) triple paramiko's exec_command returns."""
    stdin = MagicMock()
    out = MagicMock()
    out.channel = FakeChannel(stdout, stderr, exit_code)
    err = MagicMock()
    return stdin, out, err


@pytest.fixture
def password_config():
    """Password-authenticated connection config."""
    return ConnectionConfig(
        host="host.example.com",
        username="user",
        secret=PasswordSecret("hunter2"),
    )


@pytest.fixture
def key_config():
    """Key-authenticated connection config with a bare key body."""
    return ConnectionConfig(
        host="host.example.com",
        username="user",
        port=2222,
        secret=PrivateKeySecret("b3BlbnNzaC1rZXktdjEAAAAA"),
    )


@pytest.fixture
def mock_ssh_client():
    """Mock paramiko.SSHClient; exec_command returns an empty successful result."""
    client = MagicMock(spec=paramiko.SSHClient)
    client.exec_command.side_effect = lambda *a, **kw: exec_streams()
    client.open_sftp.return_value = MagicMock(spec=paramiko.SFTPClient)
    return client


@pytest.fixture
def mock_session(mocker):
    """Mock SSHSession for testing without a real connection.

    $HOME is /home/user; download_file writes b"remote content" locally.
    """
    from sshv2.ssh.session import SSHSession

    session = MagicMock(spec=SSHSession)
    session.target = "user@host.example.com:22"

    def execute(command, working_directory=None):
        if command == "echo $HOME":
            return CommandResult(stdout="/home/user", stderr="", exit_code=0)
        return CommandResult(stdout="", stderr="", exit_code=0)

    def download_file(remote_path, local_path):
        Path(local_path).write_bytes(b"remote content")
        return Path(local_path)

    session.execute.side_effect = execute
    session.download_file.side_effect = download_file
    return session


@pytest.fixture
def session_factory(mock_session):
    """Session factory handing out mock_session."""
    return MagicMock(return_value=mock_session)


@pytest.fixture
def staging_dir(tmp_path, mocker):
    """Point staging files at a temp directory so leftovers can be checked."""
    import tempfile

    directory = tmp_path / "staging"
    directory.mkdir()
    mocker.patch.object(tempfile, "tempdir", str(directory))
    return directory


@pytest.fixture
def make_streams():
    """Factory for exec_command stream triples."""
    return exec_streams


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers setup_logging attached during a test."""
    yield
    logger = logging.getLogger("sshv2")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
