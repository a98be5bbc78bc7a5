"""Session data types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class SessionState(str, Enum):
    """Lifecycle of an SSHSession: UNCONNECTED -> CONNECTED -> CLOSED."""

    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    CLOSED = "closed"


class Direction(str, Enum):
    UPLOAD = "upload"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class CommandResult:
    """Captured output of one remote command."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class TransferDescriptor:
    """One file transfer between a staging file and a remote path."""

    local_path: Path
    remote_path: str
    direction: Direction

    def __str__(self) -> str:
        if self.direction is Direction.UPLOAD:
            return f"{self.local_path} -> {self.remote_path}"
        return f"{self.remote_path} -> {self.local_path}"
