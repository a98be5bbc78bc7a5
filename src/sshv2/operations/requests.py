"""Operation requests and outcomes."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union

from sshv2.exceptions import (
    InvalidPathError,
    ParameterError,
    SSHError,
    Sshv2Error,
    TransferError,
)
from sshv2.ssh.base import CommandResult
from sshv2.utils import DEFAULT_MIME_TYPE, guess_mime_type


class ErrorPolicy(str, Enum):
    """What a batch does when one item fails."""

    HALT = "halt"
    CONTINUE = "continue"


class ErrorKind(str, Enum):
    CONNECTION = "connection"
    INVALID_PATH = "invalid_path"
    TRANSFER = "transfer"
    PARAMETER = "parameter"

    @classmethod
    def for_error(cls, exc: Sshv2Error) -> "ErrorKind":
        if isinstance(exc, SSHError):
            return cls.CONNECTION
        if isinstance(exc, InvalidPathError):
            return cls.INVALID_PATH
        if isinstance(exc, TransferError):
            return cls.TRANSFER
        return cls.PARAMETER


@dataclass(frozen=True)
class BinaryData:
    """A binary payload: inline bytes or a reference to a stored file."""

    data: bytes | None = None
    path: Path | None = None
    file_name: str | None = None
    mime_type: str = DEFAULT_MIME_TYPE

    @classmethod
    def from_file(cls, path: Path, file_name: str | None = None) -> "BinaryData":
        """Reference a local file without reading it."""
        name = file_name or path.name
        return cls(path=path, file_name=name, mime_type=guess_mime_type(name))

    @property
    def is_empty(self) -> bool:
        return self.data is None and self.path is None

    def read(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is not None:
            return self.path.read_bytes()
        raise ParameterError("Binary data has no content")

    def write_to(self, dest: Path) -> None:
        """Write the payload to dest, streaming when it is a file reference."""
        if self.data is not None:
            dest.write_bytes(self.data)
        elif self.path is not None:
            with open(self.path, "rb") as src, open(dest, "wb") as dst:
                shutil.copyfileobj(src, dst)
        else:
            raise ParameterError("Binary data has no content")


# Inline text, inline bytes, or a binary payload. None means the bound
# binary field was missing on the input item.
UploadSource = Union[str, bytes, BinaryData, None]


@dataclass(frozen=True)
class ExecuteCommand:
    command: str
    working_directory: str = "/"


@dataclass(frozen=True)
class DownloadFile:
    remote_path: str
    file_name: str | None = None  # overrides the name taken from remote_path


@dataclass(frozen=True)
class UploadFile:
    remote_directory: str
    source: UploadSource
    remote_filename: str | None = None  # defaults to the binary's file name

    def target_name(self) -> str:
        """File name to create in remote_directory.

        Raises ParameterError when neither an explicit name nor a binary
        file name is available.
        """
        if self.remote_filename:
            return self.remote_filename
        if isinstance(self.source, BinaryData) and self.source.file_name:
            return self.source.file_name
        raise ParameterError("No remote file name given and the binary data has no file name")


OperationRequest = Union[ExecuteCommand, DownloadFile, UploadFile]


@dataclass(frozen=True)
class UploadAck:
    remote_path: str


@dataclass(frozen=True)
class Success:
    """A completed operation with its host output record."""

    request: OperationRequest
    payload: CommandResult | BinaryData | UploadAck
    record: dict[str, Any] = field(default_factory=dict)

    ok = True

    @property
    def binary(self) -> BinaryData | None:
        if isinstance(self.payload, BinaryData):
            return self.payload
        return None


@dataclass(frozen=True)
class Failure:
    """A failed operation recorded under the continue policy."""

    request: OperationRequest
    kind: ErrorKind
    message: str

    ok = False

    @property
    def record(self) -> dict[str, Any]:
        return {"success": False, "error": self.message}

    @property
    def binary(self) -> None:
        return None


OperationOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class ConnectionTestResult:
    status: str  # "OK" or "Error"
    message: str

    @property
    def ok(self) -> bool:
        return self.status == "OK"

    @property
    def record(self) -> dict[str, Any]:
        return {"status": self.status, "message": self.message}
