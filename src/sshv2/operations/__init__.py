"""Operation requests and their dispatch over one session."""

from sshv2.operations.dispatcher import dispatch, run, run_one, probe_connection
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

__all__ = [
    "BinaryData",
    "ConnectionTestResult",
    "DownloadFile",
    "ErrorKind",
    "ErrorPolicy",
    "ExecuteCommand",
    "Failure",
    "OperationOutcome",
    "OperationRequest",
    "Success",
    "UploadAck",
    "UploadFile",
    "dispatch",
    "run",
    "run_one",
    "probe_connection",
]
