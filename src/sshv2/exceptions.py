"""Exception hierarchy for sshv2."""

from __future__ import annotations


class Sshv2Error(Exception):
    """Base exception for all sshv2 errors.

    Attributes:
        message: Human-readable error message
        exit_code: Suggested exit code for CLI (default 1)
    """

    def __init__(self, message: str, exit_code: int = 1):
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class ConfigError(Sshv2Error):
    """Connection configuration errors (profiles, inline parameters)."""

    pass


class ValidationError(Sshv2Error):
    """Input validation errors (paths, operation arguments)."""

    pass


class InvalidPathError(ValidationError):
    """Remote path uses an unsupported home-relative form."""

    pass


class ParameterError(ValidationError):
    """Required operation input (binary field, content, file name) is missing."""

    pass


class SSHError(Sshv2Error):
    """SSH connection errors (auth failure, unreachable host, host key)."""

    pass


class ConnectionClosedError(SSHError):
    """Operation attempted on a session that was already disconnected."""

    pass


class TransferError(Sshv2Error):
    """SFTP transfer errors.

    Attributes:
        reason: One of "not_found", "permission" or "io"
    """

    def __init__(self, message: str, reason: str = "io", exit_code: int = 1):
        self.reason = reason
        super().__init__(message, exit_code=exit_code)
