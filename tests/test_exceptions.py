"""Tests for sshv2 exception hierarchy."""

import pytest

from sshv2.exceptions import (
    Sshv2Error,
    ConfigError,
    ValidationError,
    InvalidPathError,
    ParameterError,
    SSHError,
    ConnectionClosedError,
    TransferError,
)


class TestSshv2Error:
    """Tests for base Sshv2Error class."""

    def test_message_attribute(self):
        """Sshv2Error stores message as attribute."""
        err = Sshv2Error("test message")
        assert err.message == "test message"

    def test_default_exit_code(self):
        """Sshv2Error has default exit code of 1."""
        assert Sshv2Error("test").exit_code == 1

    def test_custom_exit_code(self):
        """Sshv2Error accepts custom exit code."""
        assert Sshv2Error("test", exit_code=2).exit_code == 2

    def test_str_representation(self):
        """Sshv2Error string representation is the message."""
        assert str(Sshv2Error("test message")) == "test message"


class TestSubclasses:
    """Tests for the exception subclasses."""

    @pytest.mark.parametrize(
        "cls", [ConfigError, ValidationError, SSHError, TransferError]
    )
    def test_inherits_from_base(self, cls):
        """Every error kind can be caught as Sshv2Error."""
        assert isinstance(cls("x"), Sshv2Error)

    def test_path_and_parameter_errors_are_validation_errors(self):
        """InvalidPathError and ParameterError are ValidationErrors."""
        assert isinstance(InvalidPathError("x"), ValidationError)
        assert isinstance(ParameterError("x"), ValidationError)

    def test_connection_closed_is_ssh_error(self):
        """ConnectionClosedError can be caught as SSHError."""
        with pytest.raises(SSHError):
            raise ConnectionClosedError("closed")


class TestTransferError:
    """Tests for TransferError reason."""

    def test_default_reason_is_io(self):
        """TransferError defaults to an I/O failure."""
        assert TransferError("disk full").reason == "io"

    def test_custom_reason(self):
        """TransferError keeps the given reason."""
        err = TransferError("missing", reason="not_found")
        assert err.reason == "not_found"
        assert err.message == "missing"
