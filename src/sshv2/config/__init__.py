"""Connection configuration loading."""

from sshv2.config.connection import (
    AuthMode,
    ConnectionConfig,
    PasswordSecret,
    PrivateKeySecret,
)
from sshv2.config.profiles import ProfileStore

__all__ = [
    "AuthMode",
    "ConnectionConfig",
    "PasswordSecret",
    "PrivateKeySecret",
    "ProfileStore",
]
