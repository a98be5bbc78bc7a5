"""Connection configuration (one per invocation, never persisted)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from sshv2.exceptions import ConfigError

DEFAULT_PORT = 22


class AuthMode(str, Enum):
    """How the session authenticates."""

    PASSWORD = "password"
    PRIVATE_KEY = "privateKey"

    @classmethod
    def parse(cls, value: str) -> "AuthMode":
        """Parse an auth mode name (camelCase or snake_case)."""
        normalized = value.strip().replace("_", "").replace("-", "").lower()
        for mode in cls:
            if mode.value.lower() == normalized:
                return mode
        raise ConfigError(
            f"Invalid authentication mode: '{value}' (use 'password' or 'privateKey')"
        )


@dataclass(frozen=True)
class PasswordSecret:
    password: str

    def __repr__(self) -> str:
        return "PasswordSecret(password=***)"


@dataclass(frozen=True)
class PrivateKeySecret:
    key_material: str
    passphrase: str | None = None

    def __repr__(self) -> str:
        has_passphrase = bool(self.passphrase)
        return f"PrivateKeySecret(key_material=***, passphrase={'***' if has_passphrase else None})"


Secret = Union[PasswordSecret, PrivateKeySecret]


@dataclass(frozen=True)
class ConnectionConfig:
    """Resolved connection parameters for one SSH session.

    The auth mode is derived from the secret variant, so a password can
    never travel alongside a private key.
    """

    host: str
    username: str
    secret: Secret
    port: int = DEFAULT_PORT
    timeout: float | None = None  # connect/banner/auth; None = transport default
    strict_host_keys: bool = False

    def __post_init__(self):
        if not self.host:
            raise ConfigError("Connection host is required")
        validate_port(self.port)
        if self.timeout is not None and not self.timeout > 0:
            raise ConfigError(f"Invalid timeout: {self.timeout} (must be positive)")
        if not isinstance(self.secret, (PasswordSecret, PrivateKeySecret)):
            raise ConfigError("Connection secret must be a password or a private key")

    @property
    def auth_mode(self) -> AuthMode:
        if isinstance(self.secret, PasswordSecret):
            return AuthMode.PASSWORD
        return AuthMode.PRIVATE_KEY

    @property
    def target(self) -> str:
        """user@host:port, for messages."""
        return f"{self.username}@{self.host}:{self.port}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConnectionConfig":
        """Build a config from a host parameter record.

        Accepts {host, port, username, authMode, password?, privateKey?,
        passphrase?} with camelCase or snake_case keys. Exactly one of
        password/privateKey must be populated, matching authMode.
        """
        host = _get(data, "host")
        if not host:
            raise ConfigError("Connection host is required")

        port = _coerce_port(_get(data, "port", DEFAULT_PORT))
        username = _get(data, "username", "") or ""

        password = _get(data, "password")
        private_key = _get(data, "privateKey", _get(data, "private_key"))
        passphrase = _get(data, "passphrase")

        raw_mode = _get(data, "authMode", _get(data, "auth_mode", _get(data, "auth")))
        if raw_mode is None:
            # Infer from whichever secret is present
            mode = AuthMode.PRIVATE_KEY if private_key else AuthMode.PASSWORD
        else:
            mode = AuthMode.parse(str(raw_mode))

        secret: Secret
        if mode is AuthMode.PASSWORD:
            if private_key:
                raise ConfigError("privateKey must not be set when authMode is 'password'")
            if password is None:
                raise ConfigError("password is required when authMode is 'password'")
            secret = PasswordSecret(password=str(password))
        else:
            if password:
                raise ConfigError("password must not be set when authMode is 'privateKey'")
            if not private_key:
                raise ConfigError("privateKey is required when authMode is 'privateKey'")
            secret = PrivateKeySecret(
                key_material=str(private_key),
                passphrase=str(passphrase) if passphrase else None,
            )

        return cls(
            host=str(host),
            port=port,
            username=str(username),
            secret=secret,
            timeout=_coerce_timeout(_get(data, "timeout")),
            strict_host_keys=_coerce_bool(
                "strictHostKeys", _get(data, "strictHostKeys", _get(data, "strict_host_keys", False))
            ),
        )


def validate_port(port: int) -> None:
    """Validate TCP port (1-65535).

    Raises ConfigError if invalid.
    """
    if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
        raise ConfigError(f"Invalid port: {port!r} (must be 1-65535)")


def _coerce_port(value: Any) -> int:
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    validate_port(value)
    return value


def _coerce_timeout(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"Invalid timeout: {value!r} (must be a number of seconds)")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid timeout: {value!r} (must be a number of seconds)")


def _coerce_bool(name: str, value: Any) -> bool:
    """Accept booleans and "true"/"false" strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ConfigError(f"Invalid {name}: {value!r} (use true or false)")


def _get(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    value = data.get(key)
    return default if value is None else value
