"""Stored connection profiles (~/.config/sshv2/config.toml)."""

from __future__ import annotations

import tomli
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sshv2.config.connection import ConnectionConfig
from sshv2.exceptions import ConfigError
from sshv2.output import warn

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "sshv2" / "config.toml"

KNOWN_PROFILE_FIELDS = {
    "host",
    "port",
    "username",
    "auth",
    "password",
    "private_key",
    "private_key_file",
    "passphrase",
    "timeout",
    "strict_host_keys",
}


@dataclass
class ProfileStore:
    """Named connection profiles from config.toml."""

    profiles: dict[str, dict[str, Any]]  # name -> raw table
    path: Path | None = None

    @classmethod
    def load(cls, path: Path | None = None) -> "ProfileStore":
        """Load profiles from file.

        Returns an empty store if the file doesn't exist.
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        if not path.exists():
            return cls(profiles={}, path=path)

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigError(f"{path.name}: {e}")

        profiles: dict[str, dict[str, Any]] = {}
        for name, table in data.get("profiles", {}).items():
            if not isinstance(table, dict):
                raise ConfigError(f"{path.name}: [profiles.{name}] must be a table")

            unknown = set(table.keys()) - KNOWN_PROFILE_FIELDS
            if unknown:
                warn(f"{path.name}: [profiles.{name}] unknown fields: {', '.join(sorted(unknown))}")

            if "private_key" in table and "private_key_file" in table:
                raise ConfigError(
                    f"{path.name}: [profiles.{name}] set either private_key or private_key_file, not both"
                )
            profiles[name] = dict(table)

        return cls(profiles=profiles, path=path)

    def names(self) -> list[str]:
        return sorted(self.profiles)

    def __contains__(self, name: str) -> bool:
        return name in self.profiles

    def get(self, name: str) -> ConnectionConfig:
        """Build the ConnectionConfig for a profile.

        Raises ConfigError if the profile is unknown or invalid.
        """
        table = self.profiles.get(name)
        if table is None:
            raise ConfigError(f"Unknown profile: '{name}'")

        record = {k: v for k, v in table.items() if k in KNOWN_PROFILE_FIELDS}
        key_file = record.pop("private_key_file", None)
        if key_file:
            record["private_key"] = read_key_file(Path(key_file))

        try:
            return ConnectionConfig.from_mapping(record)
        except ConfigError as e:
            raise ConfigError(f"profile '{name}': {e.message}")


def read_key_file(path: Path) -> str:
    """Read private key material from a local file.

    Raises ConfigError if the file can't be read.
    """
    path = path.expanduser()
    try:
        return path.read_text()
    except OSError as e:
        raise ConfigError(f"Cannot read private key file {path}: {e.strerror or e}")
