"""Remote path resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sshv2.exceptions import InvalidPathError
from sshv2.output import debug

if TYPE_CHECKING:
    from sshv2.ssh.session import SSHSession

HOME_PREFIX = "~/"


def resolve_remote_path(path: str, session: "SSHSession") -> str:
    """Expand a leading ~/ using the remote $HOME.

    Paths not starting with ~ are returned unchanged without touching the
    session. A bare ~ or ~user form is rejected.

    Raises:
        InvalidPathError: For ~ / ~name, or when $HOME can't be read.
    """
    if path.startswith(HOME_PREFIX):
        home = remote_home(session)
        if not home.endswith("/"):
            home += "/"
        resolved = home + path[len(HOME_PREFIX):]
        debug(f"[path] {path} -> {resolved}")
        return resolved

    if path.startswith("~"):
        raise InvalidPathError('Invalid path. Replace "~" with home directory or "~/"')

    return path


def remote_home(session: "SSHSession") -> str:
    """Get the remote user's home directory."""
    result = session.execute("echo $HOME")
    home = result.stdout.strip()
    if not result.succeeded or not home:
        raise InvalidPathError("Failed to get remote home directory")
    return home
