"""Utility functions."""

from __future__ import annotations

import mimetypes
import posixpath

DEFAULT_MIME_TYPE = "application/octet-stream"


def shell_quote(s: str) -> str:
    """Quote string for a POSIX shell, handling single quotes."""
    # Replace ' with '\''
    escaped = s.replace("'", "'\\''")
    return f"'{escaped}'"


def remote_join(directory: str, filename: str) -> str:
    """Join a remote directory and file name with exactly one separator.

    >>> remote_join("/home/user", "a.txt")
    '/home/user/a.txt'
    >>> remote_join("/home/user/", "a.txt")
    '/home/user/a.txt'
    """
    if directory.endswith("/"):
        return f"{directory}{filename}"
    return f"{directory}/{filename}"


def remote_basename(path: str, default: str = "file") -> str:
    """Last component of a remote path, or default when there is none."""
    return posixpath.basename(path) or default


def guess_mime_type(file_name: str) -> str:
    """Guess a mime type from a file name."""
    mime_type, _ = mimetypes.guess_type(file_name)
    return mime_type or DEFAULT_MIME_TYPE
