"""Local staging files for transfers."""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, TypeVar

from sshv2.output import debug

T = TypeVar("T")

STAGING_PREFIX = "sshv2-"


@contextmanager
def staging_file(prefix: str = STAGING_PREFIX) -> Iterator[Path]:
    """Create a uniquely named empty local file, removed on exit.

    The file is deleted whether the body returns, raises, or exits early.
    """
    fd, name = tempfile.mkstemp(prefix=prefix)
    os.close(fd)
    path = Path(name)
    debug(f"[staging] created {path}")
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        debug(f"[staging] removed {path}")


def with_staging_file(body: Callable[[Path], T], prefix: str = STAGING_PREFIX) -> T:
    """Run body with a fresh staging path and return its result."""
    with staging_file(prefix) as path:
        return body(path)
