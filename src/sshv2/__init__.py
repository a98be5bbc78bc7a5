"""sshv2 - SSH command execution and file transfer as workflow steps."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("sshv2")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts that were never installed
