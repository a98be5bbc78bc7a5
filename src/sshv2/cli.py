"""Command-line interface for sshv2."""

from __future__ import annotations

import argparse
import getpass
import os
import re
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from sshv2 import __version__
from sshv2.config import ConnectionConfig, ProfileStore
from sshv2.config.profiles import read_key_file
from sshv2.exceptions import ConfigError, Sshv2Error, ValidationError
from sshv2.operations import BinaryData, ErrorPolicy
from sshv2.operations.requests import UploadSource
from sshv2.output import error, setup_logging

DEFAULT_PASSWORD_ENV = "SSHV2_PASSWORD"
DEFAULT_PASSPHRASE_ENV = "SSHV2_PASSPHRASE"

TARGET_RE = re.compile(r"^(?:(?P<user>[^@]+)@)?(?P<host>[^@:]+|\[[^\]]+\])(?::(?P<port>\d+))?$")


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser."""
    parser = argparse.ArgumentParser(
        prog="sshv2",
        description="Run commands and transfer files over SSH",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sshv2 web --exec "uptime"                        # stored profile
  sshv2 deploy@web.example.com -i ~/.ssh/id_ed25519 --exec "ls" --cwd ~/app
  sshv2 web --exec "make test" --exec "make lint" --continue-on-fail
  sshv2 web --download ~/logs/app.log -o ./logs/
  sshv2 web --upload ./build.tar.gz --remote-dir /srv/releases
  sshv2 web --text "KEY=value" --remote-dir ~/app --remote-name .env
  sshv2 web --test                                 # check credentials
  sshv2 --profiles                                 # list stored profiles
""",
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )

    parser.add_argument("target", nargs="?", help="profile name or [user@]host[:port]")

    # Connection
    parser.add_argument("-p", "--port", type=int, help="SSH port (default 22)")
    parser.add_argument("-i", "--identity", metavar="FILE", help="Private key file")
    parser.add_argument(
        "--password-env",
        default=DEFAULT_PASSWORD_ENV,
        metavar="VAR",
        help=f"Environment variable holding the password (default {DEFAULT_PASSWORD_ENV})",
    )
    parser.add_argument(
        "--passphrase-env",
        default=DEFAULT_PASSPHRASE_ENV,
        metavar="VAR",
        help=f"Environment variable holding the key passphrase (default {DEFAULT_PASSPHRASE_ENV})",
    )
    parser.add_argument("--timeout", type=float, help="Connect/auth timeout in seconds")
    parser.add_argument(
        "--strict-host-keys",
        action="store_true",
        default=None,
        help="Reject hosts missing from known_hosts",
    )
    parser.add_argument("--config", metavar="FILE", help="Profile file (default ~/.config/sshv2/config.toml)")

    # Operations
    parser.add_argument(
        "--exec", dest="exec_cmds", action="append", default=[], metavar="CMD",
        help="Execute shell command (repeatable)",
    )
    parser.add_argument("--cwd", default="/", metavar="DIR", help="Working directory for --exec")
    parser.add_argument("--download", metavar="REMOTE", help="Download a remote file")
    parser.add_argument("-o", "--output", metavar="PATH", help="Local destination for --download")
    parser.add_argument("--file-name", metavar="NAME", help="Override the downloaded file name")
    parser.add_argument(
        "--upload", action="append", default=[], metavar="LOCAL",
        help="Upload a local file (repeatable)",
    )
    parser.add_argument("--text", metavar="CONTENT", help="Upload inline text content")
    parser.add_argument("--remote-dir", metavar="DIR", help="Target directory for uploads")
    parser.add_argument("--remote-name", metavar="NAME", help="Remote file name for uploads")
    parser.add_argument("--test", action="store_true", help="Test the connection")
    parser.add_argument("--profiles", action="store_true", help="List stored profiles")

    # Modifiers
    parser.add_argument(
        "--continue-on-fail", action="store_true",
        help="Record failed items and continue with the rest",
    )
    parser.add_argument("--json", action="store_true", help="JSON output")
    parser.add_argument("--debug", action="store_true", help="Debug mode")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    try:
        return _main(argv)
    except Sshv2Error as e:
        error(e.message, exit_now=False)
        return e.exit_code
    except KeyboardInterrupt:
        return 130


def _validate_flag_conflicts(args: argparse.Namespace) -> None:
    """Validate that conflicting flags are not used together."""
    commands = []
    if args.exec_cmds:
        commands.append("--exec")
    if args.download:
        commands.append("--download")
    if args.upload or args.text is not None:
        commands.append("--upload/--text")
    if args.test:
        commands.append("--test")
    if args.profiles:
        commands.append("--profiles")

    if len(commands) > 1:
        raise ValidationError(f"Conflicting commands: {', '.join(commands)}")

    if (args.upload or args.text is not None) and not args.remote_dir:
        raise ValidationError("--upload/--text requires --remote-dir")

    if args.text is not None and not args.remote_name:
        raise ValidationError("--text requires --remote-name")

    if args.remote_name and len(args.upload) + (args.text is not None) > 1:
        raise ValidationError("--remote-name can only be used with a single upload")

    if (args.output or args.file_name) and not args.download:
        raise ValidationError("--output and --file-name require --download")


def parse_target(target: str) -> tuple[str | None, str, int | None]:
    """Split [user@]host[:port] into (user, host, port).

    Raises ValidationError if the target can't be parsed.
    """
    match = TARGET_RE.match(target)
    if not match:
        raise ValidationError(f"Invalid target: '{target}' (use [user@]host[:port])")
    port = match.group("port")
    host = match.group("host").strip("[]")
    return match.group("user"), host, int(port) if port else None


def resolve_connection(args: argparse.Namespace, store: ProfileStore) -> ConnectionConfig:
    """Build the ConnectionConfig from a profile or inline flags.

    CLI flags override profile values for port, timeout and host key policy.
    """
    overrides: dict[str, Any] = {}
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    if args.strict_host_keys is not None:
        overrides["strict_host_keys"] = args.strict_host_keys

    if args.target in store:
        config = store.get(args.target)
        if args.port is not None:
            overrides["port"] = args.port
        return replace(config, **overrides) if overrides else config

    user, host, port = parse_target(args.target)
    record: dict[str, Any] = {
        "host": host,
        "port": args.port or port or 22,
        "username": user or getpass.getuser(),
        **overrides,
    }

    if args.identity:
        record["authMode"] = "privateKey"
        record["privateKey"] = read_key_file(Path(args.identity))
        passphrase = os.environ.get(args.passphrase_env)
        if passphrase:
            record["passphrase"] = passphrase
    else:
        record["authMode"] = "password"
        record["password"] = _read_password(args.password_env, record["username"], host)

    return ConnectionConfig.from_mapping(record)


def _read_password(env_var: str, username: str, host: str) -> str:
    password = os.environ.get(env_var)
    if password is not None:
        return password
    if sys.stdin.isatty():
        return getpass.getpass(f"{username}@{host}'s password: ")
    raise ConfigError(f"No password given: set {env_var} or use --identity")


def _upload_sources(args: argparse.Namespace) -> list[UploadSource]:
    sources: list[UploadSource] = []
    for local in args.upload:
        path = Path(local).expanduser()
        if not path.is_file():
            raise ValidationError(f"File not found: {path}")
        sources.append(BinaryData.from_file(path))
    if args.text is not None:
        sources.append(args.text)
    return sources


def _main(argv: list[str] | None = None) -> int:
    """Internal main function that may raise Sshv2Error."""
    parser = build_parser()
    args = parser.parse_args(argv)

    _validate_flag_conflicts(args)
    setup_logging(debug=args.debug)

    store = ProfileStore.load(Path(args.config).expanduser() if args.config else None)

    if args.profiles:
        from sshv2.commands.connection import list_profiles

        return list_profiles(store)

    if not args.target:
        parser.print_help()
        return 1

    config = resolve_connection(args, store)
    policy = ErrorPolicy.CONTINUE if args.continue_on_fail else ErrorPolicy.HALT

    if args.test:
        from sshv2.commands.connection import check_connection

        return check_connection(config, args.json)

    if args.exec_cmds:
        from sshv2.commands.exec import exec_commands

        return exec_commands(config, args.exec_cmds, args.cwd, policy, args.json)

    if args.download:
        from sshv2.commands.transfer import download

        local = Path(args.output).expanduser() if args.output else None
        return download(config, args.download, local, args.file_name, policy, args.json)

    if args.upload or args.text is not None:
        from sshv2.commands.transfer import upload

        return upload(
            config, _upload_sources(args), args.remote_dir, args.remote_name, policy, args.json
        )

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
