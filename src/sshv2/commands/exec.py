"""Remote command execution."""

from __future__ import annotations

import sys

from sshv2.config.connection import ConnectionConfig
from sshv2.operations import ErrorPolicy, ExecuteCommand, OperationOutcome, run
from sshv2.operations.dispatcher import SessionFactory
from sshv2.output import colorize_exit, emit_record, error, info
from sshv2.ssh.session import SSHSession


def exec_commands(
    config: ConnectionConfig,
    commands: list[str],
    cwd: str = "/",
    policy: ErrorPolicy = ErrorPolicy.HALT,
    as_json: bool = False,
    *,
    session_factory: SessionFactory = SSHSession,
) -> int:
    """Run commands in order over one session.

    Returns the remote exit code for a single command, otherwise 0 when
    every command succeeded and 1 when any failed.
    """
    requests = [ExecuteCommand(command, cwd) for command in commands]
    outcomes = run(config, requests, policy, session_factory=session_factory)

    for outcome in outcomes:
        if as_json:
            emit_record(outcome.record)
        else:
            _print_outcome(outcome, show_header=len(commands) > 1)

    return _exit_code(outcomes)


def _print_outcome(outcome: OperationOutcome, show_header: bool) -> None:
    if not outcome.ok:
        error(outcome.message, exit_now=False)
        return

    record = outcome.record
    if show_header:
        info(f"$ {record['command']}")
    if record["stdout"]:
        print(record["stdout"])
    if record["stderr"]:
        print(record["stderr"], file=sys.stderr)
    if show_header:
        print(colorize_exit(record["exitCode"]), file=sys.stderr)


def _exit_code(outcomes: list[OperationOutcome]) -> int:
    if len(outcomes) == 1 and outcomes[0].ok:
        return outcomes[0].record["exitCode"]
    if all(o.ok and o.record["success"] for o in outcomes):
        return 0
    return 1
