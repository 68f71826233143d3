"""Carry out the picker's decision by running zellij."""

import os
import subprocess
import sys

import click

from .sessions import ZELLIJ, parse_name
from .state import AttachSession, CreateSession, DeleteSession, ExitAction, Quit


def exec_zellij(args: list[str], failure: str) -> int:
    """Replace this process with zellij.

    Only returns when the exec itself fails, in which case the error is
    reported and 1 is returned.
    """
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        os.execvp(ZELLIJ, [ZELLIJ, *args])
    except OSError as e:
        click.echo(f"{failure}: {e}", err=True)
    return 1


def run_zellij(command: str, name: str, verb: str) -> bool:
    """Run ``zellij <command> <name>`` to completion.

    Returns True on success; failures are reported on stderr.
    """
    try:
        result = subprocess.run([ZELLIJ, command, name], check=False)
    except OSError as e:
        click.echo(f"Failed to run {command}: {e}", err=True)
        return False
    if result.returncode != 0:
        click.echo(
            f"Failed to {verb} session '{name}': exit code {result.returncode}",
            err=True,
        )
        return False
    return True


def delete_session(name: str) -> int:
    """Kill a session, then delete it.

    A failed kill is reported but the delete is still attempted. A failed
    delete is fatal.
    """
    click.echo(f"Killing session: {name}")
    if run_zellij("kill-session", name, "kill"):
        click.echo("Session killed successfully")

    click.echo(f"Deleting session: {name}")
    if not run_zellij("delete-session", name, "delete"):
        return 1
    click.echo(click.style("Session deleted successfully", fg="green"))
    return 0


def dispatch_action(action: ExitAction) -> int:
    """Perform ``action`` and return the exit status for this process.

    Attach and create exec into zellij and never return on success.
    """
    if isinstance(action, AttachSession):
        name = parse_name(action.name)
        return exec_zellij(["attach", name], f"Failed to attach to session '{name}'")
    if isinstance(action, CreateSession):
        if action.name:
            return exec_zellij(
                ["--session", action.name],
                f"Failed to create session '{action.name}'",
            )
        return exec_zellij([], "Failed to create session")
    if isinstance(action, DeleteSession):
        return delete_session(parse_name(action.name))
    if isinstance(action, Quit):
        return 0
    raise TypeError(f"unknown exit action: {action!r}")
