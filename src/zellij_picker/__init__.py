"""Interactive picker for zellij sessions."""

import sys

import click

from .dispatch import dispatch_action
from .loop import handle_key, pick_action, run_event_loop
from .sessions import list_sessions, parse_name, strip_ansi_codes
from .state import (
    AttachSession,
    CreateSession,
    DeleteSession,
    PickerState,
    Quit,
)
from .terminal import Terminal, TerminalError, parse_keys

__all__ = [
    "AttachSession",
    "CreateSession",
    "DeleteSession",
    "PickerState",
    "Quit",
    "Terminal",
    "TerminalError",
    "cli",
    "dispatch_action",
    "handle_key",
    "list_sessions",
    "main",
    "parse_keys",
    "parse_name",
    "pick_action",
    "run_event_loop",
    "strip_ansi_codes",
]


@click.command()
def cli():
    """Pick a zellij session to attach to, create, or kill and delete.

    With no running sessions a new unnamed session is started right away.
    """
    try:
        action = pick_action(list_sessions())
    except KeyboardInterrupt:
        action = Quit()
    except TerminalError as e:
        click.echo(f"zellij-picker error: {e}", err=True)
        sys.exit(1)

    sys.exit(dispatch_action(action))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
