"""Event loop that turns key presses into a single exit action."""

from typing import Callable, Optional

from .state import (
    DOWN,
    UP,
    AttachSession,
    CreateSession,
    DeleteSession,
    ExitAction,
    PickerState,
    Quit,
)
from .terminal import (
    KEY_BACKSPACE,
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_UP,
    POLL_TIMEOUT,
    Terminal,
)


def handle_key(state: PickerState, key: str) -> Optional[ExitAction]:
    """Apply one key to the picker state.

    Returns:
        The exit action when the key ends the picker, None otherwise
    """
    if state.editing:
        # The buffer swallows every character until Enter or Escape
        if key == KEY_ENTER:
            return state.confirm_entry()
        if key == KEY_ESCAPE:
            state.cancel_entry()
        elif key == KEY_BACKSPACE:
            state.backspace_buffer()
        elif len(key) == 1 and key.isprintable():
            state.edit_buffer(key)
        return None

    if key in ("q", KEY_ESCAPE):
        return Quit()
    if key in (KEY_UP, "k"):
        state.move_selection(UP)
    elif key in (KEY_DOWN, "j"):
        state.move_selection(DOWN)
    elif key == "d":
        name = state.selected()
        if name is not None:
            return DeleteSession(name)
    elif key == KEY_ENTER:
        name = state.selected()
        if name is not None:
            return AttachSession(name)
    elif key == "n":
        state.begin_new_session_entry()
    return None


def run_event_loop(
    state: PickerState,
    draw: Callable[[PickerState], None],
    poll: Callable[[float], Optional[str]],
    timeout: float = POLL_TIMEOUT,
) -> ExitAction:
    """Draw, wait for a key, repeat until a key produces a decision.

    A poll that times out just loops back to drawing, which also picks up a
    resized terminal.
    """
    try:
        while True:
            draw(state)
            key = poll(timeout)
            if key is None:
                continue
            action = handle_key(state, key)
            if action is not None:
                return action
    except KeyboardInterrupt:
        return Quit()


def pick_action(sessions: list[str], terminal_factory=Terminal) -> ExitAction:
    """Run the interactive picker over ``sessions``.

    With no sessions there is nothing to choose from, so the terminal is left
    alone and a fresh unnamed session is requested straight away.
    """
    if not sessions:
        return CreateSession(None)

    state = PickerState(sessions)
    with terminal_factory() as terminal:
        return run_event_loop(state, terminal.draw, terminal.poll)
