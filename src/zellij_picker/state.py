"""Picker state machine and the decisions it can produce."""

from dataclasses import dataclass
from typing import Optional, Union

UP = -1
DOWN = 1

# Punctuation allowed in new session names besides letters and digits
NAME_PUNCTUATION = "-_"


@dataclass(frozen=True)
class AttachSession:
    name: str


@dataclass(frozen=True)
class CreateSession:
    name: Optional[str] = None


@dataclass(frozen=True)
class DeleteSession:
    name: str


@dataclass(frozen=True)
class Quit:
    pass


ExitAction = Union[AttachSession, CreateSession, DeleteSession, Quit]


def is_name_char(char: str) -> bool:
    """Check whether a single character may appear in a session name."""
    return len(char) == 1 and (char.isalnum() or char in NAME_PUNCTUATION)


class PickerState:
    """Session list, cursor and optional new-session buffer.

    While ``new_session_input`` is None the picker is navigating the list;
    otherwise the user is typing a new session name into it. Calls made in
    the wrong mode leave the state untouched.
    """

    def __init__(self, sessions: list[str]):
        self.sessions = list(sessions)
        self.selection: Optional[int] = 0 if self.sessions else None
        self.new_session_input: Optional[str] = None

    @property
    def editing(self) -> bool:
        return self.new_session_input is not None

    def selected(self) -> Optional[str]:
        if self.selection is None:
            return None
        return self.sessions[self.selection]

    def move_selection(self, direction: int) -> None:
        """Move the cursor one row up or down, wrapping at both ends."""
        if self.editing or not self.sessions:
            return
        step = 1 if direction > 0 else -1
        self.selection = (self.selection + step) % len(self.sessions)

    def begin_new_session_entry(self) -> None:
        if self.editing:
            return
        self.new_session_input = ""

    def edit_buffer(self, char: str) -> None:
        if not self.editing or not is_name_char(char):
            return
        self.new_session_input += char

    def backspace_buffer(self) -> None:
        if self.new_session_input:
            self.new_session_input = self.new_session_input[:-1]

    def cancel_entry(self) -> None:
        self.new_session_input = None

    def confirm_entry(self) -> Optional[CreateSession]:
        """Finish typing a session name.

        An empty name cancels the entry and returns None; the only way to
        create an unnamed session is to start the picker with no sessions.
        """
        if not self.editing:
            return None
        name = self.new_session_input.strip()
        if not name:
            self.cancel_entry()
            return None
        return CreateSession(name)
