"""Draw the picker as a rich layout.

Rendering is a pure function of the picker state and the terminal height, so
the event loop can call it on every tick.
"""

from typing import Optional

from rich import box
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from .state import PickerState

TITLE_HEIGHT = 3
FOOTER_HEIGHT = 3

HIGHLIGHT_SYMBOL = "› "
HIGHLIGHT_STYLE = "bold black on cyan"

LEGEND = [
    ("↑↓", "navigate"),
    ("Enter", "attach"),
    ("n", "new session"),
    ("d", "kill and delete session"),
    ("q", "quit"),
]


def visible_window(count: int, selection: Optional[int], rows: Optional[int]) -> range:
    """Pick the slice of the list that fits in ``rows`` lines.

    The window starts at the top and only scrolls once the selected row would
    fall off the bottom.
    """
    if rows is None or count <= rows:
        return range(count)
    rows = max(1, rows)
    start = 0
    if selection is not None and selection >= rows:
        start = selection - rows + 1
    return range(start, start + rows)


def render_title() -> Panel:
    title = Text()
    title.append("  zellij-picker", style="bold cyan")
    title.append("  -  pick or create a session")
    return Panel(title, box=box.HORIZONTALS, border_style="bright_black")


def render_sessions(state: PickerState, rows: Optional[int] = None) -> Panel:
    """Render the session list.

    While a new name is being typed the list is dimmed and nothing is
    highlighted, since focus belongs to the input footer.
    """
    body = Text()
    window = visible_window(len(state.sessions), state.selection, rows)

    for i in window:
        # zellij colours its listing; keep those colours unless overridden
        label = Text.from_ansi(state.sessions[i])
        if i != window.start:
            body.append("\n")
        if state.editing:
            line = Text("    ")
            line.append_text(label)
            line.stylize("bright_black")
        elif i == state.selection:
            line = Text(f"{HIGHLIGHT_SYMBOL}  ")
            line.append_text(label)
            line.stylize(HIGHLIGHT_STYLE)
        else:
            line = Text("    ", style="white")
            line.append_text(label)
        body.append_text(line)

    border = "bright_black" if state.editing else "cyan"
    return Panel(body, title=" sessions ", title_align="left", border_style=border)


def render_footer(state: PickerState) -> Panel:
    line = Text()
    if state.editing:
        line.append("  new session name: ", style="bold yellow")
        line.append(state.new_session_input, style="bold white")
        line.append("_", style="blink yellow")
        return Panel(line, box=box.HORIZONTALS, border_style="yellow")

    line.append(" ")
    for key, label in LEGEND:
        line.append(f" {key}", style="cyan")
        line.append(f" {label}  ")
    return Panel(line, box=box.HORIZONTALS, border_style="bright_black")


def render(state: PickerState, height: Optional[int] = None) -> Layout:
    """Build the full screen: title, session list and footer.

    Args:
        state: current picker state
        height: terminal height in lines, used to keep the selection in view

    Returns:
        Layout ready to hand to a rich Console or Live display
    """
    rows = None
    if height is not None:
        # The list panel's own borders take two lines
        rows = height - TITLE_HEIGHT - FOOTER_HEIGHT - 2

    layout = Layout()
    layout.split_column(
        Layout(render_title(), name="title", size=TITLE_HEIGHT),
        Layout(render_sessions(state, rows), name="sessions", ratio=1),
        Layout(render_footer(state), name="footer", size=FOOTER_HEIGHT),
    )
    return layout
