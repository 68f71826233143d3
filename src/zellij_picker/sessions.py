"""Session discovery and name normalisation for zellij."""

import re
import subprocess

# Binary invoked for every external operation
ZELLIJ = "zellij"

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-?]*[mK]")


def list_sessions() -> list[str]:
    """Ask zellij for the running sessions.

    Returns:
        Display-form session names in the order zellij reports them. Any
        failure (binary missing, non-zero exit) yields an empty list.
    """
    try:
        result = subprocess.run(
            [ZELLIJ, "list-sessions"],
            capture_output=True,
            check=False,
        )
    except OSError:
        return []

    if result.returncode != 0:
        return []

    stdout = result.stdout.decode("utf-8", errors="replace")
    return [line.strip() for line in stdout.splitlines() if line.strip()]


def strip_ansi_codes(text: str) -> str:
    """Remove colour and erase-line escape sequences."""
    return ANSI_ESCAPE_RE.sub("", text)


def parse_name(display_name: str) -> str:
    """Convert a listed session label into the name zellij accepts.

    "\\x1b[32mwork\\x1b[0m [Created 2 mins ago]" becomes "work".
    """
    plain = strip_ansi_codes(display_name)
    return plain.split(" [", 1)[0].strip()
