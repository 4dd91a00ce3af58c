"""Pretty formatting utilities for CLI output."""

import json
import shutil
import sys
from typing import IO, List, Optional

import click

def get_term_width() -> int:
    """Get terminal width, default to 80 if can't detect."""
    try:
        return shutil.get_terminal_size().columns
    except (OSError, ValueError):
        return 80


def header(text: str, width: Optional[int] = None) -> str:
    """Create a boxed section header."""
    width = width or min(get_term_width(), 72)
    h_line = "─" * (width - 2)
    padding = max(width - len(text) - 3, 0)
    return "\n".join([
        f"┌{h_line}┐",
        f"│ {text}{' ' * padding}│",
        f"└{h_line}┘",
    ])


def pretty_json(data: object, prefix: str = "") -> str:
    """Format JSON data with optional prefix."""
    raw = json.dumps(data, indent=2)
    if prefix:
        lines = raw.split("\n")
        return "\n".join(f"{prefix}{line}" for line in lines)
    return raw


def print_json(data: object, prefix: str = "", file: Optional[IO[str]] = None) -> None:
    """Print JSON data to file (default stdout)."""
    if file is None:
        file = sys.stdout
    print(pretty_json(data, prefix), file=file)


class Output:
    """Line printer for user-facing messages.

    Each kind of line has its own prefix so the operator can scan output at
    a glance. Everything goes to one stream (stdout unless given).
    """

    def __init__(self, file: Optional[IO[str]] = None):
        self._file = file

    @property
    def file(self) -> IO[str]:
        return self._file if self._file is not None else sys.stdout

    def line(self, text: str = "") -> None:
        click.echo(text, file=self.file)

    def success(self, text: str) -> None:
        self.line(f"🟢 {text}")

    def error(self, text: str) -> None:
        self.line(f"🔴 Error: {text}")

    def warning(self, text: str) -> None:
        self.line(f"🟡 Warning: {text}")

    def info(self, text: str) -> None:
        self.line(f"   {text}")

    def step(self, text: str) -> None:
        self.line(f"➡️  {text}")

    def suggestion(self, text: str) -> None:
        self.line(f"💡 Next step: {text}")

    def prompt_line(self, text: str) -> str:
        """Format a question for confirm()."""
        return f"❔ {text}"

    def header(self, text: str) -> None:
        self.line(header(text))

    def numbered(self, items: List[str]) -> None:
        for i, item in enumerate(items, 1):
            self.line(f"   {i}. {item}")
