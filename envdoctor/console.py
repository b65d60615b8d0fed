"""
EnvDoctor Console — Coloured, line-oriented report output.
"""

import os
import sys
from typing import Optional, TextIO

DIVIDER_WIDTH = 50


# ANSI colors
class C:
    RESET  = "\033[0m"
    GREEN  = "\033[32m"
    RED    = "\033[31m"
    YELLOW = "\033[33m"
    BLUE   = "\033[34m"
    DIM    = "\033[2m"


PASS_GLYPH = "✓"
FAIL_GLYPH = "✗"


def should_use_color(stream: TextIO) -> bool:
    """Colour only on a terminal, and never when NO_COLOR is set."""
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class Console:
    """Writes report lines to a stream, flushing each one as it is printed."""

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        self._stream = stream
        self._color = color

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so a swapped sys.stdout (pytest capsys) is honoured
        return self._stream if self._stream is not None else sys.stdout

    @property
    def color(self) -> bool:
        if self._color is None:
            return should_use_color(self.stream)
        return self._color

    def log(self, message: str = "", color: str = ""):
        if color and self.color:
            message = f"{color}{message}{C.RESET}"
        print(message, file=self.stream, flush=True)

    def divider(self):
        self.log("─" * DIVIDER_WIDTH)

    def header(self, title: str):
        self.log(f"\n🩺 {title}\n")
        self.divider()

    def result(self, name: str, ok: bool, message: str, fix: Optional[str] = None):
        """Print `<glyph> <name>: <message>`, plus an indented fix line on failure."""
        if ok:
            self.log(f"{PASS_GLYPH} {name}: {message}", C.GREEN)
            return
        self.log(f"{FAIL_GLYPH} {name}: {message}", C.RED)
        if fix:
            self.log(f"  Fix: {fix}", C.DIM)
