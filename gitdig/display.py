"""Coloured terminal output."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

_RESET = "\x1b[0m"

_RED = "31"
_GREEN = "32"
_YELLOW = "33"
_BLUE = "34"
_MAGENTA = "35"
_CYAN = "36"
_WHITE = "37"
_BOLD = "1"


@dataclass
class _ColorSettings:
    """Colour switch; ``forced_off`` of None means decide from the terminal."""

    forced_off: bool | None = None

    def colors_off(self) -> bool:
        if self.forced_off is not None:
            return self.forced_off
        if "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
            return True
        isatty = getattr(sys.stdout, "isatty", None)
        return not (isatty is not None and isatty())


_settings = _ColorSettings()


def _emit(text: str, *codes: str) -> None:
    if _settings.colors_off():
        out = text
    else:
        out = f"\x1b[{';'.join(codes)}m{text}{_RESET}"
    sys.stdout.write(out)
    sys.stdout.flush()


def red(text: str) -> None:
    """Print text in red."""
    _emit(text, _RED)


def green(text: str) -> None:
    """Print text in green."""
    _emit(text, _GREEN)


def yellow(text: str) -> None:
    """Print text in yellow."""
    _emit(text, _YELLOW)


def blue(text: str) -> None:
    """Print text in blue."""
    _emit(text, _BLUE)


def magenta(text: str) -> None:
    """Print text in magenta."""
    _emit(text, _MAGENTA)


def cyan(text: str) -> None:
    """Print text in cyan."""
    _emit(text, _CYAN)


def white(text: str) -> None:
    """Print text in white."""
    _emit(text, _WHITE)


def bold_red(text: str) -> None:
    """Print text in bold red."""
    _emit(text, _RED, _BOLD)


def bold_green(text: str) -> None:
    """Print text in bold green."""
    _emit(text, _GREEN, _BOLD)


def bold_yellow(text: str) -> None:
    """Print text in bold yellow."""
    _emit(text, _YELLOW, _BOLD)


def bold_blue(text: str) -> None:
    """Print text in bold blue."""
    _emit(text, _BLUE, _BOLD)


def bold_magenta(text: str) -> None:
    """Print text in bold magenta."""
    _emit(text, _MAGENTA, _BOLD)


def bold_cyan(text: str) -> None:
    """Print text in bold cyan."""
    _emit(text, _CYAN, _BOLD)


def bold(text: str) -> None:
    """Print text in bold."""
    _emit(text, _BOLD)


def error(text: str) -> None:
    """Print an error message."""
    red(text)


def success(text: str) -> None:
    """Print a success message."""
    green(text)


def warning(text: str) -> None:
    """Print a warning message."""
    yellow(text)


def info(text: str) -> None:
    """Print an informational message."""
    cyan(text)


def prompt(prompt_msg: str) -> str:
    """Show a prompt and read one word from standard input.

    Raises EOFError at end of input and ValueError unless the line
    holds exactly one word.
    """
    cyan(prompt_msg)
    line = sys.stdin.readline()
    if line == "":
        raise EOFError("no input")
    words = line.split()
    if not words:
        raise ValueError("unexpected newline")
    if len(words) > 1:
        raise ValueError("expected newline")
    return words[0]


def disable_colors() -> None:
    """Turn colour output off."""
    _settings.forced_off = True


def enable_colors() -> None:
    """Turn colour output on."""
    _settings.forced_off = False