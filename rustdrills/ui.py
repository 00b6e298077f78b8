"""Coloured status lines printed to the terminal."""

from __future__ import annotations

import os

from rich.console import Console
from rich.text import Text

_WARN_EMOJI = "⚠️ "
_WARN_PLAIN = "!"
_SUCCESS_EMOJI = "✅"
_SUCCESS_PLAIN = "✓"


def _emoji_enabled() -> bool:
    return "NO_EMOJI" not in os.environ


def _emit(emoji: str, plain: str, message: str, style: str) -> None:
    prefix = emoji if _emoji_enabled() else plain
    line = Text()
    line.append(prefix, style=style)
    line.append(" ")
    line.append(str(message), style=style)
    Console(highlight=False, soft_wrap=True).print(line)


def warn(message: str) -> None:
    """Print a red warning line."""
    _emit(_WARN_EMOJI, _WARN_PLAIN, message, "red")


def success(message: str) -> None:
    """Print a green success line."""
    _emit(_SUCCESS_EMOJI, _SUCCESS_PLAIN, message, "green")