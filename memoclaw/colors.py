"""Terminal colour helpers.

Colour is applied only when stdout is a TTY, ``NO_COLOR`` is unset and
``--no-color`` was not given. The check runs on every call so redirected
or captured output stays plain.
"""

import os
import sys

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
GRAY = "\033[90m"

_disabled = False


def disable_color() -> None:
    """Turn colour off for the rest of the process (``--no-color``)."""
    global _disabled
    _disabled = True


def color_enabled() -> bool:
    if _disabled or os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


def paint(text: str, code: str) -> str:
    if not color_enabled():
        return text
    return f"{code}{text}{RESET}"


def bold(text: str) -> str:
    return paint(text, BOLD)


def dim(text: str) -> str:
    return paint(text, DIM)


def red(text: str) -> str:
    return paint(text, RED)


def green(text: str) -> str:
    return paint(text, GREEN)


def yellow(text: str) -> str:
    return paint(text, YELLOW)


def blue(text: str) -> str:
    return paint(text, BLUE)


def magenta(text: str) -> str:
    return paint(text, MAGENTA)


def cyan(text: str) -> str:
    return paint(text, CYAN)


def gray(text: str) -> str:
    return paint(text, GRAY)
