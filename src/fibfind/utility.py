# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import sys

from colorama import Fore, Style


class UserInputError(Exception):
    pass


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out


def display_needle(needle: bytes) -> str:
    """Needle as text for the screen; '?' when it is not valid UTF-8."""
    try:
        return needle.decode("utf-8")
    except UnicodeDecodeError:
        return "?"


def debug_line(msg: str) -> None:
    """Dimmed '[debug]' line on STDERR."""
    try:
        sys.stderr.write(f"{Style.DIM}[debug]{Style.RESET_ALL} {msg}\n")
        sys.stderr.flush()
    except Exception:
        pass


def warn_line(msg: str) -> None:
    try:
        sys.stderr.write(f"{Fore.YELLOW}[warn]{Style.RESET_ALL} {msg}\n")
        sys.stderr.flush()
    except Exception:
        pass
