# src/fibfind/progress.py
from __future__ import annotations

import sys
from typing import TextIO

from fibfind.utility import display_needle

BAR_WIDTH = 100
CLEAR_SCREEN = "\x1b[2J"


def progress_step(chunk: int) -> int:
    """Indices between two progress rows (one row per percent)."""
    return max(1, chunk // 100)


def format_progress(i: int, beg: int, chunk: int) -> str:
    pct = min(BAR_WIDTH, (i - beg) // progress_step(chunk))
    return f"[{'=' * pct}{' ' * (BAR_WIDTH - pct)}]({pct}%, {i})"


def format_hit(j: int, needle: bytes) -> str:
    return f'Find!!! Fib_{j} has "{display_needle(needle)}"'


def goto_row(row: int) -> str:
    """Move to column 0 of `row` and erase it."""
    return f"\x1b[{row};0H\x1b[2K"


class NullSink:
    """Progress channel that discards everything."""

    def progress(self, line: int, i: int, beg: int, chunk: int) -> None:
        pass

    def hit(self, line: int, j: int, needle: bytes) -> None:
        pass

    def clear(self) -> None:
        pass


class TerminalSink:
    """
    Line-addressed progress channel: each worker owns one terminal row.

    Writes are best-effort; a broken or closed stream never stops a search.
    With stream=None the current sys.stdout is looked up on every write,
    so the sink stays usable after being handed to a worker process.
    """

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def _write(self, text: str) -> None:
        try:
            out = self._out()
            out.write(text)
            out.flush()
        except (OSError, ValueError):
            pass

    def progress(self, line: int, i: int, beg: int, chunk: int) -> None:
        self._write(goto_row(line) + format_progress(i, beg, chunk) + "\n")

    def hit(self, line: int, j: int, needle: bytes) -> None:
        self._write(goto_row(line) + format_hit(j, needle) + "\n")

    def clear(self) -> None:
        self._write(CLEAR_SCREEN + "\n")


class RecordingSink:
    """Keeps every event in memory (thread workers only)."""

    def __init__(self):
        self.events: list[tuple[str, int, str]] = []

    def progress(self, line: int, i: int, beg: int, chunk: int) -> None:
        self.events.append(("progress", line, format_progress(i, beg, chunk)))

    def hit(self, line: int, j: int, needle: bytes) -> None:
        self.events.append(("hit", line, format_hit(j, needle)))

    def clear(self) -> None:
        self.events.append(("clear", 0, ""))

    def lines(self, kind: str) -> list[str]:
        return [text for k, _, text in self.events if k == kind]
