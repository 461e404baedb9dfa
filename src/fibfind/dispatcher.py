# src/fibfind/dispatcher.py
"""
Shared work dispenser for the search workers.

Three cells live in multiprocessing shared memory, so one Dispatcher serves
thread workers and process workers alike:

  cursor     next unassigned chunk start (fetch-and-add by `chunk`)
  found      set once any worker has matched
  found_idx  lowest reported match index, -1 while none

found_idx only ever decreases and chunks are handed out in increasing
order, so a worker may drop everything at or above found_idx.
"""

from __future__ import annotations

import multiprocessing
from multiprocessing.context import BaseContext

NOT_FOUND = -1


class Dispatcher:
    def __init__(self, start: int, chunk: int, *, ctx: BaseContext | None = None):
        if chunk < 1:
            raise ValueError(f"chunk must be >= 1, got {chunk}")
        ctx = ctx or multiprocessing.get_context()
        self.start = int(start)
        self.chunk = int(chunk)
        self._cursor = ctx.Value("q", self.start)
        self._found = ctx.Value("b", 0)
        self._found_idx = ctx.Value("q", NOT_FOUND)

    def acquire_chunk(self) -> int:
        """Fetch-and-add the cursor; return the chunk start before the add."""
        with self._cursor.get_lock():
            beg = self._cursor.value
            self._cursor.value = beg + self.chunk
        return beg

    def try_report(self, j: int) -> bool:
        """Record a match at index j; True if j became the best known index."""
        self._found.value = 1
        with self._found_idx.get_lock():
            now = self._found_idx.value
            if now == NOT_FOUND or now > j:
                self._found_idx.value = j
                return True
        return False

    def poll_found(self) -> bool:
        return bool(self._found.value)

    @property
    def found_index(self) -> int:
        return self._found_idx.value

    def beaten(self, j: int) -> bool:
        """True when a match below index j is already known."""
        if not self.poll_found():
            return False
        idx = self.found_index
        return idx != NOT_FOUND and idx < j

    @property
    def cursor(self) -> int:
        return self._cursor.value
