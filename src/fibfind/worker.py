# src/fibfind/worker.py
from __future__ import annotations

from dataclasses import dataclass

from fibfind.dispatcher import Dispatcher
from fibfind.fibmath import digits, iter_fib
from fibfind.progress import NullSink, progress_step


@dataclass(frozen=True)
class ScanOutcome:
    examined: int
    hit: int | None = None
    stopped: bool = False  # a lower match was reported elsewhere


def scan(
    beg: int,
    chunk: int,
    needle: bytes,
    dispatcher: Dispatcher,
    sink=None,
    line: int = 1,
) -> ScanOutcome:
    """
    Examine F(beg+1) .. F(beg+chunk) for `needle`.

    On a match the index is reported to the dispatcher and the hit is shown
    on the worker's row. Scanning stops early once a match below the next
    index is known.
    """
    sink = sink or NullSink()
    step = progress_step(chunk)
    examined = 0
    for j, fj in iter_fib(beg + 1, chunk):
        examined += 1
        if needle in digits(fj):
            dispatcher.try_report(j)
            sink.hit(line, j, needle)
            return ScanOutcome(examined, hit=j)
        if j % step == 0:
            sink.progress(line, j, beg, chunk)
        if dispatcher.beaten(j + 1):
            return ScanOutcome(examined, stopped=True)
    return ScanOutcome(examined)


def search_part(worker_id: int, dispatcher: Dispatcher, needle: bytes, sink=None) -> int | None:
    """Worker loop: pull chunks until this worker matches or is beaten. Returns the hit index."""
    line = worker_id + 1
    while True:
        beg = dispatcher.acquire_chunk()
        if dispatcher.beaten(beg + 1):
            return None
        outcome = scan(beg, dispatcher.chunk, needle, dispatcher, sink, line)
        if outcome.hit is not None:
            return outcome.hit
        if outcome.stopped:
            return None
