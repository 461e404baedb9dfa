# src/fibfind/supervisor.py
from __future__ import annotations

import multiprocessing
import threading
import time
from dataclasses import dataclass

from fibfind.dispatcher import Dispatcher
from fibfind.progress import NullSink, TerminalSink
from fibfind.runtime import current as _rt_current
from fibfind.utility import debug_line, display_needle, warn_line
from fibfind.worker import search_part

BACKENDS = ("thread", "process")


@dataclass(frozen=True)
class SearchConfig:
    needle: bytes
    threads: int = 16
    chunk: int = 10_000
    start: int = 0
    backend: str = "thread"
    progress: bool = True


def _spawn_threads(cfg: SearchConfig, dispatcher: Dispatcher, sink) -> list[threading.Thread]:
    workers = []
    for i in range(cfg.threads):
        th = threading.Thread(
            target=search_part,
            args=(i, dispatcher, cfg.needle, sink),
            name=f"fibfind-worker-{i}",
            daemon=True,  # Ctrl-C in the main thread ends the program
        )
        th.start()
        workers.append(th)
    return workers


def _spawn_processes(cfg: SearchConfig, dispatcher: Dispatcher, sink, ctx) -> list:
    workers = []
    for i in range(cfg.threads):
        proc = ctx.Process(
            target=search_part,
            args=(i, dispatcher, cfg.needle, sink),
            name=f"fibfind-worker-{i}",
            daemon=True,
        )
        proc.start()
        workers.append(proc)
    return workers


def run_search(cfg: SearchConfig, sink=None) -> int:
    """
    Run the parallel search and return the lowest matching index.

    Blocks until every worker has finished. With a needle that never
    occurs this does not return; interrupt it from outside.
    """
    if cfg.backend not in BACKENDS:
        raise ValueError(f"unknown backend {cfg.backend!r}")
    if sink is None:
        sink = TerminalSink() if cfg.progress else NullSink()

    debug = _rt_current().debug
    ctx = multiprocessing.get_context() if cfg.backend == "process" else None
    dispatcher = Dispatcher(cfg.start, cfg.chunk, ctx=ctx)

    if debug:
        debug_line(
            f"search needle={display_needle(cfg.needle)!r} threads={cfg.threads} "
            f"chunk={cfg.chunk} start={cfg.start} backend={cfg.backend}"
        )

    sink.clear()
    t0 = time.perf_counter()
    if cfg.backend == "process":
        workers = _spawn_processes(cfg, dispatcher, sink, ctx)
    else:
        workers = _spawn_threads(cfg, dispatcher, sink)

    try:
        for w in workers:
            w.join()
    except KeyboardInterrupt:
        if cfg.backend == "process":
            for w in workers:
                w.terminate()
            for w in workers:
                w.join()
        raise

    sink.clear()

    if cfg.backend == "process":
        failed = [w.name for w in workers if w.exitcode not in (0, None)]
        if failed:
            warn_line(f"worker(s) exited abnormally: {', '.join(failed)}")

    if debug:
        dt = time.perf_counter() - t0
        debug_line(
            f"done in {dt:.3f}s, chunks dispensed: {(dispatcher.cursor - cfg.start) // cfg.chunk}, "
            f"idx={dispatcher.found_index}"
        )
    return dispatcher.found_index
