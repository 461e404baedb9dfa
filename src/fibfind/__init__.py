from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("fibfind")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .dispatcher import Dispatcher
from .fibmath import contains, digits, iter_fib, jump
from .runtime import APPLY, CFG
from .supervisor import SearchConfig, run_search
from .worker import ScanOutcome, scan, search_part

__all__ = [
    "APPLY",
    "CFG",
    "Dispatcher",
    "ScanOutcome",
    "SearchConfig",
    "__version__",
    "contains",
    "digits",
    "iter_fib",
    "jump",
    "run_search",
    "scan",
    "search_part",
]
