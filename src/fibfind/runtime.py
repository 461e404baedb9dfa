# src/fibfind/runtime.py
from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Runtime:
    """Settings of the active profile plus the two flags the search reads."""
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False
    progress: bool = True  # False = no per-worker progress rows

    def apply(self, settings) -> None:
        self.profile_name = settings.name
        self.settings = dict(settings.data)
        for key, attr in (("BEHAVIOUR.DEBUG", "debug"), ("DISPLAY.PROGRESS", "progress")):
            value = self.get(key)
            if isinstance(value, bool):
                setattr(self, attr, value)

    def get(self, key: str, default: Any = None) -> Any:
        """Dotted lookup, e.g. 'SEARCH.CHUNK'."""
        node: Any = self.settings
        for part in key.split(".") if key else ():
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node if key else default


_current_runtime: ContextVar[Runtime | None] = ContextVar("fibfind_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = reset()
    return rt


def reset() -> Runtime:
    """Install a fresh Runtime; the CLI does this on every run."""
    rt = Runtime()
    _current_runtime.set(rt)
    return rt


def APPLY(settings) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)
