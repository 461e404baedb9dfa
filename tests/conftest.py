# tests/conftest.py
from __future__ import annotations

import pytest

from fibfind import runtime


def _naive_first_index(needle: bytes, *, limit: int = 10_000, first: int = 1) -> int | None:
    """Reference: plain iteration with str(), independent of the engine."""
    a, b = 0, 1  # F(0), F(1)
    for i in range(limit + 1):
        if i >= first and needle in str(a).encode("ascii"):
            return i
        a, b = b, a + b
    return None


@pytest.fixture(autouse=True)
def fresh_runtime():
    """Every test starts with default runtime settings (debug off)."""
    return runtime.reset()


@pytest.fixture
def fib_home(tmp_path, monkeypatch):
    """Point FIBFIND_HOME at an empty temporary workspace."""
    monkeypatch.setenv("FIBFIND_HOME", str(tmp_path))
    (tmp_path / "profiles").mkdir()
    return tmp_path


@pytest.fixture
def naive_first():
    return _naive_first_index
