from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib as toml
except ImportError:
    import tomli as toml  # type: ignore

from fibfind.runtime import CFG
from fibfind.runtime import current as _rt_current
from fibfind.supervisor import BACKENDS, SearchConfig
from fibfind.utility import UserInputError
from fibfind.workspace import profiles_dir

DEFAULT_THREADS = 16
DEFAULT_CHUNK = 10_000
DEFAULT_START = 0
DEFAULT_BACKEND = "thread"
MIN_CHUNK = 100

TABLES = ("SEARCH", "DISPLAY", "BEHAVIOUR")


@dataclass(frozen=True)
class Settings:
    """One profile: its tables (minus [PROFILE]) and where it came from."""
    name: str
    description: str = "(no description)"
    data: dict[str, Any] = field(default_factory=dict)
    path: Path | None = None


# --- Profiles --------------------------------------------------------------


def _read_profile(path: Path) -> Settings:
    try:
        with path.open("rb") as f:
            raw = toml.load(f)
    except (OSError, toml.TOMLDecodeError) as e:
        # decode errors carry "(at line N, column M)" in their text
        raise UserInputError(f"reading {path.name}: {e}") from None

    meta = raw.pop("PROFILE", None)
    if not isinstance(meta, dict):
        meta = {}
    description = " ".join(str(meta.get("description") or "").split())
    return Settings(
        name=str(meta.get("name") or path.stem),
        description=description or "(no description)",
        data=raw,
        path=path,
    )


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """(name, description) for every profile file; unreadable ones are listed by file name."""
    found = []
    for p in profiles_dir().glob("*.toml"):
        try:
            s = _read_profile(p)
        except UserInputError:
            s = Settings(name=p.stem)
        found.append((s.name, s.description))
    return sorted(found, key=lambda t: t[0].lower())


def load_settings(name: str | None) -> Settings:
    """
    Load a profile by name (default 'default').

    A missing 'default' profile yields empty settings, so a fresh install
    runs on built-in defaults. Any other missing profile is a user error.
    """
    name = name or "default"
    path = profiles_dir() / f"{name}.toml"
    if not path.exists():
        if name == "default":
            return Settings(name="default", description="(built-in defaults)")
        raise UserInputError(f"Profile '{name}' not found at {path}")

    settings = _read_profile(path)
    for table in TABLES:
        if not isinstance(settings.data.get(table, {}), dict):
            raise UserInputError(f"reading {path.name}: [{table}] must be a table.")
    return settings


# --- Search configuration --------------------------------------------------


def _pick(cli_value: Any, key: str, default: Any) -> Any:
    """CLI flag > profile value > built-in default."""
    if cli_value is not None:
        return cli_value
    return CFG(key, default)


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise UserInputError(f"{what} must be an integer, got {value!r}.")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise UserInputError(f"{what} must be an integer, got {value!r}.") from None


def needle_bytes(needle: str | bytes) -> bytes:
    """Command-line needle as raw bytes; undecodable argv bytes survive via surrogateescape."""
    if isinstance(needle, bytes):
        return needle
    return needle.encode("utf-8", "surrogateescape")


def validate_config(cfg: SearchConfig) -> SearchConfig:
    if not cfg.needle:
        raise UserInputError("needle must not be empty.")
    if cfg.threads < 1:
        raise UserInputError(f"threads must be at least 1, got {cfg.threads}.")
    if cfg.chunk < MIN_CHUNK:
        raise UserInputError(f"chunk must be at least {MIN_CHUNK}, got {cfg.chunk}.")
    if cfg.start < 0:
        raise UserInputError(f"start must not be negative, got {cfg.start}.")
    if cfg.backend not in BACKENDS:
        raise UserInputError(f"backend must be one of {', '.join(BACKENDS)}, got {cfg.backend!r}.")
    return cfg


def build_config(
    needle: str | bytes,
    *,
    threads: int | None = None,
    chunk: int | None = None,
    start: int | None = None,
    backend: str | None = None,
    progress: bool | None = None,
) -> SearchConfig:
    """Merge CLI values over the applied profile and validate the result."""
    if progress is None:
        progress = _rt_current().progress
    cfg = SearchConfig(
        needle=needle_bytes(needle),
        threads=_as_int(_pick(threads, "SEARCH.THREADS", DEFAULT_THREADS), "threads"),
        chunk=_as_int(_pick(chunk, "SEARCH.CHUNK", DEFAULT_CHUNK), "chunk"),
        start=_as_int(_pick(start, "SEARCH.START", DEFAULT_START), "start"),
        backend=str(_pick(backend, "SEARCH.BACKEND", DEFAULT_BACKEND)).strip().lower(),
        progress=progress,
    )
    return validate_config(cfg)
