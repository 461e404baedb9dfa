# tests/test_config.py
from __future__ import annotations

import pytest

from fibfind import config as CONFIG
from fibfind.runtime import APPLY, CFG, current
from fibfind.utility import UserInputError, flatten_dotted

# ---------- helpers -----------------------------------------------------------

FAST_PROFILE = """\
[PROFILE]
name = "fast"
description = "  many   workers  "

[SEARCH]
THREADS = 4
CHUNK = 500
START = 10
BACKEND = "Process"

[DISPLAY]
PROGRESS = false

[BEHAVIOUR]
DEBUG = true
"""


def _write_profile(home, name: str, text: str):
    path = home / "profiles" / f"{name}.toml"
    path.write_text(text, encoding="utf-8")
    return path


# ---------- profiles ----------------------------------------------------------


def test_missing_default_profile_gives_builtin_defaults(fib_home):
    s = CONFIG.load_settings(None)
    assert s.name == "default"
    assert s.data == {}
    assert s.path is None


def test_missing_named_profile_is_user_error(fib_home):
    with pytest.raises(UserInputError, match="nope"):
        CONFIG.load_settings("nope")


def test_load_profile_strips_metadata(fib_home):
    path = _write_profile(fib_home, "fast", FAST_PROFILE)
    s = CONFIG.load_settings("fast")
    assert s.name == "fast"
    assert s.description == "many workers"
    assert s.path == path
    assert "PROFILE" not in s.data
    assert s.data["SEARCH"]["CHUNK"] == 500


def test_malformed_toml_reports_location(fib_home):
    _write_profile(fib_home, "broken", "[SEARCH]\nTHREADS = = 3\n")
    with pytest.raises(UserInputError, match=r"broken\.toml.*line 2"):
        CONFIG.load_settings("broken")


def test_section_must_be_a_table(fib_home):
    _write_profile(fib_home, "flat", 'SEARCH = "fast"\n')
    with pytest.raises(UserInputError, match=r"\[SEARCH\]"):
        CONFIG.load_settings("flat")


def test_list_profiles_with_descriptions(fib_home):
    _write_profile(fib_home, "b", '[PROFILE]\ndescription = "second"\n')
    _write_profile(fib_home, "a", "[SEARCH]\nTHREADS = 2\n")
    _write_profile(fib_home, "c", "not toml at all [")
    assert CONFIG.list_profiles_with_descriptions() == [
        ("a", "(no description)"),
        ("b", "second"),
        ("c", "(no description)"),
    ]


# ---------- runtime -----------------------------------------------------------


def test_apply_syncs_runtime_flags():
    APPLY(CONFIG.Settings(name="t", data={"BEHAVIOUR": {"DEBUG": True}, "DISPLAY": {"PROGRESS": False}}))
    rt = current()
    assert rt.profile_name == "t"
    assert rt.debug is True
    assert rt.progress is False
    assert CFG("DISPLAY.PROGRESS") is False
    assert CFG("SEARCH.CHUNK", 123) == 123
    assert CFG("", "x") == "x"


def test_flatten_dotted():
    assert flatten_dotted({"SEARCH": {"CHUNK": 5, "X": {"Y": 1}}, "Z": 2}) == {
        "SEARCH.CHUNK": 5,
        "SEARCH.X.Y": 1,
        "Z": 2,
    }


# ---------- build_config ------------------------------------------------------


def test_build_config_builtin_defaults():
    cfg = CONFIG.build_config("144")
    assert cfg.needle == b"144"
    assert (cfg.threads, cfg.chunk, cfg.start, cfg.backend, cfg.progress) == (16, 10_000, 0, "thread", True)


def test_profile_values_under_cli_overrides(fib_home):
    _write_profile(fib_home, "fast", FAST_PROFILE)
    APPLY(CONFIG.load_settings("fast"))
    cfg = CONFIG.build_config("144", threads=2)
    assert cfg.threads == 2             # CLI wins
    assert cfg.chunk == 500             # from profile
    assert cfg.start == 10
    assert cfg.backend == "process"     # normalized
    assert cfg.progress is False
    assert CONFIG.build_config("144", progress=True).progress is True


@pytest.mark.parametrize(
    "kwargs,msg",
    [
        ({"threads": 0}, "threads"),
        ({"chunk": 99}, "chunk must be at least 100"),
        ({"start": -1}, "start"),
        ({"backend": "gpu"}, "backend"),
    ],
    ids=["threads=0", "chunk<100", "negative-start", "bad-backend"],
)
def test_invalid_configuration_rejected(kwargs, msg):
    with pytest.raises(UserInputError, match=msg):
        CONFIG.build_config("144", **kwargs)


def test_empty_needle_rejected():
    with pytest.raises(UserInputError, match="needle"):
        CONFIG.build_config("")


def test_non_integer_profile_value_rejected():
    APPLY(CONFIG.Settings(name="t", data={"SEARCH": {"CHUNK": "lots"}}))
    with pytest.raises(UserInputError, match="chunk must be an integer"):
        CONFIG.build_config("1")


def test_needle_bytes_keeps_raw_argv_bytes():
    assert CONFIG.needle_bytes("6765") == b"6765"
    assert CONFIG.needle_bytes("\udcff12") == b"\xff12"
    assert CONFIG.needle_bytes(b"\x00") == b"\x00"
