# src/fibfind/cli.py

"""
Fibonacci substring finder

Description:
    Searches F(1), F(2), ... for the first Fibonacci number whose decimal
    digits contain a given substring. Work is split into chunks that are
    handed to parallel workers; each worker draws its own progress row.

usage: fibfind -n NEEDLE [-t THREADS] [-c CHUNK] [-s START] [options]
"""

from __future__ import annotations

import argparse
import faulthandler
import sys
import textwrap

from colorama import Fore, Style, just_fix_windows_console

from fibfind import __version__ as _ver
from fibfind import config as CONFIG
from fibfind.runtime import APPLY, CFG
from fibfind.runtime import reset as _rt_reset
from fibfind.supervisor import BACKENDS, run_search
from fibfind.utility import UserInputError, debug_line, flatten_dotted, typename


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _print_profiles() -> None:
    items = CONFIG.list_profiles_with_descriptions()
    if not items:
        print("No profiles found.")
        return
    width = max(len(name) for name, _ in items)
    for name, desc in items:
        print(f"  {Fore.CYAN}{name:<{width}}{Style.RESET_ALL}  {desc}")


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    profiles:
      Defaults for threads, chunk, start and backend can be kept in
      $FIBFIND_HOME/profiles/<name>.toml (default: ~/.fibfind/profiles):

        [PROFILE]
        description = "laptop settings"

        [SEARCH]
        THREADS = 8
        CHUNK = 20000
        BACKEND = "process"

        [DISPLAY]
        PROGRESS = true

      Command-line flags always win over profile values.
    """)

    p = argparse.ArgumentParser(
        prog="fibfind",
        description="Find the first Fibonacci number whose digits contain a substring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("-n", "--needle", help="digit substring to search for (required)")
    p.add_argument("-t", "--threads", type=int, default=None, help="number of parallel workers (default 16)")
    p.add_argument("-c", "--chunk", type=int, default=None, help="indices per dispatched chunk, >= 100 (default 10000)")
    p.add_argument("-s", "--start", type=int, default=None, help="index the first chunk starts after (default 0)")
    p.add_argument("--backend", choices=BACKENDS, default=None,
                   help="run workers as threads or as processes (default thread)")
    p.add_argument("--profile", default=None, help="profile name to load defaults from")
    p.add_argument("--list-profiles", action="store_true", help="list available profiles and exit")
    p.add_argument("--quiet", action="store_true", help="no progress display, print only the result")
    p.add_argument("--debug", action="store_true", help="show configuration, timings and full tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = ("--debug" in (argv if argv is not None else sys.argv))
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _debug_dump_profile(selected) -> None:
    debug_line(f"active profile: {selected.name} - {selected.description}")
    if selected.path:
        debug_line(f"profile file: {selected.path}")
    flat = flatten_dotted(selected.data)
    for k in sorted(flat.keys(), key=str.lower):
        runtime_val = CFG(k, None)
        debug_line(f"  {k:.<40} {runtime_val!r} ({typename(runtime_val)})")


# ---- main ----
def _main_impl(argv=None) -> int:

    # Windows consoles only; leaves stdout unwrapped so the row escapes reach it
    just_fix_windows_console()

    parser = _build_parser()
    args = parser.parse_args(argv)

    rt = _rt_reset()
    rt.debug = bool(args.debug)

    if args.list_profiles:
        _print_profiles()
        return 0

    if args.needle is None:
        parser.error("the following arguments are required: -n/--needle")

    # Load & apply profile; an explicitly named one must exist
    selected = CONFIG.load_settings(args.profile)
    APPLY(selected)
    if args.debug:
        rt.debug = True  # --debug wins over BEHAVIOUR.DEBUG = false
    if rt.debug:
        try:
            faulthandler.enable()
        except (OSError, ValueError):
            pass  # stderr without a file descriptor
        _debug_dump_profile(selected)

    cfg = CONFIG.build_config(
        args.needle,
        threads=args.threads,
        chunk=args.chunk,
        start=args.start,
        backend=args.backend,
        progress=False if args.quiet else None,
    )

    idx = run_search(cfg)
    print(f"idx:{idx}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
