# src/combinadic/cli.py

"""
Combinadic - rank and unrank K-combinations of N items

Description:
    Maps every K-combination of {0..N-1} to a dense index in
    [0, C(N, K)) and back, lists the whole table, and shows the
    index tables behind the mapping.

usage: see combinadic -h
"""

from __future__ import annotations

import argparse
import faulthandler
import io
import os
import platform
import sys
import textwrap
import threading
import traceback
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

from combinadic import __version__ as _ver
from combinadic import config as CONFIG
from combinadic.binomial import resolve_width
from combinadic.engine import BinCoeff, create
from combinadic.errors import CombinadicError, UserInputError
from combinadic.export import check_display_chars, write_kindexes, write_kindexes_file
from combinadic.fmt import (
    abbr_int_fast,
    display_chars_setting,
    format_combination,
    format_count,
    kv_line,
)
from combinadic.output_manager import OutputManager, resolve_output_path, validate_output_setting
from combinadic.progress import Progress
from combinadic.runtime import APPLY, CFG, ensure_runtime_deps
from combinadic.runtime import current as _rt_current
from combinadic.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook

    def _thread_excepthook(args):
        sys.stderr.write("\n[UNCAUGHT THREAD EXCEPTION]\n")
        traceback.print_exception(args.exc_type, args.exc_value, args.exc_traceback, file=sys.stderr)
        sys.stderr.flush()
    threading.excepthook = _thread_excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not (msg.startswith("Invalid input:") or msg.startswith("Error:")):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _debug(msg: str) -> None:
    if _rt_current().debug:
        print(f"[debug] {msg}", file=sys.stderr)


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    examples:
      combinadic total 52 7              133,784,560 seven-card hands
      combinadic rank 13 5 12 11 10 9 8  -> 1286
      combinadic unrank 13 5 0           -> [4, 3, 2, 1, 0]
      combinadic --profile poker list 13 5
      combinadic --width int64 total 66 33

    commands:
      init [--overwrite]
          Create workspace folders and copy packaged profiles if missing.
          --overwrite requires environment variable COMBINADIC_DEV=1.
      profiles
          List available profiles.
      where
          Show the workspace and package paths.
    """)

    p = argparse.ArgumentParser(
        prog="combinadic",
        description="Combinadic — rank and unrank K-combinations of N items",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")
    p.add_argument("--profile", default=None, help="Profile to use (default: last used, then 'default')")
    p.add_argument("--width", default=None, help="Integer width: int32 or int64 (overrides ENGINE.WIDTH)")
    p.add_argument("--output", default=None, help="Write results to a file (also prints unless --quiet)")
    p.add_argument("--quiet", action="store_true", help="Suppress screen output and progress")
    p.add_argument("--debug", action="store_true", help="Show internal trace info and full tracebacks")

    sub = p.add_subparsers(dest="command", metavar="COMMAND")

    def nk(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("n", type=int, help="number of items (N)")
        sp.add_argument("k", type=int, help="group size (K)")

    sp = sub.add_parser("total", help="Number of K-combinations of N items")
    nk(sp)

    sp = sub.add_parser("rank", help="Index of a combination")
    nk(sp)
    sp.add_argument("values", type=int, nargs="+", help="the K combination members")
    sp.add_argument("--sorted", action="store_true", help="values are already in descending order")

    sp = sub.add_parser("unrank", help="Combination at one or more indexes")
    nk(sp)
    sp.add_argument("indexes", type=int, nargs="+", help="index(es) in [0, C(N, K))")
    sp.add_argument("--chars", default=None, help="display characters, one per item")

    sp = sub.add_parser("list", help="Write every combination in table order")
    nk(sp)
    order = sp.add_mutually_exclusive_group()
    order.add_argument("--asc", dest="ascending", action="store_true", default=None, help="ascending order")
    order.add_argument("--desc", dest="ascending", action="store_false", default=None, help="descending order")
    sp.add_argument("--sep", default=None, help="separator between values of a group")
    sp.add_argument("--group-sep", default=None, help="separator between groups")
    sp.add_argument("--max-line", type=int, default=None, help="wrap lines at this many characters")
    sp.add_argument("--chars", default=None, help="display characters, one per item")

    sp = sub.add_parser("tables", help="Show the index tables for N choose K")
    nk(sp)
    sp.add_argument("--verify", action="store_true", help="check every cell against C(j, K-i)")

    sub.add_parser("profiles", help="List profiles")
    sp = sub.add_parser("init", help="Seed the workspace")
    sp.add_argument("--overwrite", action="store_true", help="replace existing profiles (developers)")
    sub.add_parser("where", help="Show workspace and package paths")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except (UserInputError, CombinadicError) as e:
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


def _configure_text_streams() -> None:
    if os.environ.get("PYTHONIOENCODING"):
        return
    # Only touch redirected output (pipes/files), leave TTY as-is
    if sys.stdout.isatty() or not hasattr(sys.stdout, "reconfigure"):
        return
    enc = (sys.stdout.encoding or "").lower()
    if platform.system() == "Windows" or enc in ("", "ascii", "us-ascii"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")


def _select_profile_name(explicit: str | None) -> str:
    """explicit --profile → last used → 'default'"""
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _load_profile(name: str, explicit: bool) -> None:
    if not CONFIG.has_profile(name):
        if explicit:
            avail = ", ".join(CONFIG.list_all_profiles())
            raise UserInputError(f"Unknown profile: '{name}'. Available profiles: {avail}")
        _debug(f"profile '{name}' missing, running with built-in defaults")
        return
    selected = CONFIG.load_settings(name)
    APPLY(selected)
    if explicit:
        CONFIG.write_current_profile(name)
    _debug(f"active profile: {selected.name} ({selected._source})")


def _engine(args) -> BinCoeff:
    width = resolve_width(args.width or _rt_current().width)
    verify = bool(CFG("ENGINE.VALIDATE_TABLES", False)) or bool(getattr(args, "verify", False))
    eng = create(args.n, args.k, width, verify=verify)
    _debug(f"built {eng!r}; tables {eng.tables()!r}")
    return eng


def _chars(args) -> str | None:
    dc = getattr(args, "chars", None)
    return dc if dc else display_chars_setting()


# ---- commands ----

def _cmd_total(args, om: OutputManager) -> int:
    eng = _engine(args)
    om.write(kv_line("N choose K", f"{eng.item_count} choose {eng.group_size}"))
    om.write(kv_line("Width", eng.width))
    om.write(kv_line("Combinations", format_count(eng.total_combinations)))
    tables = eng.tables()
    if tables is not None:
        om.write(kv_line("Index tables", f"{tables.row_count} rows, {format_count(tables.nbytes)} bytes"))
    return 0


def _cmd_rank(args, om: OutputManager) -> int:
    eng = _engine(args)
    idx = eng.rank(args.values, already_sorted=args.sorted)
    om.write(idx)
    return 0


def _cmd_unrank(args, om: OutputManager) -> int:
    eng = _engine(args)
    chars = _chars(args)
    check_display_chars(eng, chars)
    many = len(args.indexes) > 1
    for idx in args.indexes:
        combo = eng.unrank(idx)
        text = format_combination(combo, chars)
        om.write(f"{idx}\t{text}" if many else text)
    return 0


def _cmd_list(args, om: OutputManager, output: str | None) -> int:
    eng = _engine(args)
    opts = {
        "display_chars": _chars(args),
        "sep": args.sep if args.sep is not None else CFG("EXPORT.SEPARATOR", " "),
        "group_sep": args.group_sep if args.group_sep is not None else CFG("EXPORT.GROUP_SEPARATOR", "; "),
        "max_line_chars": args.max_line if args.max_line is not None else int(CFG("EXPORT.MAX_LINE_CHARS", 80)),
        "ascending": args.ascending if args.ascending is not None else bool(CFG("EXPORT.ASCENDING", True)),
    }
    total = eng.total_combinations

    # A single output file is streamed directly; everything else goes through om.
    if output and not (output in (".", "./") or output.endswith("/")):
        path = resolve_output_path(output, str(workspace_dir()))
        prog = Progress(total, enabled=not args.quiet and total > 10_000)
        lines = write_kindexes_file(eng, path, progress=prog, **opts)
        om.write_screen(f"Wrote {format_count(total)} combinations ({lines} lines) to {path}")
        return 0

    cap = int(CFG("BEHAVIOUR.MAX_LIST", 100_000) or 0)
    if cap and total > cap:
        raise UserInputError(
            f"{abbr_int_fast(total)} combinations exceed BEHAVIOUR.MAX_LIST={cap}; use --output FILE."
        )
    buf = io.StringIO()
    write_kindexes(eng, buf, **opts)
    om.write(buf.getvalue(), end="")
    return 0


def _cmd_tables(args, om: OutputManager) -> int:
    eng = _engine(args)
    tables = eng.tables()
    if tables is None:
        om.write(f"{eng.item_count} choose 1 uses no index tables (rank = value).")
        return 0
    k = eng.group_size
    for i, row in enumerate(tables):
        om.write(f"{Fore.CYAN}row {i} C(j, {k - i}):{Style.RESET_ALL} " + " ".join(str(v) for v in row))
    if args.verify:
        om.write(f"{Fore.GREEN}All cells match C(j, K-i).{Style.RESET_ALL}")
    return 0


def _cmd_profiles(om: OutputManager) -> int:
    active = _rt_current().profile_name
    for name, desc in CONFIG.list_profiles_with_descriptions():
        mark = "*" if name == active else " "
        om.write(f"{mark} {Fore.YELLOW}{name:<12}{Style.RESET_ALL} {desc}")
    return 0


def _cmd_init(args) -> int:
    if args.overwrite:
        if os.environ.get("COMBINADIC_DEV") != "1":
            print("Refusing to overwrite: set COMBINADIC_DEV=1 to enable developer overwrite.")
            return 2
        ws, copied = seed_workspace(overwrite=True)
        print(f"Workspace ready at: {ws} (overwrote existing files)")
    else:
        ws, _, copied = ensure_workspace_seeded()
        print(f"Workspace ready at: {ws}")
    print(f"Copied -> profiles: {copied.get('profiles', 0)}")
    return 0


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)
    _configure_text_streams()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if args.command is None:
        parser.print_help()
        return 0

    if not ensure_runtime_deps(strict=True):
        return 1

    ensure_workspace_seeded()

    if args.command == "init":
        return _cmd_init(args)
    if args.command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('combinadic')}")
        return 0

    profile_name = _select_profile_name(args.profile)
    _load_profile(profile_name, explicit=bool(args.profile))
    if args.debug:
        rt.debug = True

    try:
        output = validate_output_setting(args.output)
    except ValueError as e:
        raise UserInputError(f"--output: {e}") from None

    name = f"{getattr(args, 'n', '')}C{getattr(args, 'k', '')}-{args.command}"
    with OutputManager(output_file=output, quiet=args.quiet, name=name) as om:
        if args.command == "total":
            return _cmd_total(args, om)
        if args.command == "rank":
            return _cmd_rank(args, om)
        if args.command == "unrank":
            return _cmd_unrank(args, om)
        if args.command == "list":
            return _cmd_list(args, om, output)
        if args.command == "tables":
            return _cmd_tables(args, om)
        if args.command == "profiles":
            return _cmd_profiles(om)

    parser.error(f"unknown command {args.command!r}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
