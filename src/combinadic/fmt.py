# src/combinadic/fmt.py
from __future__ import annotations

import re
from collections.abc import Sequence

from colorama import Fore, Style

from combinadic.runtime import CFG

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)


def abbr_int_fast(n: int, head: int = 10, tail: int = 10, threshold: int = 35, ellipsis: str = "…") -> str:
    """Abbreviate very large ints as first<head>…last<tail>."""
    if not isinstance(n, int):
        return str(n)
    sign = "-" if n < 0 else ""
    s = str(abs(n))
    if len(s) <= threshold or head + tail >= len(s):
        return sign + s
    return f"{sign}{s[:head]}{ellipsis}{s[-tail:]}"


def format_count(n: int) -> str:
    """Thousands-grouped integer, e.g. 7,219,428,434,016,265,740."""
    return f"{n:,}"


def format_combination(values: Sequence[int], display_chars: Sequence[str] | None = None) -> str:
    """[12, 11, 10, 9, 8] or, with display characters, 'AKQJT'."""
    if display_chars:
        return "".join(display_chars[v] for v in values)
    return "[" + ", ".join(str(v) for v in values) + "]"


def label(text: str) -> str:
    return f"{Fore.CYAN}{text}{Style.RESET_ALL}"


def value(text: object) -> str:
    return f"{Fore.YELLOW}{Style.BRIGHT}{text}{Style.RESET_ALL}"


def kv_line(key: str, val: object, width: int = 20) -> str:
    return f"{label(f'{key}:'.ljust(width))} {value(val)}"


def display_chars_setting() -> str | None:
    dc = CFG("EXPORT.DISPLAY_CHARS", None)
    return str(dc) if dc else None
