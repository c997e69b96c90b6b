# -----------------------------------------------------------------------------
#  export.py
#  Render the whole combination table as text.
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import TextIO

from combinadic.engine import BinCoeff
from combinadic.errors import UserInputError
from combinadic.progress import Progress


def field_width(n: int) -> int:
    """Right-align width used for a value below n."""
    return n // 10 + 1


def format_value(v: int, width: int, display_chars: Sequence[str] | None = None) -> str:
    if display_chars is not None:
        return display_chars[v]
    return f"{v:>{width}}"


def format_group(
    combination: Sequence[int],
    width: int,
    display_chars: Sequence[str] | None = None,
    sep: str = " ",
) -> str:
    return sep.join(format_value(v, width, display_chars) for v in combination)


def check_display_chars(engine: BinCoeff, display_chars: Sequence[str] | None) -> None:
    if display_chars is not None and len(display_chars) < engine.item_count:
        raise UserInputError(
            f"display characters cover {len(display_chars)} values, need {engine.item_count}"
        )


def iter_groups(engine: BinCoeff, ascending: bool = True) -> Iterator[tuple[int, list[int]]]:
    """(index, combination) pairs in table order, or reversed."""
    n = engine.total_combinations
    rng = range(n) if ascending else range(n - 1, -1, -1)
    for i in rng:
        yield i, engine.unrank(i)


def write_kindexes(
    engine: BinCoeff,
    stream: TextIO,
    display_chars: Sequence[str] | None = None,
    sep: str = " ",
    group_sep: str = "; ",
    max_line_chars: int = 80,
    ascending: bool = True,
    progress: Progress | None = None,
) -> int:
    """
    Write every combination to `stream`, most significant value first.

    Groups are joined by `group_sep`; once the pending text reaches
    `max_line_chars` everything up to the last complete group is written
    as one line. Returns the number of lines written.
    """
    check_display_chars(engine, display_chars)
    width = field_width(engine.item_count)
    buf = ""
    prev_len = 0
    lines = 0
    for done, (_, combo) in enumerate(iter_groups(engine, ascending), start=1):
        buf += format_group(combo, width, display_chars, sep)
        if len(buf) >= max_line_chars and prev_len > 0:
            stream.write(buf[:prev_len] + "\n")
            lines += 1
            buf = buf[prev_len:]
        buf += group_sep
        prev_len = len(buf)
        if progress is not None:
            progress.update(done, f"{done}/{engine.total_combinations}")
    stream.write(buf + "\n")
    if progress is not None:
        progress.done()
    return lines + 1


def write_kindexes_file(engine: BinCoeff, path: str | Path, **kwargs) -> int:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as fh:
        return write_kindexes(engine, fh, **kwargs)


def kindexes_lines(
    engine: BinCoeff,
    display_chars: str | None = None,
    sep: str = " ",
    ascending: bool = True,
) -> list[str]:
    """
    One string per combination, least significant value first.

    `display_chars` maps value v to display_chars[v] (one character per
    item, e.g. "23456789TJQKA" for card ranks).
    """
    check_display_chars(engine, display_chars)
    width = field_width(engine.item_count)
    return [
        format_group(list(reversed(combo)), width, display_chars, sep)
        for _, combo in iter_groups(engine, ascending)
    ]
