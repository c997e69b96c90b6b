from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("combinadic")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .binomial import (
    INT32,
    INT64,
    Width,
    binomial_bounded,
    binomial_wide,
    checked_binomial,
    checked_binomial_bounded,
    resolve_width,
)
from .engine import BinCoeff, BinCoeff32, BinCoeff64, create
from .errors import (
    CombinadicError,
    CombinadicOverflowError,
    InvalidArgumentError,
    InvalidCombinationError,
    RankOutOfRangeError,
    TableInvariantError,
)
from .normalize import is_strictly_descending, sort_descending
from .payload import RankedTable
from .tables import IndexTables, build_index_tables

__all__ = [
    "INT32",
    "INT64",
    "BinCoeff",
    "BinCoeff32",
    "BinCoeff64",
    "CombinadicError",
    "CombinadicOverflowError",
    "IndexTables",
    "InvalidArgumentError",
    "InvalidCombinationError",
    "RankOutOfRangeError",
    "RankedTable",
    "TableInvariantError",
    "Width",
    "__version__",
    "binomial_bounded",
    "binomial_wide",
    "build_index_tables",
    "checked_binomial",
    "checked_binomial_bounded",
    "create",
    "is_strictly_descending",
    "resolve_width",
    "sort_descending",
]
