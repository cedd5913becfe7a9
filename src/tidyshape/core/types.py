"""
Column value types.

Every column of a Table carries one ColumnType from a closed set. Missing values
(``None`` and float NaN) never decide a column's type; a column holding values of
more than one kind is MIXED, which is how the value column of a gather boxes
heterogeneous inputs.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Iterable, Sequence

import numpy as np


class ColumnType(str, Enum):
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    BOOLEAN = "boolean"
    NULL = "null"
    MIXED = "mixed"


NUMERIC_TYPES = frozenset({ColumnType.INTEGER, ColumnType.FLOAT})

_TRUE_STRINGS = {"true", "TRUE", "True"}
_FALSE_STRINGS = {"false", "FALSE", "False"}


def is_missing(value: Any) -> bool:
    """Return True for ``None`` and float NaN."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def type_of(value: Any) -> ColumnType:
    """Map a single Python value to its ColumnType."""
    if is_missing(value):
        return ColumnType.NULL
    # bool is a subclass of int, check it first
    if isinstance(value, (bool, np.bool_)):
        return ColumnType.BOOLEAN
    if isinstance(value, (int, np.integer)):
        return ColumnType.INTEGER
    if isinstance(value, (float, np.floating)):
        return ColumnType.FLOAT
    if isinstance(value, str):
        return ColumnType.TEXT
    return ColumnType.MIXED


def combine_types(types: Iterable[ColumnType]) -> ColumnType:
    """Return the narrowest ColumnType able to hold every type in ``types``."""
    seen = {t for t in types if t is not ColumnType.NULL}
    if not seen:
        return ColumnType.NULL
    if len(seen) == 1:
        return seen.pop()
    if seen <= NUMERIC_TYPES:
        return ColumnType.FLOAT
    return ColumnType.MIXED


def infer_type(values: Iterable[Any]) -> ColumnType:
    return combine_types(type_of(v) for v in values)


def from_numpy_dtype(dtype: Any) -> ColumnType | None:
    """Map a numpy/pandas dtype to a ColumnType, or None when the values must be inspected."""
    try:
        np_dtype = np.dtype(dtype)
    except TypeError:
        # pandas extension dtypes (string, category, nullable ints)
        return None
    if np.issubdtype(np_dtype, np.bool_):
        return ColumnType.BOOLEAN
    if np.issubdtype(np_dtype, np.integer):
        return ColumnType.INTEGER
    if np.issubdtype(np_dtype, np.floating):
        return ColumnType.FLOAT
    return None


def _parse(text: str, target: ColumnType) -> Any:
    if target is ColumnType.INTEGER:
        return int(text)
    if target is ColumnType.FLOAT:
        return float(text)
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(text)


def convert_values(values: Sequence[Any]) -> tuple:
    """Convert text values to integers, floats or booleans when every one parses.

    Tries the targets in that order and keeps the first that accepts all non-missing
    values. Anything that is not all-text, or does not parse, is returned unchanged.
    """
    present = [v for v in values if not is_missing(v)]
    if not present or not all(isinstance(v, str) for v in present):
        return tuple(values)

    for target in (ColumnType.INTEGER, ColumnType.FLOAT, ColumnType.BOOLEAN):
        try:
            return tuple(v if is_missing(v) else _parse(v.strip(), target) for v in values)
        except ValueError:
            continue
    return tuple(values)
