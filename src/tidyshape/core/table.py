"""
Immutable column-oriented table.

A Table is an ordered sequence of named, typed columns of equal length. Tables are
value objects: columns hold tuples, the dataclasses are frozen, and every
transformation builds a new Table rather than modifying one in place. Two tables are
equal when their column names, types and values are equal in order.

Conversion to and from pandas is provided so the reshaping operations can be used on
DataFrames without the engine itself depending on pandas semantics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from ..exceptions import SchemaError, UnknownColumnError
from .types import ColumnType, from_numpy_dtype, infer_type, is_missing


@dataclass(frozen=True)
class Column:
    """A named column of values with a single logical type.

    When ``dtype`` is omitted it is inferred from the values.
    """

    name: str
    values: Tuple[Any, ...] = ()
    dtype: Optional[ColumnType] = None

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise SchemaError(f"Column name must be a non-empty string, got {self.name!r}")
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))
        if self.dtype is None:
            object.__setattr__(self, "dtype", infer_type(self.values))
        elif not isinstance(self.dtype, ColumnType):
            object.__setattr__(self, "dtype", ColumnType(self.dtype))

    def __len__(self) -> int:
        return len(self.values)

    def rename(self, name: str) -> "Column":
        return Column(name=name, values=self.values, dtype=self.dtype)


@dataclass(frozen=True)
class Table:
    """Ordered collection of equal-length named columns.

    Attributes:
        columns: The table's columns, left to right

    Example:
        >>> cars = Table.from_dict({
        ...     "id": ["car1", "car2", "car3"],
        ...     "city": [19, 20, 29],
        ...     "hwy": [24, 30, 35],
        ... })
        >>> cars.column_names
        ('id', 'city', 'hwy')
        >>> cars.num_rows
        3
    """

    columns: Tuple[Column, ...] = ()
    _index: Dict[str, int] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.columns, tuple):
            object.__setattr__(self, "columns", tuple(self.columns))

        index: Dict[str, int] = {}
        for position, column in enumerate(self.columns):
            if not isinstance(column, Column):
                raise SchemaError(f"Table columns must be Column instances, got {type(column)}")
            if column.name in index:
                raise SchemaError(f"Duplicate column name: {column.name!r}")
            index[column.name] = position
        object.__setattr__(self, "_index", index)

        lengths = {len(column) for column in self.columns}
        if len(lengths) > 1:
            shape = {column.name: len(column) for column in self.columns}
            raise SchemaError(f"All columns must have the same length, got {shape}")

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Sequence[Any]],
                  dtypes: Optional[Mapping[str, ColumnType]] = None) -> "Table":
        """Build a table from a mapping of column name to values (insertion order kept)."""
        dtypes = dtypes or {}
        return cls(tuple(
            Column(name=name, values=tuple(values), dtype=dtypes.get(name))
            for name, values in data.items()
        ))

    @classmethod
    def from_rows(cls, column_names: Sequence[str], rows: Sequence[Sequence[Any]]) -> "Table":
        """Build a table from a header and row-oriented data."""
        width = len(column_names)
        for i, row in enumerate(rows):
            if len(row) != width:
                raise SchemaError(
                    f"Row {i} has {len(row)} values, expected {width} for columns {list(column_names)}"
                )
        if not rows:
            return cls(tuple(Column(name=name) for name in column_names))
        return cls(tuple(
            Column(name=name, values=values)
            for name, values in zip(column_names, zip(*rows))
        ))

    @classmethod
    def from_pandas(cls, df: pd.DataFrame) -> "Table":
        """Convert a pandas DataFrame to a Table.

        The DataFrame's index is dropped; column labels are converted to strings.
        NaN and pandas missing markers become ``None``. Column types come from the
        dtype when it maps to a single ColumnType, otherwise from the values.
        """
        columns = []
        for label in df.columns:
            series = df[label]
            values = tuple(None if _pandas_missing(v) else v for v in series.tolist())
            # numpy dtypes keep the type of empty and all-NaN columns
            dtype = from_numpy_dtype(series.dtype)
            columns.append(Column(name=str(label), values=values, dtype=dtype))
        return cls(tuple(columns))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    @property
    def schema(self) -> Dict[str, ColumnType]:
        """Column name to ColumnType, in column order."""
        return {column.name: column.dtype for column in self.columns}

    @property
    def num_rows(self) -> int:
        return len(self.columns[0]) if self.columns else 0

    @property
    def num_columns(self) -> int:
        return len(self.columns)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.num_rows, self.num_columns

    def __len__(self) -> int:
        return self.num_rows

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __getitem__(self, name: str) -> Tuple[Any, ...]:
        return self.column(name).values

    def column(self, name: str) -> Column:
        """Return the column called ``name``.

        Raises:
            UnknownColumnError: If the table has no such column
        """
        try:
            return self.columns[self._index[name]]
        except KeyError:
            raise UnknownColumnError([name], self.column_names) from None

    def rows(self) -> Iterator[Tuple[Any, ...]]:
        """Iterate over rows as tuples, in column order."""
        return iter(zip(*(column.values for column in self.columns)))

    def select(self, names: Sequence[str]) -> "Table":
        """Return a table holding only ``names``, in the given order."""
        missing = [name for name in names if name not in self._index]
        if missing:
            raise UnknownColumnError(missing, self.column_names)
        return Table(tuple(self.column(name) for name in names))

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, List[Any]]:
        return {column.name: list(column.values) for column in self.columns}

    def to_pandas(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame with a fresh RangeIndex.

        MIXED and TEXT columns become object columns; numeric columns keep their
        natural numpy dtype.
        """
        data = {}
        for column in self.columns:
            if column.dtype in (ColumnType.MIXED, ColumnType.TEXT, ColumnType.NULL):
                data[column.name] = pd.Series(list(column.values), dtype=object)
            else:
                data[column.name] = pd.Series(
                    [float("nan") if v is None else v for v in column.values]
                    if column.dtype is ColumnType.FLOAT else list(column.values)
                )
        return pd.DataFrame(data, columns=list(self.column_names))

    def __repr__(self) -> str:
        cols = ", ".join(f"{c.name}: {c.dtype.value}" for c in self.columns)
        return f"Table({cols}; {self.num_rows} rows)"


def _pandas_missing(value: Any) -> bool:
    return is_missing(value) or value is pd.NA or value is pd.NaT
