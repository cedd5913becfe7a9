"""
tidyshape - wide-to-long (gather) and long-to-wide (spread) reshaping of tables.

The engine works on immutable Tables; pandas DataFrames are accepted and returned
by the top-level functions, and ``tidyshape.DataFrame`` records every reshape in a
logical plan that can be explained, serialized and replayed.

Usage:
    >>> import tidyshape as ts
    >>> cars = ts.Table.from_dict({"id": ["car1", "car2", "car3"],
    ...                            "city": [19, 20, 29], "hwy": [24, 30, 35]})
    >>> long = ts.gather(cars, "roadtype", "mpg", ts.exclude("id"))
    >>> long.column_names
    ('id', 'roadtype', 'mpg')

Key components:
- Table: immutable column-oriented table with typed columns
- Selectors: ExplicitInclude, ExplicitExclude, ColumnRange, Everything
- gather / spread: the reshaping operations
- DataFrame: pandas DataFrame subclass that tracks reshapes in a LogicalPlan
"""

from typing import Any, Optional

import pandas as _pd

from .core import Column, ColumnType, DataFrame, Table
from .core import reshape as _reshape
from .algebra import LogicalPlan
from .config import DEFAULT_CONFIG, ReshapeConfig, load_config
from .selectors import (
    ColumnRange,
    Everything,
    ExplicitExclude,
    ExplicitInclude,
    Selector,
    between,
    everything,
    exclude,
    include,
)
from .exceptions import *

# Version
__version__ = "0.1.0"

__all__ = [
    'Table',
    'Column',
    'ColumnType',
    'DataFrame',
    'LogicalPlan',
    'Selector',
    'ExplicitInclude',
    'ExplicitExclude',
    'ColumnRange',
    'Everything',
    'include',
    'exclude',
    'between',
    'everything',
    'ReshapeConfig',
    'DEFAULT_CONFIG',
    'load_config',
    'gather',
    'pivot',
    'spread',
    'ReshapeError',
    'UnknownColumnError',
    'NameCollisionError',
    'EmptyGatherError',
    'ColumnTypeError',
    'DuplicateKeyError',
    'SchemaError',
    'ConfigError',
]


def gather(data, key: Optional[str] = None, value: Optional[str] = None, selector: Any = None, **kwargs):
    """Collapse columns into key/value pairs.

    Accepts a Table or a pandas DataFrame and returns the same kind. Use
    ``tidyshape.DataFrame.gather`` to have the step recorded in a plan.

    Args:
        data: Table or DataFrame to reshape (not modified)
        key: Name of the new column holding former column names
        value: Name of the new column holding former cell values
        selector: Selector, column name, or list of names to gather. None gathers every column.
        **kwargs: ``na_rm``, ``convert``, ``strict_types``, ``config``

    Returns:
        Reshaped Table or DataFrame

    Raises:
        UnknownColumnError: The selector names a missing column
        NameCollisionError: ``key``/``value`` clashes with a kept column
        EmptyGatherError: The selector gathers no columns
    """
    if isinstance(data, Table):
        return _reshape.gather(data, key, value, selector, **kwargs)
    if isinstance(data, _pd.DataFrame):
        result = _reshape.gather(Table.from_pandas(data), key, value, selector, **kwargs)
        return result.to_pandas()
    raise TypeError(f"Expected Table or DataFrame, got {type(data).__name__}")


# The wide-to-long pivot
pivot = gather


def spread(data, key: str, value: str, fill: Any = None, **kwargs):
    """Widen a key/value pair of columns into one column per distinct key.

    Accepts a Table or a pandas DataFrame and returns the same kind.

    Args:
        data: Table or DataFrame in long format
        key: Column whose values become the new column names
        value: Column whose values fill the new columns
        fill: Value for combinations that do not occur
        **kwargs: ``convert``, ``config``

    Raises:
        UnknownColumnError: ``key`` or ``value`` is missing
        NameCollisionError: A key value equals an identity column's name
        DuplicateKeyError: Two rows would fill the same cell
    """
    if isinstance(data, Table):
        return _reshape.spread(data, key, value, fill=fill, **kwargs)
    if isinstance(data, _pd.DataFrame):
        result = _reshape.spread(Table.from_pandas(data), key, value, fill=fill, **kwargs)
        return result.to_pandas()
    raise TypeError(f"Expected Table or DataFrame, got {type(data).__name__}")
