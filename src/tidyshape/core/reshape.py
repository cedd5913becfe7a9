"""
Wide-to-long and long-to-wide reshaping of Tables.

gather() collapses a set of columns into key/value pairs. Output rows come in blocks,
one block per gathered column in the table's left-to-right order, and each block keeps
the input's row order:

    id   city hwy            id   key  value
    car1 19   24             car1 city 19
    car2 20   30     --->    car2 city 20
                             car1 hwy  24
                             car2 hwy  30

spread() is the inverse: it widens a key/value pair back into one column per key.
Both functions validate everything before building output, so a failing call never
returns a partial table.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..selectors import Resolution, Selector, as_selector
from ..config import ReshapeConfig, resolve_config
from ..exceptions import (
    ColumnTypeError,
    DuplicateKeyError,
    EmptyGatherError,
    NameCollisionError,
    UnknownColumnError,
)
from .table import Column, Table
from .types import NUMERIC_TYPES, ColumnType, combine_types, convert_values, infer_type, is_missing

logger = logging.getLogger(__name__)


def _check_new_name(name: Any, role: str) -> None:
    if not isinstance(name, str) or not name:
        raise ValueError(f"{role} column name must be a non-empty string, got {name!r}")


def _value_type(table: Table, gathered: Sequence[str], strict: bool) -> ColumnType:
    types = [table.column(name).dtype for name in gathered]
    if strict:
        present = {t for t in types if t is not ColumnType.NULL}
        if len(present) > 1 and not present <= NUMERIC_TYPES:
            detail = ", ".join(f"{n}: {t.value}" for n, t in zip(gathered, types))
            raise ColumnTypeError(f"Gathered columns must share one value type, got {detail}")
    return combine_types(types)


def resolve_gather(table: Table, key: str, value: str, selector: Selector) -> Resolution:
    """Resolve ``selector`` against ``table`` and validate the new column names.

    Raises:
        UnknownColumnError: The selector names a column the table does not have
        NameCollisionError: ``key`` or ``value`` clashes with a kept column or each other
        EmptyGatherError: Nothing is selected for gathering
    """
    _check_new_name(key, "Key")
    _check_new_name(value, "Value")
    if key == value:
        raise NameCollisionError(f"Key and value columns must have different names, both are {key!r}")

    resolution = selector.resolve(table.column_names)

    for role, name in (("Key", key), ("Value", value)):
        if name in resolution.kept:
            raise NameCollisionError(
                f"{role} column name {name!r} collides with kept column {name!r}"
            )
    if not resolution.gathered:
        raise EmptyGatherError(
            f"Selector {selector!r} gathers no columns from {list(table.column_names)}"
        )
    return resolution


def gather(
    table: Table,
    key: Optional[str] = None,
    value: Optional[str] = None,
    selector: Any = None,
    *,
    na_rm: Optional[bool] = None,
    convert: Optional[bool] = None,
    strict_types: Optional[bool] = None,
    config: Optional[ReshapeConfig] = None,
) -> Table:
    """Collapse the selected columns of ``table`` into key/value pairs.

    Args:
        table: Input table (not modified)
        key: Name of the output column holding former column names
        value: Name of the output column holding former cell values
        selector: Selector, column name, or list of names to gather. None gathers everything.
        na_rm: Drop output rows whose value is missing
        convert: Convert key names to numbers/booleans when they all parse
        strict_types: Reject gathered columns of different value types
        config: Defaults for every option left as None

    Returns:
        Table with the kept columns followed by ``key`` and ``value``. Its row count is
        ``table.num_rows * len(gathered)`` before ``na_rm`` filtering.
    """
    options = resolve_config(config).merged(
        key_name=key, value_name=value, na_rm=na_rm, convert=convert, strict_types=strict_types,
    )
    selector = as_selector(selector)
    resolution = resolve_gather(table, options.key_name, options.value_name, selector)
    value_type = _value_type(table, resolution.gathered, options.strict_types)

    logger.debug(
        f"Gathering {list(resolution.gathered)} into ({options.key_name!r}, {options.value_name!r}), "
        f"keeping {list(resolution.kept)}"
    )

    n = table.num_rows
    kept_values: Dict[str, List[Any]] = {name: [] for name in resolution.kept}
    keys: List[Any] = []
    values: List[Any] = []

    for name in resolution.gathered:
        block = table[name]
        if options.na_rm:
            rows = [i for i, v in enumerate(block) if not is_missing(v)]
        else:
            rows = range(n)
        for kept_name in resolution.kept:
            source = table[kept_name]
            kept_values[kept_name].extend(source[i] for i in rows)
        keys.extend([name] * len(rows))
        values.extend(block[i] for i in rows)

    key_values = convert_values(keys) if options.convert else tuple(keys)
    columns = [
        Column(name=name, values=tuple(kept_values[name]), dtype=table.column(name).dtype)
        for name in resolution.kept
    ]
    columns.append(Column(name=options.key_name, values=key_values,
                          dtype=infer_type(key_values) if key_values else ColumnType.TEXT))
    columns.append(Column(name=options.value_name, values=tuple(values), dtype=value_type))
    result = Table(tuple(columns))

    logger.debug(f"Gather produced {result.num_rows} rows x {result.num_columns} columns")
    return result


def spread(
    table: Table,
    key: str,
    value: str,
    *,
    fill: Any = None,
    convert: Optional[bool] = None,
    config: Optional[ReshapeConfig] = None,
) -> Table:
    """Widen a key/value pair of columns into one column per distinct key.

    Every other column identifies a row. Output rows follow the first appearance of
    each identity tuple, and new columns follow the first appearance of each key, so
    spreading the result of gather() restores the original layout.

    Raises:
        UnknownColumnError: ``key`` or ``value`` is not a column of ``table``
        NameCollisionError: A key value equals an identity column's name
        DuplicateKeyError: Two rows share an identity tuple and a key
    """
    options = resolve_config(config).merged(fill=fill, convert=convert)
    if key == value:
        raise ValueError(f"Key and value must be different columns, both are {key!r}")
    missing = [name for name in (key, value) if name not in table]
    if missing:
        raise UnknownColumnError(missing, table.column_names)

    id_names = tuple(name for name in table.column_names if name not in (key, value))
    id_columns = [table[name] for name in id_names]
    key_column = table[key]
    value_column = table[value]

    row_index: Dict[Tuple[Any, ...], int] = {}
    key_values: Dict[Any, Any] = {}
    new_columns: Dict[Any, Dict[int, Any]] = {}

    for i in range(table.num_rows):
        identity = tuple(column[i] for column in id_columns)
        row = row_index.setdefault(identity, len(row_index))
        identifier = _key_identity(key_column[i])
        key_values.setdefault(identifier, key_column[i])
        cells = new_columns.setdefault(identifier, {})
        if row in cells:
            raise DuplicateKeyError(
                f"Duplicate identifiers for key {key_column[i]!r}: rows share "
                f"{dict(zip(id_names, identity))}"
            )
        cells[row] = value_column[i]

    labels = [_column_label(k) for k in key_values.values()]
    collisions = sorted(set(labels) & set(id_names))
    if collisions:
        raise NameCollisionError(f"Key values {collisions} collide with identity columns")
    if len(set(labels)) != len(labels):
        raise NameCollisionError(f"Key values map to duplicate column names: {labels}")

    logger.debug(
        f"Spreading {key!r}/{value!r} into {len(labels)} columns over {len(row_index)} rows"
    )

    identities = list(row_index)
    columns = [
        Column(name=name, values=tuple(identity[j] for identity in identities),
               dtype=table.column(name).dtype)
        for j, name in enumerate(id_names)
    ]
    for label, cells in zip(labels, new_columns.values()):
        cell_values = tuple(cells.get(row, options.fill) for row in range(len(identities)))
        if options.convert:
            cell_values = convert_values(cell_values)
        columns.append(Column(name=label, values=cell_values))
    return Table(tuple(columns))


def _column_label(key: Any) -> str:
    if is_missing(key):
        return "NA"
    return key if isinstance(key, str) else str(key)


def _key_identity(key: Any) -> Any:
    # 1, 1.0 and True compare equal but label different columns
    if is_missing(key):
        return None
    return (type(key), key)
