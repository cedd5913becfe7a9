"""Eager executor: evaluates an operation tree bottom-up over Tables.

Every operation produces a concrete Table so users can inspect intermediate
results, while the operation tree stays available for explanation and
serialization.
"""

from __future__ import annotations

from typing import Optional

from tidyshape.config import ReshapeConfig
from tidyshape.core.reshape import gather, spread
from tidyshape.core.table import Table
from tidyshape.algebra.operations import (
    Gather,
    Operation,
    Source,
    Spread,
)


def execute(op: Operation, config: Optional[ReshapeConfig] = None) -> Table:
    """Recursively execute an operation tree, returning a Table.

    Args:
        op: Root of the operation tree
        config: Defaults for options the operations leave unset

    Raises:
        ValueError: A Source has no data attached
    """
    match op:
        case Source(data=data, source_id=source_id):
            if data is None:
                raise ValueError(
                    f"Source operation {source_id!r} has no data for eager execution. "
                    "Set Source.data to a Table before calling execute()."
                )
            # Tables are immutable, the source can be shared
            return data

        case Gather(
            key=key, value=value, selector=selector,
            na_rm=na_rm, convert=convert, strict_types=strict_types,
            inputs=[child],
        ):
            table = execute(child, config)
            return gather(
                table, key, value, selector,
                na_rm=na_rm, convert=convert, strict_types=strict_types,
                config=config,
            )

        case Spread(
            key=key, value=value, fill=fill, convert=convert, inputs=[child],
        ):
            table = execute(child, config)
            return spread(table, key, value, fill=fill, convert=convert, config=config)

        case _:
            raise TypeError(f"Unknown operation type: {type(op).__name__}")
