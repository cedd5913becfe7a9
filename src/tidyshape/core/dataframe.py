"""
tidyshape.DataFrame subclass with logical plan tracking.

This module defines a pandas DataFrame subclass whose reshaping methods run the
Table engine and record each step in a logical plan. The plan can be explained,
serialized, and executed again later.

Key features:
- Dual-mode execution: gather/spread execute eagerly AND record in the logical plan
- Plan propagation: _plan survives copies; any other pandas operation or column
  assignment restarts the plan from a snapshot of the frame it produced
- Replay: the first reshape attaches a snapshot of the source data, so
  ``df._plan.execute()`` reproduces the result
"""

from typing import Any, Optional, Sequence

import pandas as pd

from ..algebra import LogicalPlan, Source, Gather, Spread
from ..config import ReshapeConfig, resolve_config
from ..selectors import ExplicitExclude, ExplicitInclude, Everything
from . import reshape
from .table import Table

# Source id for frames whose history is not recorded
DERIVED_SOURCE_ID = "<dataframe>"


class DataFrame(pd.DataFrame):
    """DataFrame subclass that tracks reshaping operations in a logical plan.

    Attributes:
        _plan: LogicalPlan tracking the computation graph from source to current state

    Example:
        >>> cars = DataFrame({'id': ['car1', 'car2'], 'city': [19, 20], 'hwy': [24, 30]})
        >>> long = cars.gather('roadtype', 'mpg', exclude=['id'])
        >>> print(long._plan.explain())
    """

    # Tell pandas to preserve the plan when creating new DataFrames
    _metadata = ['_tracked_plan']

    _tracked_plan = None

    @property
    def _constructor(self):
        """Return constructor for creating new instances of this class."""
        return DataFrame

    def __init__(self, data=None, plan=None, source_id=None, **kwargs):
        """Initialize a tidyshape DataFrame.

        Args:
            data: Data to initialize the DataFrame with (same as pandas)
            plan: Optional LogicalPlan to attach (for internal use)
            source_id: Optional source identifier for the Source node
            **kwargs: Additional arguments passed to pandas DataFrame
        """
        super().__init__(data, **kwargs)

        if plan is not None:
            self._tracked_plan = plan
        elif isinstance(data, DataFrame):
            # Preserve plan from another tidyshape DataFrame
            self._tracked_plan = data._plan
        else:
            if source_id is None:
                source_id = DERIVED_SOURCE_ID
            schema = [str(c) for c in self.columns] if len(self.columns) > 0 else None
            self._tracked_plan = LogicalPlan(Source(source_id=source_id, schema=schema))

    def __finalize__(self, other, method=None, **kwargs):
        result = super().__finalize__(other, method=method, **kwargs)
        if method != "copy" and isinstance(result, DataFrame):
            # filters, joins, reindexing etc. are not recorded
            result._tracked_plan = None
        return result

    def __setitem__(self, key, value):
        super().__setitem__(key, value)
        self._tracked_plan = None

    @property
    def _plan(self) -> LogicalPlan:
        """The plan that reproduces this frame.

        A frame produced by an untracked pandas operation has no recorded history;
        its plan is a Source holding a snapshot of its current data.
        """
        if self._tracked_plan is None:
            return LogicalPlan(Source(source_id=DERIVED_SOURCE_ID, data=self.to_table()))
        return self._tracked_plan

    @classmethod
    def from_table(cls, table: Table, source_id: Optional[str] = None) -> "DataFrame":
        """Wrap a Table, recording it as the plan's source data."""
        source = Source(source_id=source_id or "<table>", data=table)
        return cls(table.to_pandas(), plan=LogicalPlan(source))

    def to_table(self) -> Table:
        """Convert to an immutable Table (the index is dropped)."""
        return Table.from_pandas(self)

    def _input_root(self, table: Table):
        """Plan root to build on, attaching ``table`` to a data-less source."""
        if self._tracked_plan is None:
            return Source(source_id=DERIVED_SOURCE_ID, data=table)
        root = self._tracked_plan.root
        if isinstance(root, Source) and root.data is None:
            return Source(source_id=root.source_id, schema=root.schema, data=table)
        return root

    def gather(
        self,
        key: Optional[str] = None,
        value: Optional[str] = None,
        columns: Optional[Sequence[str]] = None,
        *,
        exclude: Optional[Sequence[str]] = None,
        na_rm: Optional[bool] = None,
        convert: Optional[bool] = None,
        strict_types: Optional[bool] = None,
        config: Optional[ReshapeConfig] = None,
    ) -> "DataFrame":
        """Collapse columns into key/value pairs (tracked operation).

        Options are resolved against ``config`` here and recorded with their
        concrete values, so the plan replays without the configuration.

        Args:
            key: Name of the new column holding former column names
            value: Name of the new column holding former cell values
            columns: Columns to gather. Defaults to every column not in ``exclude``.
            exclude: Columns to keep as identity columns
            na_rm: Drop rows whose value is missing
            convert: Convert key names to numbers/booleans when they all parse
            strict_types: Reject gathered columns of differing types
            config: Defaults for options left as None

        Returns:
            New DataFrame in long format with updated plan
        """
        if columns is not None and exclude is not None:
            raise ValueError("gather accepts columns or exclude, not both")
        if columns is not None:
            selector = ExplicitInclude(columns)
        elif exclude is not None:
            selector = ExplicitExclude(exclude)
        else:
            selector = Everything()

        options = resolve_config(config).merged(
            key_name=key, value_name=value,
            na_rm=na_rm, convert=convert, strict_types=strict_types,
        )
        table = self.to_table()
        result = reshape.gather(table, selector=selector, config=options)

        gather_op = Gather(
            key=options.key_name,
            value=options.value_name,
            selector=selector,
            na_rm=options.na_rm,
            convert=options.convert,
            strict_types=options.strict_types,
            inputs=[self._input_root(table)],
        )
        return DataFrame(result.to_pandas(), plan=LogicalPlan(gather_op))

    def spread(
        self,
        key: str,
        value: str,
        fill: Any = None,
        *,
        convert: Optional[bool] = None,
        config: Optional[ReshapeConfig] = None,
    ) -> "DataFrame":
        """Widen a key/value pair into one column per key (tracked operation).

        Args:
            key: Column whose values become the new column names
            value: Column whose values fill the new columns
            fill: Value for identity/key combinations that do not occur
            convert: Convert text cells in new columns to numbers/booleans
            config: Defaults for options left as None

        Returns:
            New DataFrame in wide format with updated plan
        """
        options = resolve_config(config).merged(fill=fill, convert=convert)
        table = self.to_table()
        result = reshape.spread(table, key, value, config=options)
        spread_op = Spread(
            key=key, value=value, fill=options.fill, convert=options.convert,
            inputs=[self._input_root(table)],
        )
        return DataFrame(result.to_pandas(), plan=LogicalPlan(spread_op))

    def to_pandas(self) -> pd.DataFrame:
        """Convert to a regular pandas DataFrame (without plan tracking)."""
        return pd.DataFrame(self)
