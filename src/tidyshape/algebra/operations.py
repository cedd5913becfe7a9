"""
Operation nodes for the reshaping algebra.

Each operation is a node in the logical plan tree. Operations are dataclasses that
capture the intent of a reshape without executing it; ``execute`` in
``tidyshape.algebra.eager`` evaluates them.

Constructor shortcuts
---------------------
Unary operations accept ``input=<op>`` as shorthand for ``inputs=[<op>]``.
Gather also accepts ``columns=`` (names to gather) or ``exclude=`` (names to keep)
as shorthand for an explicit ``selector``.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any

import pandas as pd

from ..core.table import Table
from ..selectors import ExplicitExclude, ExplicitInclude, Everything, Selector, as_selector


def _resolve_inputs(
    inputs: List["Operation"],
    *,
    input: Optional["Operation"] = None,
) -> List["Operation"]:
    """Build the inputs list from explicit inputs or the ``input`` alias."""
    if inputs:
        return inputs
    if input is not None:
        return [input]
    return []


@dataclass
class Operation:
    """Base class for all operations."""

    inputs: List["Operation"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError(
            f"to_dict not implemented for {self.__class__.__name__}"
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Operation":
        op_type = data.get("type")
        if not op_type:
            raise ValueError("Operation dict must have 'type' field")

        type_map = {
            "source": Source,
            "gather": Gather,
            "spread": Spread,
        }

        op_class = type_map.get(op_type)
        if not op_class:
            raise ValueError(f"Unknown operation type: {op_type}")

        inputs_data = data.get("inputs", [])
        if not inputs_data:
            single = data.get("input")
            if single is not None:
                inputs_data = [single] if isinstance(single, dict) else single
        if isinstance(inputs_data, dict):
            inputs_data = [inputs_data]
        inputs = [Operation.from_dict(inp) for inp in inputs_data]

        kwargs = {k: v for k, v in data.items() if k not in ("type", "inputs", "input")}
        kwargs["inputs"] = inputs

        if op_type == "gather" and isinstance(kwargs.get("selector"), dict):
            kwargs["selector"] = Selector.from_dict(kwargs["selector"])

        return op_class(**kwargs)


@dataclass
class Source(Operation):
    """Data source; always a leaf node.

    ``data`` may be a Table, a pandas DataFrame, or a mapping of column name to
    values; the latter two are converted to a Table. When no schema is given it is
    taken from the data.

    Aliases: ``name`` → ``source_id``.
    """

    source_id: str = ""
    schema: Optional[List[str]] = None
    data: Optional[Table] = field(default=None, repr=False)
    name: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        if self.name is not None and not self.source_id:
            self.source_id = self.name
        self.name = None
        if self.inputs:
            raise ValueError("Source operation cannot have inputs")
        if isinstance(self.data, pd.DataFrame):
            self.data = Table.from_pandas(self.data)
        elif isinstance(self.data, dict):
            # embedded by serialize(include_data=True)
            self.data = Table.from_dict(self.data)
        if self.data is not None and not isinstance(self.data, Table):
            raise TypeError(f"Source data must be a Table or DataFrame, got {type(self.data)}")
        if self.schema is None and self.data is not None:
            self.schema = list(self.data.column_names)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "source",
            "source_id": self.source_id,
            "schema": self.schema,
            "inputs": [],
        }


@dataclass
class Gather(Operation):
    """Wide-to-long reshaping.

    Options left as None take their value from the configuration at execution time.

    Aliases: ``input`` → ``inputs[0]``, ``columns`` → ``ExplicitInclude(columns)``,
    ``exclude`` → ``ExplicitExclude(exclude)``.
    """

    key: Optional[str] = None
    value: Optional[str] = None
    selector: Selector = field(default_factory=Everything)
    na_rm: Optional[bool] = None
    convert: Optional[bool] = None
    strict_types: Optional[bool] = None
    input: Optional[Operation] = field(default=None, repr=False)
    columns: Optional[List[str]] = field(default=None, repr=False)
    exclude: Optional[List[str]] = field(default=None, repr=False)

    def __post_init__(self):
        self.inputs = _resolve_inputs(self.inputs, input=self.input)
        self.input = None
        if self.columns is not None and self.exclude is not None:
            raise ValueError("Gather operation accepts columns or exclude, not both")
        if self.columns is not None:
            self.selector = ExplicitInclude(self.columns)
        elif self.exclude is not None:
            self.selector = ExplicitExclude(self.exclude)
        else:
            self.selector = as_selector(self.selector)
        self.columns = None
        self.exclude = None

        if len(self.inputs) != 1:
            raise ValueError("Gather operation must have exactly one input")
        for role, name in (("key", self.key), ("value", self.value)):
            if name is not None and (not isinstance(name, str) or not name):
                raise ValueError(f"Gather operation {role} name must be a non-empty string")
        if self.key is not None and self.key == self.value:
            raise ValueError("Gather operation key and value names must differ")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "gather",
            "key": self.key,
            "value": self.value,
            "selector": self.selector.to_dict(),
            "na_rm": self.na_rm,
            "convert": self.convert,
            "strict_types": self.strict_types,
            "input": self.inputs[0].to_dict(),
        }


@dataclass
class Spread(Operation):
    """Long-to-wide reshaping (the inverse of Gather).

    Aliases: ``input`` → ``inputs[0]``.
    """

    key: str = ""
    value: str = ""
    fill: Any = None
    convert: Optional[bool] = None
    input: Optional[Operation] = field(default=None, repr=False)

    def __post_init__(self):
        self.inputs = _resolve_inputs(self.inputs, input=self.input)
        self.input = None
        if len(self.inputs) != 1:
            raise ValueError("Spread operation must have exactly one input")
        if not self.key:
            raise ValueError("Spread operation must specify a key column")
        if not self.value:
            raise ValueError("Spread operation must specify a value column")
        if self.key == self.value:
            raise ValueError("Spread operation key and value columns must differ")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "spread",
            "key": self.key,
            "value": self.value,
            "fill": self.fill,
            "convert": self.convert,
            "input": self.inputs[0].to_dict(),
        }
