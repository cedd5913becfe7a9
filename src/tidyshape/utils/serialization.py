"""
Plan serialization utilities.

Provides JSON serialization and deserialization for logical plans. The serialized
format carries a version for forward compatibility. Source data is left out by
default; with ``include_data=True`` each Source's table is embedded as a mapping of
column name to values, which makes the deserialized plan executable.
"""

import json
from typing import Dict, Any, List
from ..algebra.logical_plan import LogicalPlan
from ..algebra.operations import Operation, Source, Spread
from ..exceptions import SchemaError


# Current serialization format version
SERIALIZATION_VERSION = "1.0"

_JSON_SCALARS = (str, int, float, bool, type(None))


def _child_dicts(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    if data.get("inputs"):
        return data["inputs"]
    if data.get("input") is not None:
        return [data["input"]]
    return []


def _prepare(op: Operation, data: Dict[str, Any], include_data: bool) -> None:
    """Walk the operation tree and its dict form together.

    Checks that Spread fill values survive JSON and, when asked, adds each
    Source's table under ``data``.
    """
    if isinstance(op, Spread) and not isinstance(op.fill, _JSON_SCALARS):
        raise TypeError(
            f"Spread fill {op.fill!r} ({type(op.fill).__name__}) cannot be stored "
            "in a plan; use a string, number, boolean or None"
        )
    if include_data and isinstance(op, Source) and op.data is not None:
        data["data"] = op.data.to_dict()
    for child_op, child_data in zip(op.inputs, _child_dicts(data)):
        _prepare(child_op, child_data, include_data)


def serialize(plan: LogicalPlan, include_data: bool = False) -> Dict[str, Any]:
    """Serialize a logical plan to a JSON-serializable dictionary.

    The serialized format includes:
    - version: Format version string for forward compatibility
    - root: The root operation serialized as a nested dictionary

    Args:
        plan: The logical plan to serialize
        include_data: Embed each Source's table under a ``data`` key

    Returns:
        Dictionary that can be serialized to JSON

    Raises:
        TypeError: If plan is not a LogicalPlan, or a Spread fill is not a JSON scalar

    Example:
        >>> source = Source(source_id="mpg", schema=["id", "city", "hwy"])
        >>> plan = LogicalPlan(Gather(key="roadtype", value="mpg", exclude=["id"], input=source))
        >>> data = serialize(plan)
        >>> assert data["version"] == "1.0"
        >>> assert data["root"]["type"] == "gather"
    """
    if not isinstance(plan, LogicalPlan):
        raise TypeError(f"Expected LogicalPlan, got {type(plan)}")

    root = plan.root.to_dict()
    _prepare(plan.root, root, include_data)

    return {
        "version": SERIALIZATION_VERSION,
        "root": root,
    }


def deserialize(data: Dict[str, Any]) -> LogicalPlan:
    """Rebuild a reshape plan from the dictionary produced by serialize().

    Raises:
        TypeError: If data is not a dictionary
        ValueError: If the format version is unsupported or an operation, selector
            or embedded table cannot be rebuilt
    """
    if not isinstance(data, dict):
        raise TypeError(f"Expected dict, got {type(data)}")

    missing = [field for field in ("version", "root") if field not in data]
    if missing:
        raise ValueError(f"Serialized plan is missing {missing} field(s)")

    version = data["version"]
    if version != SERIALIZATION_VERSION:
        raise ValueError(
            f"Unsupported serialization version: {version!r}; "
            f"this release reads plans written as {SERIALIZATION_VERSION!r}"
        )
    if not isinstance(data["root"], dict):
        raise ValueError(f"Plan root must be an operation dict, got {type(data['root']).__name__}")

    try:
        root = Operation.from_dict(data["root"])
    except SchemaError as e:
        raise ValueError(f"Embedded source data is invalid: {e}") from e
    except ValueError as e:
        raise ValueError(f"Cannot rebuild reshape plan: {e}") from e
    except (KeyError, TypeError) as e:
        raise ValueError(f"Unexpected field in reshape plan: {e}") from e

    return LogicalPlan(root)


def to_json(plan: LogicalPlan, include_data: bool = False, **kwargs) -> str:
    """Serialize a logical plan to a JSON string.

    ``kwargs`` go to json.dumps (e.g. ``indent=2``).
    """
    return json.dumps(serialize(plan, include_data=include_data), **kwargs)


def from_json(json_str: str) -> LogicalPlan:
    """Rebuild a reshape plan from the text produced by to_json()."""
    if not isinstance(json_str, str):
        raise TypeError(f"Expected str, got {type(json_str)}")

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}") from e

    return deserialize(data)
