"""
Plan visualization utilities.

Provides text-based tree rendering for logical plans. The root (final result) is
printed first and each input hangs below its consumer with box-drawing connectors.
"""

from typing import Optional, Set
from ..algebra.logical_plan import LogicalPlan
from ..algebra.operations import Operation, Source, Gather, Spread
from ..selectors import ColumnRange, Everything, ExplicitExclude, ExplicitInclude, Selector


def visualize(plan: LogicalPlan) -> str:
    """Generate a text-based tree visualization of the plan.

    Args:
        plan: The logical plan to visualize

    Returns:
        A string containing the tree-shaped visualization

    Example:
        >>> source = Source(source_id="mpg", schema=["id", "city", "hwy"])
        >>> gathered = Gather(key="roadtype", value="mpg", exclude=["id"], input=source)
        >>> print(visualize(LogicalPlan(gathered)))
        Gather(key='roadtype', value='mpg', exclude=['id'])
        └── Source(source_id='mpg', schema=['id', 'city', 'hwy'])
    """
    if not isinstance(plan, LogicalPlan):
        raise TypeError(f"Expected LogicalPlan, got {type(plan)}")

    lines = []
    visited: Set[int] = set()
    _visualize_operation(plan.root, lines, prefix=None, is_last=True, visited=visited)
    return "\n".join(lines)


def _visualize_operation(
    op: Operation,
    lines: list,
    prefix: Optional[str],
    is_last: bool,
    visited: Set[int]
) -> None:
    """Recursively visualize an operation and its inputs.

    Args:
        op: Operation to visualize
        lines: List to append visualization lines to
        prefix: Indentation inherited from the parent, None for the root
        is_last: Whether this is the last child of its parent
        visited: Set of operation IDs already visited (for shared subtrees)
    """
    connector = "└── " if is_last else "├── "

    op_id = id(op)
    if op_id in visited:
        lines.append((prefix or "") + connector + "[already shown]")
        return
    visited.add(op_id)

    if prefix is None:
        lines.append(_format_operation(op))
        child_prefix = ""
    else:
        lines.append(prefix + connector + _format_operation(op))
        child_prefix = prefix + ("    " if is_last else "│   ")

    for i, input_op in enumerate(op.inputs):
        _visualize_operation(input_op, lines, child_prefix, i == len(op.inputs) - 1, visited)


def _format_selector(selector: Selector) -> str:
    if isinstance(selector, ExplicitInclude):
        return f"columns={list(selector.names)}"
    if isinstance(selector, ExplicitExclude):
        return f"exclude={list(selector.names)}"
    if isinstance(selector, ColumnRange):
        return f"columns='{selector.start}':'{selector.stop}'"
    if isinstance(selector, Everything):
        return "columns=*"
    return f"selector={selector!r}"


def _format_operation(op: Operation) -> str:
    """Format an operation as a string with its key parameters."""
    op_type = op.__class__.__name__

    if isinstance(op, Source):
        if op.schema:
            return f"{op_type}(source_id='{op.source_id}', schema={op.schema})"
        return f"{op_type}(source_id='{op.source_id}')"

    elif isinstance(op, Gather):
        parts = [f"key='{op.key}'", f"value='{op.value}'", _format_selector(op.selector)]
        if op.na_rm:
            parts.append("na_rm=True")
        if op.convert:
            parts.append("convert=True")
        if op.strict_types:
            parts.append("strict_types=True")
        return f"{op_type}({', '.join(parts)})"

    elif isinstance(op, Spread):
        fill_str = f", fill={op.fill!r}" if op.fill is not None else ""
        return f"{op_type}(key='{op.key}', value='{op.value}'{fill_str})"

    else:
        return f"{op_type}()"
