"""
Logical plan representation for reshaping operations.

The LogicalPlan class wraps the root operation of an algebra tree and provides
methods for introspection, serialization, execution and debugging. It tracks the
complete computation graph from source to final result.
"""

from typing import Dict, Any, Optional

from .operations import Operation, Source, Gather, Spread


class LogicalPlan:
    """Logical plan for reshaping operations.

    A LogicalPlan wraps the root operation of an algebra tree. The tree is built by
    composing operations, with each operation referencing its input operations. The
    plan can be serialized to JSON, explained for debugging, and executed eagerly.

    Attributes:
        root: The root operation of the plan (final result)

    Example:
        >>> source = Source(source_id="mpg", schema=["id", "city", "hwy"])
        >>> gathered = Gather(key="roadtype", value="mpg", exclude=["id"], inputs=[source])
        >>> plan = LogicalPlan(gathered)
        >>> print(plan.explain())
    """

    def __init__(self, root: Operation):
        """Initialize a logical plan with a root operation.

        Args:
            root: The root operation of the plan
        """
        if not isinstance(root, Operation):
            raise TypeError(f"Plan root must be an Operation, got {type(root)}")
        self._root = root

    @property
    def root(self) -> Operation:
        """Get the root operation of the plan."""
        return self._root

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the plan to a dictionary.

        Returns the root operation's dict directly so ``plan.to_dict()["type"]``
        gives the root operation type.
        """
        return self._root.to_dict()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LogicalPlan':
        """Deserialize a plan from a dictionary.

        Accepts either a wrapped ``{"root": ...}`` dict or the root operation
        dict directly (must have a ``"type"`` key).
        """
        if 'root' in data:
            root = Operation.from_dict(data['root'])
        elif 'type' in data:
            root = Operation.from_dict(data)
        else:
            raise ValueError("Plan dict must have 'root' or 'type' key")
        return cls(root)

    def execute(self, config: Optional[Any] = None):
        """Evaluate the plan eagerly and return the resulting Table."""
        from .eager import execute
        return execute(self._root, config)

    def explain(self, verbose: bool = False) -> str:
        """Generate a human-readable explanation of the plan.

        The explanation lists operations from leaves (sources) to root (final result).

        Args:
            verbose: If True, include the options left at their defaults

        Returns:
            String explanation of the plan
        """
        lines = []
        lines.append("Logical Plan:")
        lines.append("=" * 60)

        self._explain_operation(self._root, lines, verbose=verbose)

        return "\n".join(lines)

    def _explain_operation(self, op: Operation, lines: list, verbose: bool):
        """Recursively explain an operation and its inputs."""
        # Inputs first (leaves before root)
        for input_op in op.inputs:
            self._explain_operation(input_op, lines, verbose)

        op_type = op.__class__.__name__

        if isinstance(op, Source):
            desc = f"{op_type}(source_id='{op.source_id}'"
            if op.schema:
                desc += f", schema={op.schema}"
            desc += ")"

        elif isinstance(op, Gather):
            desc = f"{op_type}(key='{op.key}', value='{op.value}', selector={op.selector!r}"
            if verbose or op.na_rm:
                desc += f", na_rm={op.na_rm}"
            if verbose or op.convert:
                desc += f", convert={op.convert}"
            if verbose or op.strict_types:
                desc += f", strict_types={op.strict_types}"
            desc += ")"

        elif isinstance(op, Spread):
            desc = f"{op_type}(key='{op.key}', value='{op.value}'"
            if verbose or op.fill is not None:
                desc += f", fill={op.fill!r}"
            desc += ")"

        else:
            desc = f"{op_type}()"

        lines.append(desc)

    def copy(self) -> 'LogicalPlan':
        """Create a shallow copy of the plan.

        Returns:
            New LogicalPlan instance with the same root operation
        """
        return LogicalPlan(self._root)

    def __repr__(self) -> str:
        """String representation of the plan."""
        return f"LogicalPlan(root={self._root.__class__.__name__})"

    def __str__(self) -> str:
        """String representation showing the plan explanation."""
        return self.explain()
