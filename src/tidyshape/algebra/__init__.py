"""
Reshaping algebra module.

This module defines the intermediate representation (IR) for reshaping operations.
The algebra provides a composable, serializable representation of transformations
that can be explained, serialized and executed eagerly.

Key components:
- LogicalPlan: Container for the operation tree
- Operation classes: Source, Gather, Spread
- execute: Eager evaluation of an operation tree over Tables
"""

from .logical_plan import LogicalPlan
from .operations import (
    Operation,
    Source,
    Gather,
    Spread,
)
from .eager import execute

__all__ = [
    "LogicalPlan",
    "Operation",
    "Source",
    "Gather",
    "Spread",
    "execute",
]
