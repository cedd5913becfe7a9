"""
Core module for tidyshape.

This module provides the immutable Table model, the gather/spread engine, and the
plan-tracking pandas DataFrame subclass.
"""

from .types import ColumnType
from .table import Column, Table
from .reshape import gather, spread
from .dataframe import DataFrame

__all__ = ["ColumnType", "Column", "Table", "gather", "spread", "DataFrame"]
