"""
Exception classes for tidyshape.

These exceptions are raised by the reshaping operations when the caller's input cannot
produce a well-formed table. None of them are transient: they describe bad arguments
and are reported before any output is built.
"""


class ReshapeError(Exception):
    """Base class for every error raised by tidyshape."""
    pass


class UnknownColumnError(ReshapeError, KeyError):
    """Raised when a selector or argument names a column the table does not have.

    Attributes:
        missing: The requested names that were not found, in request order
        available: The table's column names
    """

    def __init__(self, missing, available=()):
        self.missing = list(missing)
        self.available = list(available)
        super().__init__(
            f"Unknown column(s) {self.missing}; table has {self.available}"
        )

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class NameCollisionError(ReshapeError):
    """Raised when a new column name clashes with a column that is kept.

    Gathering into a key or value column named like one of the kept (identity)
    columns would produce two output columns with the same name. Spreading a
    key whose values include an identity column's name has the same problem.
    """
    pass


class EmptyGatherError(ReshapeError):
    """Raised when a selector resolves to zero gathered columns.

    Examples:
        - ExplicitExclude naming every column of the table
        - ExplicitInclude([]) or Everything() on a table without columns
    """
    pass


class ColumnTypeError(ReshapeError):
    """Raised in strict mode when gathered columns do not share a value type."""
    pass


class DuplicateKeyError(ReshapeError):
    """Raised when spread finds more than one value for a single output cell."""
    pass


class SchemaError(ReshapeError):
    """Raised when a table is constructed with an invalid shape.

    Examples:
        - Two columns with the same name
        - Columns of different lengths
        - A row whose width does not match the header
    """
    pass


class ConfigError(ReshapeError, ValueError):
    """Raised when a configuration file is missing or malformed."""
    pass
