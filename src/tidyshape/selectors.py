"""
Column selectors.

A selector is a small immutable value describing which columns of a table are
gathered. It is resolved once against the table's column names into a Resolution,
which partitions the columns into *kept* (identity) and *gathered* sets. Both sets
are returned in the table's left-to-right order, whatever order the selector listed
names in, so downstream code never has to match names again.

Variants:
- ExplicitInclude(names): gather exactly these columns
- ExplicitExclude(names): keep these columns, gather everything else
- ColumnRange(start, stop): gather the inclusive positional range start..stop
- Everything(): gather every column
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

from .exceptions import UnknownColumnError


@dataclass(frozen=True)
class Resolution:
    """A selector resolved against a concrete schema."""

    kept: Tuple[str, ...]
    gathered: Tuple[str, ...]


class Selector:
    """Base class for column selectors."""

    kind: str = ""

    def resolve(self, columns: Sequence[str]) -> Resolution:
        raise NotImplementedError(
            f"resolve not implemented for {self.__class__.__name__}"
        )

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError(
            f"to_dict not implemented for {self.__class__.__name__}"
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Selector":
        kind = data.get("kind")
        if not kind:
            raise ValueError("Selector dict must have 'kind' field")

        kind_map = {
            "include": ExplicitInclude,
            "exclude": ExplicitExclude,
            "range": ColumnRange,
            "everything": Everything,
        }
        selector_class = kind_map.get(kind)
        if not selector_class:
            raise ValueError(f"Unknown selector kind: {kind}")

        kwargs = {k: v for k, v in data.items() if k != "kind"}
        return selector_class(**kwargs)


def _check_known(names: Sequence[str], columns: Sequence[str]) -> None:
    available = set(columns)
    missing = [name for name in names if name not in available]
    if missing:
        raise UnknownColumnError(missing, columns)


def _partition(columns: Sequence[str], gathered: set) -> Resolution:
    return Resolution(
        kept=tuple(c for c in columns if c not in gathered),
        gathered=tuple(c for c in columns if c in gathered),
    )


@dataclass(frozen=True)
class ExplicitInclude(Selector):
    """Gather the named columns; keep the rest."""

    names: Tuple[str, ...] = ()
    kind = "include"

    def __post_init__(self):
        object.__setattr__(self, "names", _as_names(self.names))

    def resolve(self, columns: Sequence[str]) -> Resolution:
        _check_known(self.names, columns)
        return _partition(columns, set(self.names))

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "names": list(self.names)}


@dataclass(frozen=True)
class ExplicitExclude(Selector):
    """Keep the named columns; gather everything else."""

    names: Tuple[str, ...] = ()
    kind = "exclude"

    def __post_init__(self):
        object.__setattr__(self, "names", _as_names(self.names))

    def resolve(self, columns: Sequence[str]) -> Resolution:
        _check_known(self.names, columns)
        kept = set(self.names)
        return _partition(columns, {c for c in columns if c not in kept})

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "names": list(self.names)}


@dataclass(frozen=True)
class ColumnRange(Selector):
    """Gather every column positioned between ``start`` and ``stop``, inclusive.

    The endpoints may be given in either order.
    """

    start: str = ""
    stop: str = ""
    kind = "range"

    def __post_init__(self):
        if not self.start or not self.stop:
            raise ValueError("ColumnRange must specify start and stop columns")

    def resolve(self, columns: Sequence[str]) -> Resolution:
        _check_known([self.start, self.stop], columns)
        positions = sorted((list(columns).index(self.start), list(columns).index(self.stop)))
        return _partition(columns, set(columns[positions[0]:positions[1] + 1]))

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "start": self.start, "stop": self.stop}


@dataclass(frozen=True)
class Everything(Selector):
    """Gather every column of the table."""

    kind = "everything"

    def resolve(self, columns: Sequence[str]) -> Resolution:
        return Resolution(kept=(), gathered=tuple(columns))

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind}


def _as_names(names: Any) -> Tuple[str, ...]:
    if isinstance(names, str):
        return (names,)
    # drop repeats, keep first occurrence
    return tuple(dict.fromkeys(names))


def include(*names: str) -> ExplicitInclude:
    return ExplicitInclude(names)


def exclude(*names: str) -> ExplicitExclude:
    return ExplicitExclude(names)


def between(start: str, stop: str) -> ColumnRange:
    return ColumnRange(start, stop)


def everything() -> Everything:
    return Everything()


def as_selector(selection: Any) -> Selector:
    """Coerce a selector-like argument into a Selector.

    ``None`` selects everything; a name or a list of names selects those columns.
    """
    if selection is None:
        return Everything()
    if isinstance(selection, Selector):
        return selection
    if isinstance(selection, str):
        return ExplicitInclude((selection,))
    if isinstance(selection, (list, tuple)):
        return ExplicitInclude(tuple(selection))
    raise TypeError(f"Cannot interpret {type(selection).__name__} as a column selector")
