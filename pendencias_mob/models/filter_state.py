from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

"""FilterState model: one selection per filterable column.

A column is either *unrestricted* (never touched since the dataset was loaded)
or has an explicit *selection* of accepted display values. An explicit but
empty selection still imposes no constraint on rows; it only differs from the
unrestricted state in that it counts as an active filter (the operator cleared
the column's checkbox list).
"""

__all__ = [
    "BLANK_SENTINEL",
    "ColumnSelection",
    "FilterState",
]

BLANK_SENTINEL = "(Vazio)"


@dataclass(frozen=True)
class ColumnSelection:
    """Tagged selection for one column.

    ``values is None`` means Unrestricted; otherwise RestrictedTo(values).
    """
    values: frozenset[str] | None = None

    @classmethod
    def unrestricted(cls) -> ColumnSelection:
        return cls(None)

    @classmethod
    def restricted_to(cls, values: Iterable[str]) -> ColumnSelection:
        return cls(frozenset(values))

    @property
    def is_unrestricted(self) -> bool:
        return self.values is None

    @property
    def constrains_rows(self) -> bool:
        """True when the selection actually narrows the visible rows."""
        return bool(self.values)

    def accepts(self, display_value: str) -> bool:
        if not self.constrains_rows:
            return True
        assert self.values is not None
        return display_value in self.values

    def toggled(self, value: str) -> ColumnSelection:
        current = self.values or frozenset()
        return ColumnSelection(current ^ {value})


@dataclass(frozen=True)
class FilterState:
    """Immutable per-column selections; every change yields a new state."""
    columns: tuple[str, ...]
    selections: Mapping[str, ColumnSelection] = field(default_factory=dict)

    def __post_init__(self) -> None:
        merged = {c: self.selections.get(c, ColumnSelection.unrestricted()) for c in self.columns}
        unknown = set(self.selections) - set(self.columns)
        if unknown:
            raise KeyError(f"selections for unknown columns: {sorted(unknown)}")
        object.__setattr__(self, "selections", MappingProxyType(merged))

    @classmethod
    def empty(cls, columns: Iterable[str]) -> FilterState:
        return cls(columns=tuple(columns))

    def selection(self, column: str) -> ColumnSelection:
        return self.selections[column]

    def with_selection(self, column: str, selection: ColumnSelection) -> FilterState:
        if column not in self.selections:
            raise KeyError(column)
        updated = dict(self.selections)
        updated[column] = selection
        return FilterState(columns=self.columns, selections=updated)

    def constrained_columns(self) -> list[str]:
        return [c for c, sel in self.selections.items() if sel.constrains_rows]
