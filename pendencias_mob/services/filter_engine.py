from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from ..models.canonical_row import CANONICAL_COLUMNS, CanonicalRow
from ..models.filter_state import BLANK_SENTINEL, ColumnSelection, FilterState

"""Filter engine: spreadsheet-style per-column checkbox filters.

Columns are filtered independently and combined with AND. The visible view is
a pure function of (dataset, FilterState) and is recomputed on demand; the
engine only ever swaps one immutable FilterState for another.
"""

__all__ = [
    "FilterEngine",
    "UnknownColumnError",
    "apply_filters",
    "display_value",
    "filter_options",
    "is_filtering",
]

logger = logging.getLogger(__name__)


class UnknownColumnError(KeyError):
    """Raised when a filter action names a column that is not filterable."""


def display_value(value: str) -> str:
    """Value as shown in filter menus; blanks map to the (Vazio) sentinel."""
    return value if value else BLANK_SENTINEL


def filter_options(rows: Iterable[CanonicalRow], columns: Sequence[str] = CANONICAL_COLUMNS) -> dict[str, list[str]]:
    """Sorted distinct display values per column over the *full* dataset."""
    seen: dict[str, set[str]] = {c: set() for c in columns}
    for row in rows:
        for c in columns:
            seen[c].add(display_value(row[c]))
    return {c: sorted(vals) for c, vals in seen.items()}


def apply_filters(rows: Iterable[CanonicalRow], state: FilterState) -> list[CanonicalRow]:
    """Rows accepted by every constraining column selection."""
    active = [(c, state.selection(c)) for c in state.constrained_columns()]
    if not active:
        return list(rows)
    return [r for r in rows if all(sel.accepts(display_value(r[c])) for c, sel in active)]


def is_filtering(state: FilterState, options: Mapping[str, Sequence[str]]) -> bool:
    """True when some touched column does not select its whole option set."""
    for column, sel in state.selections.items():
        if sel.is_unrestricted:
            continue
        assert sel.values is not None
        # compara conjuntos: um valor fora das opções também filtra
        if sel.values != frozenset(options.get(column, ())):
            return True
    return False


class FilterEngine:
    """Live filter state over one loaded dataset.

    A new upload means a new engine (or :meth:`load`); the previous state is
    discarded.
    """

    def __init__(self, rows: Sequence[CanonicalRow] = (), columns: Sequence[str] = CANONICAL_COLUMNS) -> None:
        self.columns = tuple(columns)
        self.load(rows)

    def load(self, rows: Sequence[CanonicalRow]) -> None:
        """Replace the dataset and reset every column to unrestricted."""
        self._rows: tuple[CanonicalRow, ...] = tuple(rows)
        self._options = filter_options(self._rows, self.columns)
        self._state = FilterState.empty(self.columns)
        logger.debug(f"filter engine loaded rows={len(self._rows)}")

    @property
    def rows(self) -> tuple[CanonicalRow, ...]:
        return self._rows

    @property
    def state(self) -> FilterState:
        return self._state

    def options(self) -> dict[str, list[str]]:
        """FilterOptions for every column."""
        return {c: list(v) for c, v in self._options.items()}

    def options_for(self, column: str) -> list[str]:
        self._check(column)
        return list(self._options[column])

    def _check(self, column: str) -> None:
        if column not in self.columns:
            raise UnknownColumnError(column)

    def toggle_value(self, column: str, value: str) -> None:
        self._check(column)
        sel = self._state.selection(column).toggled(value)
        self._state = self._state.with_selection(column, sel)

    def select_all(self, column: str) -> None:
        self._check(column)
        sel = ColumnSelection.restricted_to(self._options[column])
        self._state = self._state.with_selection(column, sel)

    def clear_column(self, column: str) -> None:
        self._check(column)
        self._state = self._state.with_selection(column, ColumnSelection.restricted_to(()))

    def reset(self) -> None:
        self._state = FilterState.empty(self.columns)

    def visible_rows(self) -> list[CanonicalRow]:
        return apply_filters(self._rows, self._state)

    def has_active_filters(self) -> bool:
        return is_filtering(self._state, self._options)
