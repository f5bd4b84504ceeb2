from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from .canonical_row import CanonicalRow

"""Result models for ingestion and export.

Phase outputs are frozen: a new upload builds a new IngestionResult, and every
export request builds a new ExportResult (pending rows are never cached).
"""

__all__ = [
    "DueStatus",
    "IngestionResult",
    "ExportResult",
]


class DueStatus(Enum):
    """Due-date proximity of a ticket relative to a given day.

    - OVERDUE: Data Limite strictly before today
    - DUE_TODAY: Data Limite is today
    - UPCOMING: Data Limite after today
    - UNDATED: Data Limite empty or unparseable
    """
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    UPCOMING = "upcoming"
    UNDATED = "undated"


@dataclass(frozen=True)
class IngestionResult:
    """Canonical dataset published to the filter engine after one upload."""
    source_name: str
    all_rows: tuple[CanonicalRow, ...]  # every source row, canonical form
    rows: tuple[CanonicalRow, ...]  # working dataset after the status gate
    fallback_used: bool = False  # gate would have emptied the dataset

    @property
    def total_rows(self) -> int:
        return len(self.all_rows)

    @property
    def actionable_rows(self) -> int:
        """Rows that passed the status gate (0 when the fallback kicked in)."""
        return 0 if self.fallback_used else len(self.rows)


@dataclass(frozen=True)
class ExportResult:
    """Outcome of one export request.

    ``content`` is None when nothing qualified; ``notice`` then carries the
    operator-facing message.
    """
    today: date
    rows: tuple[CanonicalRow, ...]
    filename: str | None = None
    content: bytes | None = None
    notice: str | None = None
    overdue: int = 0
    due_today: int = 0

    @property
    def exported(self) -> bool:
        return self.content is not None
