from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from ..models.canonical_row import COL_DATA_LIMITE, COL_STATUS, CanonicalRow
from ..models.config_models import DEFAULT_ACTIONABLE_STATUSES
from ..models.results import DueStatus
from .normalizers import parse_canonical_date
from .status_gate import is_actionable

"""Pending selector: due-today-or-overdue tickets for export.

Recomputed on every export request from the currently visible rows; never
cached.
"""

__all__ = [
    "due_status",
    "select_pending",
]


def due_status(row: CanonicalRow, today: date) -> DueStatus:
    """Classify a row's Data Limite relative to ``today``."""
    due = parse_canonical_date(row[COL_DATA_LIMITE])
    if due is None:
        return DueStatus.UNDATED
    if due < today:
        return DueStatus.OVERDUE
    if due == today:
        return DueStatus.DUE_TODAY
    return DueStatus.UPCOMING


def select_pending(
    rows: Iterable[CanonicalRow],
    today: date,
    fragments: Iterable[str] = DEFAULT_ACTIONABLE_STATUSES,
) -> list[CanonicalRow]:
    """Rows due on or before ``today`` whose status passes the gate.

    Rows with an empty or unparseable Data Limite are never pending.
    """
    frags = tuple(fragments)
    pending: list[CanonicalRow] = []
    for row in rows:
        if due_status(row, today) not in (DueStatus.OVERDUE, DueStatus.DUE_TODAY):
            continue
        if not is_actionable(row[COL_STATUS], frags):
            continue
        pending.append(row)
    return pending
