from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..models.canonical_row import COL_STATUS, CanonicalRow
from ..models.config_models import DEFAULT_ACTIONABLE_STATUSES

"""Status gate: decides whether a ticket is actionable.

A status is actionable when its lower-cased text contains any allow-listed
fragment (substring match, so "Encaminhado", "Encaminhada p/ campo" and
"ENCAMINHAR" all pass with "encaminh").
"""

__all__ = [
    "is_actionable",
    "prune_actionable",
]

logger = logging.getLogger(__name__)


def is_actionable(status: str, fragments: Iterable[str] = DEFAULT_ACTIONABLE_STATUSES) -> bool:
    text = (status or "").lower()
    return any(f in text for f in fragments)


def prune_actionable(
    rows: Sequence[CanonicalRow],
    fragments: Iterable[str] = DEFAULT_ACTIONABLE_STATUSES,
) -> tuple[list[CanonicalRow], bool]:
    """Keep only actionable rows.

    Returns ``(rows, fallback_used)``. When no row is actionable but the
    input was not empty, the unpruned rows are returned with
    ``fallback_used=True`` so the table never comes up empty because of an
    unexpected status vocabulary.
    """
    frags = tuple(fragments)
    kept = [r for r in rows if is_actionable(r[COL_STATUS], frags)]
    if not kept and rows:
        statuses = sorted({r[COL_STATUS] for r in rows})
        logger.info(f"no actionable status found, keeping all {len(rows)} rows (statuses={statuses[:10]})")
        return list(rows), True
    return kept, False
