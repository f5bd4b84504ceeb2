from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date

from ..excel.writer import write_workbook
from ..models.canonical_row import CANONICAL_COLUMNS, CanonicalRow
from ..models.config_models import AppConfig
from ..models.export_plan import CellStyle, ExportPlan
from ..models.results import DueStatus, ExportResult
from .pending import due_status, select_pending

"""Export of pending/overdue tickets.

Builds the presentation plan (header treatment, row tint by due-date
proximity, column widths) and hands it to the writer collaborator. An empty
pending set is an operator notice, not an error: no file is produced.
"""

__all__ = [
    "NOTHING_TO_EXPORT",
    "build_export_plan",
    "column_widths",
    "export_pending",
]

logger = logging.getLogger(__name__)

NOTHING_TO_EXPORT = "Nenhuma pendência para exportar"

HEADER_FILL = "1F4E78"
HEADER_FONT_COLOR = "FFFFFF"
OVERDUE_FILL = "FFC7CE"  # vermelho claro
DUE_TODAY_FILL = "FFEB9C"  # âmbar
BORDER_COLOR = "BFBFBF"
WIDTH_PADDING = 2

Writer = Callable[[ExportPlan], bytes]


def column_widths(columns: Sequence[str], rows: Iterable[Sequence[str]], cap: int) -> tuple[int, ...]:
    """Per column: longest of header and cells, plus padding, capped."""
    longest = [len(c) for c in columns]
    for row in rows:
        for i, cell in enumerate(row):
            longest[i] = max(longest[i], len(cell))
    return tuple(min(n + WIDTH_PADDING, cap) for n in longest)


def _row_style(status: DueStatus) -> CellStyle:
    if status is DueStatus.OVERDUE:
        return CellStyle(fill=OVERDUE_FILL, border_color=BORDER_COLOR)
    if status is DueStatus.DUE_TODAY:
        return CellStyle(fill=DUE_TODAY_FILL, border_color=BORDER_COLOR)
    return CellStyle(border_color=BORDER_COLOR)


def build_export_plan(
    rows: Sequence[CanonicalRow],
    today: date,
    columns: Sequence[str] = CANONICAL_COLUMNS,
    max_column_width: int = 50,
) -> ExportPlan:
    body = tuple(tuple(r[c] for c in columns) for r in rows)
    return ExportPlan(
        columns=tuple(columns),
        rows=body,
        header_style=CellStyle(
            fill=HEADER_FILL,
            font_color=HEADER_FONT_COLOR,
            bold=True,
            border_color=BORDER_COLOR,
        ),
        row_styles=tuple(_row_style(due_status(r, today)) for r in rows),
        column_widths=column_widths(columns, body, max_column_width),
    )


def export_pending(
    visible_rows: Sequence[CanonicalRow],
    today: date,
    config: AppConfig | None = None,
    writer: Writer = write_workbook,
) -> ExportResult:
    """Select pending rows from the visible view and materialize them.

    Args:
        visible_rows: output of ``FilterEngine.visible_rows()``
        today: reference day (time of day is irrelevant)
        config: export settings; defaults when None
        writer: collaborator turning an ExportPlan into document bytes

    Returns:
        ExportResult with content and file name, or with a notice when
        nothing is due.
    """
    cfg = config or AppConfig()
    pending = select_pending(visible_rows, today, cfg.actionable_statuses)
    if not pending:
        logger.info(NOTHING_TO_EXPORT)
        return ExportResult(today=today, rows=(), notice=NOTHING_TO_EXPORT)

    statuses = [due_status(r, today) for r in pending]
    plan = build_export_plan(pending, today, max_column_width=cfg.export.max_column_width)
    content = writer(plan)
    filename = cfg.export.filename_for(today.isoformat())
    logger.info(f"export ready file={filename} rows={len(pending)}")
    return ExportResult(
        today=today,
        rows=tuple(pending),
        filename=filename,
        content=content,
        overdue=statuses.count(DueStatus.OVERDUE),
        due_today=statuses.count(DueStatus.DUE_TODAY),
    )
