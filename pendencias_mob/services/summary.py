from __future__ import annotations

from ..models.results import ExportResult, IngestionResult

"""SUMMARY line rendering for one CLI run.

Format:
SUMMARY file={name} rows={n} actionable={n} fallback={yes|no} visible={n}
pending={n} overdue={n} due_today={n} exported={file|none}
"""


def render_summary_line(
    ingestion: IngestionResult,
    visible_rows: int,
    export: ExportResult | None = None,
) -> str:
    """Render the SUMMARY line for an ingestion (and optional export).

    Examples:
        >>> from pendencias_mob.models.results import IngestionResult
        >>> result = IngestionResult(source_name="mob.xlsx", all_rows=(), rows=())
        >>> render_summary_line(result, 0)
        'SUMMARY file=mob.xlsx rows=0 actionable=0 fallback=no visible=0 pending=0 overdue=0 due_today=0 exported=none'
    """
    pending = len(export.rows) if export is not None else 0
    overdue = export.overdue if export is not None else 0
    due_today = export.due_today if export is not None else 0
    exported = export.filename if export is not None and export.exported else "none"
    return (
        f"SUMMARY file={ingestion.source_name} "
        f"rows={ingestion.total_rows} "
        f"actionable={ingestion.actionable_rows} "
        f"fallback={'yes' if ingestion.fallback_used else 'no'} "
        f"visible={visible_rows} "
        f"pending={pending} "
        f"overdue={overdue} "
        f"due_today={due_today} "
        f"exported={exported}"
    )
