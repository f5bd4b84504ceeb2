from __future__ import annotations

import io

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..models.export_plan import CellStyle, ExportPlan

"""Spreadsheet writer collaborator (openpyxl).

Materializes an ExportPlan into an .xlsx byte buffer. Styling decisions are
made upstream; this module only translates them into openpyxl objects.
"""

__all__ = [
    "write_workbook",
]


def _fill(color: str | None) -> PatternFill | None:
    if not color:
        return None
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _border(color: str | None) -> Border | None:
    if not color:
        return None
    side = Side(style="thin", color=color)
    return Border(left=side, right=side, top=side, bottom=side)


def _apply(cell, style: CellStyle) -> None:
    fill = _fill(style.fill)
    if fill is not None:
        cell.fill = fill
    if style.bold or style.font_color:
        cell.font = Font(bold=style.bold, color=style.font_color)
    border = _border(style.border_color)
    if border is not None:
        cell.border = border


def write_workbook(plan: ExportPlan) -> bytes:
    """Render ``plan`` as a single-sheet workbook and return its bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = plan.sheet_title

    ws.append(list(plan.columns))
    for cell in ws[1]:
        _apply(cell, plan.header_style)
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row_idx, (values, style) in enumerate(zip(plan.rows, plan.row_styles, strict=True), start=2):
        for col_idx, value in enumerate(values, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if value.startswith("="):
                # texto livre, nunca fórmula
                cell.data_type = "s"
            _apply(cell, style)

    for idx, width in enumerate(plan.column_widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width

    if plan.freeze_panes:
        ws.freeze_panes = plan.freeze_panes

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
