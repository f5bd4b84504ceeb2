from __future__ import annotations

from dataclasses import dataclass

"""Presentation plan handed to the spreadsheet writer.

The plan carries everything the writer needs (columns, cell values, fills,
fonts, borders, widths, frozen header); the writer adds no business logic.
Colours are RGB hex strings without '#', as openpyxl expects.
"""

__all__ = [
    "CellStyle",
    "ExportPlan",
]


@dataclass(frozen=True)
class CellStyle:
    fill: str | None = None  # solid fill colour
    font_color: str | None = None
    bold: bool = False
    border_color: str | None = None  # thin border on all four sides


@dataclass(frozen=True)
class ExportPlan:
    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    header_style: CellStyle
    row_styles: tuple[CellStyle, ...]  # one per body row
    column_widths: tuple[int, ...]  # one per column
    freeze_panes: str | None = "A2"
    sheet_title: str = "Pendências"
