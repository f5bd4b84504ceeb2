from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Config dataclasses for the ticket spreadsheet pipeline.

These are the domain-side view of ``config/pendencias.yml``; the loader in
``pendencias_mob.config.loader`` validates the YAML and builds them. Every
field has a default so that the tool runs without any configuration file.
"""

DEFAULT_ORIGIN_TAG = "MOB"
DEFAULT_ACTIONABLE_STATUSES: tuple[str, ...] = ("encaminh", "transfer", "campo", "reenc", "proced")
DEFAULT_FILENAME_PATTERN = "pendencias_mob_{date}.xlsx"
DEFAULT_MAX_COLUMN_WIDTH = 50


class DateOrder(Enum):
    """Tie-break for slash dates whose first two parts are both <= 12."""
    DAY_FIRST = "day_first"
    MONTH_FIRST = "month_first"


@dataclass(frozen=True)
class ExportConfig:
    """Export file settings."""
    filename_pattern: str = DEFAULT_FILENAME_PATTERN  # {date} -> ISO date
    max_column_width: int = DEFAULT_MAX_COLUMN_WIDTH
    output_dir: str = "."

    def filename_for(self, iso_date: str) -> str:
        return self.filename_pattern.format(date=iso_date)


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    origin_tag: str = DEFAULT_ORIGIN_TAG
    column_aliases: dict[str, tuple[str, ...]] = field(default_factory=dict)  # extra aliases only
    actionable_statuses: tuple[str, ...] = DEFAULT_ACTIONABLE_STATUSES
    date_order: dict[str, DateOrder] = field(default_factory=dict)  # column -> override
    date_epoch: int = 1900
    export: ExportConfig = field(default_factory=ExportConfig)

    def date_order_for(self, column: str) -> DateOrder:
        return self.date_order.get(column, DateOrder.DAY_FIRST)
