"""Domain models for the ticket spreadsheet pipeline.

This package contains the dataclasses shared by the reader, the services and
the CLI: the canonical row, the filter state, configuration and phase results.
"""

from .canonical_row import CANONICAL_COLUMNS, CanonicalRow
from .config_models import AppConfig, DateOrder, ExportConfig
from .filter_state import BLANK_SENTINEL, ColumnSelection, FilterState
from .results import DueStatus, ExportResult, IngestionResult

__all__ = [
    # Canonical schema
    "CANONICAL_COLUMNS",
    "CanonicalRow",
    # Configuration models
    "AppConfig",
    "DateOrder",
    "ExportConfig",
    # Filter models
    "BLANK_SENTINEL",
    "ColumnSelection",
    "FilterState",
    # Phase results
    "DueStatus",
    "ExportResult",
    "IngestionResult",
]
