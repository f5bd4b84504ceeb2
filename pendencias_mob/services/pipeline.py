from __future__ import annotations

import logging
from pathlib import Path

from ..excel.reader import ReadFailureError, UnsupportedFormatError, read_upload
from ..models.config_models import AppConfig
from ..models.results import IngestionResult
from .row_builder import build_rows
from .status_gate import prune_actionable

"""Ingestion boundary: uploaded file -> published canonical dataset.

raw bytes -> reader -> row builder (resolver + normalizers) -> status gate.
Either a complete IngestionResult is returned or an IngestionError is raised;
a partially built dataset is never handed to the filter engine.
"""

__all__ = [
    "EMPTY_INPUT_MESSAGE",
    "PARSE_FAILURE_MESSAGE",
    "IngestionError",
    "InputEmptyError",
    "ParseFailureError",
    "ingest_file",
    "ingest_upload",
]

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Arquivo vazio"
PARSE_FAILURE_MESSAGE = "Erro ao processar arquivo"


class IngestionError(Exception):
    """Base exception for ingestion failures; ``user_message`` is for operators."""
    user_message = PARSE_FAILURE_MESSAGE


class InputEmptyError(IngestionError):
    """The file parsed fine but holds no data rows."""
    user_message = EMPTY_INPUT_MESSAGE


class ParseFailureError(IngestionError):
    """The file is unreadable, malformed, or of an unsupported type."""


def ingest_upload(raw: bytes, filename: str, config: AppConfig | None = None) -> IngestionResult:
    """Run the full ingestion pipeline over one uploaded file buffer.

    Raises:
        InputEmptyError: the first sheet has no data rows
        ParseFailureError: the file could not be read or normalized
    """
    cfg = config or AppConfig()
    try:
        raw_rows = read_upload(raw, filename)
    except (UnsupportedFormatError, ReadFailureError) as e:
        logger.debug(f"reader failed for {filename}: {e}")
        raise ParseFailureError(str(e)) from e

    if not raw_rows:
        raise InputEmptyError(f"{filename}: no data rows")

    try:
        canonical = build_rows(raw_rows, cfg)
    except (TypeError, ValueError) as e:
        # normalizadores são totais; isto indica um bug, não dado ruim
        raise ParseFailureError(f"{filename}: could not normalize rows: {e}") from e

    working, fallback = prune_actionable(canonical, cfg.actionable_statuses)
    logger.info(
        f"ingested file={filename} rows={len(canonical)} working={len(working)} fallback={fallback}"
    )
    return IngestionResult(
        source_name=filename,
        all_rows=tuple(canonical),
        rows=tuple(working),
        fallback_used=fallback,
    )


def ingest_file(path: Path, config: AppConfig | None = None) -> IngestionResult:
    """Read ``path`` from disk and ingest it."""
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ParseFailureError(f"could not open {path}: {e}") from e
    return ingest_upload(raw, path.name, config)
