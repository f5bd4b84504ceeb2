from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..models.canonical_row import (
    CANONICAL_COLUMNS,
    COL_CNPJ_CPF,
    COL_DATA_LIMITE,
    COL_ORIGEM,
    CanonicalRow,
)
from ..models.config_models import AppConfig
from .columns import ColumnResolver
from .normalizers import clean_identifier, normalize_date, to_text
from .progress import RowProgress

"""Row builder: RawRow -> CanonicalRow.

For each source row, every canonical column is filled in canonical order:
Column Resolver picks the source key, then the column's normalizer converts
the raw value. Input order is preserved and rows are never deduplicated.
"""

__all__ = [
    "DATE_COLUMNS",
    "IDENTIFIER_COLUMNS",
    "build_row",
    "build_rows",
]

logger = logging.getLogger(__name__)

DATE_COLUMNS = frozenset({COL_DATA_LIMITE})
IDENTIFIER_COLUMNS = frozenset({COL_CNPJ_CPF})


def _normalizer_for(column: str, config: AppConfig) -> Callable[[Any], str]:
    if column in DATE_COLUMNS:
        order = config.date_order_for(column)
        return lambda v: normalize_date(v, order=order, epoch=config.date_epoch)
    if column in IDENTIFIER_COLUMNS:
        return clean_identifier
    return to_text


def build_row(
    raw_row: Mapping[str, Any],
    row_number: int,
    resolver: ColumnResolver,
    config: AppConfig,
    normalizers: Mapping[str, Callable[[Any], str]] | None = None,
) -> CanonicalRow:
    """Build one CanonicalRow; absent or unparseable fields become ""."""
    funcs = normalizers or {c: _normalizer_for(c, config) for c in CANONICAL_COLUMNS}
    values: dict[str, str] = {}
    for column in CANONICAL_COLUMNS:
        if column == COL_ORIGEM:
            values[column] = config.origin_tag
            continue
        key = resolver.source_key(raw_row, column)
        if key is None:
            values[column] = ""
            continue
        raw = raw_row[key]
        normalized = funcs[column](raw)
        if normalized == "" and to_text(raw) != "":
            # UnparseableField: descartado em silêncio (só em debug)
            logger.debug(f"row {row_number}: dropped unparseable {column}={raw!r}")
        values[column] = normalized
    return CanonicalRow(row_number=row_number, values=values, raw_values=dict(raw_row))


def build_rows(raw_rows: Iterable[Mapping[str, Any]], config: AppConfig | None = None) -> list[CanonicalRow]:
    """Build the canonical dataset for one upload, preserving input order."""
    cfg = config or AppConfig()
    rows_in = list(raw_rows)
    resolver = ColumnResolver(cfg.column_aliases)
    normalizers = {c: _normalizer_for(c, cfg) for c in CANONICAL_COLUMNS}

    if rows_in:
        mapping = resolver.mapping_for(rows_in[0].keys())
        unresolved = [c for c, src in mapping.items() if src is None and c != COL_ORIGEM]
        if unresolved:
            logger.debug(f"columns without source header: {unresolved}")

    built: list[CanonicalRow] = []
    with RowProgress(len(rows_in)) as progress:
        for idx, raw in enumerate(rows_in, start=1):
            built.append(build_row(raw, idx, resolver, cfg, normalizers))
            progress.advance()
    return built
