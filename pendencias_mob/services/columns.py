from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Mapping
from typing import Any

from ..models.canonical_row import (
    CANONICAL_COLUMNS,
    COL_CHAMADO,
    COL_CIDADE,
    COL_CLIENTE,
    COL_CNPJ_CPF,
    COL_CONTRATANTE,
    COL_DATA_LIMITE,
    COL_JUSTIFICATIVA,
    COL_NUMERO_REFERENCIA,
    COL_ORIGEM,
    COL_PRESTADOR,
    COL_SERVICO,
    COL_STATUS,
    COL_TECNICO,
)

"""Column resolver: maps arbitrary source headers onto the canonical schema.

Headers are compared in normalized form (case-folded, accents stripped,
whitespace collapsed) against the canonical name and a static alias table.
A canonical column with no matching header is simply absent; partial
schemas are expected and never raise.
"""

__all__ = [
    "DEFAULT_ALIASES",
    "ColumnResolver",
    "build_alias_table",
    "normalize_header",
    "resolve_column",
]

_WS_RE = re.compile(r"\s+")

DEFAULT_ALIASES: dict[str, tuple[str, ...]] = {
    COL_ORIGEM: (),
    COL_CHAMADO: ("Nº Chamado", "Numero Chamado", "Número do Chamado", "Ticket"),
    COL_NUMERO_REFERENCIA: ("Número Referência", "Nº Referência", "Referencia", "Numero de Referencia"),
    COL_CONTRATANTE: ("Empresa Contratante",),
    COL_SERVICO: ("Tipo Serviço", "Tipo de Serviço", "Servico"),
    COL_STATUS: ("Situação", "Status Chamado"),
    COL_DATA_LIMITE: ("Prazo", "Data Prazo", "Data Limite Atendimento", "Vencimento", "Data Vencimento"),
    COL_CLIENTE: ("Nome Cliente", "Nome do Cliente", "Razão Social"),
    COL_CNPJ_CPF: ("CNPJ / CPF", "CPF/CNPJ", "CPF / CNPJ", "CNPJ", "CPF", "Documento"),
    COL_CIDADE: ("Município", "Cidade Cliente"),
    COL_TECNICO: ("Técnico Responsável", "Nome Técnico"),
    COL_PRESTADOR: ("Prestador de Serviço", "Empresa Prestadora"),
    COL_JUSTIFICATIVA: ("Justificativa Abono", "Justificativa", "Abono"),
}


def normalize_header(name: Any) -> str:
    """Case-fold, strip accents and collapse whitespace.

    >>> normalize_header("  Nome   CLIENTE ")
    'nome cliente'
    >>> normalize_header("Serviço")
    'servico'
    """
    text = unicodedata.normalize("NFKD", str(name))
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _WS_RE.sub(" ", text).strip().casefold()


def build_alias_table(
    extra_aliases: Mapping[str, Iterable[str]] | None = None,
) -> dict[str, tuple[str, ...]]:
    """Return canonical column -> normalized names, canonical name first.

    ``extra_aliases`` (from configuration) are appended after the built-in
    aliases, so built-ins win when a sheet carries both.
    """
    table: dict[str, tuple[str, ...]] = {}
    for column in CANONICAL_COLUMNS:
        names = [column, *DEFAULT_ALIASES.get(column, ())]
        if extra_aliases and column in extra_aliases:
            names.extend(extra_aliases[column])
        seen: list[str] = []
        for n in names:
            key = normalize_header(n)
            if key and key not in seen:
                seen.append(key)
        table[column] = tuple(seen)
    return table


def _pick(headers: Iterable[str], accepted: tuple[str, ...]) -> str | None:
    by_norm: dict[str, str] = {}
    for h in headers:
        # primeira ocorrência vence em cabeçalhos duplicados
        by_norm.setdefault(normalize_header(h), h)
    for candidate in accepted:
        if candidate in by_norm:
            return by_norm[candidate]
    return None


def resolve_column(
    raw_row: Mapping[str, Any],
    column: str,
    alias_table: Mapping[str, tuple[str, ...]] | None = None,
) -> str | None:
    """Return the source key in ``raw_row`` feeding ``column``, or None."""
    table = alias_table if alias_table is not None else build_alias_table()
    return _pick(raw_row.keys(), table.get(column, (normalize_header(column),)))


class ColumnResolver:
    """Header lookup built once per row-builder run.

    The source -> canonical mapping is cached per distinct header tuple, so a
    sheet with uniform headers resolves exactly once.
    """

    def __init__(self, extra_aliases: Mapping[str, Iterable[str]] | None = None) -> None:
        self.alias_table = build_alias_table(extra_aliases)
        self._cache: dict[tuple[str, ...], dict[str, str | None]] = {}

    def mapping_for(self, headers: Iterable[str]) -> dict[str, str | None]:
        key = tuple(headers)
        cached = self._cache.get(key)
        if cached is None:
            cached = {c: _pick(key, self.alias_table[c]) for c in CANONICAL_COLUMNS}
            self._cache[key] = cached
        return cached

    def source_key(self, raw_row: Mapping[str, Any], column: str) -> str | None:
        return self.mapping_for(raw_row.keys())[column]
