from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

"""CanonicalRow model for the ticket spreadsheet pipeline.

Every uploaded spreadsheet, whatever its header names, is reconciled into the
same fixed 13-column shape. A CanonicalRow is created once by the row builder
and is read-only afterwards: filters and exports only ever derive subsets.
"""

__all__ = [
    "CANONICAL_COLUMNS",
    "COL_ORIGEM",
    "COL_CHAMADO",
    "COL_NUMERO_REFERENCIA",
    "COL_CONTRATANTE",
    "COL_SERVICO",
    "COL_STATUS",
    "COL_DATA_LIMITE",
    "COL_CLIENTE",
    "COL_CNPJ_CPF",
    "COL_CIDADE",
    "COL_TECNICO",
    "COL_PRESTADOR",
    "COL_JUSTIFICATIVA",
    "CanonicalRow",
]

COL_ORIGEM = "Origem"
COL_CHAMADO = "Chamado"
COL_NUMERO_REFERENCIA = "Numero Referencia"
COL_CONTRATANTE = "Contratante"
COL_SERVICO = "Serviço"
COL_STATUS = "Status"
COL_DATA_LIMITE = "Data Limite"
COL_CLIENTE = "Cliente"
COL_CNPJ_CPF = "CNPJ/CPF"
COL_CIDADE = "Cidade"
COL_TECNICO = "Técnico"
COL_PRESTADOR = "Prestador"
COL_JUSTIFICATIVA = "Justificativa do Abono"

# Ordem fixa: export e tabela seguem exatamente esta sequência
CANONICAL_COLUMNS: tuple[str, ...] = (
    COL_ORIGEM,
    COL_CHAMADO,
    COL_NUMERO_REFERENCIA,
    COL_CONTRATANTE,
    COL_SERVICO,
    COL_STATUS,
    COL_DATA_LIMITE,
    COL_CLIENTE,
    COL_CNPJ_CPF,
    COL_CIDADE,
    COL_TECNICO,
    COL_PRESTADOR,
    COL_JUSTIFICATIVA,
)


@dataclass(frozen=True)
class CanonicalRow:
    """One ticket after normalization into the canonical schema.

    ``row_number`` is the 1-based position of the source data row (the header
    row is not counted). ``values`` always holds every canonical column, in
    canonical order, as plain strings (``""`` when absent or unparseable).
    """
    row_number: int
    values: Mapping[str, str]
    raw_values: Mapping[str, Any] | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        missing = [c for c in CANONICAL_COLUMNS if c not in self.values]
        extra = [k for k in self.values if k not in CANONICAL_COLUMNS]
        if missing or extra:
            raise ValueError(f"row {self.row_number}: non-canonical keys missing={missing} extra={extra}")
        ordered = {c: self.values[c] for c in CANONICAL_COLUMNS}
        for col, val in ordered.items():
            if not isinstance(val, str):
                raise TypeError(f"row {self.row_number}: column '{col}' holds {type(val).__name__}, expected str")
        # dataclass congelada: object.__setattr__ troca por uma visão somente leitura
        object.__setattr__(self, "values", MappingProxyType(ordered))

    def __getitem__(self, column: str) -> str:
        return self.values[column]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def get(self, column: str, default: str = "") -> str:
        return self.values.get(column, default)

    def to_dict(self) -> dict[str, str]:
        """Return a mutable copy in canonical column order."""
        return dict(self.values)

    def to_list(self) -> list[str]:
        return [self.values[c] for c in CANONICAL_COLUMNS]
