# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from pendencias_mob.logging.init import reset_logging
from pendencias_mob.models.canonical_row import CANONICAL_COLUMNS, CanonicalRow

TODAY = date(2026, 1, 12)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("PENDENCIAS_CONFIG", raising=False)
        monkeypatch.delenv("PENDENCIAS_OUTPUT_DIR", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """origin_tag: MOB
column_aliases:
  Cliente: ["Nome Fantasia"]
actionable_statuses: [encaminh, transfer, campo, reenc, proced]
date_order:
  Data Limite: day_first
date_epoch: 1900
export:
  filename_pattern: "pendencias_mob_{date}.xlsx"
  max_column_width: 40
  output_dir: ./saida
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "pendencias.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_xlsx() -> Callable[..., Path]:
    """Write header-keyed dict rows to a single-sheet workbook."""
    def _make(path: Path, rows: list[dict[str, Any]], columns: list[str] | None = None) -> Path:
        df = pd.DataFrame(rows, columns=columns)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Relatorio", index=False)
        return path
    return _make


@pytest.fixture()
def sample_mob_rows() -> list[dict[str, Any]]:
    """Rows shaped like a real MOB export (source header names, mixed dates)."""
    return [
        {
            "Chamado": 1001, "Numero Referencia": "REF-1", "Contratante": "Banco A",
            "Serviço": "Instalação", "Status": "Encaminhado", "Data Limite": "2026-01-12 00:00:00",
            "Nome Cliente": "Acme", "CNPJ / CPF": '"12.345.678/0001-99"', "Cidade": "Recife",
            "Técnico": "Ana", "Prestador": "Rede Sul", "Justificativa do Abono": "",
        },
        {
            "Chamado": 1002, "Numero Referencia": "REF-2", "Contratante": "Banco A",
            "Serviço": "Manutenção", "Status": "Em Campo", "Data Limite": "10/01/2026",
            "Nome Cliente": "Beta", "CNPJ / CPF": "'123.456.789-00", "Cidade": "Olinda",
            "Técnico": "Bruno", "Prestador": "Rede Sul", "Justificativa do Abono": "",
        },
        {
            "Chamado": 1003, "Numero Referencia": "REF-3", "Contratante": "Banco B",
            "Serviço": "Retirada", "Status": "Transferido", "Data Limite": "01/20/2026",
            "Nome Cliente": "Gama", "CNPJ / CPF": "98.765.432/0001-10", "Cidade": "Recife",
            "Técnico": "Ana", "Prestador": "Rede Norte", "Justificativa do Abono": "",
        },
        {
            "Chamado": 1004, "Numero Referencia": "", "Contratante": "Banco B",
            "Serviço": "Instalação", "Status": "Concluído", "Data Limite": "05/01/2026",
            "Nome Cliente": "Delta", "CNPJ / CPF": "", "Cidade": "",
            "Técnico": "Carla", "Prestador": "Rede Norte", "Justificativa do Abono": "Cliente ausente",
        },
        {
            "Chamado": 1005, "Numero Referencia": "REF-5", "Contratante": "Banco A",
            "Serviço": "Manutenção", "Status": "Reencaminhado", "Data Limite": "Mon",
            "Nome Cliente": "Épsilon", "CNPJ / CPF": "11.222.333/0001-44", "Cidade": "",
            "Técnico": "Bruno", "Prestador": "Rede Sul", "Justificativa do Abono": "",
        },
    ]


@pytest.fixture()
def make_row() -> Callable[..., CanonicalRow]:
    """Build a CanonicalRow from keyword overrides (blank defaults)."""
    counter = {"n": 0}

    def _make(**overrides: str) -> CanonicalRow:
        counter["n"] += 1
        values = {c: "" for c in CANONICAL_COLUMNS}
        values["Origem"] = "MOB"
        aliases = {
            "data_limite": "Data Limite",
            "cnpj_cpf": "CNPJ/CPF",
            "servico": "Serviço",
            "tecnico": "Técnico",
            "numero_referencia": "Numero Referencia",
            "justificativa": "Justificativa do Abono",
        }
        for key, val in overrides.items():
            values[aliases.get(key, key.capitalize() if key.islower() else key)] = val
        return CanonicalRow(row_number=counter["n"], values=values)
    return _make


@pytest.fixture()
def today() -> date:
    return TODAY
