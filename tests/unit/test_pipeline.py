from __future__ import annotations

from pathlib import Path

import pytest

from pendencias_mob.models.config_models import AppConfig
from pendencias_mob.services.pipeline import (
    EMPTY_INPUT_MESSAGE,
    PARSE_FAILURE_MESSAGE,
    InputEmptyError,
    ParseFailureError,
    ingest_file,
    ingest_upload,
)


def test_ingest_prunes_to_actionable_rows(temp_workdir: Path, make_xlsx, sample_mob_rows):
    path = make_xlsx(temp_workdir / "data" / "mob.xlsx", sample_mob_rows)
    result = ingest_file(path)
    assert result.source_name == "mob.xlsx"
    assert result.total_rows == 5
    assert result.fallback_used is False
    # "Concluído" is dropped
    assert [r["Chamado"] for r in result.rows] == ["1001", "1002", "1003", "1005"]
    assert result.actionable_rows == 4


def test_ingest_normalizes_fields(temp_workdir: Path, make_xlsx, sample_mob_rows):
    path = make_xlsx(temp_workdir / "data" / "mob.xlsx", sample_mob_rows)
    rows = {r["Chamado"]: r for r in ingest_file(path).all_rows}
    assert rows["1001"]["Data Limite"] == "12/01/2026"
    assert rows["1001"]["CNPJ/CPF"] == "12.345.678/0001-99"
    assert rows["1001"]["Cliente"] == "Acme"
    assert rows["1002"]["CNPJ/CPF"] == "123.456.789-00"
    assert rows["1003"]["Data Limite"] == "20/01/2026"
    assert rows["1005"]["Data Limite"] == ""
    assert all(r["Origem"] == "MOB" for r in rows.values())


def test_fallback_keeps_all_rows_when_nothing_actionable():
    raw = "Chamado;Status\n1;Concluído\n2;Cancelado\n".encode("utf-8")
    result = ingest_upload(raw, "closed.csv")
    assert result.fallback_used is True
    assert len(result.rows) == 2
    assert result.actionable_rows == 0


def test_odd_date_cell_is_dropped_not_fatal():
    raw = "Status;Data Limite\nEm Campo;²/01/2024\nEm Campo;05/01/2024\n".encode("utf-8")
    result = ingest_upload(raw, "sobrescrito.csv")
    assert [r["Data Limite"] for r in result.rows] == ["", "05/01/2024"]


def test_empty_input():
    with pytest.raises(InputEmptyError) as e:
        ingest_upload(b"Chamado;Status\n", "empty.csv")
    assert e.value.user_message == EMPTY_INPUT_MESSAGE


def test_unreadable_file_is_parse_failure():
    with pytest.raises(ParseFailureError) as e:
        ingest_upload(b"garbage", "broken.xlsx")
    assert e.value.user_message == PARSE_FAILURE_MESSAGE


def test_unsupported_type_is_parse_failure():
    with pytest.raises(ParseFailureError):
        ingest_upload(b"x", "report.pdf")


def test_missing_path_is_parse_failure(tmp_path: Path):
    with pytest.raises(ParseFailureError):
        ingest_file(tmp_path / "missing.xlsx")


def test_config_statuses_drive_initial_prune():
    raw = "Chamado;Status\n1;Aguardando\n2;Em Campo\n".encode("utf-8")
    result = ingest_upload(raw, "x.csv", AppConfig(actionable_statuses=("aguard",)))
    assert [r["Chamado"] for r in result.rows] == ["1"]
