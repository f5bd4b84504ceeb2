from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from pendencias_mob.models.config_models import DateOrder
from pendencias_mob.services.normalizers import (
    clean_identifier,
    format_date,
    normalize_date,
    parse_canonical_date,
    to_text,
)


# --- native dates ---------------------------------------------------------

def test_native_datetime_ignores_time_of_day():
    assert normalize_date(datetime(2024, 1, 5, 23, 59)) == "05/01/2024"


def test_native_date():
    assert normalize_date(date(2026, 12, 31)) == "31/12/2026"


def test_pandas_timestamp_is_a_datetime():
    assert normalize_date(pd.Timestamp("2025-03-04 10:00")) == "04/03/2025"


# --- serial numbers -------------------------------------------------------

@pytest.mark.parametrize(
    "serial, expected",
    [
        (45292, "01/01/2024"),
        (45292.75, "01/01/2024"),
        (1, "01/01/1900"),
        (61, "01/03/1900"),
    ],
)
def test_serial_1900_epoch(serial, expected):
    assert normalize_date(serial) == expected


def test_serial_1904_epoch():
    # 0-based from 1904-01-01
    assert normalize_date(1, epoch=1904) == "02/01/1904"


@pytest.mark.parametrize("serial", [0, -5, float("nan"), float("inf"), 10**12])
def test_serial_out_of_range_is_empty(serial):
    assert normalize_date(serial) == ""


def test_bool_is_not_a_serial():
    assert normalize_date(True) == ""


# --- ISO text -------------------------------------------------------------

def test_iso_text_is_reordered():
    assert normalize_date("2024-01-05") == "05/01/2024"


def test_iso_text_with_time_suffix():
    assert normalize_date("2026-01-12 00:00:00") == "12/01/2026"


def test_iso_text_with_t_separator():
    assert normalize_date("2026-01-12T08:30:00") == "12/01/2026"


def test_iso_text_invalid_calendar_date():
    assert normalize_date("2024-02-30") == ""


def test_dash_text_without_four_digit_year_first_is_empty():
    assert normalize_date("05-01-2024") == ""


# --- slash text -----------------------------------------------------------

def test_day_above_twelve_confirms_day_first():
    assert normalize_date("13/02/2024") == "13/02/2024"


def test_second_part_above_twelve_is_swapped():
    assert normalize_date("02/13/2024") == "13/02/2024"


def test_ambiguous_defaults_to_day_first():
    assert normalize_date("03/04/2024") == "03/04/2024"


def test_ambiguous_month_first_override():
    assert normalize_date("03/04/2024", order=DateOrder.MONTH_FIRST) == "04/03/2024"


def test_magnitude_wins_over_month_first_override():
    assert normalize_date("25/04/2024", order=DateOrder.MONTH_FIRST) == "25/04/2024"


def test_no_special_case_for_first_of_december():
    # single tie-break rule, no literal-pattern exceptions
    assert normalize_date("01/12/2024") == "01/12/2024"


def test_slash_text_is_zero_padded():
    assert normalize_date("5/1/2024") == "05/01/2024"


def test_slash_text_with_time_suffix():
    assert normalize_date("05/01/2024 14:30") == "05/01/2024"


@pytest.mark.parametrize("text", ["05/01/24", "05/01/02024", "05/01/", "13/13/2024", "31/02/2024", "00/01/2024", "a/b/2024", "1/2/3/2024"])
def test_invalid_slash_text_is_empty(text):
    assert normalize_date(text) == ""


# --- other text -----------------------------------------------------------

@pytest.mark.parametrize("token", ["Mon", "tue", "WED", "Sunday", "seg", "Sáb"])
def test_bare_weekday_tokens_are_empty(token):
    assert normalize_date(token) == ""


def test_weekday_prefixed_value_is_empty():
    assert normalize_date("Mon 12/01/2026") == ""


@pytest.mark.parametrize("value", [None, "", "   ", "amanhã", "45292", "2024", object()])
def test_unparseable_values_are_empty(value):
    assert normalize_date(value) == ""


# --- properties -----------------------------------------------------------

@pytest.mark.parametrize("canonical", ["01/01/2024", "05/01/2024", "12/12/2030", "29/02/2024", "31/12/1999"])
def test_canonical_dates_are_idempotent(canonical):
    assert normalize_date(canonical) == canonical
    assert normalize_date(normalize_date(canonical)) == canonical


@pytest.mark.parametrize(
    "value",
    [
        "2024-13-01", "99/99/9999", "--", "//", "/", "-", "2024-01", "1/1/1", 3.5e9, -0.0, "Terça", "12/31",
        "²/01/2024", "01/²/2024", "2024-²-01", "2024-01-²", "2024-01-01T²",
    ],
)
def test_output_is_always_canonical_or_empty(value):
    out = normalize_date(value)
    assert out == "" or parse_canonical_date(out) is not None
    if out:
        assert len(out) == 10 and out[2] == "/" and out[5] == "/"


def test_format_and_parse_canonical_date():
    d = date(2024, 1, 5)
    assert format_date(d) == "05/01/2024"
    assert parse_canonical_date("05/01/2024") == d
    assert parse_canonical_date("") is None
    assert parse_canonical_date("2024-01-05") is None


# --- identifiers & text ---------------------------------------------------

def test_identifier_strips_formula_quoting():
    assert clean_identifier('="12.345.678/0001-99"') == "12.345.678/0001-99"


def test_identifier_strips_apostrophe_prefix_and_whitespace():
    assert clean_identifier("  '123.456.789-00 ") == "123.456.789-00"


def test_identifier_keeps_invalid_digit_counts():
    assert clean_identifier("123") == "123"


def test_identifier_from_number():
    assert clean_identifier(12345678000199.0) == "12345678000199"


def test_identifier_blank():
    assert clean_identifier(None) == ""
    assert clean_identifier('=""') == ""


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        ("  Recife ", "Recife"),
        (1001, "1001"),
        (1001.0, "1001"),
        (2.5, "2.5"),
        (float("nan"), ""),
        (datetime(2024, 1, 5), "05/01/2024"),
        (datetime(2024, 1, 5, 9, 30), "05/01/2024 09:30"),
    ],
)
def test_to_text(value, expected):
    assert to_text(value) == expected
