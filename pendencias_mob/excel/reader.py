from __future__ import annotations

import io
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import chardet
import pandas as pd

"""Spreadsheet reader collaborator.

Reads the first sheet of an uploaded .xlsx/.xlsm/.xls/.csv file and returns
RawRows: header-keyed dicts whose values are strings, numbers or native
datetimes. Blank cells become "". Numeric date serials are passed through
untouched; decoding them is the normalizers' job.

pandas does the heavy lifting (openpyxl for .xlsx, xlrd for .xls). CSV bytes
are decoded with chardet's guess and the delimiter is sniffed, so both ","
and ";" exports are accepted.
"""

__all__ = [
    "SUPPORTED_SUFFIXES",
    "RawRow",
    "ReadFailureError",
    "UnsupportedFormatError",
    "read_first_sheet",
    "read_upload",
]

logger = logging.getLogger(__name__)

RawRow = dict[str, Any]

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
LEGACY_EXCEL_SUFFIXES = {".xls"}
TEXT_SUFFIXES = {".csv"}
SUPPORTED_SUFFIXES = EXCEL_SUFFIXES | LEGACY_EXCEL_SUFFIXES | TEXT_SUFFIXES
MIN_ENCODING_CONFIDENCE = 0.9


class UnsupportedFormatError(Exception):
    """Raised when the uploaded file extension is not a spreadsheet we read."""


class ReadFailureError(Exception):
    """Raised when the file cannot be read or parsed as a table."""


def _decode_text(raw: bytes) -> str:
    """Decode CSV bytes: UTF-8, then a confident chardet guess, then cp1252/latin-1."""
    if raw.startswith(b"\xef\xbb\xbf"):
        raw = raw[3:]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass
    guess = chardet.detect(raw)
    detected = guess.get("encoding")
    if detected and (guess.get("confidence") or 0.0) >= MIN_ENCODING_CONFIDENCE:
        try:
            return raw.decode(detected)
        except (LookupError, UnicodeDecodeError):
            logger.debug(f"chardet guess {detected!r} failed")
    # planilhas do Excel BR: quase sempre Windows-1252
    try:
        return raw.decode("cp1252")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def _read_csv(raw: bytes) -> pd.DataFrame:
    text = _decode_text(raw)
    if not text.strip():
        return pd.DataFrame()
    # sep=None: python engine sniffs ',' / ';' / tab
    return pd.read_csv(
        io.StringIO(text),
        sep=None,
        engine="python",
        dtype=str,
        keep_default_na=False,
    )


def _read_excel(raw: bytes, suffix: str) -> pd.DataFrame:
    engine = "xlrd" if suffix in LEGACY_EXCEL_SUFFIXES else "openpyxl"
    if engine == "xlrd":
        try:
            import xlrd  # noqa: F401
        except ImportError as e:
            raise ReadFailureError(".xls files require xlrd: pip install 'pendencias-mob[xls]'") from e
    # keep_default_na=False: textos como "NA" (sigla) não viram NaN
    return pd.read_excel(
        io.BytesIO(raw),
        sheet_name=0,
        dtype=object,
        engine=engine,
        keep_default_na=False,
    )


def _clean_cell(value: Any) -> Any:
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    if isinstance(value, float) and pd.isna(value):
        return ""
    return value


def _frame_to_rows(df: pd.DataFrame) -> list[RawRow]:
    columns = [str(c).strip() for c in df.columns]
    rows: list[RawRow] = []
    for raw in df.itertuples(index=False, name=None):
        row = {col: _clean_cell(val) for col, val in zip(columns, raw, strict=False)}
        # linhas totalmente vazias (rodapé do Excel) são ignoradas
        if all(v == "" or (isinstance(v, str) and not v.strip()) for v in row.values()):
            continue
        rows.append(row)
    return rows


def read_upload(raw: bytes, filename: str) -> list[RawRow]:
    """Read an uploaded file buffer, dispatching on the file name's extension.

    Parameters
    ----------
    raw: file contents
    filename: original name (only the extension is used)

    Raises
    ------
    UnsupportedFormatError: extension is not .xlsx/.xlsm/.xls/.csv
    ReadFailureError: the underlying parser rejected the contents
    """
    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise UnsupportedFormatError(f"unsupported file type '{suffix or filename}'")
    try:
        if suffix in TEXT_SUFFIXES:
            df = _read_csv(raw)
        else:
            df = _read_excel(raw, suffix)
    except ReadFailureError:
        raise
    except Exception as e:
        raise ReadFailureError(f"could not read {filename}: {e}") from e
    rows = _frame_to_rows(df)
    logger.debug(f"read {len(rows)} rows from {filename} columns={list(df.columns)}")
    return rows


def read_first_sheet(path: Path) -> list[RawRow]:
    """Read the first sheet of a spreadsheet on disk."""
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ReadFailureError(f"could not open {path}: {e}") from e
    return read_upload(raw, path.name)
