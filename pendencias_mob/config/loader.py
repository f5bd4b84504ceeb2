from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.canonical_row import CANONICAL_COLUMNS
from ..models.config_models import AppConfig, DateOrder, ExportConfig

"""Config loader.

Responsibilities:
- Locate the YAML config (CLI flag > PENDENCIAS_CONFIG > config/pendencias.yml)
- Validate it against the bundled JSON schema
- Check column names against the canonical schema
- Build the frozen AppConfig (defaults for anything omitted)
"""

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "OUTPUT_DIR_ENV_VAR",
    "SCHEMA_PATH",
    "ConfigError",
    "load_config",
    "resolve_config_path",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/pendencias.yml")
CONFIG_ENV_VAR = "PENDENCIAS_CONFIG"
OUTPUT_DIR_ENV_VAR = "PENDENCIAS_OUTPUT_DIR"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _check_columns(section: str, names: Any) -> None:
    unknown = sorted(set(names) - set(CANONICAL_COLUMNS))
    if unknown:
        raise ConfigError(f"config validation failed: {section} has unknown columns {unknown}")


def _check_filename_pattern(pattern: str) -> None:
    try:
        pattern.format(date="2000-01-01")
    except (AttributeError, IndexError, KeyError, ValueError) as e:
        raise ConfigError(
            f"config validation failed: export.filename_pattern {pattern!r} accepts only {{date}}: {e!r}"
        ) from e


def resolve_config_path(cli_path: Path | None = None) -> Path | None:
    """Pick the config file to load; None means built-in defaults.

    An explicitly requested path (flag or env var) is returned even if it
    does not exist, so that load_config can report it.
    """
    if cli_path is not None:
        return cli_path
    env = os.getenv(CONFIG_ENV_VAR)
    if env:
        return Path(env)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(path: Path | None = None) -> AppConfig:
    """Load and validate configuration; ``path=None`` gives the defaults."""
    if path is None:
        data: dict[str, Any] = {}
    else:
        if not path.exists():
            raise ConfigError(f"config file not found: {path}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    aliases = data.get("column_aliases", {})
    _check_columns("column_aliases", aliases)
    date_order = data.get("date_order", {})
    _check_columns("date_order", date_order)

    defaults = AppConfig()
    export_raw = data.get("export", {})
    if "filename_pattern" in export_raw:
        _check_filename_pattern(export_raw["filename_pattern"])
    export = ExportConfig(
        filename_pattern=export_raw.get("filename_pattern", defaults.export.filename_pattern),
        max_column_width=export_raw.get("max_column_width", defaults.export.max_column_width),
        # variável de ambiente sobrepõe o YAML
        output_dir=os.getenv(OUTPUT_DIR_ENV_VAR) or export_raw.get("output_dir", defaults.export.output_dir),
    )
    statuses = data.get("actionable_statuses")
    return AppConfig(
        origin_tag=data.get("origin_tag", defaults.origin_tag),
        column_aliases={col: tuple(names) for col, names in aliases.items()},
        actionable_statuses=(
            tuple(s.strip().lower() for s in statuses) if statuses else defaults.actionable_statuses
        ),
        date_order={col: DateOrder(v) for col, v in date_order.items()},
        date_epoch=data.get("date_epoch", defaults.date_epoch),
        export=export,
    )
