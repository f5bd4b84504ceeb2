from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from pendencias_mob.config.loader import ConfigError, load_config, resolve_config_path
from pendencias_mob.logging.init import enable_debug, log_summary, setup_logging
from pendencias_mob.models.config_models import AppConfig
from pendencias_mob.models.results import DueStatus, IngestionResult
from pendencias_mob.services.columns import ColumnResolver
from pendencias_mob.services.exporter import export_pending
from pendencias_mob.services.filter_engine import FilterEngine, UnknownColumnError, display_value
from pendencias_mob.services.pending import due_status
from pendencias_mob.services.pipeline import IngestionError, ingest_file
from pendencias_mob.services.summary import render_summary_line

"""CLI entrypoint: the command-line stand-in for the upload/filter/export UI.

Flow: load .env and config -> ingest one spreadsheet -> apply filter actions
in the order given -> export pending/overdue tickets -> SUMMARY line.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

BLANK_CELL = "—"
DUE_MARKERS = {
    DueStatus.OVERDUE: "ATRASADO",
    DueStatus.DUE_TODAY: "HOJE",
    DueStatus.UPCOMING: "",
    DueStatus.UNDATED: "",
}


class _FilterAction(argparse.Action):
    """Collect filter actions into one ordered list shared by all flags."""

    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace, values: Any, option_string: str | None = None) -> None:
        actions = list(getattr(namespace, self.dest, None) or [])
        kind = self.const
        if kind == "toggle":
            column, sep, value = str(values).partition("=")
            if not sep:
                parser.error(f"{option_string} expects COLUMN=VALUE, got {values!r}")
            actions.append((kind, column.strip(), value.strip()))
        else:
            actions.append((kind, str(values).strip(), None))
        setattr(namespace, self.dest, actions)


def _parse_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {text!r}") from e


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="pendencias-mob",
        description="Normalize a service-ticket spreadsheet and export pending/overdue tickets",
    )
    p.add_argument("file", type=Path, help="Spreadsheet to ingest (.xlsx, .xls or .csv)")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default: config/pendencias.yml)")
    p.add_argument("--filter", dest="actions", action=_FilterAction, const="toggle", metavar="COLUMN=VALUE",
                   help="Toggle one accepted value for a column; repeatable. Use '(Vazio)' for blanks")
    p.add_argument("--select-all", dest="actions", action=_FilterAction, const="select_all", metavar="COLUMN",
                   help="Select every value of a column")
    p.add_argument("--clear", dest="actions", action=_FilterAction, const="clear", metavar="COLUMN",
                   help="Clear a column's selection")
    p.add_argument("--today", type=_parse_date, default=None, help="Reference date (YYYY-MM-DD), default today")
    p.add_argument("--output-dir", type=Path, default=None, help="Where to write the export")
    p.add_argument("--no-export", action="store_true", help="Stop after filtering; do not write a file")
    p.add_argument("--list-options", metavar="COLUMN", default=None, help="Print filter options of a column then exit")
    p.add_argument("--inspect-data", action="store_true", help="Print column mapping & first rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _inspect_data(result: IngestionResult, cfg: AppConfig, today: date, limit: int = 5) -> int:
    print(f"FILE: {result.source_name} rows={result.total_rows} working={len(result.rows)}")
    if not result.all_rows:
        return EXIT_SUCCESS
    headers = list((result.all_rows[0].raw_values or {}).keys())
    mapping = ColumnResolver(cfg.column_aliases).mapping_for(headers)
    print(f"  source_columns={headers}")
    for canonical, source in mapping.items():
        print(f"  {canonical} <- {source if source is not None else '(ausente)'}")
    for row in result.rows[:limit]:
        marker = DUE_MARKERS[due_status(row, today)]
        cells = " | ".join(v or BLANK_CELL for v in row.to_list())
        print(f"    [{marker or '-'}] {cells}")
    return EXIT_SUCCESS


def _apply_actions(engine: FilterEngine, actions: list[tuple[str, str, str | None]]) -> None:
    for kind, column, value in actions:
        if kind == "toggle":
            assert value is not None
            engine.toggle_value(column, display_value(value))
        elif kind == "select_all":
            engine.select_all(column)
        else:
            engine.clear_column(column)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # só lê sys.argv quando argv é None (cli_main([]) em teste não herda args do pytest)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=True)

    if args.debug:
        enable_debug()

    try:
        cfg = load_config(resolve_config_path(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    today = args.today or date.today()
    logger.info(f"Processing file: {args.file}")

    try:
        result = ingest_file(args.file, cfg)
    except IngestionError as e:
        logger.error(f"{e.user_message}: {e}")
        return EXIT_FATAL

    if result.fallback_used:
        logger.warning("nenhum status acionável; exibindo todas as linhas")

    if args.inspect_data:
        return _inspect_data(result, cfg, today)

    engine = FilterEngine(result.rows)

    if args.list_options is not None:
        try:
            options = engine.options_for(args.list_options)
        except UnknownColumnError:
            logger.error(f"unknown column: {args.list_options}")
            return EXIT_FATAL
        for option in options:
            print(option)
        return EXIT_SUCCESS

    try:
        _apply_actions(engine, args.actions or [])
    except UnknownColumnError as e:
        logger.error(f"unknown column: {e.args[0]}")
        return EXIT_FATAL

    visible = engine.visible_rows()
    logger.info(f"visible={len(visible)} filtering={engine.has_active_filters()}")

    export = None
    if not args.no_export:
        export = export_pending(visible, today, cfg)
        if export.exported:
            assert export.content is not None and export.filename is not None
            out_dir = args.output_dir or Path(cfg.export.output_dir)
            target = out_dir / export.filename
            try:
                out_dir.mkdir(parents=True, exist_ok=True)
                target.write_bytes(export.content)
            except OSError as e:
                logger.error(f"could not write {target}: {e}")
                return EXIT_FATAL
            logger.info(f"wrote {target}")

    summary_line = render_summary_line(result, len(visible), export)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
