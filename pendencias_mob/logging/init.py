from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Application logging: one ``LABEL message`` line per record on stdout.

The app logger is "pendencias_mob". Modules log through
``logging.getLogger(__name__)``, which makes them its children, so a single
handler formats everything. The SUMMARY level sits between INFO and WARNING
and is used once per CLI run for the machine-readable run summary.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "enable_debug",
    "get_logger",
    "log_summary",
    "reset_logging",
    "setup_logging",
]

APP_LOGGER_NAME = "pendencias_mob"
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``WARN planilha sem status acionável`` style formatter."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def setup_logging(stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled stdout handler to the app logger.

    Calling it again returns the already configured logger untouched, so the
    CLI and tests can both call it freely. ``stream`` defaults to the
    ``sys.stdout`` current at first call.
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    app = logging.getLogger(APP_LOGGER_NAME)
    app.setLevel(logging.INFO)
    for old in app.handlers[:]:
        app.removeHandler(old)

    # o nível efetivo fica no logger; o handler deixa passar tudo
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(LabeledFormatter())
    app.addHandler(handler)
    app.propagate = False

    _logger = app
    return app


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def enable_debug() -> None:
    """Show DEBUG records (``--debug``), e.g. dropped unparseable fields."""
    app = get_logger()
    app.setLevel(logging.DEBUG)
    app.debug("debug mode enabled")


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup starts clean (tests)."""
    global _logger
    _logger = None
