from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display for row normalization (tqdm, TTY only).

Large exports from the ticket system can hold tens of thousands of rows; on
an interactive terminal the row builder shows a single bar. In non-TTY
environments (CI, pipes) no bar is created at all, so no ANSI control
sequences end up in captured output.
"""

__all__ = [
    "RowProgress",
    "is_tty_enabled",
]

# Barra só compensa a partir deste volume
MIN_ROWS_FOR_BAR = 2000


def is_tty_enabled() -> bool:
    """True when stdout is an interactive terminal."""
    return sys.stdout.isatty()


class RowProgress:
    """Progress bar over the rows of one uploaded sheet."""

    def __init__(self, total_rows: int, *, description: str = "Normalizando linhas") -> None:
        self.total_rows = total_rows
        self.description = description
        self.done = 0
        self.enabled = is_tty_enabled() and total_rows >= MIN_ROWS_FOR_BAR
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, n: int = 1) -> None:
        self.done += n
        if self.pbar is not None:
            self.pbar.update(n)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> RowProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
