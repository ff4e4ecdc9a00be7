from __future__ import annotations

import csv
import logging
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

LINE_BREAK_PATTERN = re.compile(r"\r?\n")
BOM = "\ufeff"


def parse_csv_rows(text: str, warnings: Optional[List[str]] = None) -> List[List[str]]:
    """
    Split delimited text into rows of trimmed cells.

    Blank and whitespace-only lines are dropped. Each physical line is one
    record: a quoted cell may hold commas and doubled quotes but never a line
    break, and an unterminated quote simply runs to the end of its line.
    Rows are not padded, so callers must index cells defensively.

    A data line the ``csv`` module rejects (an oversized field, for example)
    becomes an empty row so later row numbers stay stable, and is reported
    through the logger and ``warnings``. A rejected header line raises
    ``csv.Error``.
    """
    if text.startswith(BOM):
        text = text[len(BOM) :]
    rows: List[List[str]] = []
    for line in LINE_BREAK_PATTERN.split(text):
        if not line.strip():
            continue
        try:
            cells = next(csv.reader([line], skipinitialspace=True))
        except csv.Error as exc:
            if not rows:
                raise
            message = f"Row {len(rows) + 1}: could not be parsed ({exc}), skipped"
            logger.warning(message)
            if warnings is not None:
                warnings.append(message)
            rows.append([])
            continue
        rows.append([cell.strip() for cell in cells])
    return rows
