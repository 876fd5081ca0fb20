"""Build a Report from the raw text of a usage export.

Row-level problems are logged and recorded as warnings; only document-level
problems (no data rows, or no row surviving the parse) fail the build.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import List

import pandas as pd

from usage_report.errors import DocumentEmptyError, NoValidRowsError, RowRejectedError
from usage_report.formats import detect_csv_format, to_format_type
from usage_report.models import Report, RowWarning, UsageLine
from usage_report.parser import parse_line, split_csv_row

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r?\n")
_DAY = pd.Timedelta(days=1)


def build_report(data: str) -> Report:
    lines = _LINE_BREAK_RE.split(data)
    # A trailing newline after the header is not a data row.
    while lines and not lines[-1].strip():
        lines.pop()
    if len(lines) < 2:
        raise DocumentEmptyError("CSV file is empty or has no data rows")

    csv_format = detect_csv_format(lines[0])
    logger.info("Detected CSV format: %s", csv_format)

    parsed: List[UsageLine] = []
    warnings: List[RowWarning] = []
    for index, line in enumerate(lines):
        if index == 0 or not line.strip():
            continue
        try:
            parsed.append(parse_line(csv_format, split_csv_row(line)))
        except (RowRejectedError, ValueError, TypeError) as exc:
            logger.warning("Skipping line %d: %s", index + 1, exc)
            warnings.append(RowWarning(line_number=index + 1, reason=str(exc)))

    if not parsed:
        raise NoValidRowsError("No valid data rows found in CSV file", warnings)

    # sorted() is stable, so rows sharing a timestamp keep file order.
    parsed = sorted(parsed, key=lambda line: line.date)
    start_date = parsed[0].date
    end_date = parsed[-1].date

    return Report(
        lines=tuple(parsed),
        start_date=start_date,
        end_date=end_date,
        days=(end_date - start_date) / _DAY,
        format_type=to_format_type(csv_format),
        csv_format=csv_format,
        warnings=tuple(warnings),
    )


async def build_report_async(data: str) -> Report:
    """Run build_report in a worker thread so an event loop stays responsive."""
    return await asyncio.to_thread(build_report, data)


def read_report_file(path: str | Path) -> Report:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Input not found: {p}")
    return build_report(p.read_text(encoding="utf-8-sig"))
