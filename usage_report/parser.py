from __future__ import annotations

from typing import Callable, Dict, List, Optional

import numpy as np
import pandas as pd

from usage_report.errors import RowRejectedError
from usage_report.formats import MIN_COLUMNS, strip_quotes
from usage_report.models import CsvFormat, UsageLine


def split_csv_row(line: str) -> List[str]:
    """Split a raw row on bare commas and drop one layer of quotes per field."""
    return [strip_quotes(field) for field in line.split(",")]


def to_timestamp(value: object) -> Optional[pd.Timestamp]:
    """Parse a date-like value as a UTC timestamp; None when it does not parse.

    Naive values are read as UTC so every date in a session compares cleanly.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(ts):
        return None
    return ts


def to_number(value: str) -> float:
    """Best-effort numeric coercion; anything non-numeric becomes NaN."""
    out = pd.to_numeric(value.strip(), errors="coerce") if value.strip() else np.nan
    return float(out)


def _optional(value: str) -> Optional[str]:
    return value or None


def _base_fields(csv: List[str]) -> dict:
    date = to_timestamp(csv[0])
    if date is None:
        raise RowRejectedError(f"invalid date {csv[0]!r}")
    return {
        "date": date,
        "product": csv[1],
        "sku": csv[2],
        "quantity": to_number(csv[3]),
        "unit_type": csv[4],
        "price_per_unit": to_number(csv[5]),
        "gross_amount": to_number(csv[6]),
        "discount_amount": to_number(csv[7]),
        "net_amount": to_number(csv[8]),
    }


def parse_legacy15_line(csv: List[str]) -> UsageLine:
    return UsageLine(
        **_base_fields(csv),
        username=csv[9],
        organization=csv[10],
        repository_name=csv[11],
        workflow_name=_optional(csv[12]),
        workflow_path=_optional(csv[13]),
        cost_center_name=csv[14],
    )


def parse_legacy14_line(csv: List[str]) -> UsageLine:
    return UsageLine(
        **_base_fields(csv),
        username=csv[9],
        organization=csv[10],
        repository_name=csv[11],
        workflow_name=None,
        workflow_path=_optional(csv[12]),
        cost_center_name=csv[13],
    )


def parse_summarized_line(csv: List[str]) -> UsageLine:
    # No username or workflow columns in the summarized export.
    return UsageLine(
        **_base_fields(csv),
        username="",
        organization=csv[9],
        repository_name=csv[10],
        workflow_name=None,
        workflow_path=None,
        cost_center_name=csv[11],
    )


LINE_PARSERS: Dict[str, Callable[[List[str]], UsageLine]] = {
    "legacy-15": parse_legacy15_line,
    "legacy-14": parse_legacy14_line,
    "summarized-12": parse_summarized_line,
}


def parse_line(csv_format: CsvFormat, csv: List[str]) -> UsageLine:
    """Map one split row onto a UsageLine using the layout for ``csv_format``.

    Raises RowRejectedError when the row is too short for the layout or its
    date does not parse. Bad numbers never reject a row.
    """
    required = MIN_COLUMNS[csv_format]
    if len(csv) < required:
        raise RowRejectedError(
            f"expected at least {required} columns for {csv_format} format, got {len(csv)}"
        )
    return LINE_PARSERS[csv_format](csv)
