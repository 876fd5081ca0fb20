from __future__ import annotations

import logging
import re
from typing import Dict, List, Tuple

from usage_report.models import CsvFormat, FormatType

logger = logging.getLogger(__name__)

_QUOTES_RE = re.compile(r'^"|"$')

LEGACY_15_COLUMNS: Tuple[str, ...] = (
    "usage_at",
    "product",
    "sku",
    "quantity",
    "unit_type",
    "applied_cost_per_quantity",
    "gross_amount",
    "discount_amount",
    "net_amount",
    "username",
    "organization",
    "repository_name",
    "workflow_name",
    "workflow_path",
    "cost_center_name",
)

LEGACY_14_COLUMNS: Tuple[str, ...] = (
    "date",
    "product",
    "sku",
    "quantity",
    "unit_type",
    "applied_cost_per_quantity",
    "gross_amount",
    "discount_amount",
    "net_amount",
    "username",
    "organization",
    "repository",
    "workflow_path",
    "cost_center_name",
)

SUMMARIZED_12_COLUMNS: Tuple[str, ...] = (
    "date",
    "product",
    "sku",
    "quantity",
    "unit_type",
    "applied_cost_per_quantity",
    "gross_amount",
    "discount_amount",
    "net_amount",
    "organization",
    "repository",
    "cost_center_name",
)

FORMAT_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "legacy-15": LEGACY_15_COLUMNS,
    "legacy-14": LEGACY_14_COLUMNS,
    "summarized-12": SUMMARIZED_12_COLUMNS,
}

# Minimum field count a data row needs for each layout.
MIN_COLUMNS: Dict[str, int] = {name: len(cols) for name, cols in FORMAT_COLUMNS.items()}


def strip_quotes(field: str) -> str:
    return _QUOTES_RE.sub("", field)


def parse_header(header_line: str) -> List[str]:
    return [strip_quotes(h).lower().strip() for h in header_line.split(",")]


def detect_csv_format(header_line: str) -> CsvFormat:
    """Classify a header row into one of the known export layouts.

    Headers that match nothing fall through to ``summarized-12``.
    """
    header_columns = parse_header(header_line)
    logger.debug("Header columns (%d): %s", len(header_columns), header_columns)

    if "usage_at" in header_columns or "workflow_name" in header_columns:
        return "legacy-15"
    if "username" in header_columns or "workflow_path" in header_columns:
        return "legacy-14"
    return "summarized-12"


def to_format_type(csv_format: CsvFormat) -> FormatType:
    return "summarized" if csv_format == "summarized-12" else "legacy"
