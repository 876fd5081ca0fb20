from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from usage_report.errors import UsageReportError
from usage_report.filters import describe_filter
from usage_report.session import ReportSession
from usage_report.summary import compute_usage_summary

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Summarize a GitHub usage report CSV export.")
    parser.add_argument("path", help="Path to the usage report CSV")
    parser.add_argument("--mode", choices=["minutes", "cost"], default=None, help="Value mode (default: cost)")
    parser.add_argument("--start", default=None, help="Start of the date range (inclusive)")
    parser.add_argument("--end", default=None, help="End of the date range (inclusive)")
    parser.add_argument("--workflow", default=None, help="Only lines for this workflow name or path")
    parser.add_argument("--sku", default=None, help="Only lines for this raw SKU")
    parser.add_argument(
        "--product",
        action="append",
        default=None,
        help="Only lines whose product contains this token (repeatable)",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser


def _error(exc: Exception) -> int:
    print(json.dumps({"error": str(exc), "type": type(exc).__name__}), file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")

    session = ReportSession()
    try:
        report = session.load_file(args.path)
    except (OSError, UnicodeDecodeError, UsageReportError) as exc:
        logger.error("Failed to load %s: %s", args.path, exc)
        return _error(exc)

    try:
        if args.mode:
            session.set_value_mode(args.mode)
        update = {k: v for k, v in {"start_date": args.start, "end_date": args.end, "workflow": args.workflow, "sku": args.sku}.items() if v is not None}
        if update:
            session.set_filter(update)
    except ValueError as exc:
        return _error(exc)

    lines = session.filtered_by_product(args.product) if args.product else session.filtered_lines
    payload = {
        "format_type": report.format_type,
        "days": report.days,
        "rejected_rows": len(report.warnings),
        "filters": describe_filter(session.filters),
        "summary": compute_usage_summary(lines, session.value_mode),
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
