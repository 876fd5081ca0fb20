from __future__ import annotations

from typing import Iterable, Tuple

from usage_report.models import RowWarning


class UsageReportError(Exception):
    """Base class for report build failures surfaced to callers."""

    kind = "usage_report_error"


class DocumentEmptyError(UsageReportError):
    kind = "empty_document"


class RowRejectedError(UsageReportError):
    kind = "row_rejected"


class NoValidRowsError(UsageReportError):
    kind = "no_valid_rows"

    def __init__(self, message: str, warnings: Iterable[RowWarning] = ()) -> None:
        super().__init__(message)
        self.warnings: Tuple[RowWarning, ...] = tuple(warnings)
