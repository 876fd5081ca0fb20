from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Literal, Optional, Tuple

import pandas as pd

CsvFormat = Literal["legacy-15", "legacy-14", "summarized-12"]
FormatType = Literal["legacy", "summarized"]
ValueMode = Literal["minutes", "cost"]

VALUE_MODES: Tuple[str, ...] = ("minutes", "cost")


@dataclass(frozen=True)
class UsageLine:
    date: pd.Timestamp
    product: str
    sku: str
    quantity: float
    unit_type: str
    price_per_unit: float
    gross_amount: float
    discount_amount: float
    net_amount: float
    username: str
    organization: str
    repository_name: str
    workflow_name: Optional[str]
    workflow_path: Optional[str]
    cost_center_name: str

    @property
    def workflow(self) -> Optional[str]:
        """Workflow name, falling back to the workflow path."""
        return self.workflow_name or self.workflow_path


@dataclass(frozen=True)
class UsageLineValue(UsageLine):
    value: float = 0.0

    @classmethod
    def from_line(cls, line: UsageLine, value: float) -> "UsageLineValue":
        data = {f.name: getattr(line, f.name) for f in fields(UsageLine)}
        return cls(**data, value=value)


@dataclass(frozen=True)
class RowWarning:
    line_number: int
    reason: str


@dataclass(frozen=True)
class Report:
    lines: Tuple[UsageLine, ...]
    start_date: pd.Timestamp
    end_date: pd.Timestamp
    days: float
    format_type: FormatType
    csv_format: CsvFormat
    warnings: Tuple[RowWarning, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class UsageFilter:
    start_date: Optional[pd.Timestamp] = None
    end_date: Optional[pd.Timestamp] = None
    workflow: str = ""
    sku: str = ""


@dataclass(frozen=True)
class ReportFacets:
    owners: Tuple[str, ...] = ()
    repositories: Tuple[str, ...] = ()
    workflows: Tuple[str, ...] = ()
    skus: Tuple[str, ...] = ()
    products: Tuple[str, ...] = ()
    usernames: Tuple[str, ...] = ()
    has_workflow_data: bool = False
    has_username_data: bool = False
