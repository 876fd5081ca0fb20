from __future__ import annotations

import math
from typing import Any, Dict, List, Sequence

import pandas as pd

from usage_report.filters import filter_by_product
from usage_report.models import UsageLine, UsageLineValue
from usage_report.skus import format_sku, sku_sort_key

MONTHS_ORDER = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def _safe_float(value: object) -> float:
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(out) or math.isinf(out):
        return 0.0
    return out


def _values_frame(lines: Sequence[UsageLineValue]) -> pd.DataFrame:
    return pd.DataFrame.from_records(
        [
            {
                "date": line.date,
                "product": line.product,
                "sku": format_sku(line.sku),
                "repository": line.repository_name,
                "workflow": line.workflow or "",
                "quantity": line.quantity,
                "value": line.value,
            }
            for line in lines
        ],
        columns=["date", "product", "sku", "repository", "workflow", "quantity", "value"],
    )


def _group_totals(df: pd.DataFrame, column: str, label: str) -> List[Dict[str, Any]]:
    grouped = (
        df[df[column].astype(str) != ""]
        .groupby(column, sort=False)["value"]
        .sum()
        .reset_index()
        .sort_values("value", ascending=False, kind="stable")
    )
    return [{label: str(row[column]), "value": _safe_float(row["value"])} for _, row in grouped.iterrows()]


def actions_total_minutes(lines: Sequence[UsageLine]) -> float:
    return _safe_float(sum(_safe_float(line.quantity) for line in filter_by_product(lines, "actions")))


def actions_total_cost(lines: Sequence[UsageLine]) -> float:
    return _safe_float(
        sum(_safe_float(line.quantity * line.price_per_unit) for line in filter_by_product(lines, "actions"))
    )


def compute_usage_summary(lines: Sequence[UsageLineValue], value_mode: str) -> Dict[str, Any]:
    """JSON-serializable totals and breakdowns for a filtered line set."""
    payload: Dict[str, Any] = {
        "value_mode": value_mode,
        "line_count": len(lines),
        "total_value": 0.0,
        "total_quantity": 0.0,
        "actions_total_minutes": actions_total_minutes(lines),
        "actions_total_cost": actions_total_cost(lines),
        "by_product": [],
        "by_sku": [],
        "by_month": [],
        "by_repository": [],
        "by_workflow": [],
    }
    if not lines:
        return payload

    df = _values_frame(lines)
    payload["total_value"] = _safe_float(df["value"].sum())
    payload["total_quantity"] = _safe_float(pd.to_numeric(df["quantity"], errors="coerce").fillna(0).sum())
    payload["by_product"] = _group_totals(df, "product", "product")
    payload["by_repository"] = _group_totals(df, "repository", "repository")
    payload["by_workflow"] = _group_totals(df, "workflow", "workflow")
    payload["by_sku"] = sorted(_group_totals(df, "sku", "sku"), key=lambda row: sku_sort_key(row["sku"]))

    dates = pd.to_datetime(df["date"], utc=True)
    monthly = (
        df.assign(period=dates.dt.strftime("%Y-%m"), month=dates.dt.month)
        .groupby(["period", "month"])["value"]
        .sum()
        .reset_index()
        .sort_values("period")
    )
    payload["by_month"] = [
        {"period": row["period"], "month": MONTHS_ORDER[int(row["month"]) - 1], "value": _safe_float(row["value"])}
        for _, row in monthly.iterrows()
    ]
    return payload
