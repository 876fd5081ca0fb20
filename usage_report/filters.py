from __future__ import annotations

from dataclasses import asdict, replace
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from usage_report.models import UsageFilter, UsageLine, UsageLineValue
from usage_report.parser import to_timestamp

FRAME_COLUMNS = ["date", "product", "sku", "workflow", "quantity", "price_per_unit"]


def normalize_filter(raw: dict, *, base: Optional[UsageFilter] = None) -> UsageFilter:
    """Merge a partial filter dict into ``base``.

    Only keys present in ``raw`` are touched. A range whose end falls before
    its start is swapped.
    """
    current = base or UsageFilter()
    updates = {}
    if "start_date" in raw:
        updates["start_date"] = to_timestamp(raw["start_date"])
    if "end_date" in raw:
        updates["end_date"] = to_timestamp(raw["end_date"])
    if "workflow" in raw:
        updates["workflow"] = raw["workflow"] or ""
    if "sku" in raw:
        updates["sku"] = raw["sku"] or ""

    merged = replace(current, **updates)
    if merged.start_date is not None and merged.end_date is not None and merged.end_date < merged.start_date:
        merged = replace(merged, start_date=merged.end_date, end_date=merged.start_date)
    return merged


def lines_frame(lines: Sequence[UsageLine]) -> pd.DataFrame:
    """Columns the filter engine needs, one row per line, in line order."""
    if not lines:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    df = pd.DataFrame.from_records(
        [
            {
                "date": line.date,
                "product": line.product,
                "sku": line.sku,
                "workflow": line.workflow or "",
                "quantity": line.quantity,
                "price_per_unit": line.price_per_unit,
            }
            for line in lines
        ],
        columns=FRAME_COLUMNS,
    )
    df["date"] = pd.to_datetime(df["date"], utc=True)
    return df


def filter_mask(df: pd.DataFrame, filt: UsageFilter) -> pd.Series:
    mask = pd.Series(True, index=df.index)
    if filt.sku:
        mask &= df["sku"].eq(filt.sku)
    if filt.workflow:
        mask &= df["workflow"].eq(filt.workflow)
    if filt.start_date is not None and filt.end_date is not None:
        mask &= (df["date"] >= filt.start_date) & (df["date"] <= filt.end_date)
    return mask


def compute_values(df: pd.DataFrame, value_mode: str) -> np.ndarray:
    """Per-row value: quantity for ``minutes``, quantity * price for ``cost``.

    NaN from unparseable numbers becomes 0.
    """
    quantity = pd.to_numeric(df["quantity"], errors="coerce").to_numpy(dtype=float)
    if value_mode == "minutes":
        values = quantity
    elif value_mode == "cost":
        price = pd.to_numeric(df["price_per_unit"], errors="coerce").to_numpy(dtype=float)
        values = quantity * price
    else:
        raise ValueError(f"Unknown value mode: {value_mode!r}")
    return np.where(np.isnan(values), 0.0, values)


def apply_filter(
    lines: Sequence[UsageLine],
    filt: UsageFilter,
    value_mode: str,
    *,
    frame: Optional[pd.DataFrame] = None,
) -> List[UsageLineValue]:
    """Filter the full line set and attach a value to each survivor.

    Always works from ``lines`` as given; survivors are new UsageLineValue
    records, the inputs are never modified.
    """
    df = frame if frame is not None else lines_frame(lines)
    if df.empty:
        return []
    mask = filter_mask(df, filt).to_numpy()
    values = compute_values(df, value_mode)
    positions = np.flatnonzero(mask)
    return [UsageLineValue.from_line(lines[pos], float(values[pos])) for pos in positions]


def filter_by_product(lines: Iterable[UsageLine], products: str | Iterable[str]) -> list:
    tokens = [products] if isinstance(products, str) else list(products)
    return [line for line in lines if any(token in line.product for token in tokens)]


def distinct_workflows(lines: Iterable[UsageLine]) -> List[str]:
    seen: Dict[str, None] = {}
    for line in lines:
        workflow = line.workflow
        if workflow:
            seen.setdefault(workflow)
    return list(seen)


def match_workflows(workflows: Iterable[str], query: str) -> List[str]:
    q = (query or "").lower()
    return [w for w in workflows if q in w.lower()]


def describe_filter(filt: UsageFilter) -> dict:
    payload = asdict(filt)
    for key in ("start_date", "end_date"):
        if payload[key] is not None:
            payload[key] = payload[key].isoformat()
    return payload
