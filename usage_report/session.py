"""In-memory report session.

A ReportSession owns the loaded Report, the active filter and the value mode.
Loading a report or changing the filter/value mode recomputes the filtered
lines from the full line set and publishes them to every subscriber.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from usage_report.builder import build_report, build_report_async, read_report_file
from usage_report.config import SessionSettings
from usage_report.filters import (
    apply_filter,
    distinct_workflows,
    filter_by_product,
    lines_frame,
    match_workflows,
    normalize_filter,
)
from usage_report.models import Report, ReportFacets, UsageFilter, UsageLine, UsageLineValue
from usage_report.schemas import FilterUpdateModel, ValueModeModel

logger = logging.getLogger(__name__)

Listener = Callable[[List[UsageLineValue]], None]


def compute_facets(lines: Sequence[UsageLine]) -> ReportFacets:
    """Distinct values per facet in first-seen order, from one pass over ``lines``."""
    owners: Dict[str, None] = {}
    repositories: Dict[str, None] = {}
    workflows: Dict[str, None] = {}
    skus: Dict[str, None] = {}
    products: Dict[str, None] = {}
    usernames: Dict[str, None] = {}
    for line in lines:
        owners.setdefault(line.organization)
        repositories.setdefault(line.repository_name)
        skus.setdefault(line.sku)
        products.setdefault(line.product)
        if line.workflow:
            workflows.setdefault(line.workflow)
        if line.username:
            usernames.setdefault(line.username)
    return ReportFacets(
        owners=tuple(owners),
        repositories=tuple(repositories),
        workflows=tuple(workflows),
        skus=tuple(skus),
        products=tuple(products),
        usernames=tuple(usernames),
        has_workflow_data=bool(workflows),
        has_username_data=bool(usernames),
    )


class ReportSession:
    def __init__(self, settings: Optional[SessionSettings] = None) -> None:
        self.settings = settings or SessionSettings()
        self._report: Optional[Report] = None
        self._frame: pd.DataFrame = lines_frame([])
        self._filter = UsageFilter()
        self._value_mode = ValueModeModel(mode=self.settings.default_value_mode).mode
        self._facets = ReportFacets()
        self._filtered: List[UsageLineValue] = []
        self._listeners: List[Listener] = []
        self._load_lock = asyncio.Lock()

    # ---------------- Report state ----------------
    @property
    def current_report(self) -> Optional[Report]:
        return self._report

    @property
    def filters(self) -> UsageFilter:
        return self._filter

    @property
    def value_mode(self) -> str:
        return self._value_mode

    @property
    def facets(self) -> ReportFacets:
        return self._facets

    @property
    def format_type(self) -> Optional[str]:
        return self._report.format_type if self._report is not None else None

    @property
    def owners(self) -> Tuple[str, ...]:
        return self._facets.owners

    @property
    def repositories(self) -> Tuple[str, ...]:
        return self._facets.repositories

    @property
    def workflows(self) -> Tuple[str, ...]:
        return self._facets.workflows

    @property
    def skus(self) -> Tuple[str, ...]:
        return self._facets.skus

    @property
    def products(self) -> Tuple[str, ...]:
        return self._facets.products

    @property
    def usernames(self) -> Tuple[str, ...]:
        return self._facets.usernames

    @property
    def has_workflow_data(self) -> bool:
        return self._facets.has_workflow_data

    @property
    def has_username_data(self) -> bool:
        return self._facets.has_username_data

    def load_report(self, data: str) -> Report:
        """Build a report from raw CSV text and make it the current one.

        Build errors propagate and leave the previous report in place.
        """
        report = build_report(data)
        self._set_report(report)
        return report

    def load_file(self, path) -> Report:
        report = read_report_file(path)
        self._set_report(report)
        return report

    async def load_report_async(self, data: str) -> Report:
        # Loads run one at a time; the last one to finish is the current report.
        async with self._load_lock:
            report = await build_report_async(data)
            self._set_report(report)
            return report

    def _set_report(self, report: Report) -> None:
        self._report = report
        self._frame = lines_frame(report.lines)
        self._filter = UsageFilter(start_date=report.start_date, end_date=report.end_date)
        self._facets = compute_facets(report.lines)
        logger.info(
            "Usage report loaded: %d lines, format=%s, has_workflow_data=%s, has_username_data=%s",
            len(report.lines),
            report.format_type,
            self._facets.has_workflow_data,
            self._facets.has_username_data,
        )
        self._recompute()

    # ---------------- Filtering ----------------
    def set_filter(self, update: Optional[dict] = None, **kwargs) -> UsageFilter:
        """Merge a partial filter (start_date, end_date, workflow, sku) and republish."""
        raw = dict(update or {}, **kwargs)
        model = FilterUpdateModel.model_validate(raw)
        self._filter = normalize_filter(model.model_dump(exclude_unset=True), base=self._filter)
        self._recompute()
        return self._filter

    def set_value_mode(self, mode: str) -> None:
        self._value_mode = ValueModeModel(mode=mode).mode
        self._recompute()

    def _recompute(self) -> None:
        if self._report is None:
            return
        self._filtered = apply_filter(self._report.lines, self._filter, self._value_mode, frame=self._frame)
        self._publish(self._filtered)

    @property
    def filtered_lines(self) -> List[UsageLineValue]:
        return list(self._filtered)

    def filtered_by_product(self, products: str | Sequence[str]) -> List[UsageLineValue]:
        return filter_by_product(self._filtered, products)

    def grouped_lines(self) -> Dict[str, List[UsageLineValue]]:
        """Filtered lines split into the configured product groups."""
        return {name: self.filtered_by_product(tokens) for name, tokens in self.settings.product_groups.items()}

    def distinct_workflows(self, product: Optional[str | Sequence[str]] = None) -> List[str]:
        return distinct_workflows(self.filtered_by_product(product or self.settings.workflow_product))

    def workflow_options(self, query: str = "") -> List[str]:
        return match_workflows(self.distinct_workflows(), query)

    # ---------------- Subscriptions ----------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for every published filtered set.

        If a set has already been published it is delivered immediately.
        Returns a callable that removes the listener.
        """
        if self._report is not None:
            listener(list(self._filtered))
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def subscribe_product(self, products: str | Sequence[str], listener: Listener) -> Callable[[], None]:
        return self.subscribe(lambda lines: listener(filter_by_product(lines, products)))

    def _publish(self, lines: List[UsageLineValue]) -> None:
        first_error: Optional[Exception] = None
        for listener in list(self._listeners):
            try:
                listener(list(lines))
            except Exception as exc:
                logger.exception("filtered lines listener failed")
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error
