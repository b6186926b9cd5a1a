"""Shared test helpers: an in-memory query client and report builders.

Regular functions/classes (not fixtures) that any test module can import.
"""
from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from ga_dashboard.config import Settings
from ga_dashboard.connectors.base import OrderBy, QueryClient, ReportResult, ReportRow


@dataclass
class Query:
    """One recorded call against FakeQueryClient."""
    property_id: str
    date_ranges: tuple = ()
    metrics: tuple = ()
    dimensions: tuple = ()
    dimension_filter: dict = field(default_factory=dict)
    order_by: OrderBy | None = None
    limit: int | None = None
    realtime: bool = False

    @property
    def range_label(self) -> str | None:
        return self.date_ranges[0].label if self.date_ranges else None


class FakeQueryClient(QueryClient):
    """Answers every query through ``handler(query)``.

    The handler returns a ReportResult, or an Exception instance which is
    raised to simulate a backend failure. Calls are recorded in ``calls``.
    """

    name = "fake"

    def __init__(self, handler: Callable[[Query], Any] | None = None):
        self.handler = handler or (lambda query: ReportResult())
        self.calls: list[Query] = []
        self._lock = threading.Lock()

    def _answer(self, query: Query) -> ReportResult:
        with self._lock:
            self.calls.append(query)
        outcome = self.handler(query)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def run_report(self, property_id, date_ranges, metrics, dimensions=None,
                   dimension_filter=None, order_by=None, limit=None):
        return self._answer(Query(
            property_id=property_id,
            date_ranges=tuple(date_ranges),
            metrics=tuple(metrics),
            dimensions=tuple(dimensions or ()),
            dimension_filter=dict(dimension_filter or {}),
            order_by=order_by,
            limit=limit,
        ))

    def run_realtime_report(self, property_id, metrics):
        return self._answer(Query(property_id=property_id, metrics=tuple(metrics), realtime=True))


def metric_result(*values) -> ReportResult:
    """A single-row report holding the given metric values."""
    return ReportResult(rows=(ReportRow(metric_values=tuple(str(v) for v in values)),))


def breakdown_result(pairs: list[tuple[str, Any]]) -> ReportResult:
    """One row per (dimension value, metric value) pair."""
    return ReportResult(rows=tuple(
        ReportRow(dimension_values=(name,), metric_values=(str(value),))
        for name, value in pairs
    ))


def _to_result(value) -> Any:
    if value is None:
        return ReportResult()
    if isinstance(value, (Exception, ReportResult)):
        return value
    if isinstance(value, (tuple, list)) and value and isinstance(value[0], tuple):
        return breakdown_result(list(value))
    if isinstance(value, (tuple, list)):
        return metric_result(*value)
    return metric_result(value)


def dashboard_handler(
    ranges: dict[str, Any] | None = None,
    realtime: Any = 0,
    sources: Any = (),
    countries: Any = (),
    sunday: Any = 0,
    new_users: Any = None,
) -> Callable[[Query], Any]:
    """Route each dashboard query by its shape.

    Values may be an int (single metric), a tuple of metric values, a list
    of (dimension, metric) pairs, None (no rows) or an Exception (raised).
    """
    ranges = ranges or {}

    def handler(query: Query):
        if query.realtime:
            return _to_result(realtime)
        if "newVsReturning" in query.dimensions:
            return _to_result(new_users)
        if "sessionSourceMedium" in query.dimensions:
            return _to_result(list(sources) or None)
        if "country" in query.dimensions:
            return _to_result(list(countries) or None)
        if query.range_label == "Sunday":
            return _to_result(sunday)
        return _to_result(ranges.get(query.range_label))

    return handler


def run(coro):
    """Run an async coroutine in a sync test."""
    return asyncio.run(coro)


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env and environment."""
    values = {
        "google_credentials": None,
        "ga4_credentials_path": "/nonexistent/credentials.json",
        "dashboard_password": None,
        "stats_cache_ttl": 0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)
