"""
Base query client for the analytics backend.

Services depend only on this interface, so tests can hand them an
in-memory client instead of the live GA4 one.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ga_dashboard.models.property import DateRange


@dataclass(frozen=True)
class ReportRow:
    """One result row, positionally aligned with the request's dimensions/metrics"""
    dimension_values: Tuple[str, ...] = ()
    metric_values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ReportResult:
    rows: Tuple[ReportRow, ...] = ()
    dimension_headers: Tuple[str, ...] = ()
    metric_headers: Tuple[str, ...] = ()
    row_count: int = 0


@dataclass(frozen=True)
class OrderBy:
    """Sort on a metric (descending by default) or a dimension (ascending)"""
    metric: Optional[str] = None
    dimension: Optional[str] = None
    desc: bool = False

    @classmethod
    def metric_desc(cls, metric: str) -> "OrderBy":
        return cls(metric=metric, desc=True)

    @classmethod
    def dimension_asc(cls, dimension: str) -> "OrderBy":
        return cls(dimension=dimension)


class QueryClient(ABC):
    """Executes one report against the analytics backend.

    Implementations raise on any backend failure; callers decide how to
    degrade. ``dimension_filter`` maps a dimension name to the exact string
    value it must equal (several entries are ANDed).
    """

    name: str = "query client"

    @abstractmethod
    def run_report(
        self,
        property_id: str,
        date_ranges: Sequence[DateRange],
        metrics: Sequence[str],
        dimensions: Optional[Sequence[str]] = None,
        dimension_filter: Optional[Dict[str, str]] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> ReportResult:
        """Run a standard report"""
        pass

    @abstractmethod
    def run_realtime_report(self, property_id: str, metrics: Sequence[str]) -> ReportResult:
        """Run a realtime report (last 30 minutes)"""
        pass


def first_metric(result: ReportResult, index: int = 0) -> Optional[str]:
    """Metric value of the first row, or None when the report is empty"""
    if not result.rows:
        return None
    values: List[str] = list(result.rows[0].metric_values)
    if len(values) <= index:
        return None
    return values[index]
