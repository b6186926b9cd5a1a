"""
Google Analytics 4 query client

Thin wrapper over the GA4 Data API (v1beta). The client's own transport
timeout/retry behaviour is used as-is; nothing here retries.
"""
from typing import Any, Dict, Optional, Sequence, Tuple

from google.analytics.data_v1beta import BetaAnalyticsDataClient
from google.analytics.data_v1beta.types import (
    DateRange as GADateRange,
    Dimension,
    Filter,
    FilterExpression,
    FilterExpressionList,
    Metric,
    OrderBy as GAOrderBy,
    RunRealtimeReportRequest,
    RunReportRequest,
)
from google.oauth2 import service_account

from ga_dashboard.config import Settings
from ga_dashboard.connectors.base import OrderBy, QueryClient, ReportResult, ReportRow
from ga_dashboard.models.property import DateRange
from ga_dashboard.utils.credentials import load_service_account_info
from ga_dashboard.utils.logger import log

GA4_SCOPES = ["https://www.googleapis.com/auth/analytics.readonly"]


class GA4QueryClient(QueryClient):
    """Query client backed by BetaAnalyticsDataClient"""

    name = "Google Analytics 4"

    def __init__(self, client: BetaAnalyticsDataClient):
        self.client = client

    @classmethod
    def from_service_account_info(cls, info: Dict[str, Any]) -> "GA4QueryClient":
        credentials = service_account.Credentials.from_service_account_info(info, scopes=GA4_SCOPES)
        return cls(BetaAnalyticsDataClient(credentials=credentials))

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
        request_args = {
            "property": f"properties/{property_id}",
            "date_ranges": [GADateRange(start_date=r.start, end_date=r.end) for r in date_ranges],
            "metrics": [Metric(name=m) for m in metrics],
            "dimensions": [Dimension(name=d) for d in dimensions or []],
        }
        if dimension_filter:
            request_args["dimension_filter"] = _filter_expression(dimension_filter)
        if order_by:
            request_args["order_bys"] = [_order_by(order_by)]
        if limit:
            request_args["limit"] = limit

        response = self.client.run_report(RunReportRequest(**request_args))
        return _to_result(response)

    def run_realtime_report(self, property_id: str, metrics: Sequence[str]) -> ReportResult:
        request = RunRealtimeReportRequest(
            property=f"properties/{property_id}",
            metrics=[Metric(name=m) for m in metrics],
        )
        response = self.client.run_realtime_report(request)
        return _to_result(response)


def _filter_expression(dimension_filter: Dict[str, str]) -> FilterExpression:
    """Exact string match on each dimension; several are ANDed"""
    expressions = [
        FilterExpression(
            filter=Filter(field_name=field_name, string_filter=Filter.StringFilter(value=value))
        )
        for field_name, value in dimension_filter.items()
    ]
    if len(expressions) == 1:
        return expressions[0]
    return FilterExpression(and_group=FilterExpressionList(expressions=expressions))


def _order_by(order_by: OrderBy) -> GAOrderBy:
    if order_by.metric:
        return GAOrderBy(
            metric=GAOrderBy.MetricOrderBy(metric_name=order_by.metric),
            desc=order_by.desc,
        )
    return GAOrderBy(
        dimension=GAOrderBy.DimensionOrderBy(dimension_name=order_by.dimension),
        desc=order_by.desc,
    )


def _to_result(response) -> ReportResult:
    rows = tuple(
        ReportRow(
            dimension_values=tuple(v.value for v in row.dimension_values),
            metric_values=tuple(v.value for v in row.metric_values),
        )
        for row in response.rows
    )
    return ReportResult(
        rows=rows,
        dimension_headers=tuple(h.name for h in response.dimension_headers),
        metric_headers=tuple(h.name for h in response.metric_headers),
        row_count=response.row_count,
    )


def build_query_client(settings: Settings) -> Tuple[Optional[QueryClient], Optional[str]]:
    """
    Create the GA4 client from configured credentials.

    Returns:
        (client, None) on success, (None, error message) when credentials
        are missing or invalid. The caller reports the error once.
    """
    try:
        info = load_service_account_info(settings)
        client = GA4QueryClient.from_service_account_info(info)
        log.info("Connected to Google Analytics 4")
        return client, None
    except Exception as e:
        log.error(f"Failed to initialise GA4 client: {str(e)}")
        return None, str(e)
