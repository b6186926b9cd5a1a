"""
Referral partner report.

Traffic a partner site sends to one of our properties, identified by its
sessionSource value. Uses the same silent-degrade policy as the main
dashboard: each section falls back to zeros or an empty list on failure.
"""
from typing import Any, Dict, Sequence, Tuple

from ga_dashboard.connectors.base import OrderBy, QueryClient
from ga_dashboard.models.property import DEFAULT_DATE_RANGES, TRAILING_WEEK, DateRange
from ga_dashboard.models.stats import PartnerRangeMetrics, PartnerReport
from ga_dashboard.services.fetch_result import NO_ROWS, FetchResult, attempt
from ga_dashboard.utils.helpers import parse_count

PARTNER_DATE_RANGES: Tuple[DateRange, ...] = DEFAULT_DATE_RANGES + (
    DateRange("All Time", "2020-01-01", "today"),
)

PARTNER_RANGE_METRICS = ["totalUsers", "newUsers", "sessions", "screenPageViews", "averageSessionDuration"]

TOP_PAGES_LIMIT = 10
DAILY_TRAFFIC_WINDOW = DateRange("30 Days", "30daysAgo", "today")


class PartnerReportService:
    """Source-filtered stats for a single property"""

    def __init__(self, client: QueryClient):
        self.client = client

    def _source_filter(self, source: str) -> Dict[str, str]:
        return {"sessionSource": source}

    def fetch_range(self, property_id: str, source: str, date_range: DateRange) -> FetchResult[PartnerRangeMetrics]:
        def fetch():
            result = self.client.run_report(
                property_id,
                [date_range],
                PARTNER_RANGE_METRICS,
                dimension_filter=self._source_filter(source),
            )
            if not result.rows:
                return FetchResult.failure(NO_ROWS)
            values = result.rows[0].metric_values
            return FetchResult.success(PartnerRangeMetrics(
                users=parse_count(values[0]),
                new_users=parse_count(values[1]),
                sessions=parse_count(values[2]),
                page_views=parse_count(values[3]),
                avg_session_duration=float(values[4]),
            ))

        return attempt(f"partner range '{date_range.label}'", property_id, fetch)

    def fetch_top_pages(self, property_id: str, source: str) -> FetchResult[Tuple[Dict[str, Any], ...]]:
        def fetch():
            result = self.client.run_report(
                property_id,
                [TRAILING_WEEK],
                ["screenPageViews", "totalUsers"],
                dimensions=["pagePath"],
                dimension_filter=self._source_filter(source),
                order_by=OrderBy.metric_desc("screenPageViews"),
                limit=TOP_PAGES_LIMIT,
            )
            return FetchResult.success(tuple(
                {
                    "path": row.dimension_values[0],
                    "views": parse_count(row.metric_values[0]),
                    "users": parse_count(row.metric_values[1]),
                }
                for row in result.rows
            ))

        return attempt("partner top pages", property_id, fetch)

    def fetch_daily_traffic(self, property_id: str, source: str) -> FetchResult[Tuple[Dict[str, Any], ...]]:
        def fetch():
            result = self.client.run_report(
                property_id,
                [DAILY_TRAFFIC_WINDOW],
                ["totalUsers", "sessions"],
                dimensions=["date"],
                dimension_filter=self._source_filter(source),
                order_by=OrderBy.dimension_asc("date"),
            )
            return FetchResult.success(tuple(
                {
                    "date": row.dimension_values[0],
                    "users": parse_count(row.metric_values[0]),
                    "sessions": parse_count(row.metric_values[1]),
                }
                for row in result.rows
            ))

        return attempt("partner daily traffic", property_id, fetch)

    def build_report(
        self,
        property_id: str,
        source: str,
        partner: str,
        website: str,
        date_ranges: Sequence[DateRange] = PARTNER_DATE_RANGES,
    ) -> PartnerReport:
        ranges = {
            date_range.label: self.fetch_range(property_id, source, date_range).value_or(PartnerRangeMetrics())
            for date_range in date_ranges
        }
        return PartnerReport(
            partner=partner,
            website=website,
            ranges=ranges,
            top_pages=self.fetch_top_pages(property_id, source).value_or(()),
            daily_traffic=self.fetch_daily_traffic(property_id, source).value_or(()),
        )
