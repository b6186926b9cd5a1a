"""
Per-property GA4 fetches used by the dashboard.

Each fetch issues a single query (the range fetch issues one per range)
and returns a FetchResult; none of them raise. The aggregator maps
failures to defaults: zero for counts, an empty tuple for breakdowns.
"""
import re
from datetime import date
from typing import Dict, List, Sequence, Tuple

from ga_dashboard.connectors.base import OrderBy, QueryClient, first_metric
from ga_dashboard.models.property import DateRange, TRAILING_WEEK
from ga_dashboard.models.stats import CountryEntry, RangeMetrics, TrafficSourceEntry
from ga_dashboard.services.fetch_result import NO_ROWS, FetchResult, attempt
from ga_dashboard.utils.helpers import most_recent_sunday, parse_count

CORE_METRICS = ["totalUsers", "newUsers", "sessions", "screenPageViews"]

TRAFFIC_SOURCE_LIMIT = 5
COUNTRY_LIMIT = 20

# Applied in order, each rewriting at most one occurrence. Order matters:
# "(direct) / (none)" must still be intact when its exact rule runs, and
# "(not set)" is last so it only touches what the other rules left.
SOURCE_LABEL_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile(r" / organic$"), ""),
    (re.compile(r" / referral$"), ""),
    (re.compile(r" / cpc$"), " (Ads)"),
    (re.compile(r"^\(direct\) / \(none\)$"), "Direct"),
    (re.compile(r"\(not set\)"), "Other"),
]

PLACEHOLDER_COUNTRY = "(not set)"


def clean_source_label(source_medium: str) -> str:
    """Turn a GA4 sessionSourceMedium value into a dashboard label"""
    label = source_medium
    for pattern, replacement in SOURCE_LABEL_RULES:
        label = pattern.sub(replacement, label, count=1)
    return label


def is_real_country(country: str) -> bool:
    """False for GA4's placeholder and blank country values"""
    return bool(country and country.strip() and country != PLACEHOLDER_COUNTRY)


def fetch_range_metrics(client: QueryClient, property_id: str, date_range: DateRange) -> FetchResult[RangeMetrics]:
    """Users, new users, sessions and page views for one date range"""
    def fetch():
        result = client.run_report(property_id, [date_range], CORE_METRICS)
        if not result.rows:
            return FetchResult.failure(NO_ROWS)
        values = result.rows[0].metric_values
        return FetchResult.success(RangeMetrics(
            users=parse_count(values[0]),
            new_users=parse_count(values[1]),
            sessions=parse_count(values[2]),
            page_views=parse_count(values[3]),
        ))

    return attempt(f"range '{date_range.label}'", property_id, fetch)


def fetch_range_stats(
    client: QueryClient,
    property_id: str,
    date_ranges: Sequence[DateRange],
) -> Dict[str, RangeMetrics]:
    """
    One independent query per range.

    Every requested label gets an entry; a range whose query fails or
    returns no rows reads all-zero without affecting the others.
    """
    return {
        date_range.label: fetch_range_metrics(client, property_id, date_range).value_or(RangeMetrics.zero())
        for date_range in date_ranges
    }


def fetch_realtime_users(client: QueryClient, property_id: str) -> FetchResult[int]:
    """Users active in the last 30 minutes"""
    def fetch():
        value = first_metric(client.run_realtime_report(property_id, ["activeUsers"]))
        if value is None:
            return FetchResult.failure(NO_ROWS)
        return FetchResult.success(parse_count(value))

    return attempt("realtime", property_id, fetch)


def fetch_traffic_sources(client: QueryClient, property_id: str) -> FetchResult[Tuple[TrafficSourceEntry, ...]]:
    """Top session sources over the trailing week, labels cleaned"""
    def fetch():
        result = client.run_report(
            property_id,
            [TRAILING_WEEK],
            ["sessions"],
            dimensions=["sessionSourceMedium"],
            order_by=OrderBy.metric_desc("sessions"),
            limit=TRAFFIC_SOURCE_LIMIT,
        )
        return FetchResult.success(tuple(
            TrafficSourceEntry(
                name=clean_source_label(row.dimension_values[0]),
                sessions=parse_count(row.metric_values[0]),
            )
            for row in result.rows[:TRAFFIC_SOURCE_LIMIT]
        ))

    return attempt("traffic sources", property_id, fetch)


def fetch_countries(client: QueryClient, property_id: str) -> FetchResult[Tuple[CountryEntry, ...]]:
    """
    Top countries by users over the trailing week.

    The cap applies before placeholder/blank countries are dropped, so
    fewer than COUNTRY_LIMIT entries may come back.
    """
    def fetch():
        result = client.run_report(
            property_id,
            [TRAILING_WEEK],
            ["totalUsers"],
            dimensions=["country"],
            order_by=OrderBy.metric_desc("totalUsers"),
            limit=COUNTRY_LIMIT,
        )
        return FetchResult.success(tuple(
            CountryEntry(name=row.dimension_values[0], users=parse_count(row.metric_values[0]))
            for row in result.rows[:COUNTRY_LIMIT]
            if is_real_country(row.dimension_values[0])
        ))

    return attempt("countries", property_id, fetch)


def fetch_sunday_users(client: QueryClient, property_id: str, today: date) -> FetchResult[int]:
    """Total users on the most recent Sunday (today, if today is Sunday)"""
    sunday = most_recent_sunday(today).isoformat()

    def fetch():
        result = client.run_report(property_id, [DateRange("Sunday", sunday, sunday)], ["totalUsers"])
        value = first_metric(result)
        if value is None:
            return FetchResult.failure(NO_ROWS)
        return FetchResult.success(parse_count(value))

    return attempt("sunday users", property_id, fetch)


def fetch_new_user_count(client: QueryClient, property_id: str) -> FetchResult[int]:
    """Trailing-week users whose newVsReturning dimension reads "new" """
    def fetch():
        result = client.run_report(
            property_id,
            [TRAILING_WEEK],
            ["totalUsers"],
            dimensions=["newVsReturning"],
            dimension_filter={"newVsReturning": "new"},
        )
        value = first_metric(result)
        if value is None:
            return FetchResult.failure(NO_ROWS)
        return FetchResult.success(parse_count(value))

    return attempt("new users backfill", property_id, fetch)
