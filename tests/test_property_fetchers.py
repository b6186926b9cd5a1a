"""
Per-property fetch tests.

Guards against:
1. A failing or empty range query dropping or corrupting other ranges
2. Traffic source labels cleaned in the wrong order
3. Placeholder/blank countries leaking into the breakdown
4. Any fetch raising instead of degrading to its default
5. The Sunday query hitting the wrong day
"""
from datetime import date

from ga_dashboard.connectors.base import OrderBy
from ga_dashboard.models.property import DEFAULT_DATE_RANGES, DateRange
from ga_dashboard.models.stats import CountryEntry, RangeMetrics, TrafficSourceEntry
from ga_dashboard.services.property_fetchers import (
    clean_source_label,
    fetch_countries,
    fetch_new_user_count,
    fetch_range_stats,
    fetch_realtime_users,
    fetch_sunday_users,
    fetch_traffic_sources,
    is_real_country,
)

from helpers import FakeQueryClient, dashboard_handler

PROPERTY_ID = "408962359"


# ---------------------------------------------------------------------------
# Range stats
# ---------------------------------------------------------------------------

def test_range_stats_parses_core_metrics():
    client = FakeQueryClient(dashboard_handler(ranges={"7 Days": (100, 20, 150, 400)}))
    ranges = fetch_range_stats(client, PROPERTY_ID, [DateRange("7 Days", "7daysAgo", "today")])
    assert ranges == {"7 Days": RangeMetrics(users=100, new_users=20, sessions=150, page_views=400)}


def test_range_stats_one_query_per_range():
    client = FakeQueryClient(dashboard_handler())
    fetch_range_stats(client, PROPERTY_ID, DEFAULT_DATE_RANGES)

    assert [q.range_label for q in client.calls] == [r.label for r in DEFAULT_DATE_RANGES]
    for query in client.calls:
        assert query.metrics == ("totalUsers", "newUsers", "sessions", "screenPageViews")
        assert len(query.date_ranges) == 1


def test_range_stats_has_entry_for_every_label_when_all_fail():
    client = FakeQueryClient(lambda query: RuntimeError("quota exceeded"))
    ranges = fetch_range_stats(client, PROPERTY_ID, DEFAULT_DATE_RANGES)

    assert list(ranges) == [r.label for r in DEFAULT_DATE_RANGES]
    assert all(m == RangeMetrics.zero() for m in ranges.values())


def test_range_failure_is_isolated():
    """One failed and one empty range must not touch the others."""
    client = FakeQueryClient(dashboard_handler(ranges={
        "Today": RuntimeError("deadline exceeded"),
        "7 Days": (100, 20, 150, 400),
        "14 Days": None,
        "28 Days": (300, 90, 500, 1200),
    }))
    ranges = fetch_range_stats(client, PROPERTY_ID, DEFAULT_DATE_RANGES)

    assert ranges["Today"] == RangeMetrics.zero()
    assert ranges["7 Days"] == RangeMetrics(100, 20, 150, 400)
    assert ranges["14 Days"] == RangeMetrics.zero()
    assert ranges["28 Days"] == RangeMetrics(300, 90, 500, 1200)


def test_range_stats_empty_request():
    client = FakeQueryClient()
    assert fetch_range_stats(client, PROPERTY_ID, []) == {}
    assert client.calls == []


# ---------------------------------------------------------------------------
# Realtime
# ---------------------------------------------------------------------------

def test_realtime_users():
    client = FakeQueryClient(dashboard_handler(realtime=7))
    assert fetch_realtime_users(client, PROPERTY_ID).value_or(0) == 7
    assert client.calls[0].realtime
    assert client.calls[0].metrics == ("activeUsers",)


def test_realtime_defaults_to_zero():
    failing = FakeQueryClient(lambda query: ConnectionError("reset"))
    empty = FakeQueryClient()
    assert fetch_realtime_users(failing, PROPERTY_ID).value_or(0) == 0
    assert fetch_realtime_users(empty, PROPERTY_ID).value_or(0) == 0
    assert len(failing.calls) == 1  # single attempt


# ---------------------------------------------------------------------------
# Traffic source labels
# ---------------------------------------------------------------------------

def test_clean_organic():
    assert clean_source_label("google / organic") == "google"


def test_clean_referral():
    assert clean_source_label("github.com / referral") == "github.com"


def test_clean_cpc_becomes_ads():
    assert clean_source_label("newsletter / cpc") == "newsletter (Ads)"


def test_clean_not_set_becomes_other():
    assert clean_source_label("(not set)") == "Other"


def test_clean_direct_none_becomes_direct():
    assert clean_source_label("(direct) / (none)") == "Direct"


def test_clean_leaves_other_mediums():
    assert clean_source_label("mailchimp / email") == "mailchimp / email"


def test_clean_only_strips_suffix():
    assert clean_source_label("news / organic / feed") == "news / organic / feed"


def test_traffic_sources_query_shape_and_cleanup():
    client = FakeQueryClient(dashboard_handler(sources=[
        ("(direct) / (none)", 120),
        ("google / organic", 80),
        ("newsletter / cpc", 12),
        ("(not set)", 3),
    ]))
    sources = fetch_traffic_sources(client, PROPERTY_ID).value_or(())

    assert sources == (
        TrafficSourceEntry("Direct", 120),
        TrafficSourceEntry("google", 80),
        TrafficSourceEntry("newsletter (Ads)", 12),
        TrafficSourceEntry("Other", 3),
    )
    query = client.calls[0]
    assert query.dimensions == ("sessionSourceMedium",)
    assert query.order_by == OrderBy(metric="sessions", desc=True)
    assert query.limit == 5
    assert (query.date_ranges[0].start, query.date_ranges[0].end) == ("7daysAgo", "today")


def test_traffic_sources_capped_at_five():
    client = FakeQueryClient(dashboard_handler(sources=[(f"site{i} / referral", 10 - i) for i in range(8)]))
    assert len(fetch_traffic_sources(client, PROPERTY_ID).value_or(())) == 5


def test_traffic_sources_empty_on_failure():
    client = FakeQueryClient(lambda query: RuntimeError("boom"))
    assert fetch_traffic_sources(client, PROPERTY_ID).value_or(()) == ()


# ---------------------------------------------------------------------------
# Countries
# ---------------------------------------------------------------------------

def test_is_real_country():
    assert is_real_country("United States")
    assert not is_real_country("(not set)")
    assert not is_real_country("")
    assert not is_real_country("   ")


def test_countries_filters_placeholders_only():
    client = FakeQueryClient(dashboard_handler(countries=[
        ("United States", 50),
        ("(not set)", 30),
        ("Brazil", 20),
        ("", 10),
        ("  ", 5),
        ("not set", 2),
    ]))
    countries = fetch_countries(client, PROPERTY_ID).value_or(())

    assert countries == (
        CountryEntry("United States", 50),
        CountryEntry("Brazil", 20),
        CountryEntry("not set", 2),
    )
    query = client.calls[0]
    assert query.dimensions == ("country",)
    assert query.limit == 20
    assert query.order_by == OrderBy(metric="totalUsers", desc=True)


def test_countries_cap_applies_before_filtering():
    pairs = [("(not set)", 100)] + [(f"Country {i}", 50 - i) for i in range(25)]
    client = FakeQueryClient(dashboard_handler(countries=pairs))
    assert len(fetch_countries(client, PROPERTY_ID).value_or(())) == 19


def test_countries_empty_on_failure():
    client = FakeQueryClient(lambda query: TimeoutError("timed out"))
    assert fetch_countries(client, PROPERTY_ID).value_or(()) == ()


# ---------------------------------------------------------------------------
# Sunday users
# ---------------------------------------------------------------------------

def test_sunday_users_queries_single_day():
    client = FakeQueryClient(dashboard_handler(sunday=42))
    wednesday = date(2024, 1, 3)
    assert fetch_sunday_users(client, PROPERTY_ID, wednesday).value_or(0) == 42

    date_range = client.calls[0].date_ranges[0]
    assert date_range.start == date_range.end == "2023-12-31"
    assert client.calls[0].metrics == ("totalUsers",)


def test_sunday_users_zero_on_failure_or_no_rows():
    assert fetch_sunday_users(FakeQueryClient(), PROPERTY_ID, date(2024, 1, 3)).value_or(0) == 0
    failing = FakeQueryClient(lambda query: RuntimeError("boom"))
    assert fetch_sunday_users(failing, PROPERTY_ID, date(2024, 1, 3)).value_or(0) == 0


# ---------------------------------------------------------------------------
# New-user backfill query
# ---------------------------------------------------------------------------

def test_new_user_count_filters_on_new():
    client = FakeQueryClient(dashboard_handler(new_users=20))
    assert fetch_new_user_count(client, PROPERTY_ID).value_or(0) == 20

    query = client.calls[0]
    assert query.dimensions == ("newVsReturning",)
    assert query.dimension_filter == {"newVsReturning": "new"}
    assert query.metrics == ("totalUsers",)


def test_new_user_count_failure_is_marked():
    result = fetch_new_user_count(FakeQueryClient(lambda q: RuntimeError("boom")), PROPERTY_ID)
    assert not result.ok
    assert "boom" in result.error
