"""
Property aggregation: fan out the per-property fetches and merge them.
"""
import asyncio
import time
from datetime import date
from typing import Callable, Optional, Sequence

from ga_dashboard.connectors.base import QueryClient
from ga_dashboard.models.property import DEFAULT_DATE_RANGES, SEVEN_DAY_LABEL, DateRange, Property
from ga_dashboard.models.stats import PropertyStatsResult, RangeMetrics
from ga_dashboard.services.fallback_estimator import apply_fallback_estimates
from ga_dashboard.services.property_fetchers import (
    fetch_countries,
    fetch_new_user_count,
    fetch_range_stats,
    fetch_realtime_users,
    fetch_sunday_users,
    fetch_traffic_sources,
)
from ga_dashboard.utils.helpers import local_today
from ga_dashboard.utils.logger import log


class PropertyStatsService:
    """
    Builds one PropertyStatsResult per call.

    The independent fetches run concurrently in worker threads (the GA4
    client is blocking); the fallback estimator runs once the range stats
    are in. Nothing raises past this service: every field degrades to
    zero or empty on its own.
    """

    def __init__(
        self,
        client: QueryClient,
        timezone: Optional[str] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.client = client
        self._today = today or (lambda: local_today(timezone))

    async def fetch_property_stats(
        self,
        prop: Property,
        date_ranges: Sequence[DateRange] = DEFAULT_DATE_RANGES,
    ) -> PropertyStatsResult:
        start_time = time.time()
        client, property_id = self.client, prop.property_id

        ranges, realtime, sources, countries, sunday = await asyncio.gather(
            asyncio.to_thread(fetch_range_stats, client, property_id, date_ranges),
            asyncio.to_thread(fetch_realtime_users, client, property_id),
            asyncio.to_thread(fetch_traffic_sources, client, property_id),
            asyncio.to_thread(fetch_countries, client, property_id),
            asyncio.to_thread(fetch_sunday_users, client, property_id, self._today()),
        )

        ranges = await asyncio.to_thread(
            apply_fallback_estimates,
            ranges,
            lambda: fetch_new_user_count(client, property_id),
        )

        result = PropertyStatsResult(
            name=prop.name,
            property_key=prop.key,
            ranges=ranges,
            realtime=realtime.value_or(0),
            traffic_sources=sources.value_or(()),
            countries=countries.value_or(()),
            sunday_users=sunday.value_or(0),
        )

        elapsed = time.time() - start_time
        week = ranges.get(SEVEN_DAY_LABEL, RangeMetrics.zero())
        log.info(f"Fetched stats for {prop.name} ({property_id}) in {elapsed:.2f}s: {week.users} users in 7 days")
        return result
