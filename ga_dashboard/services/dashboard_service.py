"""
Dashboard orchestration across all configured properties.
"""
import time
from typing import Any, Dict, Sequence

from ga_dashboard.models.property import DEFAULT_DATE_RANGES, DateRange, PropertyRegistry
from ga_dashboard.services.property_stats_service import PropertyStatsService
from ga_dashboard.utils.logger import log


class DashboardService:
    """
    Builds the /api/stats payload.

    Properties are aggregated strictly one after another to stay well
    inside GA4's per-property request quotas.
    """

    def __init__(self, stats_service: PropertyStatsService, registry: PropertyRegistry):
        self.stats_service = stats_service
        self.registry = registry

    async def fetch_dashboard(self, date_ranges: Sequence[DateRange] = DEFAULT_DATE_RANGES) -> Dict[str, Any]:
        """
        Returns:
            {group_key: {"label": ..., "items": {property_key: stats dict}}}
        """
        start_time = time.time()
        results: Dict[str, Any] = {}

        for group in self.registry.groups:
            items = {}
            for prop in group.items:
                stats = await self.stats_service.fetch_property_stats(prop, date_ranges)
                items[prop.key] = stats.to_dict()
            results[group.key] = {"label": group.label, "items": items}

        property_count = sum(len(group.items) for group in self.registry.groups)
        log.info(f"Dashboard built for {property_count} properties in {time.time() - start_time:.2f}s")
        return results
