"""
Dashboard result records.

Field names serialize to the camelCase keys the dashboard front end reads.
"""
from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class RangeMetrics:
    """Core counts for one labeled date range"""
    users: int = 0
    new_users: int = 0
    sessions: int = 0
    page_views: int = 0

    @classmethod
    def zero(cls) -> "RangeMetrics":
        return cls()

    def to_dict(self) -> Dict[str, int]:
        return {
            "users": self.users,
            "newUsers": self.new_users,
            "sessions": self.sessions,
            "pageViews": self.page_views,
        }


@dataclass(frozen=True)
class TrafficSourceEntry:
    name: str
    sessions: int


@dataclass(frozen=True)
class CountryEntry:
    name: str
    users: int


@dataclass(frozen=True)
class PropertyStatsResult:
    """Everything the dashboard shows for one property"""
    name: str
    property_key: str
    ranges: Dict[str, RangeMetrics]
    realtime: int = 0
    traffic_sources: Tuple[TrafficSourceEntry, ...] = ()
    countries: Tuple[CountryEntry, ...] = ()
    sunday_users: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "propertyKey": self.property_key,
            "ranges": {label: metrics.to_dict() for label, metrics in self.ranges.items()},
            "realtime": self.realtime,
            "trafficSources": [{"name": s.name, "sessions": s.sessions} for s in self.traffic_sources],
            "countries": [{"name": c.name, "users": c.users} for c in self.countries],
            "sundayUsers": self.sunday_users,
        }


@dataclass(frozen=True)
class PartnerRangeMetrics:
    """Range counts restricted to one referral source"""
    users: int = 0
    new_users: int = 0
    sessions: int = 0
    page_views: int = 0
    avg_session_duration: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "users": self.users,
            "newUsers": self.new_users,
            "sessions": self.sessions,
            "pageViews": self.page_views,
            "avgSessionDuration": self.avg_session_duration,
        }


@dataclass(frozen=True)
class PartnerReport:
    partner: str
    website: str
    ranges: Dict[str, PartnerRangeMetrics]
    top_pages: Tuple[Dict[str, Any], ...] = ()
    daily_traffic: Tuple[Dict[str, Any], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "partner": self.partner,
            "website": self.website,
            "ranges": {label: m.to_dict() for label, m in self.ranges.items()},
            "topPages": list(self.top_pages),
            "dailyTraffic": list(self.daily_traffic),
        }
