"""Domain records for the GA dashboard"""

from ga_dashboard.models.property import (
    Property,
    PropertyGroup,
    PropertyRegistry,
    DateRange,
    DEFAULT_DATE_RANGES,
    SEVEN_DAY_LABEL,
    TRAILING_WEEK,
    load_registry,
)

from ga_dashboard.models.stats import (
    RangeMetrics,
    TrafficSourceEntry,
    CountryEntry,
    PropertyStatsResult,
    PartnerRangeMetrics,
    PartnerReport,
)

__all__ = [
    "Property",
    "PropertyGroup",
    "PropertyRegistry",
    "DateRange",
    "DEFAULT_DATE_RANGES",
    "SEVEN_DAY_LABEL",
    "TRAILING_WEEK",
    "load_registry",
    "RangeMetrics",
    "TrafficSourceEntry",
    "CountryEntry",
    "PropertyStatsResult",
    "PartnerRangeMetrics",
    "PartnerReport",
]
