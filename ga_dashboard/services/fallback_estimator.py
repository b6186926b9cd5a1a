"""
Gap-filling for properties whose instrumentation under-reports.

GA4 app streams (and some web tags) can report newUsers = 0 or
sessions = 0 alongside real traffic. Two zero-triggered heuristics,
applied in order to the completed range stats:

1. New-user ratio backfill: when the 7-day newUsers reads 0, ask the
   newVsReturning dimension for the trailing week's new users, derive the
   new-user share of 7-day users and apply it to every range still
   reading 0. This assumes the share is stable across windows; it is an
   estimate, not a correction.

2. Session substitution: when 7-day sessions reads 0 but users do not,
   every range still reading 0 sessions shows its page views instead.
   Page views are a lower-bound proxy and can overstate sessions on
   properties with many views per session.

Both only ever replace zeros. A failed backfill query leaves the zeros.
"""
from dataclasses import replace
from typing import Callable, Dict

from ga_dashboard.models.property import SEVEN_DAY_LABEL
from ga_dashboard.models.stats import RangeMetrics
from ga_dashboard.services.fetch_result import FetchResult
from ga_dashboard.utils.helpers import round_half_up
from ga_dashboard.utils.logger import log


def new_user_ratio(new_users_7d: int, users_7d: int) -> float:
    """Share of 7-day users that are new; denominator floored at 1"""
    return new_users_7d / max(1, users_7d)


def backfill_new_users(ranges: Dict[str, RangeMetrics], new_users_7d: int) -> Dict[str, RangeMetrics]:
    """Estimate newUsers for every range that reads 0 from the 7-day ratio"""
    ratio = new_user_ratio(new_users_7d, ranges[SEVEN_DAY_LABEL].users)
    return {
        label: replace(metrics, new_users=round_half_up(metrics.users * ratio)) if metrics.new_users == 0 else metrics
        for label, metrics in ranges.items()
    }


def substitute_sessions(ranges: Dict[str, RangeMetrics]) -> Dict[str, RangeMetrics]:
    """Use page views as the session count wherever sessions read 0"""
    return {
        label: replace(metrics, sessions=metrics.page_views) if metrics.sessions == 0 else metrics
        for label, metrics in ranges.items()
    }


def needs_new_user_backfill(ranges: Dict[str, RangeMetrics]) -> bool:
    week = ranges.get(SEVEN_DAY_LABEL)
    return week is not None and week.new_users == 0


def needs_session_substitution(ranges: Dict[str, RangeMetrics]) -> bool:
    week = ranges.get(SEVEN_DAY_LABEL)
    return week is not None and week.sessions == 0 and week.users > 0


def apply_fallback_estimates(
    ranges: Dict[str, RangeMetrics],
    fetch_new_user_count: Callable[[], FetchResult[int]],
) -> Dict[str, RangeMetrics]:
    """
    Run both heuristics over completed range stats.

    Args:
        ranges: label → metrics, as returned by the range fetch
        fetch_new_user_count: issues the backfill query; only called when
            the 7-day newUsers reads 0

    Returns:
        A new mapping; ``ranges`` itself is not modified.
    """
    estimated = dict(ranges)

    if needs_new_user_backfill(estimated):
        new_users_7d = fetch_new_user_count().value_or(0)
        if new_users_7d:
            log.info(f"Backfilling newUsers from newVsReturning ({new_users_7d} new in 7 days)")
            estimated = backfill_new_users(estimated, new_users_7d)

    if needs_session_substitution(estimated):
        log.info("7-day sessions read 0 with active users; substituting page views")
        estimated = substitute_sessions(estimated)

    return estimated
