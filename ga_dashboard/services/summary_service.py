"""
Weekly summary text for quick desktop/terminal checks.

Unlike the dashboard, a failing property shows its error in the text
rather than silently reading zero.
"""
import asyncio
from typing import List

from ga_dashboard.connectors.base import QueryClient
from ga_dashboard.models.property import TRAILING_WEEK, Property
from ga_dashboard.utils.helpers import format_number, parse_count

SUMMARY_TITLE = "Analytics (Last 7 Days)"


def summarize_property(client: QueryClient, prop: Property) -> str:
    try:
        result = client.run_report(prop.property_id, [TRAILING_WEEK], ["totalUsers", "newUsers", "sessions"])
        if not result.rows:
            return f"{prop.name}: No data"
        users, new_users, sessions = (format_number(parse_count(v)) for v in result.rows[0].metric_values[:3])
    except Exception as e:
        return f"{prop.name}: Error - {str(e)}"

    return f"{prop.name}:\n   Users: {users}  |  New: {new_users}  |  Sessions: {sessions}"


async def build_weekly_summary(client: QueryClient, properties: List[Property]) -> str:
    """One block per property, fetched concurrently, in registry order"""
    blocks = await asyncio.gather(
        *(asyncio.to_thread(summarize_property, client, prop) for prop in properties)
    )
    return f"{SUMMARY_TITLE}\n{'─' * 35}\n\n" + "\n\n".join(blocks)
