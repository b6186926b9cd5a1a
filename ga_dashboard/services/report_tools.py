"""
Named GA4 report operations rendered as plain text.

Each tool maps to a fixed query shape; arguments supply the property and
date window. Output is pipe-delimited, one line per row, suitable for a
terminal or an assistant tool call.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ga_dashboard.connectors.base import OrderBy, QueryClient, ReportResult, first_metric
from ga_dashboard.models.property import DateRange, PropertyRegistry
from ga_dashboard.utils.logger import log

DEFAULT_LIMIT = 10
NO_DATA_MESSAGE = "No data found for the specified date range."


@dataclass(frozen=True)
class ToolQuery:
    """Fixed query shape behind a named report tool"""
    description: str
    metrics: Tuple[str, ...] = ()
    dimensions: Tuple[str, ...] = ()
    order_metric: Optional[str] = None
    limited: bool = True
    required: Tuple[str, ...] = ("startDate", "endDate")


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False


REPORT_TOOLS: Dict[str, ToolQuery] = {
    "run_report": ToolQuery(
        description="Run a custom Google Analytics report with specified metrics and dimensions",
        required=("startDate", "endDate", "metrics"),
    ),
    "get_top_pages": ToolQuery(
        description="Get the top pages by page views for a date range",
        metrics=("screenPageViews", "totalUsers", "averageSessionDuration"),
        dimensions=("pagePath",),
        order_metric="screenPageViews",
    ),
    "get_traffic_sources": ToolQuery(
        description="Get traffic breakdown by source/medium",
        metrics=("sessions", "totalUsers", "bounceRate"),
        dimensions=("sessionSourceMedium",),
        order_metric="sessions",
    ),
    "get_user_metrics": ToolQuery(
        description="Get user and session metrics for a date range",
        metrics=("totalUsers", "newUsers", "sessions", "screenPageViews", "averageSessionDuration", "bounceRate"),
        limited=False,
    ),
    "get_geo_breakdown": ToolQuery(
        description="Get user breakdown by country and city",
        metrics=("totalUsers", "sessions"),
        dimensions=("country", "city"),
        order_metric="totalUsers",
    ),
    "get_device_breakdown": ToolQuery(
        description="Get user breakdown by device type (desktop, mobile, tablet)",
        metrics=("totalUsers", "sessions", "screenPageViews"),
        dimensions=("deviceCategory",),
        order_metric="totalUsers",
        limited=False,
    ),
}

SPECIAL_TOOLS = {
    "list_properties": "List all configured Google Analytics properties",
    "get_realtime_users": "Get the number of users currently active on the site",
}


def format_metric_value(value: str) -> str:
    """
    Human formatting for a GA4 metric string.

    Fractions strictly between 0 and 1 are rates (bounceRate etc.) and
    render as percentages; whole numbers get thousands separators; other
    numbers round to 2 decimals. Non-numeric values pass through.
    """
    try:
        num = float(value)
    except (TypeError, ValueError):
        return value
    if math.isnan(num) or math.isinf(num):
        return value

    if 0 < num < 1 and "." in value:
        return f"{num * 100:.2f}%"
    if num.is_integer():
        return f"{int(num):,}"
    return f"{num:.2f}"


def format_report(result: ReportResult) -> str:
    if not result.rows:
        return NO_DATA_MESSAGE

    lines: List[str] = []
    headers = list(result.dimension_headers) + list(result.metric_headers)
    if headers:
        lines.append(" | ".join(headers))
        lines.append("-" * 60)

    for row in result.rows:
        cells = list(row.dimension_values) + [format_metric_value(v) for v in row.metric_values]
        lines.append(" | ".join(cells))

    output = "\n".join(lines) + "\n"
    if result.row_count:
        output += f"\nTotal rows: {result.row_count}"
    return output


@dataclass
class ReportToolkit:
    """Dispatches named report tools against one query client"""
    client: QueryClient
    registry: PropertyRegistry
    tools: Dict[str, ToolQuery] = field(default_factory=lambda: dict(REPORT_TOOLS))

    def list_tools(self) -> List[Dict[str, str]]:
        names = list(SPECIAL_TOOLS.items()) + [(name, q.description) for name, q in self.tools.items()]
        return [{"name": name, "description": description} for name, description in names]

    def call(self, name: str, args: Optional[Dict[str, Any]] = None) -> ToolResult:
        args = args or {}
        try:
            if name == "list_properties":
                return ToolResult(self._list_properties())
            if name == "get_realtime_users":
                return ToolResult(self._realtime_users(args))
            if name not in self.tools:
                return ToolResult(f"Unknown tool: {name}")
            return ToolResult(self._run_tool(self.tools[name], args))
        except Exception as e:
            log.warning(f"Report tool {name} failed: {str(e)}")
            return ToolResult(f"Error: {str(e)}", is_error=True)

    def _list_properties(self) -> str:
        lines = []
        for prop in self.registry:
            suffix = " (default)" if prop.key == self.registry.default_property else ""
            lines.append(f"{prop.key}: {prop.property_id}{suffix}")
        return "Available properties:\n" + "\n".join(lines)

    def _realtime_users(self, args: Dict[str, Any]) -> str:
        property_id = self.registry.resolve_property_id(args.get("property"))
        result = self.client.run_realtime_report(property_id, ["activeUsers"])
        return f"Currently active users: {first_metric(result) or '0'}"

    def _run_tool(self, query: ToolQuery, args: Dict[str, Any]) -> str:
        missing = [key for key in query.required if not args.get(key)]
        if missing:
            raise ValueError(f"Missing required argument(s): {', '.join(missing)}")

        property_id = self.registry.resolve_property_id(args.get("property"))
        metrics = query.metrics or tuple(args["metrics"])
        dimensions = query.dimensions or tuple(args.get("dimensions") or ())
        limit = int(args.get("limit") or DEFAULT_LIMIT) if query.limited else None

        result = self.client.run_report(
            property_id,
            [DateRange("Report", args["startDate"], args["endDate"])],
            list(metrics),
            dimensions=list(dimensions),
            order_by=OrderBy.metric_desc(query.order_metric) if query.order_metric else None,
            limit=limit,
        )
        return format_report(result)
