#!/usr/bin/env python3
"""
GA4 Report Tools

Runs one named report and prints it as pipe-delimited text.

Usage:
    python scripts/ga_report.py list_properties
    python scripts/ga_report.py get_top_pages --property freeshow --start 30daysAgo --end today
    python scripts/ga_report.py run_report --start 7daysAgo --end today \\
        --metrics sessions totalUsers --dimensions deviceCategory --limit 5
    python scripts/ga_report.py get_realtime_users --property b1-admin

Tools:
    list_properties, run_report, get_top_pages, get_traffic_sources,
    get_user_metrics, get_geo_breakdown, get_device_breakdown, get_realtime_users
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ga_dashboard.config import get_settings
from ga_dashboard.connectors.ga4_connector import build_query_client
from ga_dashboard.models.property import load_registry
from ga_dashboard.services.report_tools import ReportToolkit


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a named GA4 report")
    parser.add_argument("tool", help="Report tool name (use 'tools' to list them)")
    parser.add_argument("--property", help="Property key, name or raw id (default property if omitted)")
    parser.add_argument("--start", dest="startDate", help="Start date (YYYY-MM-DD or e.g. 30daysAgo)")
    parser.add_argument("--end", dest="endDate", help="End date (YYYY-MM-DD or today)")
    parser.add_argument("--metrics", nargs="+", help="Metrics for run_report")
    parser.add_argument("--dimensions", nargs="+", help="Dimensions for run_report")
    parser.add_argument("--limit", type=int, help="Maximum rows (default 10)")
    args = parser.parse_args()

    settings = get_settings()
    client, error = build_query_client(settings)
    if client is None:
        print(f"Analytics client not initialized: {error}", file=sys.stderr)
        return 1

    toolkit = ReportToolkit(client, load_registry(settings.properties_file))

    if args.tool == "tools":
        for tool in toolkit.list_tools():
            print(f"{tool['name']:<22} {tool['description']}")
        return 0

    tool_args = {k: v for k, v in vars(args).items() if k != "tool" and v is not None}
    result = toolkit.call(args.tool, tool_args)
    print(result.text)
    return 1 if result.is_error else 0


if __name__ == "__main__":
    sys.exit(main())
