#!/usr/bin/env python3
"""
Weekly Analytics Summary

Prints users / new users / sessions for the last 7 days for every
configured property.

Usage:
    python scripts/weekly_summary.py [--group apps]
"""
import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ga_dashboard.config import get_settings
from ga_dashboard.connectors.ga4_connector import build_query_client
from ga_dashboard.models.property import load_registry
from ga_dashboard.services.summary_service import build_weekly_summary


def main() -> int:
    parser = argparse.ArgumentParser(description="Print a 7-day GA4 summary for each property")
    parser.add_argument("--group", help="Only properties in this group (e.g. websites, apps)")
    args = parser.parse_args()

    settings = get_settings()
    client, error = build_query_client(settings)
    if client is None:
        print(f"Analytics client not initialized: {error}", file=sys.stderr)
        return 1

    registry = load_registry(settings.properties_file)
    properties = [
        prop
        for group in registry.groups
        if not args.group or group.key == args.group
        for prop in group.items
    ]

    print("Fetching analytics data...")
    print(asyncio.run(build_weekly_summary(client, properties)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
