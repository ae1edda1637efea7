#!/usr/bin/env python
"""
Demo script showing the traffic MCP server capabilities.
Run this (with GOOGLE_MAPS_API_KEY set) to see example outputs from all tools.
"""

import asyncio
import json
import sys

from traffic_mcp.config import load_settings
from traffic_mcp.models import ToolFailure
from traffic_mcp.server import build_dispatcher


def print_section(title):
    print("\n" + "="*60)
    print(f"  {title}")
    print("="*60)


async def call(dispatcher, name, **arguments):
    outcome = await dispatcher.dispatch(name, arguments)
    if isinstance(outcome, ToolFailure):
        print(f"  ❌ {outcome.kind.value}: {outcome.message}")
        return None
    try:
        return json.loads(outcome.text)
    except ValueError:
        print(f"  {outcome.text}")
        return None


async def run_demo(dispatcher):
    # 1. Live traffic
    print_section("1. Live Traffic: New York -> Boston")
    result = await call(dispatcher, "get_live_traffic",
                        origin="40.7128,-74.0060", destination="Boston, MA")
    if result:
        print(f"  {result['origin']} -> {result['destination']}")
        print(f"  Distance: {result['distance']}")
        print(f"  Duration: {result['duration']} (in traffic: {result['duration_in_traffic']})")
        print(f"  {result['traffic_summary']}")
        for step in result["steps"][:3]:
            print(f"    • {step['instruction']} ({step['distance']})")

    # 2. Forecast traffic
    print_section("2. Forecast Traffic: San Francisco -> San Jose, departing now")
    result = await call(dispatcher, "get_forecast_traffic",
                        origin="San Francisco, CA", destination="San Jose, CA",
                        departure_time="now")
    if result:
        print(f"  Forecast duration in traffic: {result['forecast_duration_in_traffic']}")
        print(f"  Model: {result['traffic_model']}")

    # 3. Comparison
    print_section("3. Traffic Comparison: now vs 2 hours ahead")
    result = await call(dispatcher, "get_traffic_comparison",
                        origin="Seattle, WA", destination="Tacoma, WA", forecast_hours=2)
    if result:
        print(f"  Now: {result['current_traffic']['duration_in_traffic']}")
        print(f"  In {result['forecast_traffic']['hours_ahead']}h: "
              f"{result['forecast_traffic']['duration_in_traffic']}")
        print(f"  Difference: {result['comparison']['time_difference_seconds']:+d}s")
        print(f"  📋 {result['comparison']['recommendation']}")

    # 4. Error handling
    print_section("4. Unknown tool")
    await call(dispatcher, "unknown_tool")

    print("\n" + "="*60)
    print("  Demo Complete! These tools are now available via MCP.")
    print("="*60 + "\n")


def main():
    print("\n🚗 Traffic MCP Server - Demo\n")
    check = load_settings()
    if not check.ok:
        print(f"Error: {check.error}", file=sys.stderr)
        return 1
    asyncio.run(run_demo(build_dispatcher(check.settings)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
