"""
Traffic MCP Server entry point.

Live, forecast and comparison traffic lookups backed by the Google Directions
API, served over stdio (default) or HTTP:

    python -m traffic_mcp.server            # stdio
    python -m traffic_mcp.server http 3000  # HTTP on port 3000
"""

import argparse
import asyncio
import logging
import sys

import uvicorn

from traffic_mcp.config import API_KEY_HELP_URL, Settings, load_settings
from traffic_mcp.dispatcher import ToolDispatcher
from traffic_mcp.gateway import DirectionsGateway
from traffic_mcp.http_transport import create_http_app
from traffic_mcp.logging_config import configure_logging
from traffic_mcp.stdio_transport import run_stdio

logger = logging.getLogger(__name__)


def build_dispatcher(settings: Settings) -> ToolDispatcher:
    gateway = DirectionsGateway(
        api_key=settings.google_maps_api_key,
        base_url=settings.google_maps_directions_url,
    )
    return ToolDispatcher(gateway)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="traffic-mcp-server", description="Traffic MCP Server")
    parser.add_argument("mode", nargs="?", choices=["stdio", "http"], default="stdio")
    parser.add_argument("port", nargs="?", type=int, default=None)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    check = load_settings()
    if not check.ok:
        print(f"Error: {check.error}", file=sys.stderr)
        print(f"Get your API key from: {API_KEY_HELP_URL}", file=sys.stderr)
        return 1

    settings = check.settings
    configure_logging(settings.log_level)
    dispatcher = build_dispatcher(settings)

    if args.mode == "http":
        port = args.port or settings.http_port
        logger.info("Starting Traffic MCP Server in HTTP mode on port %s", port)
        logger.info("MCP endpoint: http://localhost:%s/mcp", port)
        logger.info("Health check: http://localhost:%s/health", port)
        uvicorn.run(create_http_app(dispatcher), host=settings.http_host, port=port)
    else:
        logger.info("Starting Traffic MCP Server in stdio mode")
        asyncio.run(run_stdio(dispatcher))
    return 0


if __name__ == "__main__":
    sys.exit(main())
