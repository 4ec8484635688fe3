"""MCP Server for Gravity Forms.

This module provides a FastMCP-based MCP server that exposes the Gravity
Forms REST API v2 as tools: forms, single entries and confirmed bulk entry
operations.
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv
from mcp.server import FastMCP
from starlette.requests import Request
from starlette.responses import Response

from .config import get_settings
from .logger_config import ErrorCategory
from .logger_config import safe_operation
from .metrics_config import METRICS_ENABLED
from .metrics_config import ensure_metrics_initialized
from .metrics_config import get_metrics_export
from .metrics_config import get_metrics_summary
from .metrics_config import is_metrics_enabled
from .metrics_config import shutdown_metrics
from .tools import register_bulk_tools
from .tools import register_entry_tools
from .tools import register_form_tools

# Load environment variables from .env file
load_dotenv()

mcp_server = FastMCP(name="gravity-forms-mcp")

register_form_tools(mcp_server)
register_entry_tools(mcp_server)
register_bulk_tools(mcp_server)

__all__ = ["mcp_server", "main"]


@mcp_server.custom_route("/health", methods=["GET"], name="health")
async def health_check(request: Request) -> Response:
    """Health check endpoint to verify server readiness."""
    return Response(status_code=200)


@mcp_server.custom_route("/metrics", methods=["GET"], name="metrics")
async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics endpoint for tool calls and bulk entry outcomes."""
    if not is_metrics_enabled():
        return Response(content="# Metrics not available\n", status_code=503, media_type="text/plain")

    success, result, error = safe_operation(
        "metrics_export", get_metrics_export, error_category=ErrorCategory.WARNING
    )
    if not success:
        return Response(content=f"# Error generating metrics: {error}\n", status_code=500, media_type="text/plain")

    metrics_data, content_type = result
    return Response(content=metrics_data, status_code=200, media_type=content_type)


@mcp_server.custom_route("/metrics/summary", methods=["GET"], name="metrics_summary")
async def metrics_summary_endpoint(request: Request) -> Response:
    """JSON summary of the metrics configuration and status."""
    return Response(
        content=json.dumps(get_metrics_summary(), indent=2),
        status_code=200,
        media_type="application/json",
    )


def _log(message: str) -> None:
    # stdout carries the MCP protocol in stdio mode
    print(message, file=sys.stderr)


# --- Main Server Execution ---
def main():
    """Run the main entry point for the server with argument parsing."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Gravity Forms MCP Server")
    parser.add_argument(
        "transport",
        choices=["sse", "stdio"],
        default="stdio",
        nargs="?",
        help="Transport: 'sse' for HTTP SSE or 'stdio' for standard I/O (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default=settings.sse_host,
        help=f"Host to bind to for SSE transport (default: {settings.sse_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.sse_port,
        help=f"Port to bind to for SSE transport (default: {settings.sse_port})",
    )
    args = parser.parse_args()

    # Module loggers (bulk runs, API client) go to stderr at the configured level
    logging.basicConfig(
        level=settings.log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    _log(f"Gravity Forms MCP server starting for {settings.gravity_forms_base_url or '<unconfigured site>'}")
    if not settings.is_configured:
        _log("Warning: GRAVITY_FORMS_BASE_URL and consumer credentials are not fully configured")

    if settings.enable_metrics:
        ensure_metrics_initialized()
    _log(f"Metrics: {'enabled' if METRICS_ENABLED and settings.enable_metrics else 'disabled'}")

    try:
        if args.transport == "stdio":
            _log("MCP server running with stdio transport. Waiting for client connection...")
            mcp_server.run(transport="stdio")
        else:
            _log(f"MCP server running with HTTP SSE transport on {args.host}:{args.port}")
            mcp_server.settings.host = args.host
            mcp_server.settings.port = args.port
            if is_metrics_enabled():
                _log(f"Metrics endpoint: http://{args.host}:{args.port}/metrics")
            mcp_server.run(transport="sse")
    finally:
        shutdown_metrics()


if __name__ == "__main__":
    main()
