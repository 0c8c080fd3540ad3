"""MCP Server for Cognitive Memory.

This module provides a FastMCP-based MCP server that gives an assistant a
persistent, file-backed memory: a running session log, long-term entities,
a rotating dream journal, a context anchors ledger and base instructions.
"""

import argparse
import json
import sys

from dotenv import load_dotenv
from mcp.server import FastMCP
from starlette.requests import Request
from starlette.responses import Response

from .config import Settings
from .config import get_settings
from .helpers import Clock
from .logger_config import ErrorCategory
from .logger_config import configure_logging
from .logger_config import safe_operation
from .memory import CognitiveMemory
from .metrics_config import ensure_metrics_initialized
from .metrics_config import get_metrics_export
from .metrics_config import get_metrics_summary
from .tools import register_entity_tools
from .tools import register_learning_tools
from .tools import register_session_tools

SERVER_NAME = "cognitive-memory"


def register_http_routes(mcp_server: FastMCP) -> None:
    """Health and metrics endpoints, served alongside the SSE transport."""

    @mcp_server.custom_route("/health", methods=["GET"], name="health")
    async def health_check(request: Request) -> Response:
        """Health check endpoint to verify server readiness."""
        return Response(status_code=200)

    @mcp_server.custom_route("/metrics", methods=["GET"], name="metrics")
    async def metrics_endpoint(request: Request) -> Response:
        """Prometheus metrics endpoint for tool usage."""
        success, export, error = safe_operation("metrics_export", get_metrics_export)
        if not success:
            return Response(content=f"# Error generating metrics: {error}\n", status_code=500, media_type="text/plain")
        metrics_data, content_type = export
        return Response(content=metrics_data, status_code=200, media_type=content_type)

    @mcp_server.custom_route("/metrics/summary", methods=["GET"], name="metrics_summary")
    async def metrics_summary_endpoint(request: Request) -> Response:
        """JSON summary of the metrics configuration and status."""
        return Response(
            content=json.dumps(get_metrics_summary(), indent=2),
            status_code=200,
            media_type="application/json",
        )


def create_server(settings: Settings | None = None, clock: Clock | None = None) -> FastMCP:
    """Build a server whose tools all share one ``CognitiveMemory``."""
    settings = settings or get_settings()
    memory = CognitiveMemory.from_settings(settings, clock=clock)

    mcp_server = FastMCP(name=SERVER_NAME, host=settings.sse_host, port=settings.sse_port)
    register_session_tools(mcp_server, memory)
    register_entity_tools(mcp_server, memory)
    register_learning_tools(mcp_server, memory)
    register_http_routes(mcp_server)
    return mcp_server


def main():
    """Run the main entry point for the server with argument parsing."""
    load_dotenv()
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Cognitive Memory MCP Server")
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

    configure_logging(settings.log_dir, settings.log_level, settings.structured_logging)
    # Metrics are optional; a failed setup only disables them
    _, metrics_enabled, _ = safe_operation(
        "metrics_initialization",
        ensure_metrics_initialized,
        settings.enable_metrics,
        error_category=ErrorCategory.WARNING,
    )

    mcp_server = create_server(settings)

    # stdout carries the stdio protocol, so status goes to stderr
    print(f"Cognitive memory server starting. Root: {settings.root_path}", file=sys.stderr)
    print(f"Metrics: {'enabled' if metrics_enabled else 'disabled'}", file=sys.stderr)

    if args.transport == "stdio":
        print("MCP server running with stdio transport. Waiting for client connection...", file=sys.stderr)
        mcp_server.run(transport="stdio")
    else:
        print(f"MCP server running with HTTP SSE transport on {args.host}:{args.port}", file=sys.stderr)
        print(f"SSE endpoint: http://{args.host}:{args.port}/sse", file=sys.stderr)
        print(f"Health endpoint: http://{args.host}:{args.port}/health", file=sys.stderr)
        if metrics_enabled:
            print(f"Metrics endpoint: http://{args.host}:{args.port}/metrics", file=sys.stderr)
        mcp_server.settings.host = args.host
        mcp_server.settings.port = args.port
        mcp_server.run(transport="sse")


if __name__ == "__main__":
    main()
