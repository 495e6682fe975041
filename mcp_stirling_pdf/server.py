"""Stirling PDF MCP server.

Wires the tool dispatcher to an MCP ``Server`` and runs it over one of
the supported transports:
- stdio (default)
- sse
- streamable-http

Recommended start:
  - `mcp-stirling-pdf`
  - `python -m mcp_stirling_pdf.server`
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from . import __version__
from . import config
from .client import StirlingClient
from .dispatcher import Dispatcher

SERVER_NAME = "stirling-pdf"

logger = logging.getLogger(config.LOGGER_NAME)


class ToolCallFailed(Exception):
    """Raised to make the MCP SDK flag a tool result with ``isError``."""


def build_server(dispatcher: Dispatcher) -> Server:
    """Create an MCP server whose tools are served by ``dispatcher``."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return dispatcher.list_tools()

    # Arguments are validated by the operations.
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict | None) -> list[types.TextContent]:
        result = await dispatcher.invoke(name, arguments)
        if result.isError:
            raise ToolCallFailed(result.content[0].text)
        return result.content

    return server


def create_dispatcher(settings: config.Settings) -> Dispatcher:
    return Dispatcher(StirlingClient(settings))


def _initialization_options(server: Server) -> InitializationOptions:
    return InitializationOptions(
        server_name=SERVER_NAME,
        server_version=__version__,
        capabilities=server.get_capabilities(
            notification_options=NotificationOptions(),
            experimental_capabilities={},
        ),
    )


def log_startup(settings: config.Settings) -> None:
    """Report configuration diagnostics before serving."""
    logger.info("Starting Stirling PDF MCP server...")
    logger.info(f"Stirling PDF URL: {settings.api_url}")
    if settings.api_key_set:
        logger.info("STIRLING_PDF_API_KEY is configured")
    else:
        logger.warning("STIRLING_PDF_API_KEY not set - API calls may fail if authentication is required")
    logger.info(f"Request timeout: {settings.timeout_seconds:g} seconds")


def create_sse_app(server: Server, debug: bool = False):
    """Create Starlette app for SSE transport."""
    try:
        from mcp.server.sse import SseServerTransport
        from starlette.applications import Starlette
        from starlette.routing import Mount, Route
    except ImportError as e:
        raise ImportError(
            "SSE mode requires additional dependencies. "
            "Install with: pip install starlette uvicorn"
        ) from e

    sse = SseServerTransport("/messages/")

    class SSEEndpoint:
        """ASGI endpoint for SSE connections."""

        async def __call__(self, scope, receive, send):
            async with sse.connect_sse(scope, receive, send) as (read_stream, write_stream):
                await server.run(read_stream, write_stream, _initialization_options(server))

    return Starlette(
        debug=debug,
        routes=[
            Route("/sse", endpoint=SSEEndpoint()),
            Mount("/messages/", app=sse.handle_post_message),
        ],
    )


def create_streamable_http_app(server: Server, debug: bool = False):
    """Create Starlette app for Streamable HTTP transport."""
    try:
        from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
        from starlette.applications import Starlette
        from starlette.routing import Route
    except ImportError as e:
        raise ImportError(
            "Streamable HTTP mode requires additional dependencies. "
            "Install with: pip install starlette uvicorn"
        ) from e

    session_manager = StreamableHTTPSessionManager(app=server, json_response=True)

    class MCPEndpoint:
        """ASGI endpoint forwarding /mcp to the session manager."""

        async def __call__(self, scope, receive, send):
            await session_manager.handle_request(scope, receive, send)

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            yield

    return Starlette(
        debug=debug,
        routes=[
            Route("/mcp", endpoint=MCPEndpoint()),
            Route("/mcp/", endpoint=MCPEndpoint()),
        ],
        lifespan=lifespan,
    )


async def main(settings: Optional[config.Settings] = None):
    """Run the server over stdin/stdout."""
    settings = settings or config.Settings.from_env()
    server = build_server(create_dispatcher(settings))
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        logger.info("Stirling PDF MCP server running on stdio")
        await server.run(read_stream, write_stream, _initialization_options(server))


def run_server(
    settings: config.Settings,
    mode: str = "stdio",
    port: int = 8002,
    host: str = "127.0.0.1",
):
    """Run the MCP server with the given transport mode."""
    log_startup(settings)

    if mode == "stdio":
        asyncio.run(main(settings))
        return

    try:
        import uvicorn
    except ImportError as e:
        raise ImportError(f"{mode} mode requires uvicorn. Install with: pip install uvicorn") from e

    server = build_server(create_dispatcher(settings))
    if mode == "sse":
        logger.info(f"Starting SSE server on {host}:{port}")
        app = create_sse_app(server, debug=settings.debug)
    elif mode == "streamable-http":
        logger.info(f"Starting Streamable HTTP server on {host}:{port}")
        logger.info(f"MCP endpoint: http://{host}:{port}/mcp")
        app = create_streamable_http_app(server, debug=settings.debug)
    else:
        raise ValueError(f"Unknown transport mode: {mode}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    from .cli import main as cli_main

    cli_main()
