"""Stirling PDF MCP command line interface.

Transport modes:
- stdio (default): Standard input/output for local MCP clients
- sse: Server-Sent Events over HTTP
- streamable-http: Streamable HTTP for newer MCP clients
"""

import argparse
import dataclasses
import sys

from . import __version__
from . import config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-stirling-pdf",
        description="Stirling PDF MCP Server - PDF operations as MCP tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run in stdio mode (default, for desktop MCP clients)
  mcp-stirling-pdf

  # Run as HTTP server with Streamable HTTP
  mcp-stirling-pdf --transport streamable-http --port 8002

Environment Variables:
  STIRLING_PDF_URL        Base URL of the Stirling PDF API (default: http://localhost:8080)
  STIRLING_PDF_API_KEY    API key sent as X-API-KEY (optional)
  STIRLING_PDF_TIMEOUT    Request timeout in seconds (default: 120)
  STIRLING_PDF_LOG_LEVEL  Logging level (DEBUG, INFO, WARNING, ERROR)
  STIRLING_PDF_DEBUG      Enable debug mode
        """
    )

    parser.add_argument(
        "--transport", "-t",
        type=str,
        default="stdio",
        choices=["stdio", "sse", "streamable-http"],
        help="Transport mode (default: stdio)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8002,
        help="Server port for HTTP modes (default: 8002)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Server host address for HTTP modes (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"mcp-stirling-pdf {__version__}"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit"
    )
    return parser


def main(argv=None):
    """Main entry point for the Stirling PDF MCP CLI."""
    args = build_parser().parse_args(argv)

    settings = config.Settings.from_env()
    if args.debug:
        settings = dataclasses.replace(settings, debug=True)
    logger = config.setup_logging(settings)

    if args.show_config:
        _show_config(settings)
        sys.exit(0)

    from . import server

    try:
        server.run_server(settings, mode=args.transport, port=args.port, host=args.host)
    except KeyboardInterrupt:
        logger.info("Server stopped")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=settings.debug)
        sys.exit(1)


def _show_config(settings: config.Settings):
    """Display current configuration settings."""
    cfg = config.get_config_summary(settings)

    print("Stirling PDF MCP Server Configuration")
    print("=" * 40)
    print(f"  API URL:       {cfg['api_url']}")
    print(f"  API Key Set:   {cfg['api_key_set']}")
    print(f"  Timeout:       {cfg['timeout_seconds']:g} seconds")
    print(f"  Log Level:     {cfg['log_level']}")
    print(f"  Debug Mode:    {cfg['debug_mode']}")
    print(f"  In Docker:     {cfg['running_in_docker']}")


if __name__ == "__main__":
    main()
