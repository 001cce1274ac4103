"""Entry point for running the Smartlead MCP server as a module.

Supports multiple modes:
    - stdio (default, alias: start): Native MCP over stdin/stdout for desktop clients
    - sse: MCP over Server-Sent Events for n8n and remote clients
    - rest: REST API wrapper for direct HTTP tool calls
    - config: Print the effective configuration and exit

Usage:
    python -m smartlead_mcp
    python -m smartlead_mcp start --api-key KEY --license-key KEY
    python -m smartlead_mcp sse --port 3001
    python -m smartlead_mcp rest -p 8100
    python -m smartlead_mcp config

Environment variables:
    SMARTLEAD_API_KEY: Smartlead API key (required)
    SMARTLEAD_LICENSE_KEY: License key for tier resolution
    SSE_PORT: Port for SSE mode (default: 3001)
    REST_PORT: Port for REST mode (default: 8100)
"""

from __future__ import annotations

import argparse
import sys

import anyio
import structlog

from . import __version__
from .config import SmartleadConfig, load_config
from .errors import ConfigurationError
from .logging import configure_logging
from .server import build_context

logger = structlog.get_logger(__name__)


def _banner(title: str, lines: list[str]) -> None:
    # stdout carries the MCP stream in stdio mode
    print(f"\n{'=' * 50}", file=sys.stderr)
    print(title, file=sys.stderr)
    print("=" * 50, file=sys.stderr)
    for line in lines:
        print(line, file=sys.stderr)
    print(f"{'=' * 50}\n", file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    # Shared options are accepted before or after the command; SUPPRESS keeps a
    # subcommand from resetting a value given at the top level
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--api-key",
        default=argparse.SUPPRESS,
        help="Smartlead API key (overrides SMARTLEAD_API_KEY)",
    )
    common.add_argument(
        "--license-key",
        default=argparse.SUPPRESS,
        help="License key (overrides SMARTLEAD_LICENSE_KEY)",
    )
    common.add_argument(
        "--config",
        dest="config_path",
        default=argparse.SUPPRESS,
        help="Path to a JSON config file (default: ./mcp_config.json if present)",
    )

    parser = argparse.ArgumentParser(
        prog="smartlead-mcp",
        description="License-gated MCP server for the Smartlead API",
        parents=[common],
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve MCP over stdio (default)
  smartlead-mcp

  # SSE mode for n8n on a custom port
  smartlead-mcp sse --port 3100

  # Show the effective configuration
  smartlead-mcp config --api-key YOUR_KEY
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser(
        "stdio", aliases=["start"], parents=[common], help="Serve MCP over stdin/stdout"
    )
    for name, help_text in (
        ("sse", "Serve MCP over Server-Sent Events (n8n and remote clients)"),
        ("rest", "Serve the REST API wrapper"),
    ):
        mode_parser = subparsers.add_parser(name, parents=[common], help=help_text)
        mode_parser.add_argument("-p", "--port", type=int, help="Port to listen on")
    subparsers.add_parser(
        "config", parents=[common], help="Print the effective configuration and exit"
    )
    return parser


def apply_cli_overrides(config: SmartleadConfig, args: argparse.Namespace) -> None:
    """Apply command-line options on top of the loaded configuration."""
    api_key = getattr(args, "api_key", None)
    if api_key:
        config.api.api_key = api_key
    license_key = getattr(args, "license_key", None)
    if license_key:
        config.license.license_key = license_key
    port = getattr(args, "port", None)
    if port is not None:
        if args.command == "sse":
            config.server.sse_port = port
        else:
            config.server.rest_port = port


def print_config(config: SmartleadConfig) -> list[str]:
    """Print a configuration summary to stdout and return validation problems."""
    enabled = [name for name, on in config.features.enabled_categories.items() if on is True]
    print("\nSmartlead MCP Server Configuration:")
    print(f"API URL: {config.api.api_url}")
    print(f"API Key: {'Configured' if config.api.api_key else 'Not Configured'}")
    print(f"License Server: {config.license.server_url or 'Not Configured'}")
    print(f"License Status: {'Configured' if config.license.license_key else 'Not Configured'}")
    print(f"n8n API: {config.n8n.api_url or 'Not Configured'}")
    print(f"SSE Port: {config.server.sse_port}")
    print(f"REST Port: {config.server.rest_port}")
    print(f"Enabled Categories: {', '.join(enabled) or 'none'}")
    print(f"Tool Overrides: {len(config.features.enabled_tools)}")

    errors = config.validate()
    if errors:
        print("\nProblems:")
        for error in errors:
            print(f"  - {error}")
    return errors


def run_stdio_server(config: SmartleadConfig) -> None:
    """Run the native MCP server over stdio."""
    from .server import run_stdio

    _banner("Smartlead MCP Server (stdio)", ["Waiting for MCP client on stdin..."])
    context = build_context(config)
    anyio.run(run_stdio, context)


def run_sse_server(config: SmartleadConfig) -> None:
    """Run the MCP server over SSE."""
    import uvicorn

    from .server import create_sse_app

    host, port = config.server.host, config.server.sse_port
    _banner(
        "Smartlead MCP Server (SSE)",
        [
            f"SSE:      http://{host}:{port}/sse",
            f"Messages: http://{host}:{port}/messages/",
            f"Health:   http://{host}:{port}/health",
        ],
    )
    app = create_sse_app(build_context(config))
    uvicorn.run(app, host=host, port=port, log_level="info")


def run_rest_server(config: SmartleadConfig) -> None:
    """Run only the REST API server."""
    import uvicorn

    from .rest_api import create_rest_app

    host, port = config.server.host, config.server.rest_port
    _banner(
        "Smartlead MCP REST API Server",
        [
            f"REST API: http://{host}:{port}",
            f"Health:   http://{host}:{port}/health",
            f"Tools:    http://{host}:{port}/tools",
            f"License:  http://{host}:{port}/license",
        ],
    )
    app = create_rest_app(build_context(config))
    uvicorn.run(app, host=host, port=port, log_level="info")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    command = {"start": "stdio", None: "stdio"}.get(args.command, args.command)
    args.command = command

    try:
        config = load_config(getattr(args, "config_path", None))
    except ConfigurationError as e:
        logger.error("invalid_configuration", error=str(e))
        return 1
    apply_cli_overrides(config, args)

    if command == "config":
        return 1 if print_config(config) else 0

    try:
        config.require_valid()
    except ConfigurationError as e:
        logger.error("invalid_configuration", error=str(e))
        return 1

    if config.features.extended_logging:
        configure_logging(log_level="DEBUG")

    if command == "stdio":
        run_stdio_server(config)
    elif command == "sse":
        run_sse_server(config)
    else:
        run_rest_server(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
