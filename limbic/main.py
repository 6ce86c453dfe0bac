"""Main entry point for Limbic MCP server."""

from __future__ import annotations

import argparse
import logging
import sys

from .config import get_config
from .server import mcp


def setup_logging() -> None:
    """Send log records to stderr; stdout belongs to the stdio transport."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Limbic MCP Server - mood scoring and memory clustering"
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default=None,
        help="MCP transport (default: LIMBIC_TRANSPORT)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Bind address for HTTP transports (default: LIMBIC_HOST)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Bind port for HTTP transports (default: LIMBIC_PORT)",
    )
    return parser.parse_args(argv)


def run_server_mode(transport: str, host: str, port: int, logger: logging.Logger) -> None:
    """Run the MCP server."""
    logger.info(f"Transport: {transport}")

    if transport == "stdio":
        mcp.run()
    elif transport in ("sse", "streamable-http"):
        mcp.settings.host = host
        mcp.settings.port = port
        logger.info(f"MCP URL: http://{host}:{port}")
        mcp.run(transport=transport)
    else:
        logger.error(f"Unknown transport: {transport}")
        sys.exit(1)


def main() -> None:
    """Run the Limbic MCP server."""
    setup_logging()
    logger = logging.getLogger(__name__)

    args = parse_args()
    config = get_config()

    # flags win over LIMBIC_* settings
    host = args.host or config.server_host
    port = args.port or config.server_port
    transport = args.transport or config.server_transport

    logger.info("Starting Limbic MCP")
    logger.info(f"Data directory: {config.data_dir}")
    logger.info(f"Algorithm version: {config.algorithm_version}")

    run_server_mode(transport, host, port, logger)


if __name__ == "__main__":
    main()
