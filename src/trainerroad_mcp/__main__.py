"""
Entry point for running trainerroad_mcp as a module.

Usage:
    python -m trainerroad_mcp                    # Run with stdio transport
    python -m trainerroad_mcp --http             # Run with HTTP transport
    python -m trainerroad_mcp --http --port 9000 # Run HTTP on custom port
"""

import argparse
import logging
import os

from trainerroad_mcp import create_app


def main():
    parser = argparse.ArgumentParser(
        description="TrainerRoad MCP Server - private and public TrainerRoad data export"
    )
    parser.add_argument(
        "--http",
        action="store_true",
        help="Use http transport instead of stdio"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8081,
        help="Port for HTTP transport (default: 8081)"
    )
    parser.add_argument(
        "--session-file",
        help="Cookie session path (default: TR_SESSION_FILE or .trainerroad/session.json)"
    )
    parser.add_argument(
        "--timezone",
        help="Default IANA zone for dates (default: TR_TIMEZONE or host zone)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log upstream requests at DEBUG level"
    )

    args = parser.parse_args()

    # Log to stderr; stdout carries the stdio transport
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Settings are read from the environment on first use
    if args.session_file:
        os.environ["TR_SESSION_FILE"] = args.session_file
    if args.timezone:
        os.environ["TR_TIMEZONE"] = args.timezone

    if args.http:
        os.environ["MCP_TRANSPORT"] = "http"
        os.environ["MCP_HOST"] = args.host
        os.environ["MCP_PORT"] = str(args.port)
    else:
        os.environ["MCP_TRANSPORT"] = "stdio"

    app = create_app()

    if args.http:
        logging.getLogger("trainerroad_mcp").info(
            f"Starting TrainerRoad MCP server on http://{args.host}:{args.port}/mcp"
        )
        app.run(transport="http", host=args.host, port=args.port)
    else:
        app.run()


if __name__ == "__main__":
    main()
