"""
Modular MCP Server for TrainerRoad Data Export

Provides tools to authenticate with TrainerRoad and read calendar, workout,
fitness and plan data via the Model Context Protocol (MCP).

Logged in, tools read the member's private calendar. Without a login, or
when a username target is given, they fall back to the public TSS profile.

This server uses a non-public API from TrainerRoad.
The API could change without notice.

Supports two transport modes:
- stdio: For single-user local usage (default)
- http: For multi-user HTTP server deployment
"""

import logging

from fastmcp import FastMCP

from trainerroad_mcp import auth_tool
from trainerroad_mcp import fitness
from trainerroad_mcp import plans
from trainerroad_mcp import timeline
from trainerroad_mcp import workouts
from trainerroad_mcp.client_factory import get_settings

logger = logging.getLogger(__name__)


def create_app() -> FastMCP:
    """Create and configure the MCP app with all tools registered."""
    app = FastMCP("TrainerRoad Data Export v1.0")

    # Register auth tools (login, logout, identity, capabilities)
    app = auth_tool.register_tools(app)

    # Register calendar tools
    app = timeline.register_tools(app)
    app = workouts.register_tools(app)

    # Register fitness and plan tools
    app = fitness.register_tools(app)
    app = plans.register_tools(app)

    return app


def main():
    """Initialize the MCP server and run with configured transport.

    Environment variables:
    - MCP_TRANSPORT: 'stdio' (default) or 'http'
    - MCP_HOST: Host to bind to (default: '0.0.0.0')
    - MCP_PORT: Port for HTTP transport (default: 8081)
    - TR_USERNAME / TR_PASSWORD: Credentials for automatic login
    - TR_SESSION_FILE: Cookie session path (default: .trainerroad/session.json)
    - TR_TIMEZONE: Default IANA zone for dates
    """
    settings = get_settings()
    app = create_app()

    if settings.transport == "http":
        logger.info(f"Starting TrainerRoad MCP server on {settings.host}:{settings.port}")
        app.run(transport="http", host=settings.host, port=settings.port)
    else:
        app.run()


if __name__ == "__main__":
    main()
