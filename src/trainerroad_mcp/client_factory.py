"""
Client factory for the TrainerRoad MCP server.

Settings are read from the environment once per process. Each tool call
builds a fresh TrainerRoadClient from them; the cookie session lives in the
session file, so clients never need to be shared.

Tools return JSON strings. Domain failures become an error payload
{error, error_code, tip}; anything unexpected propagates to FastMCP.
"""

import json
import logging
from functools import lru_cache
from typing import Any, Callable, Dict

from trainerroad_mcp.api.context import resolve_query_context
from trainerroad_mcp.api.filters import records_only
from trainerroad_mcp.api.model import FilterConfig, QueryContext, QueryIntent
from trainerroad_mcp.config import Settings
from trainerroad_mcp.errors import TrainerRoadError
from trainerroad_mcp.sdk.client import TrainerRoadClient
from trainerroad_mcp.utils import resolve_time_zone

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, built from TR_* / MCP_* on first use."""
    return Settings.from_env()


def get_client(settings: Settings = None, username: str = None, password: str = None) -> TrainerRoadClient:
    """
    Build a client from settings.

    Args:
        settings: Settings to use (defaults to get_settings())
        username: Overrides TR_USERNAME
        password: Overrides TR_PASSWORD

    Returns:
        TrainerRoadClient with the persisted cookie session loaded
    """
    settings = settings or get_settings()
    return TrainerRoadClient(
        username=username or settings.username,
        password=password or settings.password,
        session_file=settings.session_file,
    )


def resolve_context(
    client: TrainerRoadClient,
    target: str = None,
    public: bool = False,
    timezone: str = None,
    settings: Settings = None,
    private_only: str = None,
) -> QueryContext:
    """
    Resolve private/public mode for one tool call.

    Args:
        private_only: Operation name for tools that have no public rendition;
            such calls fail before any public data is fetched

    Raises:
        InvalidTimeZone: If neither timezone nor TR_TIMEZONE is a valid IANA zone
        NoTargetError, PublicProfileUnavailableError, PrivateModeRequiredError:
            See resolve_query_context
    """
    settings = settings or get_settings()
    intent = QueryIntent(
        target=target,
        force_public=bool(public),
        time_zone=resolve_time_zone(timezone, settings.timezone),
        private_only=private_only,
    )
    return resolve_query_context(client, intent)


def build_filters(
    from_date: str = None,
    to_date: str = None,
    record_type: str = None,
    contains: str = None,
    min_tss: float = None,
    max_tss: float = None,
    sort: str = None,
    result_limit: int = None,
    fields: str = None,
) -> FilterConfig:
    """FilterConfig from tool arguments. Raises ValueError on bad dates or sort."""
    return FilterConfig.from_dict({
        "from": from_date,
        "to": to_date,
        "type": record_type,
        "contains": contains,
        "min_tss": min_tss,
        "max_tss": max_tss,
        "sort": sort,
        "result_limit": result_limit,
        "fields": fields,
    })


def error_payload(error: Exception) -> Dict[str, Any]:
    """Structured error for the agent, with a tip when one is known."""
    payload = {
        "error": str(error),
        "error_code": getattr(error, "error_code", None) or "INVALID_INPUT",
    }
    tip = getattr(error, "tip", None)
    if tip:
        payload["tip"] = tip
    return payload


def respond(produce: Callable[[], Dict[str, Any]], records_only_output: bool = False) -> str:
    """
    Run a tool body and serialize its result.

    Args:
        produce: Zero-argument callable returning the payload dict
        records_only_output: Reduce the payload to the records envelope

    Returns:
        JSON string (payload or error payload)
    """
    try:
        result = produce()
    except (TrainerRoadError, ValueError) as e:
        logger.warning(f"{type(e).__name__}: {e}")
        return json.dumps(error_payload(e), indent=2)

    if records_only_output:
        result = records_only(result)
    return json.dumps(result, indent=2)
