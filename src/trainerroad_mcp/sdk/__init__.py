"""
TrainerRoad Low-Level SDK.

Thin wrapper over the TrainerRoad web API.
Each function maps 1:1 to a TrainerRoad endpoint and returns raw JSON.
"""

from trainerroad_mcp.sdk.client import CookieJar, TrainerRoadClient
from trainerroad_mcp.sdk.session import SessionStore
from trainerroad_mcp.sdk.types import (
    AUTH_COOKIE,
    BATCH_SIZE,
    PlanView,
    QueryMode,
)

__all__ = [
    "CookieJar",
    "TrainerRoadClient",
    "SessionStore",
    "AUTH_COOKIE",
    "BATCH_SIZE",
    "PlanView",
    "QueryMode",
]
