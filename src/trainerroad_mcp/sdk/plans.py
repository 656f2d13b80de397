"""
TrainerRoad plan-builder SDK functions.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from trainerroad_mcp.sdk.client import TrainerRoadClient


def get_all_user_plans(client: TrainerRoadClient, username: str) -> List[Dict[str, Any]]:
    """
    List every plan the member has built.

    GET /app/api/plan-builder/{username}/all-user-plans

    Returns:
        [{id, name, discipline, volume, phase, start, end, isAdHoc, plannedActivityGroupId}]
    """
    return client.request_json(
        "GET",
        f"/app/api/plan-builder/{quote(username, safe='')}/all-user-plans",
        referer_username=username,
    )


def get_current_custom_plan(client: TrainerRoadClient, username: str) -> Optional[Dict[str, Any]]:
    """
    Get the active custom plan with its phases.

    GET /app/api/plan-builder/current-custom-plan/{username}
    """
    return client.request_json(
        "GET",
        f"/app/api/plan-builder/current-custom-plan/{quote(username, safe='')}",
        referer_username=username,
    )


def get_plan_phases(client: TrainerRoadClient, username: str) -> List[Dict[str, Any]]:
    """
    List plan phases (base, build, specialty, ...).

    GET /app/api/plan-builder/{username}/plan-phases
    """
    return client.request_json(
        "GET",
        f"/app/api/plan-builder/{quote(username, safe='')}/plan-phases",
        referer_username=username,
    )
