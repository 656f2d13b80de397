"""
TrainerRoad career SDK functions.

Public TSS aggregate, career summary, progression levels, weight history.
"""

from typing import Any, Dict, List
from urllib.parse import quote

from trainerroad_mcp.sdk.client import TrainerRoadClient


def get_public_tss(client: TrainerRoadClient, username: str) -> Dict[str, Any]:
    """
    Get the public per-day TSS aggregate for any username.

    GET /app/api/tss/{username}  (no authentication needed)

    Returns:
        {tssByDay: [[{date, tss, tssTrainerRoad, tssOther, plannedTss..., hasRides}]],
         ftpRecordsDate: [{date, value}], ...}
    """
    return client.request_json("GET", f"/app/api/tss/{quote(username, safe='')}")


def get_career_summary(client: TrainerRoadClient, username: str) -> Dict[str, Any]:
    """
    Get the career page summary.

    GET /app/api/career/{username}/new
    """
    return client.request_json("GET", f"/app/api/career/{quote(username, safe='')}/new")


def get_career_levels(client: TrainerRoadClient, member_id: int, username: str) -> Dict[str, Any]:
    """
    Get progression levels per zone.

    GET /app/api/career/{memberId}/levels

    Returns:
        {levels: {progressionId: {recent, predicted, activityId, changeEvent}}, timestamp}
    """
    return client.request_json(
        "GET", f"/app/api/career/{member_id}/levels", referer_username=username,
    )


def get_weight_history(client: TrainerRoadClient, member_id: int, username: str) -> List[Dict[str, Any]]:
    """
    Get all recorded body-weight entries.

    GET /app/api/weight-history/{memberId}/all

    Returns:
        [{id, value, units, date}]
    """
    return client.request_json(
        "GET", f"/app/api/weight-history/{member_id}/all", referer_username=username,
    )


def get_seasons(client: TrainerRoadClient, member_id: int, username: str) -> Any:
    """
    Get training seasons.

    GET /app/api/seasons/{memberId}
    """
    return client.request_json(
        "GET", f"/app/api/seasons/{member_id}", referer_username=username,
    )
