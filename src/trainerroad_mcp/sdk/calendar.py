"""
TrainerRoad calendar SDK functions.

The timeline lists ids; detail endpoints take those ids in batches.
"""

from typing import Any, Dict, Iterable, List

from trainerroad_mcp.sdk.client import TrainerRoadClient


def get_timeline(client: TrainerRoadClient, member_id: int, username: str) -> Dict[str, Any]:
    """
    Get the member's full calendar timeline.

    GET /app/api/react-calendar/{memberId}/timeline

    Returns:
        {activities[], plannedActivities[], events[], annotations[], fitnessThresholds[], ...}
    """
    return client.request_json(
        "GET",
        f"/app/api/react-calendar/{member_id}/timeline",
        referer_username=username,
        use_cache=True,
    )


def get_activities_by_ids(
    client: TrainerRoadClient, member_id: int, username: str, activity_ids: Iterable[Any]
) -> List[Dict[str, Any]]:
    """
    Get completed activity details.

    GET /app/api/react-calendar/{memberId}/activities  (ids header, batched)
    """
    return client.fetch_batched(
        f"/app/api/react-calendar/{member_id}/activities",
        activity_ids,
        referer_username=username,
    )


def get_planned_activities_by_ids(
    client: TrainerRoadClient, member_id: int, username: str, planned_ids: Iterable[Any]
) -> List[Dict[str, Any]]:
    """
    Get planned workout details.

    GET /app/api/react-calendar/{memberId}/planned-activities  (ids header, batched)
    """
    return client.fetch_batched(
        f"/app/api/react-calendar/{member_id}/planned-activities",
        planned_ids,
        referer_username=username,
    )


def get_personal_records_by_activity_ids(
    client: TrainerRoadClient, member_id: int, username: str, activity_ids: Iterable[Any]
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Get personal records set during each activity.

    GET /app/api/react-calendar/{memberId}/personal-records  (ids header, batched)

    Returns:
        {activityId: [record, ...]} merged across batches
    """
    return client.fetch_batched(
        f"/app/api/react-calendar/{member_id}/personal-records",
        activity_ids,
        referer_username=username,
        merge_by_key=True,
    )
