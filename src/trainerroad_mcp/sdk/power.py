"""
TrainerRoad power SDK functions.

Percentile ranking and personal power records.
"""

from typing import Any, Dict, List

from trainerroad_mcp.sdk.client import TrainerRoadClient


def get_power_ranking(client: TrainerRoadClient, member_id: int, username: str) -> List[Dict[str, Any]]:
    """
    Best-power percentile ranking by duration.

    GET /app/api/onboarding/power-ranking?memberId=...

    Returns:
        [{duration, wattsRanking: {value, percentile}, wattsPerKgRanking: {value, percentile}}]
    """
    return client.request_json(
        "GET",
        "/app/api/onboarding/power-ranking",
        params={"memberId": str(member_id)},
        referer_username=username,
    )


def get_personal_records_for_date_range(
    client: TrainerRoadClient,
    member_id: int,
    username: str,
    start_date: str,
    end_date: str,
    row_type: int = 101,
    indoor_only: bool = False,
    slot: int = 1,
) -> Dict[str, Any]:
    """
    Personal power records within a date range.

    POST /app/api/personal-records/for-date-range/{memberId}?rowType=&indoorOnly=

    Args:
        start_date: YYYY-MM-DD
        end_date: YYYY-MM-DD
        row_type: 100 or 101 (upstream record table)
        indoor_only: Only indoor rides
        slot: Result slot echoed back by upstream

    Returns:
        {results: [{personalRecords: [{Seconds, Watts, WorkoutDate, ...}]}]}
    """
    if not start_date or not end_date:
        raise ValueError(
            "start_date and end_date are required (YYYY-MM-DD) for personal record date-range queries."
        )

    return client.request_json(
        "POST",
        f"/app/api/personal-records/for-date-range/{member_id}",
        params={"rowType": str(row_type), "indoorOnly": "true" if indoor_only else "false"},
        json_data=[{"Slot": int(slot), "StartDate": start_date, "EndDate": end_date}],
        referer_username=username,
    )
