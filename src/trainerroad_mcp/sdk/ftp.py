"""
TrainerRoad AI FTP Detection SDK functions.
"""

from typing import Any, Dict

from trainerroad_mcp.sdk.client import TrainerRoadClient


def get_ai_ftp_eligibility(client: TrainerRoadClient, member_id: int, username: str) -> Dict[str, Any]:
    """
    Whether AI FTP Detection can run, plus its latest detection.

    GET /app/api/ai-ftp-detection/can-use-ai-ftp/{memberId}

    Returns:
        {can, reason, modelVersion, additionalData: {detection: {ftp,
         projectedProgressionLevels[], currentProgressionLevels[]},
         nextAiFtpAvailability, lastViewed}}
    """
    return client.request_json(
        "GET",
        f"/app/api/ai-ftp-detection/can-use-ai-ftp/{member_id}",
        referer_username=username,
    )


def get_ai_ftp_failure_status(client: TrainerRoadClient, member_id: int, username: str) -> Dict[str, Any]:
    """
    Status of the last AI FTP Detection attempt.

    GET /app/api/calendar/aiftp/{memberId}/ai-failure-status

    Returns:
        {status}
    """
    return client.request_json(
        "GET",
        f"/app/api/calendar/aiftp/{member_id}/ai-failure-status",
        referer_username=username,
        use_cache=True,
    )
