"""
Fitness queries: FTP, AI FTP Detection prediction, progression levels,
weight history, and power records.

Independent upstream calls fan out on a thread pool and are joined before
any result is used.
"""

from typing import Any, Dict, Optional

import requests

from trainerroad_mcp.api.context import require_private_mode
from trainerroad_mcp.api.filters import filtered_payload
from trainerroad_mcp.api.model import FilterConfig, QueryContext
from trainerroad_mcp.api.records import (
    build_levels_by_zone,
    compact_personal_record,
    compact_weight_record,
    count_planned_workouts_in_range,
    normalize_fitness_thresholds,
    normalize_ftp_history,
    pick,
    to_number,
)
from trainerroad_mcp.errors import TrainerRoadError
from trainerroad_mcp.sdk import calendar as sdk_calendar
from trainerroad_mcp.sdk import career as sdk_career
from trainerroad_mcp.sdk import ftp as sdk_ftp
from trainerroad_mcp.sdk import power as sdk_power
from trainerroad_mcp.sdk.client import TrainerRoadClient, run_concurrently
from trainerroad_mcp.sdk.session import utc_now_iso
from trainerroad_mcp.sdk.types import POWER_RECORDS_EPOCH
from trainerroad_mcp.utils import (
    date_only_diff_days,
    parse_date_only_input,
    to_iso_date,
    today_in_time_zone,
)

DEFAULT_FTP_HISTORY_LIMIT = 50
DEFAULT_POWER_RECORD_LIMIT = 25

FTP_PUBLIC_LIMITATIONS = [
    "Public mode can expose FTP history only when profile data is public.",
    "No AI FTP detection or private progression internals in public mode.",
]


def get_ftp(
    client: TrainerRoadClient, context: QueryContext, history_limit: int = DEFAULT_FTP_HISTORY_LIMIT
) -> Dict[str, Any]:
    """
    Current FTP plus FTP history from the public TSS aggregate.

    In private mode the aggregate is fetched for the member; a failure there
    only empties the history.
    """
    source = context.public_tss
    if context.is_private:
        try:
            source = sdk_career.get_public_tss(client, context.username)
        except (TrainerRoadError, requests.RequestException):
            source = None

    history = normalize_ftp_history(pick(source, "ftpRecordsDate") or [], context.time_zone)
    records = history[-history_limit:] if history_limit and history_limit > 0 else history
    latest = history[-1] if history else None

    payload = {
        "mode": context.mode.value,
        "generatedAt": utc_now_iso(),
        "command": "ftp",
        "member": context.member,
        "currentFtp": None,
        "ftpHistoryCount": len(history),
        "query": {"historyLimit": history_limit},
        "records": records,
    }
    if context.is_private:
        payload["currentFtp"] = context.member_info.get("ftp") or (latest["value"] if latest else None)
    else:
        payload["currentFtp"] = latest["value"] if latest else None
        payload["limitations"] = FTP_PUBLIC_LIMITATIONS
    return payload


def _select_predicted_threshold(thresholds: list, next_date: Optional[str], today: str) -> Optional[dict]:
    if next_date:
        matching = [t for t in thresholds if t["dateOnly"] == next_date]
        if matching:
            return matching[-1]
    upcoming = [t for t in thresholds if t["dateOnly"] >= today and not t["isApplied"]]
    return upcoming[0] if upcoming else None


def get_ftp_prediction(client: TrainerRoadClient, context: QueryContext) -> Dict[str, Any]:
    """
    AI FTP Detection outlook: predicted FTP, when, and how much it moves.

    Fetches eligibility, failure status, career levels and timeline in
    parallel. The predicted threshold is the last fitness threshold dated on
    the next AI FTP availability date, else the first unapplied upcoming one.
    Private mode only.
    """
    require_private_mode(context, "ftp-prediction")
    member_id, username = context.member_id, context.username

    eligibility, failure_status, levels, timeline = run_concurrently(
        lambda: sdk_ftp.get_ai_ftp_eligibility(client, member_id, username),
        lambda: sdk_ftp.get_ai_ftp_failure_status(client, member_id, username),
        lambda: sdk_career.get_career_levels(client, member_id, username),
        lambda: sdk_calendar.get_timeline(client, member_id, username),
    )

    additional = pick(eligibility, "additionalData") or {}
    detection = pick(additional, "detection") or {}
    projected = pick(detection, "projectedProgressionLevels") or []
    current_levels = pick(detection, "currentProgressionLevels") or []

    next_availability = pick(additional, "nextAiFtpAvailability")
    next_date = to_iso_date(next_availability, context.time_zone) if next_availability else None
    today = today_in_time_zone(context.time_zone)

    thresholds = normalize_fitness_thresholds(pick(timeline, "fitnessThresholds") or [], context.time_zone)
    current_ftp = to_number(pick(detection, "ftp"))
    if current_ftp is None:
        current_ftp = to_number(context.member_info.get("ftp"))

    predicted = _select_predicted_threshold(thresholds, next_date, today)
    predicted_ftp = predicted["value"] if predicted else None
    prediction_date = predicted["date"] if predicted else next_availability
    prediction_date_only = predicted["dateOnly"] if predicted else next_date

    ftp_delta = None
    ftp_delta_percent = None
    if current_ftp is not None and predicted_ftp is not None:
        ftp_delta = predicted_ftp - current_ftp
        if current_ftp:
            ftp_delta_percent = round(ftp_delta / current_ftp * 100)

    return {
        "mode": context.mode.value,
        "generatedAt": utc_now_iso(),
        "command": "ftp-prediction",
        "member": context.member,
        "canUseAiFtp": bool(pick(eligibility, "can")),
        "reasonCode": pick(eligibility, "reason"),
        "modelVersion": pick(eligibility, "modelVersion") or pick(detection, "modelVersion"),
        "detectionFtp": pick(detection, "ftp"),
        "currentFtp": current_ftp,
        "predictedFtp": predicted_ftp,
        "predictionDate": prediction_date,
        "predictionDateOnly": prediction_date_only,
        "daysUntilPrediction": date_only_diff_days(today, prediction_date_only) if prediction_date_only else None,
        "ftpDelta": ftp_delta,
        "ftpDeltaPercent": ftp_delta_percent,
        "plannedWorkoutCount": (
            count_planned_workouts_in_range(pick(timeline, "plannedActivities"), today, prediction_date_only)
            if prediction_date_only else None
        ),
        "nextAiFtpAvailability": next_availability,
        "nextAiFtpAvailabilityDateOnly": next_date,
        "lastViewed": pick(additional, "lastViewed"),
        "aiFailureStatus": pick(failure_status, "status"),
        "projectedProgressionLevels": projected,
        "currentProgressionLevels": current_levels,
        "levels": pick(levels, "levels") or {},
        "levelsTimestamp": pick(levels, "timestamp"),
        "predictionThresholdSource": predicted,
        "futureFitnessThresholds": [t for t in thresholds if t["dateOnly"] >= today],
        "records": projected,
    }


def get_levels(client: TrainerRoadClient, context: QueryContext, filters: FilterConfig = None) -> Dict[str, Any]:
    """Progression levels per zone, joined with AI FTP projections. Private mode only."""
    require_private_mode(context, "levels")
    member_id, username = context.member_id, context.username

    levels, eligibility = run_concurrently(
        lambda: sdk_career.get_career_levels(client, member_id, username),
        lambda: sdk_ftp.get_ai_ftp_eligibility(client, member_id, username),
    )
    records = build_levels_by_zone(levels, eligibility, context.time_zone)
    detection = pick(pick(eligibility, "additionalData"), "detection")

    return filtered_payload(
        context, "levels", records, filters,
        levelsTimestamp=pick(levels, "timestamp"),
        aiModelVersion=pick(eligibility, "modelVersion") or pick(detection, "modelVersion"),
    )


def get_weight_history(client: TrainerRoadClient, context: QueryContext, filters: FilterConfig = None) -> Dict[str, Any]:
    """Body-weight entries. Private mode only."""
    require_private_mode(context, "weight-history")
    raw = sdk_career.get_weight_history(client, context.member_id, context.username)
    records = [compact_weight_record(r, context.time_zone) for r in raw or []]
    return filtered_payload(context, "weight-history", records, filters)


def get_power_ranking(client: TrainerRoadClient, context: QueryContext) -> Dict[str, Any]:
    """Best-power percentiles by duration. Private mode only."""
    require_private_mode(context, "power-ranking")
    records = sdk_power.get_power_ranking(client, context.member_id, context.username) or []
    return {
        "mode": context.mode.value,
        "generatedAt": utc_now_iso(),
        "command": "power-ranking",
        "member": context.member,
        "count": len(records),
        "records": records,
    }


def get_power_records(
    client: TrainerRoadClient,
    context: QueryContext,
    start_date: str = None,
    end_date: str = None,
    row_type: int = 101,
    indoor_only: bool = False,
    slot: int = 1,
    limit: int = DEFAULT_POWER_RECORD_LIMIT,
    full: bool = False,
) -> Dict[str, Any]:
    """
    Personal power records in a date range. Private mode only.

    Args:
        start_date: YYYY-MM-DD (default 2013-05-10, the earliest upstream accepts)
        end_date: YYYY-MM-DD (default today)
        row_type: Upstream record table
        indoor_only: Only indoor rides
        slot: Result slot
        limit: Top N by watts when not full
        full: Return every raw record plus the raw results

    Returns:
        Command payload with compact records ranked by watts
    """
    require_private_mode(context, "power-records")
    start = parse_date_only_input(start_date, POWER_RECORDS_EPOCH)
    end = parse_date_only_input(end_date, today_in_time_zone(context.time_zone))

    raw = sdk_power.get_personal_records_for_date_range(
        client, context.member_id, context.username, start, end,
        row_type=row_type, indoor_only=indoor_only, slot=slot,
    )
    results = pick(raw, "results") or []
    first = results[0] if results and isinstance(results[0], dict) else {}
    all_records = pick(first, "personalRecords") or []

    if full:
        records = all_records
    else:
        ranked = sorted(all_records, key=lambda r: to_number(pick(r, "Watts")) or 0, reverse=True)
        records = [compact_personal_record(r) for r in ranked[:limit]]

    payload = {
        "mode": context.mode.value,
        "generatedAt": utc_now_iso(),
        "command": "power-records",
        "member": context.member,
        "query": {
            "startDate": start,
            "endDate": end,
            "rowType": row_type,
            "indoorOnly": indoor_only,
            "slot": slot,
            "limit": limit,
            "full": full,
        },
        "totalRecords": len(all_records),
        "count": len(records),
        "records": records,
    }
    if full:
        payload["results"] = results
    return payload


def get_career(client: TrainerRoadClient, context: QueryContext) -> Dict[str, Any]:
    """Career page summary and training seasons, as returned upstream. Private mode only."""
    require_private_mode(context, "career")
    career, seasons = run_concurrently(
        lambda: sdk_career.get_career_summary(client, context.username),
        lambda: sdk_career.get_seasons(client, context.member_id, context.username),
    )
    return {
        "mode": context.mode.value,
        "generatedAt": utc_now_iso(),
        "command": "career",
        "member": context.member,
        "career": career,
        "seasons": seasons,
    }
