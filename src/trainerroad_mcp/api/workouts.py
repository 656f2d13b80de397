"""
Workout queries: today, upcoming planned workouts, completed history.

Private mode reads the timeline and optionally pulls per-id details.
Public mode can only answer with day-level TSS aggregates.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from trainerroad_mcp.api.filters import filtered_payload
from trainerroad_mcp.api.model import FilterConfig, QueryContext
from trainerroad_mcp.api.records import (
    calendar_item_date,
    pick,
    sort_days,
    with_activity_window,
)
from trainerroad_mcp.sdk import calendar as sdk_calendar
from trainerroad_mcp.sdk.client import TrainerRoadClient
from trainerroad_mcp.utils import (
    parse_date_only_input,
    parse_timestamp,
    shift_date_only,
    to_local_date_only,
    today_in_time_zone,
)

DEFAULT_WINDOW_DAYS = 60
DEFAULT_PAST_LIMIT = 30

FUTURE_PUBLIC_LIMITATIONS = [
    "Public mode returns day-level planned TSS only.",
    "Detailed workout names/durations are unavailable in public mode.",
]
PAST_PUBLIC_LIMITATIONS = [
    "Public mode returns day-level historical load signals only.",
    "Detailed completed workout records are unavailable in public mode.",
]
TODAY_PUBLIC_LIMITATIONS = [
    "Public mode provides day-level load/plan signal only.",
    "No workout-level detail without authentication.",
]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def filter_future_planned(planned_activities: Any, from_date: str, to_date: str = None) -> List[dict]:
    """Planned items whose calendar date falls in [from_date, to_date]."""
    selected = []
    for item in planned_activities or []:
        date_only = calendar_item_date(item)
        if not date_only or date_only < from_date:
            continue
        if to_date and date_only > to_date:
            continue
        selected.append(item)
    return selected


def filter_past_activities(
    activities: Any, from_date: str = None, to_date: str = None, zone: str = None
) -> List[dict]:
    """Completed activities whose local start date is in range, newest first."""
    selected = []
    for item in activities or []:
        started_date = to_local_date_only(pick(item, "started"), zone)
        if not started_date:
            continue
        if from_date and started_date < from_date:
            continue
        if to_date and started_date > to_date:
            continue
        selected.append(item)
    return sorted(
        selected,
        key=lambda item: parse_timestamp(pick(item, "started")) or _EPOCH,
        reverse=True,
    )


def resolve_window(
    from_date: Optional[str], to_date: Optional[str], default_from: str, default_to: str
) -> Tuple[str, str]:
    """
    Raises:
        ValueError: If a date is malformed or to_date is before from_date
    """
    start = parse_date_only_input(from_date, default_from)
    end = parse_date_only_input(to_date, default_to)
    if end < start:
        raise ValueError(f"Invalid range: to ({end}) is before from ({start}).")
    return start, end


def _personal_record_count(personal_records: Dict[str, Any], activity_id: Any) -> int:
    records = personal_records.get(str(activity_id), personal_records.get(activity_id))
    return len(records) if isinstance(records, list) else 0


def _ids(items: List[dict]) -> List[Any]:
    return [pick(item, "id") for item in items if pick(item, "id") is not None]


def get_future_workouts(
    client: TrainerRoadClient,
    context: QueryContext,
    from_date: str = None,
    to_date: str = None,
    days: int = DEFAULT_WINDOW_DAYS,
    details: bool = False,
    filters: FilterConfig = None,
) -> Dict[str, Any]:
    """
    Upcoming planned workouts.

    Args:
        client: TrainerRoadClient instance
        context: Resolved query context
        from_date: Window start (YYYY-MM-DD, default today)
        to_date: Window end (YYYY-MM-DD, default today + days)
        days: Window length used when to_date is not given
        details: Fetch full planned-activity details (private mode only)
        filters: Record filters

    Returns:
        Command payload with planned items (private) or day aggregates with
        planned TSS (public)
    """
    today = today_in_time_zone(context.time_zone)
    start, end = resolve_window(from_date, to_date, today, shift_date_only(today, days))
    query = {"fromDate": start, "toDate": end, "days": days, "details": bool(details)}

    if context.is_private:
        records = filter_future_planned(context.timeline.get("plannedActivities"), start, end)
        if details:
            records = sdk_calendar.get_planned_activities_by_ids(
                client, context.member_id, context.username, _ids(records)
            )
        return filtered_payload(context, "future", records, filters, query)

    days_in_window = [
        day for day in context.public_days
        if start <= day["date"] <= end and day["plannedTssTotal"] > 0
    ]
    return filtered_payload(
        context, "future", sort_days(days_in_window), filters, query,
        limitations=FUTURE_PUBLIC_LIMITATIONS,
    )


def get_past_workouts(
    client: TrainerRoadClient,
    context: QueryContext,
    from_date: str = None,
    to_date: str = None,
    days: int = DEFAULT_WINDOW_DAYS,
    limit: int = DEFAULT_PAST_LIMIT,
    details: bool = False,
    filters: FilterConfig = None,
) -> Dict[str, Any]:
    """
    Completed workouts, newest first, capped at `limit` before filtering.

    Private records carry a local-time window (startedAtLocal, endedAtLocal,
    crossesMidnightLocal, ...). With details, records are the full activity
    payloads plus a personalRecordCount.
    """
    today = today_in_time_zone(context.time_zone)
    start, end = resolve_window(from_date, to_date, shift_date_only(today, -days), today)
    query = {"fromDate": start, "toDate": end, "days": days, "limit": limit, "details": bool(details)}

    if context.is_private:
        selected = filter_past_activities(
            context.timeline.get("activities"), start, end, context.time_zone
        )[:limit]
        if not details:
            records = [with_activity_window(item, context.time_zone) for item in selected]
            return filtered_payload(context, "past", records, filters, query)

        ids = _ids(selected)
        detail_records = sdk_calendar.get_activities_by_ids(
            client, context.member_id, context.username, ids
        )
        personal_records = sdk_calendar.get_personal_records_by_activity_ids(
            client, context.member_id, context.username, ids
        ) or {}
        records = [
            with_activity_window(
                {**item, "personalRecordCount": _personal_record_count(personal_records, pick(item, "id"))},
                context.time_zone,
            )
            for item in detail_records
        ]
        return filtered_payload(
            context, "past", records, filters, query, personalRecords=personal_records
        )

    days_in_window = [
        day for day in context.public_days
        if start <= day["date"] <= end and (day["hasRides"] or day["tss"] > 0)
    ]
    return filtered_payload(
        context, "past", sort_days(days_in_window, descending=True)[:limit], filters, query,
        limitations=PAST_PUBLIC_LIMITATIONS,
    )


def get_today(
    client: TrainerRoadClient,
    context: QueryContext,
    date: str = None,
    details: bool = False,
    filters: FilterConfig = None,
) -> Dict[str, Any]:
    """
    Planned and completed workouts for one day (default today).

    Private records are tagged recordType "planned" or "completed".
    Public mode returns the single day aggregate, if any.
    """
    day_date = parse_date_only_input(date, today_in_time_zone(context.time_zone))
    query = {"date": day_date, "details": bool(details)}

    if not context.is_private:
        day = next((d for d in context.public_days if d["date"] == day_date), None)
        return filtered_payload(
            context, "today", [day] if day else [], filters, query,
            limitations=TODAY_PUBLIC_LIMITATIONS,
            counts={"days": 1 if day else 0},
            day=day,
        )

    planned = filter_future_planned(context.timeline.get("plannedActivities"), day_date, day_date)
    completed = filter_past_activities(
        context.timeline.get("activities"), day_date, day_date, context.time_zone
    )
    personal_records = {}

    if details:
        planned = sdk_calendar.get_planned_activities_by_ids(
            client, context.member_id, context.username, _ids(planned)
        )
        completed_ids = _ids(completed)
        completed = sdk_calendar.get_activities_by_ids(
            client, context.member_id, context.username, completed_ids
        )
        personal_records = sdk_calendar.get_personal_records_by_activity_ids(
            client, context.member_id, context.username, completed_ids
        ) or {}

    completed = [with_activity_window(item, context.time_zone) for item in completed]
    records = [{"recordType": "planned", **item} for item in planned] + [
        {
            "recordType": "completed",
            **item,
            "personalRecordCount": _personal_record_count(personal_records, pick(item, "id")),
        }
        for item in completed
    ]

    return filtered_payload(
        context, "today", records, filters, query,
        counts={"planned": len(planned), "completed": len(completed)},
        planned=planned,
        completed=completed,
        personalRecords=personal_records,
    )
