"""
Calendar queries: timeline overview, events, annotations.
"""

from typing import Any, Dict

from trainerroad_mcp.api.context import require_private_mode
from trainerroad_mcp.api.filters import filtered_payload
from trainerroad_mcp.api.model import FilterConfig, QueryContext
from trainerroad_mcp.api.records import (
    compact_annotation_record,
    compact_event_record,
    sort_days,
)
from trainerroad_mcp.sdk.session import utc_now_iso
from trainerroad_mcp.utils import today_in_time_zone

PUBLIC_TIMELINE_LIMITATIONS = [
    "Public mode does not expose detailed workout records.",
    "Use authenticated private mode for full workout detail.",
]


def _items(timeline: Dict[str, Any], key: str) -> list:
    value = (timeline or {}).get(key)
    return value if isinstance(value, list) else []


def get_timeline_summary(context: QueryContext, full: bool = False) -> Dict[str, Any]:
    """
    Counts of what the resolved context holds.

    Private: activities, planned activities and events (full adds the raw timeline).
    Public: days, ride days and upcoming planned days (full adds the sorted days).
    """
    payload = {
        "mode": context.mode.value,
        "generatedAt": utc_now_iso(),
        "command": "timeline",
        "member": context.member,
    }

    if context.is_private:
        payload["counts"] = {
            "activities": len(_items(context.timeline, "activities")),
            "plannedActivities": len(_items(context.timeline, "plannedActivities")),
            "events": len(_items(context.timeline, "events")),
        }
        if full:
            payload["timeline"] = context.timeline
        return payload

    today = today_in_time_zone(context.time_zone)
    days = context.public_days
    payload["counts"] = {
        "days": len(days),
        "rideDays": sum(1 for d in days if d["hasRides"] or d["tss"] > 0),
        "futurePlannedDays": sum(1 for d in days if d["date"] >= today and d["plannedTssTotal"] > 0),
    }
    payload["limitations"] = PUBLIC_TIMELINE_LIMITATIONS
    if full:
        payload["days"] = sort_days(days)
    return payload


def get_events(context: QueryContext, full: bool = False, filters: FilterConfig = None) -> Dict[str, Any]:
    """Races and other calendar events. Private mode only."""
    require_private_mode(context, "events")
    raw = _items(context.timeline, "events")
    records = raw if full else [compact_event_record(e) for e in raw]
    return filtered_payload(context, "events", records, filters, {"full": bool(full)})


def get_annotations(context: QueryContext, full: bool = False, filters: FilterConfig = None) -> Dict[str, Any]:
    """Notes, time off, injury and illness markers. Private mode only."""
    require_private_mode(context, "annotations")
    raw = _items(context.timeline, "annotations")
    records = raw if full else [compact_annotation_record(a) for a in raw]
    return filtered_payload(context, "annotations", records, filters, {"full": bool(full)})
