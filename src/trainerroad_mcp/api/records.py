"""
Record normalizers.

Pure functions turning raw TrainerRoad payloads into compact, stable dicts.
Upstream field casing varies between camelCase and PascalCase, so every
lookup goes through pick(). Missing fields become None; nothing here raises
on malformed input.
"""

import math
from typing import Any, Dict, Iterable, List, Optional

from trainerroad_mcp.sdk.types import (
    ANNOTATION_TYPE_LABELS,
    PROGRESSION_ZONE_META,
    SECONDS_PER_DAY,
    UNKNOWN_ZONE_SORT_BASE,
)
from trainerroad_mcp.utils import (
    calendar_date_to_iso,
    parse_timestamp,
    summarize_activity_window,
    to_iso_date,
)


def _casings(key: str) -> tuple:
    flipped = key[:1].swapcase() + key[1:]
    return (key, flipped) if flipped != key else (key,)


def pick(record: Any, key: str, default: Any = None) -> Any:
    """Read `key` from a payload in either casing (tss / Tss).

    Returns `default` when the record is not a dict or the field is
    absent (or null) under both spellings.
    """
    if not isinstance(record, dict):
        return default
    for name in _casings(key):
        value = record.get(name)
        if value is not None:
            return value
    return default


def to_number(value: Any) -> Optional[float]:
    """Finite number or None. Numeric strings are accepted."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return int(parsed) if parsed.is_integer() else parsed


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _iso_instant(value: Any) -> Optional[str]:
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _date_only(value: Any, zone: str = None) -> Optional[str]:
    if isinstance(value, dict):
        return calendar_date_to_iso(value)
    if value is None:
        return None
    return to_iso_date(value, zone)


# ── Public day aggregates ────────────────────────────────────────────────


def flatten_public_tss_days(public_tss: Any, zone: str = None) -> List[Dict[str, Any]]:
    """Flatten the public tssByDay week grid into one record per date.

    Weeks may have any length. Days without a date are dropped and the
    first occurrence of a date wins, so dates in the result are unique.
    """
    weeks = _as_list(pick(public_tss, "tssByDay"))
    days = []
    seen = set()

    for week in weeks:
        for day in _as_list(week):
            date_only = _date_only(pick(day, "date"), zone)
            if not date_only or date_only in seen:
                continue
            seen.add(date_only)

            planned_tr = to_number(pick(day, "plannedTssTrainerRoad")) or 0
            planned_other = to_number(pick(day, "plannedTssOther")) or 0
            days.append({
                "date": date_only,
                "dateOnly": date_only,
                "recordType": "day",
                "tss": to_number(pick(day, "tss")) or 0,
                "tssTrainerRoad": to_number(pick(day, "tssTrainerRoad")) or 0,
                "tssOther": to_number(pick(day, "tssOther")) or 0,
                "plannedTssTrainerRoad": planned_tr,
                "plannedTssOther": planned_other,
                "plannedTssTotal": planned_tr + planned_other,
                "hasRides": bool(pick(day, "hasRides")),
            })

    return days


def sort_days(days: Iterable[dict], descending: bool = False) -> List[dict]:
    return sorted(days, key=lambda d: d.get("date") or "", reverse=descending)


# ── FTP ──────────────────────────────────────────────────────────────────


def normalize_ftp_history(raw: Any, zone: str = None) -> List[Dict[str, Any]]:
    """FTP history points sorted oldest first. Entries without a date or value are dropped."""
    history = []
    for item in _as_list(raw):
        date_raw = pick(item, "date")
        value = to_number(pick(item, "value"))
        instant = _iso_instant(date_raw)
        if not date_raw or value is None or instant is None:
            continue
        history.append({
            "date": instant,
            "dateOnly": to_iso_date(date_raw, zone),
            "value": value,
        })
    return sorted(history, key=lambda h: h["date"])


def normalize_fitness_thresholds(raw: Any, zone: str = None) -> List[Dict[str, Any]]:
    """Timeline fitnessThresholds (applied and upcoming FTP changes), oldest first."""
    thresholds = []
    for item in _as_list(raw):
        date_raw = pick(item, "date")
        value = to_number(pick(item, "value"))
        instant = _iso_instant(date_raw)
        if not date_raw or value is None or instant is None:
            continue
        thresholds.append({
            "id": pick(item, "id"),
            "date": instant,
            "dateOnly": to_iso_date(date_raw, zone),
            "value": value,
            "isApplied": bool(pick(item, "isApplied")),
            "isEnabled": pick(item, "isEnabled"),
            "source": pick(item, "source"),
            "viewed": pick(item, "viewed"),
        })
    return sorted(thresholds, key=lambda t: t["date"])


def count_planned_workouts_in_range(planned_activities: Any, from_date: str, to_date: str) -> int:
    """Planned items inside [from_date, to_date] that are actual workouts."""
    count = 0
    for item in _as_list(planned_activities):
        date_only = _date_only(pick(item, "date"))
        if not date_only or date_only < from_date or date_only > to_date:
            continue
        if pick(item, "workoutId") is not None or to_number(pick(item, "type")) == 1:
            count += 1
    return count


# ── Power ────────────────────────────────────────────────────────────────


def compact_personal_record(record: Any) -> Dict[str, Any]:
    return {
        "seconds": pick(record, "Seconds"),
        "watts": pick(record, "Watts"),
        "workoutDate": pick(record, "WorkoutDate"),
        "workoutSeconds": pick(record, "WorkoutSeconds"),
        "workoutGuid": pick(record, "WorkoutGuid"),
        "workoutRecordId": pick(record, "WorkoutRecordId"),
        "workoutRecordName": pick(record, "WorkoutRecordName"),
        "surveyResponse": pick(record, "SurveyResponseTranslated"),
    }


# ── Calendar ─────────────────────────────────────────────────────────────


def calendar_item_date(item: Any) -> Optional[str]:
    """YYYY-MM-DD of a planned item / event whose date is {year, month, day}."""
    return _date_only(pick(item, "date"))


def compact_event_record(record: Any) -> Dict[str, Any]:
    return {
        "id": pick(record, "id"),
        "name": pick(record, "name"),
        "date": pick(record, "date"),
        "dateOnly": calendar_date_to_iso(pick(record, "date")),
        "timeOfDay": pick(record, "timeOfDay"),
        "started": pick(record, "started"),
        "racePriority": pick(record, "racePriority"),
        "activityType": pick(record, "activityType"),
        "activityEventType": pick(record, "activityEventType"),
        "tss": pick(record, "tss"),
        "activityTss": pick(record, "activityTss"),
        "isTriathlonType": pick(record, "isTriathlonType"),
        "manuallyCompleted": pick(record, "manuallyCompleted"),
    }


def compact_annotation_record(record: Any) -> Dict[str, Any]:
    """Annotation with a readable type label and its duration in whole days.

    Unknown type codes are labelled "unknown".
    """
    type_id = pick(record, "typeId")
    type_code = to_number(type_id)
    type_label = ANNOTATION_TYPE_LABELS.get(type_code, "unknown") if type_code is not None else "unknown"

    duration = pick(record, "duration")
    duration_seconds = to_number(duration)
    duration_days = math.floor(duration_seconds / SECONDS_PER_DAY + 0.5) if duration_seconds is not None else None

    return {
        "id": pick(record, "id"),
        "type": type_label,
        "typeId": type_id,
        "typeLabel": type_label,
        "recordType": type_label,
        "date": pick(record, "date"),
        "dateOnly": calendar_date_to_iso(pick(record, "date")),
        "durationSeconds": duration,
        "durationDays": duration_days,
        "groupId": pick(record, "groupId"),
    }


def with_activity_window(record: Any, zone: str = None) -> Any:
    """Merge the local start/end window into a completed activity.

    Activities whose start time cannot be parsed are returned unchanged.
    """
    if not isinstance(record, dict):
        return record
    window = summarize_activity_window(
        pick(record, "started"), pick(record, "durationInSeconds"), zone
    )
    if window is None:
        return record
    return {**record, **window}


# ── Weight ───────────────────────────────────────────────────────────────


def compact_weight_record(record: Any, zone: str = None) -> Dict[str, Any]:
    date_raw = pick(record, "date")
    return {
        "id": pick(record, "id"),
        "value": to_number(pick(record, "value")),
        "units": pick(record, "units"),
        "date": date_raw,
        "dateOnly": _date_only(date_raw, zone),
    }


# ── Plans ────────────────────────────────────────────────────────────────


def compact_plan_summary(plan: Any, zone: str = None) -> Dict[str, Any]:
    start = pick(plan, "start")
    return {
        "id": pick(plan, "id"),
        "name": pick(plan, "name"),
        "discipline": pick(plan, "discipline"),
        "volume": pick(plan, "volume"),
        "phase": pick(plan, "phase"),
        "start": start,
        "end": pick(plan, "end"),
        "date": start,
        "dateOnly": _date_only(start, zone),
        "isAdHoc": pick(plan, "isAdHoc"),
        "plannedActivityGroupId": pick(plan, "plannedActivityGroupId"),
    }


def compact_plan_phase(phase: Any, zone: str = None) -> Dict[str, Any]:
    start = pick(phase, "start")
    return {
        "id": pick(phase, "id"),
        "customPlanId": pick(phase, "customPlanId"),
        "type": pick(phase, "type"),
        "volume": pick(phase, "volume"),
        "planId": pick(phase, "planId"),
        "planName": pick(phase, "planName"),
        "start": start,
        "end": pick(phase, "end"),
        "date": start,
        "dateOnly": _date_only(start, zone),
        "isMasters": pick(phase, "isMasters"),
        "isPolarized": pick(phase, "isPolarized"),
    }


def compact_current_plan(plan: Any, zone: str = None) -> Optional[Dict[str, Any]]:
    """The active custom plan with its phases, or None when there is none."""
    if not isinstance(plan, dict) or not plan:
        return None
    start = pick(plan, "start")
    phases = _as_list(pick(plan, "phases"))
    return {
        "id": pick(plan, "id"),
        "name": pick(plan, "name"),
        "memberId": pick(plan, "memberId"),
        "discipline": pick(plan, "discipline"),
        "volume": pick(plan, "volume"),
        "start": start,
        "end": pick(plan, "end"),
        "date": start,
        "dateOnly": _date_only(start, zone),
        "canEdit": pick(plan, "canEdit"),
        "currentPhase": pick(plan, "currentPhase"),
        "currentPhaseStart": pick(plan, "currentPhaseStart"),
        "currentPhaseEnd": pick(plan, "currentPhaseEnd"),
        "plannedActivityGroupType": pick(plan, "plannedActivityGroupType"),
        "autoUpdateApplied": pick(plan, "autoUpdateApplied"),
        "phaseCount": len(phases),
        "phases": [compact_plan_phase(p, zone) for p in phases],
    }


# ── Progression levels ───────────────────────────────────────────────────


def _zone_meta(progression_id: int) -> Dict[str, Any]:
    meta = PROGRESSION_ZONE_META.get(progression_id)
    if meta:
        return meta
    return {
        "zoneKey": f"progression-{progression_id}",
        "zoneLabel": f"Progression {progression_id}",
        "sortOrder": UNKNOWN_ZONE_SORT_BASE + progression_id,
    }


def _by_progression_id(items: Any) -> Dict[int, dict]:
    lookup = {}
    for item in _as_list(items):
        progression_id = to_number(pick(item, "progressionId"))
        if progression_id is not None:
            lookup[int(progression_id)] = item
    return lookup


def build_levels_by_zone(
    levels_payload: Any, eligibility_payload: Any = None, zone: str = None
) -> List[Dict[str, Any]]:
    """
    Join career levels with AI FTP Detection's projected/current levels.

    Args:
        levels_payload: /career/{memberId}/levels response ({levels: {progressionId: {...}}})
        eligibility_payload: can-use-ai-ftp response (optional)
        zone: IANA zone for dateOnly

    Returns:
        One record per zone, ordered by zone sortOrder then progressionId.
        Zones outside PROGRESSION_ZONE_META sort after the known ones.
    """
    raw_levels = pick(levels_payload, "levels")
    if not isinstance(raw_levels, dict):
        raw_levels = {}
    detection = pick(pick(eligibility_payload, "additionalData"), "detection") or {}
    projected = _by_progression_id(pick(detection, "projectedProgressionLevels"))
    current = _by_progression_id(pick(detection, "currentProgressionLevels"))

    records = []
    for raw_id, value in raw_levels.items():
        progression_id = to_number(raw_id)
        if progression_id is None:
            continue
        progression_id = int(progression_id)
        meta = _zone_meta(progression_id)
        change = pick(value, "changeEvent") or {}
        change_date = pick(change, "date")
        level_change = pick(change, "level") or {}

        ai_current = current.get(progression_id)
        ai_projected = projected.get(progression_id)
        ai_current_level = to_number(pick(ai_current, "previousDisplayLevel"))
        ai_projected_level = to_number(pick(ai_projected, "displayFinalLevel"))
        ai_delta = None
        if ai_current_level is not None and ai_projected_level is not None:
            ai_delta = round(ai_projected_level - ai_current_level, 2)

        records.append({
            "progressionId": progression_id,
            "type": meta["zoneKey"],
            "recordType": meta["zoneKey"],
            "zoneKey": meta["zoneKey"],
            "zoneLabel": meta["zoneLabel"],
            "sortOrder": meta["sortOrder"],
            "recentLevel": pick(value, "recent"),
            "endpointPredictedLevel": pick(value, "predicted"),
            "activityId": pick(value, "activityId"),
            "changeDate": change_date,
            "date": change_date,
            "dateOnly": _date_only(change_date, zone),
            "changeReason": pick(change, "reason"),
            "changeFrom": pick(level_change, "from"),
            "changeTo": pick(level_change, "to"),
            "changeDelta": pick(change, "delta"),
            "aiCurrentDisplayLevel": pick(ai_current, "previousDisplayLevel"),
            "aiProjectedDisplayLevel": pick(ai_projected, "displayFinalLevel"),
            "aiDelta": ai_delta,
        })

    return sorted(records, key=lambda r: (r["sortOrder"], r["progressionId"]))

