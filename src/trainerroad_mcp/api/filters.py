"""
Generic filter / sort / project pipeline for normalized records.

Works on any record collection through four resolvers (date, type, load,
text). A record the resolvers cannot read simply fails to match; it never
raises. Pipeline order is fixed:

    date range -> type -> contains -> load range -> sort -> limit -> fields
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from trainerroad_mcp.api.model import FilterConfig
from trainerroad_mcp.api.records import pick, to_number
from trainerroad_mcp.sdk.session import utc_now_iso
from trainerroad_mcp.utils import DATE_PREFIX_PATTERN, calendar_date_to_iso


@dataclass(frozen=True)
class RecordResolver:
    """Field precedence used to read the four filterable facets of a record.

    Each tuple is tried in order and the first usable value wins.
    """
    date_fields: Sequence[str] = ("dateOnly", "localDate", "date", "started", "workoutDate")
    type_fields: Sequence[str] = ("recordType", "type", "activityType", "typeId", "progressionId")
    load_fields: Sequence[str] = ("tss", "actualTss", "plannedTssTotal", "estimatedTss")
    text_fields: Sequence[str] = (
        "name", "title", "planName", "zoneLabel", "zoneKey",
        "typeLabel", "workoutRecordName", "recordType", "type",
    )

    def resolve_date(self, record: Any) -> Optional[str]:
        if not isinstance(record, dict):
            return None
        for name in self.date_fields:
            value = pick(record, name)
            if isinstance(value, dict):
                date_only = calendar_date_to_iso(value)
                if date_only:
                    return date_only
            elif isinstance(value, str) and DATE_PREFIX_PATTERN.match(value):
                return value[:10]
        return None

    def resolve_type(self, record: Any) -> Any:
        if not isinstance(record, dict):
            return None
        for name in self.type_fields:
            value = pick(record, name)
            if value is not None:
                return value
        return None

    def resolve_load(self, record: Any) -> Optional[float]:
        if not isinstance(record, dict):
            return None
        for name in self.load_fields:
            value = to_number(pick(record, name))
            if value is not None:
                return value
        return None

    def resolve_text(self, record: Any) -> str:
        if not isinstance(record, dict):
            return ""
        parts = [str(record[name]) for name in self.text_fields if record.get(name) is not None]
        return " ".join(parts).lower()


DEFAULT_RESOLVER = RecordResolver()


def _matches_type(raw_type: Any, candidates: Sequence[str]) -> bool:
    if raw_type is None:
        return False
    as_text = str(raw_type).lower()
    as_number = to_number(raw_type)
    for candidate in candidates:
        if str(candidate).lower() == as_text:
            return True
        candidate_number = to_number(candidate)
        if candidate_number is not None and as_number is not None and candidate_number == as_number:
            return True
    return False


def _in_date_range(date_only: Optional[str], config: FilterConfig) -> bool:
    if not date_only:
        return False
    if config.from_date and date_only < config.from_date:
        return False
    if config.to_date and date_only > config.to_date:
        return False
    return True


def _in_load_range(load: Optional[float], config: FilterConfig) -> bool:
    if load is None:
        return False
    if config.min_tss is not None and load < config.min_tss:
        return False
    if config.max_tss is not None and load > config.max_tss:
        return False
    return True


def _sort_records(records: List[Any], mode: str, resolver: RecordResolver) -> List[Any]:
    # sorted() is stable, including with reverse=True
    if mode in ("date", "date-desc"):
        return sorted(
            records,
            key=lambda r: resolver.resolve_date(r) or "",
            reverse=mode == "date-desc",
        )
    if mode in ("text", "text-desc"):
        return sorted(records, key=resolver.resolve_text, reverse=mode == "text-desc")
    if mode in ("load", "load-desc"):
        sign = -1 if mode == "load-desc" else 1

        # Unresolvable loads go last in both directions
        def load_key(record):
            load = resolver.resolve_load(record)
            return (load is None, sign * load if load is not None else 0)

        return sorted(records, key=load_key)
    return records


def get_by_path(record: Any, path: str) -> Any:
    """Follow a dotted path through nested dicts and lists; None when any hop is missing.

    Non-negative integer segments index into lists (e.g. "intervals.0.name").
    """
    cursor = record
    for segment in (s.strip() for s in str(path).split(".")):
        if not segment:
            continue
        if isinstance(cursor, dict):
            cursor = cursor.get(segment)
        elif isinstance(cursor, list) and segment.isdigit():
            index = int(segment)
            cursor = cursor[index] if index < len(cursor) else None
        else:
            return None
    return cursor


def project_fields(record: Any, fields: Sequence[str]) -> Dict[str, Any]:
    return {path: get_by_path(record, path) for path in fields}


def apply_filters(
    records: Any,
    config: FilterConfig = None,
    resolver: RecordResolver = DEFAULT_RESOLVER,
) -> Dict[str, Any]:
    """
    Filter, sort, truncate and project a record collection.

    Args:
        records: Normalized records (plain dicts)
        config: Filter options; None or an empty config returns the input as-is
        resolver: Field precedence for date/type/load/text

    Returns:
        {records: [...], summary: {...resolved config, inputCount, outputCount}}
    """
    config = config or FilterConfig()
    source = list(records) if isinstance(records, (list, tuple)) else []
    output = list(source)

    if config.has_date_range:
        output = [r for r in output if _in_date_range(resolver.resolve_date(r), config)]

    if config.types:
        output = [r for r in output if _matches_type(resolver.resolve_type(r), config.types)]

    if config.contains:
        output = [r for r in output if config.contains in resolver.resolve_text(r)]

    if config.has_load_range:
        output = [r for r in output if _in_load_range(resolver.resolve_load(r), config)]

    if config.sort:
        output = _sort_records(output, config.sort, resolver)

    if config.result_limit is not None:
        output = output[: config.result_limit]

    if config.fields:
        output = [project_fields(r, config.fields) for r in output]

    return {
        "records": output,
        "summary": config.summary(len(source), len(output)),
    }


def records_only(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Trim a command payload down to the records envelope agents consume."""
    records = payload.get("records")
    envelope = {
        "mode": payload.get("mode"),
        "generatedAt": payload.get("generatedAt") or utc_now_iso(),
        "command": payload.get("command"),
        "query": payload.get("query"),
        "filters": payload.get("filters"),
        "member": payload.get("member"),
        "count": len(records) if isinstance(records, list) else payload.get("count", 0),
        "records": records if isinstance(records, list) else [],
    }
    if payload.get("limitations") is not None:
        envelope["limitations"] = payload["limitations"]
    return envelope


def filtered_payload(
    context,
    command: str,
    records: Any,
    config: FilterConfig = None,
    query: Dict[str, Any] = None,
    limitations: List[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Run apply_filters and wrap the result in the standard command payload.

    Args:
        context: Resolved QueryContext
        command: Command name echoed back to the caller
        records: Records before filtering
        config: Filter options
        query: Command-specific query echo
        limitations: Public-mode caveats, omitted when None
        **extra: Command-specific fields placed before count/records

    Returns:
        {mode, generatedAt, command, query, filters, member, ..., count, records[, limitations]}
    """
    result = apply_filters(records, config)
    payload = {
        "mode": context.mode.value,
        "generatedAt": utc_now_iso(),
        "command": command,
        "query": query,
        "filters": result["summary"],
        "member": context.member,
        **extra,
        "count": len(result["records"]),
        "records": result["records"],
    }
    if limitations is not None:
        payload["limitations"] = limitations
    return payload
