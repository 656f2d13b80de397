"""
Domain types for TrainerRoad queries.

FilterConfig is the one structure callers build by hand, so it gets
parsing and validation. QueryContext carries the resolved mode for a
single call. Records themselves stay as plain dicts.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from trainerroad_mcp.api.records import to_number
from trainerroad_mcp.sdk.types import QueryMode
from trainerroad_mcp.utils import parse_date_only_input


SORT_MODES = ("date", "date-desc", "load", "load-desc", "text", "text-desc")

# Names the web app's export flags use for the same orderings
SORT_ALIASES = {
    "tss": "load",
    "tss-desc": "load-desc",
    "name": "text",
    "name-desc": "text-desc",
}


def _split_csv(value: Any) -> List[str]:
    if value is None or value is True or value is False:
        return []
    if isinstance(value, (list, tuple, set)):
        parts = [str(v) for v in value if v is not None]
    else:
        parts = str(value).split(",")
    return [p.strip() for p in parts if p.strip()]


def _positive_int(value: Any) -> Optional[int]:
    number = to_number(value)
    if number is None or number != int(number) or number < 1:
        return None
    return int(number)


def _lower_or_none(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value).lower()


@dataclass
class FilterConfig:
    """Declarative filter/sort/project options for a record collection.

    Every field is optional; an unset field leaves the records untouched.
    """
    from_date: Optional[str] = None
    to_date: Optional[str] = None
    types: Tuple[str, ...] = ()
    contains: Optional[str] = None
    min_tss: Optional[float] = None
    max_tss: Optional[float] = None
    sort: Optional[str] = None
    result_limit: Optional[int] = None
    fields: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "FilterConfig":
        """Build a config from loose caller input.

        Accepts "from"/"to" or "from_date"/"to_date", comma-separated or list
        values for "type" and "fields", and numeric strings for the numbers.
        Non-numeric bounds and non-positive limits are ignored.

        Raises:
            ValueError: If a date is not YYYY-MM-DD or the sort mode is unknown.
        """
        d = d or {}
        sort = _lower_or_none(d.get("sort"))
        config = cls(
            from_date=parse_date_only_input(d.get("from_date", d.get("from"))),
            to_date=parse_date_only_input(d.get("to_date", d.get("to"))),
            types=tuple(t.lower() for t in _split_csv(d.get("type", d.get("types")))),
            contains=_lower_or_none(d.get("contains")),
            min_tss=to_number(d.get("min_tss")),
            max_tss=to_number(d.get("max_tss")),
            sort=SORT_ALIASES.get(sort, sort),
            result_limit=_positive_int(d.get("result_limit")),
            fields=tuple(_split_csv(d.get("fields"))),
        )
        config.validate()
        return config

    def validate(self):
        """
        Raises:
            ValueError: If the sort mode is unknown.
        """
        if self.sort is not None and self.sort not in SORT_MODES:
            raise ValueError(
                f"Invalid sort '{self.sort}'. "
                f"Must be one of: {', '.join(SORT_MODES + tuple(SORT_ALIASES))}"
            )

    @property
    def has_date_range(self) -> bool:
        return self.from_date is not None or self.to_date is not None

    @property
    def has_load_range(self) -> bool:
        return self.min_tss is not None or self.max_tss is not None

    @property
    def is_empty(self) -> bool:
        return not (
            self.has_date_range or self.types or self.contains or self.has_load_range
            or self.sort or self.result_limit or self.fields
        )

    def summary(self, input_count: int, output_count: int) -> Dict[str, Any]:
        return {
            "from": self.from_date,
            "to": self.to_date,
            "type": list(self.types),
            "contains": self.contains,
            "minTss": self.min_tss,
            "maxTss": self.max_tss,
            "sort": self.sort,
            "resultLimit": self.result_limit,
            "fields": list(self.fields),
            "inputCount": input_count,
            "outputCount": output_count,
        }


@dataclass
class QueryIntent:
    """What the caller asked for, before any network call."""
    target: Optional[str] = None
    force_public: bool = False
    time_zone: Optional[str] = None
    # Operation name when only private mode can serve the call.
    private_only: Optional[str] = None

    def __post_init__(self):
        if self.target is not None:
            self.target = self.target.strip() or None


@dataclass
class QueryContext:
    """Resolved mode, identity and base data for one call.

    Private contexts always carry the member info (with memberId) and the
    timeline. Public contexts carry only a username and day aggregates.
    """
    mode: QueryMode
    target_username: str
    member_info: Optional[Dict[str, Any]] = None
    timeline: Optional[Dict[str, Any]] = None
    public_tss: Optional[Dict[str, Any]] = None
    public_days: List[Dict[str, Any]] = field(default_factory=list)
    time_zone: Optional[str] = None

    def __post_init__(self):
        if self.mode == QueryMode.PRIVATE:
            if not self.member_info or self.member_info.get("memberId") is None:
                raise ValueError("Private context requires member info with a memberId")
        elif self.member_info is not None:
            raise ValueError("Public context must not carry member identity")

    @property
    def is_private(self) -> bool:
        return self.mode == QueryMode.PRIVATE

    @property
    def member_id(self) -> Optional[int]:
        return self.member_info.get("memberId") if self.member_info else None

    @property
    def username(self) -> str:
        return self.target_username

    @property
    def member(self) -> Dict[str, Any]:
        if self.is_private:
            return {"memberId": self.member_id, "username": self.target_username}
        return {"username": self.target_username}
