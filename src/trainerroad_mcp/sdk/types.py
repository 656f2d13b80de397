"""
TrainerRoad API constants and code tables.

All TrainerRoad-specific codes, mappings and magic values live here.
"""

from enum import Enum


BASE_URL = "https://www.trainerroad.com"
APP_URL = f"{BASE_URL}/app"

DEFAULT_USER_AGENT = (
    "trainerroad-mcp/0.1 (unofficial; personal data export; +https://www.trainerroad.com)"
)

# Cookie set by a successful login form POST
AUTH_COOKIE = "SharedTrainerRoadAuth"

# Upstream silently truncates `ids` headers longer than this
BATCH_SIZE = 100

# Header asking upstream for camelCase field names
JSON_FORMAT_HEADER = "trainerroad-jsonformat"
JSON_FORMAT_CAMEL = "camel-case"
CACHE_CONTROL_HEADER = "tr-cache-control"
CACHE_CONTROL_USE_CACHE = "use-cache"

# First day TrainerRoad accepts for personal-record date ranges
POWER_RECORDS_EPOCH = "2013-05-10"


class QueryMode(str, Enum):
    """How a query was resolved."""
    PRIVATE = "private"
    PUBLIC = "public"


class PlanView(str, Enum):
    """Which plan-builder collection a plan query returns."""
    CURRENT = "current"
    PHASES = "phases"
    PLANS = "plans"


# Progression zone metadata keyed by upstream progressionId
PROGRESSION_ZONE_META = {
    33: {"zoneKey": "endurance", "zoneLabel": "Endurance", "sortOrder": 1},
    16: {"zoneKey": "tempo", "zoneLabel": "Tempo", "sortOrder": 2},
    84: {"zoneKey": "sweet-spot", "zoneLabel": "Sweet Spot", "sortOrder": 3},
    83: {"zoneKey": "threshold", "zoneLabel": "Threshold", "sortOrder": 4},
    85: {"zoneKey": "vo2-max", "zoneLabel": "VO2 Max", "sortOrder": 5},
    79: {"zoneKey": "anaerobic", "zoneLabel": "Anaerobic", "sortOrder": 6},
}

# Zones missing from the table sort after every known zone
UNKNOWN_ZONE_SORT_BASE = 1000

# Calendar annotation type codes
ANNOTATION_TYPE_LABELS = {
    1: "note",
    2: "time-off",
    3: "injury",
    4: "illness",
    9: "plan-marker",
}

SECONDS_PER_DAY = 86_400
