"""
High-Level API — domain layer over the TrainerRoad SDK.

Every query function returns a clean dict an agent can reason about.

Modules:
    records  — Normalizers        (compact record shapes, day aggregates)
    filters  — Record pipeline    (filter, sort, limit, project)
    context  — Who are we asking? (private vs. public resolution)
    workouts — What's on / done?  (today, future, past)
    calendar — What's marked?     (timeline summary, events, annotations)
    fitness  — How fit?           (FTP, AI FTP prediction, levels, weight, power)
    plans    — What's the plan?   (current plan, phases, all plans)
"""

# Model
from trainerroad_mcp.api.model import FilterConfig, QueryContext, QueryIntent

# Pipeline
from trainerroad_mcp.api.filters import (
    RecordResolver,
    apply_filters,
    filtered_payload,
    records_only,
)

# Context
from trainerroad_mcp.api.context import (
    choose_mode,
    require_private_mode,
    resolve_query_context,
)

# Workouts
from trainerroad_mcp.api.workouts import get_future_workouts, get_past_workouts, get_today

# Calendar
from trainerroad_mcp.api.calendar import get_annotations, get_events, get_timeline_summary

# Fitness
from trainerroad_mcp.api.fitness import (
    get_career,
    get_ftp,
    get_ftp_prediction,
    get_levels,
    get_power_ranking,
    get_power_records,
    get_weight_history,
)

# Plans
from trainerroad_mcp.api.plans import get_plan

__all__ = [
    # Model
    "FilterConfig", "QueryContext", "QueryIntent",
    # Pipeline
    "RecordResolver", "apply_filters", "filtered_payload", "records_only",
    # Context
    "choose_mode", "require_private_mode", "resolve_query_context",
    # Workouts
    "get_future_workouts", "get_past_workouts", "get_today",
    # Calendar
    "get_annotations", "get_events", "get_timeline_summary",
    # Fitness
    "get_career", "get_ftp", "get_ftp_prediction", "get_levels",
    "get_power_ranking", "get_power_records", "get_weight_history",
    # Plans
    "get_plan",
]
