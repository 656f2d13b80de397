"""
Training plan queries.

Reads the current custom plan, every user plan and the plan phases, then
returns the requested view as filterable records.
"""

from typing import Any, Dict

from trainerroad_mcp.api.context import require_private_mode
from trainerroad_mcp.api.filters import filtered_payload
from trainerroad_mcp.api.model import FilterConfig, QueryContext
from trainerroad_mcp.api.records import (
    compact_current_plan,
    compact_plan_phase,
    compact_plan_summary,
)
from trainerroad_mcp.sdk import plans as sdk_plans
from trainerroad_mcp.sdk.client import TrainerRoadClient, run_concurrently
from trainerroad_mcp.sdk.types import PlanView


def _resolve_view(view: Any) -> PlanView:
    name = str(view or PlanView.PHASES.value).strip().lower()
    try:
        return PlanView(name)
    except ValueError:
        raise ValueError(
            f"Invalid view '{name}'. Must be one of: {', '.join(v.value for v in PlanView)}"
        )


def get_plan(
    client: TrainerRoadClient,
    context: QueryContext,
    view: str = "phases",
    full: bool = False,
    filters: FilterConfig = None,
) -> Dict[str, Any]:
    """
    Plan-builder data. Private mode only.

    Args:
        client: TrainerRoadClient instance
        context: Resolved query context
        view: "current", "phases" or "plans" (which collection becomes records)
        full: Include every collection, not just the selected view
        filters: Record filters

    Returns:
        Command payload; counts always cover all three collections

    Raises:
        ValueError: If view is unknown
        PrivateModeRequiredError: In public mode
    """
    require_private_mode(context, "plan")
    plan_view = _resolve_view(view)
    username = context.username

    current_raw, plans_raw, phases_raw = run_concurrently(
        lambda: sdk_plans.get_current_custom_plan(client, username),
        lambda: sdk_plans.get_all_user_plans(client, username),
        lambda: sdk_plans.get_plan_phases(client, username),
    )

    current = compact_current_plan(current_raw, context.time_zone)
    plans = [compact_plan_summary(p, context.time_zone) for p in plans_raw or []]
    phases = [compact_plan_phase(p, context.time_zone) for p in phases_raw or []]

    if plan_view == PlanView.CURRENT:
        records = [current] if current else []
    elif plan_view == PlanView.PLANS:
        records = plans
    else:
        records = phases

    extra = {
        "counts": {
            "plans": len(plans),
            "phases": len(phases),
            "currentPlan": 1 if current else 0,
        },
        "currentPlan": current,
    }
    if full or plan_view == PlanView.PLANS:
        extra["plans"] = plans
    if full or plan_view == PlanView.PHASES:
        extra["phases"] = phases

    return filtered_payload(
        context, "plan", records, filters, {"view": plan_view.value, "full": bool(full)}, **extra
    )
