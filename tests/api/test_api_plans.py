"""Tests for api/plans.py — Plan Builder views."""

import pytest
from unittest.mock import Mock, patch

from trainerroad_mcp.api.model import FilterConfig
from trainerroad_mcp.api.plans import get_plan
from trainerroad_mcp.errors import PrivateModeRequiredError


CURRENT = {
    "id": 7, "name": "Custom Plan", "start": "2024-01-01T00:00:00",
    "phases": [{"id": 1, "type": "base"}, {"id": 2, "type": "build"}],
}
PLANS = [
    {"id": 7, "name": "Custom Plan", "start": "2024-01-01T00:00:00"},
    {"id": 3, "name": "Old Plan", "start": "2023-01-01T00:00:00"},
]
PHASES = [
    {"id": 1, "type": "base", "planName": "Sweet Spot Base", "start": "2024-01-01T00:00:00"},
    {"id": 2, "type": "build", "planName": "Sustained Power Build", "start": "2024-03-01T00:00:00"},
    {"id": 3, "type": "specialty", "planName": "Gran Fondo", "start": "2024-05-01T00:00:00"},
]


@pytest.fixture
def mock_plans():
    with patch("trainerroad_mcp.api.plans.sdk_plans") as mock_sdk:
        mock_sdk.get_current_custom_plan.return_value = CURRENT
        mock_sdk.get_all_user_plans.return_value = PLANS
        mock_sdk.get_plan_phases.return_value = PHASES
        yield mock_sdk


def test_default_view_is_phases(mock_plans, private_context):
    payload = get_plan(Mock(), private_context)
    assert payload["query"]["view"] == "phases"
    assert [r["id"] for r in payload["records"]] == [1, 2, 3]
    assert payload["counts"] == {"plans": 2, "phases": 3, "currentPlan": 1}
    assert "phases" in payload
    assert "plans" not in payload


def test_current_view(mock_plans, private_context):
    payload = get_plan(Mock(), private_context, view="CURRENT")
    assert payload["count"] == 1
    assert payload["records"][0]["phaseCount"] == 2


def test_plans_view_with_full(mock_plans, private_context):
    payload = get_plan(Mock(), private_context, view="plans", full=True)
    assert [r["name"] for r in payload["records"]] == ["Custom Plan", "Old Plan"]
    assert len(payload["plans"]) == 2
    assert len(payload["phases"]) == 3


def test_filters(mock_plans, private_context):
    payload = get_plan(
        Mock(), private_context, filters=FilterConfig.from_dict({"type": "build,specialty", "from": "2024-04-01"}),
    )
    assert [r["type"] for r in payload["records"]] == ["specialty"]


def test_no_current_plan(mock_plans, private_context):
    mock_plans.get_current_custom_plan.return_value = None
    payload = get_plan(Mock(), private_context, view="current")
    assert payload["records"] == []
    assert payload["counts"]["currentPlan"] == 0


def test_invalid_view(mock_plans, private_context):
    with pytest.raises(ValueError, match="Invalid view"):
        get_plan(Mock(), private_context, view="calendar")


def test_public_rejected(mock_plans, public_context):
    with pytest.raises(PrivateModeRequiredError):
        get_plan(Mock(), public_context)
    mock_plans.get_plan_phases.assert_not_called()
