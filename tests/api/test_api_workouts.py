"""Tests for api/workouts.py — today, future and past workouts."""

import pytest
from dataclasses import replace
from unittest.mock import Mock, patch

from trainerroad_mcp.api.model import FilterConfig
from trainerroad_mcp.api.workouts import (
    filter_future_planned,
    filter_past_activities,
    get_future_workouts,
    get_past_workouts,
    get_today,
    resolve_window,
)

TODAY = "2024-01-02"


@pytest.fixture(autouse=True)
def fixed_today():
    with patch("trainerroad_mcp.api.workouts.today_in_time_zone", return_value=TODAY) as mock_today:
        yield mock_today


def _ids(payload):
    return [r.get("id") for r in payload["records"]]


class TestHelpers:
    def test_filter_future_planned(self, timeline):
        selected = filter_future_planned(timeline["plannedActivities"], "2024-01-04", "2024-01-10")
        assert [p["id"] for p in selected] == [202, 203]

    def test_filter_past_activities_newest_first(self, timeline):
        selected = filter_past_activities(timeline["activities"], "2023-12-01", "2024-01-31", "UTC")
        assert [a["id"] for a in selected] == [101, 102, 103]

    def test_filter_past_activities_uses_local_date(self, timeline):
        selected = filter_past_activities(timeline["activities"], "2024-01-02", "2024-01-02", "America/New_York")
        assert selected == []

    def test_resolve_window_defaults(self):
        assert resolve_window(None, None, "2024-01-01", "2024-01-31") == ("2024-01-01", "2024-01-31")

    def test_resolve_window_rejects_inverted_range(self):
        with pytest.raises(ValueError, match="Invalid range"):
            resolve_window("2024-02-01", "2024-01-01", "2024-01-01", "2024-01-31")


class TestFutureWorkouts:
    def test_private(self, private_context):
        payload = get_future_workouts(Mock(), private_context)
        assert payload["mode"] == "private"
        assert payload["command"] == "future"
        assert payload["query"]["fromDate"] == TODAY
        assert payload["query"]["toDate"] == "2024-03-02"
        assert _ids(payload) == [201, 202, 203]

    def test_private_filters(self, private_context):
        payload = get_future_workouts(
            Mock(), private_context, filters=FilterConfig.from_dict({"type": "1", "min_tss": 50}),
        )
        assert _ids(payload) == [203]

    @patch("trainerroad_mcp.api.workouts.sdk_calendar")
    def test_private_details(self, mock_calendar, private_context):
        client = Mock()
        mock_calendar.get_planned_activities_by_ids.return_value = [{"id": 201, "name": "Spruce", "duration": 3600}]

        payload = get_future_workouts(client, private_context, to_date="2024-01-03", details=True)

        mock_calendar.get_planned_activities_by_ids.assert_called_once_with(client, 4242, "rider", [201])
        assert payload["records"][0]["duration"] == 3600

    def test_public(self, public_context):
        payload = get_future_workouts(Mock(), public_context)
        assert payload["mode"] == "public"
        assert [d["date"] for d in payload["records"]] == ["2024-01-02"]
        assert payload["limitations"]

    def test_invalid_range(self, private_context):
        with pytest.raises(ValueError, match="Invalid range"):
            get_future_workouts(Mock(), private_context, from_date="2024-02-01", to_date="2024-01-01")


class TestPastWorkouts:
    def test_private_with_local_window(self, private_context):
        payload = get_past_workouts(Mock(), private_context, limit=2)
        assert _ids(payload) == [101, 102]
        first = payload["records"][0]
        assert first["startedAtLocal"] == "2024-01-02T04:30:00+00:00"
        assert first["crossesMidnightLocal"] is False

    def test_private_crossing_midnight_in_new_york(self, private_context):
        context = replace(private_context, time_zone="America/New_York")
        payload = get_past_workouts(Mock(), context)
        pettit = next(r for r in payload["records"] if r["id"] == 101)
        assert pettit["localDate"] == "2024-01-01"
        assert pettit["crossesMidnightLocal"] is True

    @patch("trainerroad_mcp.api.workouts.sdk_calendar")
    def test_private_details(self, mock_calendar, private_context):
        client = Mock()
        mock_calendar.get_activities_by_ids.return_value = [
            {"id": 101, "started": "2024-01-02T04:30:00Z", "durationInSeconds": 5400, "kj": 800},
        ]
        mock_calendar.get_personal_records_by_activity_ids.return_value = {"101": [{"Seconds": 5}, {"Seconds": 60}]}

        payload = get_past_workouts(client, private_context, limit=1, details=True)

        mock_calendar.get_activities_by_ids.assert_called_once_with(client, 4242, "rider", [101])
        assert payload["records"][0]["personalRecordCount"] == 2
        assert payload["records"][0]["kj"] == 800
        assert payload["personalRecords"] == {"101": [{"Seconds": 5}, {"Seconds": 60}]}

    def test_public(self, public_context):
        payload = get_past_workouts(Mock(), public_context)
        assert [d["date"] for d in payload["records"]] == ["2024-01-01"]
        assert payload["limitations"]


class TestToday:
    def test_private_completed(self, private_context):
        payload = get_today(Mock(), private_context)
        assert payload["counts"] == {"planned": 0, "completed": 1}
        assert payload["records"][0]["recordType"] == "completed"
        assert payload["records"][0]["personalRecordCount"] == 0

    def test_private_planned(self, private_context):
        payload = get_today(Mock(), private_context, date="2024-01-03")
        assert payload["counts"] == {"planned": 1, "completed": 0}
        assert payload["records"][0]["recordType"] == "planned"
        assert payload["query"]["date"] == "2024-01-03"

    def test_private_type_filter(self, private_context):
        payload = get_today(
            Mock(), private_context, filters=FilterConfig.from_dict({"type": "planned"}),
        )
        assert payload["records"] == []
        assert payload["counts"]["completed"] == 1

    def test_public(self, public_context):
        payload = get_today(Mock(), public_context)
        assert payload["counts"] == {"days": 1}
        assert payload["day"]["date"] == TODAY
        assert payload["limitations"]

    def test_public_missing_day(self, public_context):
        payload = get_today(Mock(), public_context, date="2024-02-01")
        assert payload["day"] is None
        assert payload["records"] == []

    def test_invalid_date(self, private_context):
        with pytest.raises(ValueError, match="Expected YYYY-MM-DD"):
            get_today(Mock(), private_context, date="tomorrow")
