"""
Shared pytest fixtures for TrainerRoad MCP testing.
"""
import json
import pytest
import requests
from unittest.mock import Mock, patch

from mcp.server.fastmcp import FastMCP

from trainerroad_mcp.api.model import QueryContext
from trainerroad_mcp.api.records import flatten_public_tss_days
from trainerroad_mcp.sdk.client import TrainerRoadClient
from trainerroad_mcp.sdk.types import QueryMode


def get_tool_result_text(result):
    """Extract text from tool result.

    FastMCP call_tool returns either a list of TextContent or a tuple
    (list_of_TextContent, metadata_dict). This helper extracts the text
    from the first TextContent item.
    """
    # Handle tuple return: (content_list, metadata)
    if isinstance(result, tuple) and len(result) > 0:
        result = result[0]
    if isinstance(result, list) and len(result) > 0:
        if hasattr(result[0], 'text'):
            return result[0].text
    return str(result)


def get_tool_result_json(result):
    return json.loads(get_tool_result_text(result))


class RawHeaders:
    """Stands in for urllib3's header dict, which keeps repeated Set-Cookie lines apart."""

    def __init__(self, set_cookies):
        self._set_cookies = list(set_cookies)

    def getlist(self, name):
        return list(self._set_cookies) if name.lower() == "set-cookie" else []


def make_response(status_code=200, body=None, cookies=None, headers=None, reason="OK", history=None,
                  set_cookies=None):
    """Build a real requests.Response without touching the network.

    `cookies` become simple Set-Cookie lines; `set_cookies` are passed through verbatim.
    """
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    if body is None:
        content = b""
    elif isinstance(body, (dict, list)):
        content = json.dumps(body).encode("utf-8")
    else:
        content = str(body).encode("utf-8")
    response._content = content
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    lines = [f"{name}={value}; Path=/" for name, value in (cookies or {}).items()]
    response.raw = Mock(headers=RawHeaders(lines + list(set_cookies or [])))
    response.history = history or []
    return response


def create_test_app(module):
    """Helper to create a FastMCP app with a specific module registered."""
    app = FastMCP(f"Test TrainerRoad {module.__name__}")
    app = module.register_tools(app)
    return app


MEMBER_INFO = {
    "memberId": 4242,
    "username": "rider",
    "ftp": 250,
    "weight": 72.5,
}


@pytest.fixture
def session_file(tmp_path):
    return tmp_path / "session.json"


@pytest.fixture
def client(session_file):
    """Real client backed by a temp session file; patch its transport per test."""
    return TrainerRoadClient(username="rider", password="secret", session_file=session_file)


@pytest.fixture
def timeline():
    """Private timeline sample (dates around 2024-01-01)."""
    return {
        "activities": [
            {
                "id": 101,
                "name": "Pettit",
                "started": "2024-01-02T04:30:00Z",
                "durationInSeconds": 5400,
                "tss": 55,
                "activityType": "ride",
            },
            {
                "id": 102,
                "name": "Baxter",
                "started": "2023-12-30T15:00:00Z",
                "durationInSeconds": 3600,
                "tss": 70,
                "activityType": "ride",
            },
            {
                "id": 103,
                "name": "Outside Run",
                "started": "2023-12-28T12:00:00Z",
                "durationInSeconds": 1800,
                "tss": None,
                "activityType": "run",
            },
        ],
        "plannedActivities": [
            {"id": 201, "name": "Spruce", "date": {"year": 2024, "month": 1, "day": 3},
             "workoutId": 9001, "type": 1, "tss": 48},
            {"id": 202, "name": "Rest Day Note", "date": {"year": 2024, "month": 1, "day": 4},
             "type": 5, "tss": 0},
            {"id": 203, "name": "Mary Austin", "date": {"year": 2024, "month": 1, "day": 10},
             "workoutId": 9002, "type": 1, "tss": 88},
        ],
        "events": [
            {"id": 301, "name": "Spring Crit", "date": {"year": 2024, "month": 4, "day": 6},
             "racePriority": "A", "activityType": "ride", "tss": 90},
            {"id": 302, "name": "Gravel Fondo", "date": {"year": 2024, "month": 6, "day": 1},
             "racePriority": "B", "activityType": "ride", "tss": 210},
        ],
        "annotations": [
            {"id": 401, "typeId": 2, "date": {"year": 2024, "month": 1, "day": 20},
             "duration": 172800, "groupId": None},
            {"id": 402, "typeId": 4, "date": {"year": 2024, "month": 2, "day": 1},
             "duration": 86400},
        ],
        "fitnessThresholds": [],
    }


@pytest.fixture
def public_tss():
    """Public /tss/{username} sample: two weeks, one duplicated date."""
    return {
        "tssByDay": [
            [
                {"date": "2024-01-01T00:00:00", "tss": 40, "tssTrainerRoad": 40, "tssOther": 0,
                 "plannedTssTrainerRoad": 0, "plannedTssOther": 0, "hasRides": True},
                {"date": "2024-01-02T00:00:00", "tss": 0, "tssTrainerRoad": 0, "tssOther": 0,
                 "plannedTssTrainerRoad": 60, "plannedTssOther": 5, "hasRides": False},
            ],
            [
                {"date": "2024-01-02T00:00:00", "tss": 999, "hasRides": True},
                {"date": "2024-01-03T00:00:00", "Tss": "25", "TssTrainerRoad": 25,
                 "PlannedTssTrainerRoad": 0, "HasRides": True},
            ],
        ],
        "ftpRecordsDate": [
            {"date": "2023-06-01T00:00:00Z", "value": 240},
            {"date": "2023-12-01T00:00:00Z", "value": 255},
        ],
    }


@pytest.fixture
def private_context(timeline):
    return QueryContext(
        mode=QueryMode.PRIVATE,
        target_username="rider",
        member_info=dict(MEMBER_INFO),
        timeline=timeline,
        time_zone="UTC",
    )


@pytest.fixture
def public_context(public_tss):
    return QueryContext(
        mode=QueryMode.PUBLIC,
        target_username="alice",
        public_tss=public_tss,
        public_days=flatten_public_tss_days(public_tss, "UTC"),
        time_zone="UTC",
    )


@pytest.fixture
def mock_client():
    """Mock client for tool tests; api functions are patched individually."""
    client = Mock()
    client.has_auth_cookie = True
    client.has_credentials = True
    return client


@pytest.fixture(autouse=True)
def mock_get_client(mock_client):
    """Auto-mock client_factory.get_client in all tool modules.

    Yields the mock function (not the client) so tests can inspect how
    the client was built.
    """
    get_client_fn = Mock(return_value=mock_client)

    modules_to_patch = [
        "trainerroad_mcp.auth_tool",
        "trainerroad_mcp.timeline",
        "trainerroad_mcp.workouts",
        "trainerroad_mcp.fitness",
        "trainerroad_mcp.plans",
    ]

    patchers = []
    for module in modules_to_patch:
        p = patch(f"{module}.get_client", get_client_fn)
        p.start()
        patchers.append(p)

    yield get_client_fn

    for p in patchers:
        p.stop()


@pytest.fixture
def mock_resolve_context(private_context):
    """Patch resolve_context in every tool module to return the private context."""
    resolve = Mock(return_value=private_context)
    modules_to_patch = [
        "trainerroad_mcp.timeline",
        "trainerroad_mcp.workouts",
        "trainerroad_mcp.fitness",
        "trainerroad_mcp.plans",
    ]
    patchers = [patch(f"{module}.resolve_context", resolve) for module in modules_to_patch]
    for p in patchers:
        p.start()

    yield resolve

    for p in patchers:
        p.stop()
