"""
Tests for TrainerRoad MCP authentication tools.

Tests login, logout, identity and the capabilities overview.
"""
import json
import pytest
from unittest.mock import patch

from trainerroad_mcp import auth_tool
from trainerroad_mcp.errors import AuthenticationError, UpstreamRequestError
from tests.conftest import create_test_app, get_tool_result_json, MEMBER_INFO


@pytest.fixture
def app_with_auth():
    """Create FastMCP app with auth tools registered."""
    return create_test_app(auth_tool)


@pytest.fixture
def mock_sdk_auth():
    with patch("trainerroad_mcp.auth_tool.sdk_auth") as mock_auth:
        yield mock_auth


@pytest.mark.asyncio
async def test_login_success(app_with_auth, mock_sdk_auth, mock_get_client, mock_client):
    mock_sdk_auth.login.return_value = {"ok": True, "redirect": "/app/career/rider", "hasAuthCookie": True}

    result = await app_with_auth.call_tool("trainerroad_login", {"username": "rider", "password": "pw"})

    data = get_tool_result_json(result)
    assert data["ok"] is True
    assert data["hasAuthCookie"] is True
    mock_get_client.assert_called_once_with(username="rider", password="pw")
    mock_sdk_auth.login.assert_called_once_with(mock_client, return_path=None)


@pytest.mark.asyncio
async def test_login_failure_returns_error_payload(app_with_auth, mock_sdk_auth):
    mock_sdk_auth.login.side_effect = AuthenticationError("Login did not redirect. Status=200.")

    result = await app_with_auth.call_tool("trainerroad_login", {})

    data = get_tool_result_json(result)
    assert data["error_code"] == "AUTHENTICATION_FAILED"
    assert "did not redirect" in data["error"]
    assert "tip" in data


@pytest.mark.asyncio
async def test_login_missing_credentials(app_with_auth, mock_sdk_auth):
    mock_sdk_auth.login.side_effect = ValueError("Missing credentials")

    result = await app_with_auth.call_tool("trainerroad_login", {})

    data = get_tool_result_json(result)
    assert data == {"error": "Missing credentials", "error_code": "INVALID_INPUT"}


@pytest.mark.asyncio
async def test_logout(app_with_auth, mock_sdk_auth, mock_client):
    result = await app_with_auth.call_tool("trainerroad_logout", {})

    data = get_tool_result_json(result)
    assert data["ok"] is True
    mock_sdk_auth.logout.assert_called_once_with(mock_client)


@pytest.mark.asyncio
async def test_whoami(app_with_auth, mock_sdk_auth):
    mock_sdk_auth.get_member_info.return_value = dict(MEMBER_INFO)

    result = await app_with_auth.call_tool("trainerroad_whoami", {})

    data = get_tool_result_json(result)
    assert data["memberId"] == 4242
    assert data["username"] == "rider"


@pytest.mark.asyncio
async def test_whoami_not_logged_in(app_with_auth, mock_sdk_auth):
    mock_sdk_auth.get_member_info.side_effect = UpstreamRequestError(401, "", "/app/api/member-info", "Unauthorized")

    result = await app_with_auth.call_tool("trainerroad_whoami", {})

    data = get_tool_result_json(result)
    assert data["error_code"] == "UPSTREAM_REQUEST_FAILED"
    assert "401" in data["error"]


@pytest.mark.asyncio
async def test_get_capabilities(app_with_auth):
    result = await app_with_auth.call_tool("get_capabilities", {})

    data = get_tool_result_json(result)
    assert set(data["authModes"]) == {"private", "public"}
    assert "GET /app/api/tss/{username} (day-level TSS + FTP history)" in data["endpointCoverage"]["publicLimited"]
    assert "sort" in data["filterOptions"]
    assert data["generatedAt"].endswith("Z")


def test_capabilities_is_serializable():
    assert json.loads(json.dumps(auth_tool.CAPABILITIES))["authModes"]["public"]["browserRequired"] is False
