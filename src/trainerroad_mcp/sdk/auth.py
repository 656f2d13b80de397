"""
TrainerRoad authentication SDK functions.

Login is a two-step form flow: GET the login page for its anti-forgery
token and ReturnUrl, then POST the form and expect a redirect that sets
the SharedTrainerRoadAuth cookie.
"""

import html
import re
from typing import Any, Dict, Optional
from urllib.parse import quote

from trainerroad_mcp.config import DEFAULT_RETURN_PATH
from trainerroad_mcp.errors import AuthenticationError
from trainerroad_mcp.sdk.client import TrainerRoadClient
from trainerroad_mcp.sdk.session import utc_now_iso
from trainerroad_mcp.sdk.types import AUTH_COOKIE, BASE_URL

_INPUT_TAG = re.compile(r"<input\b[^>]*>", re.IGNORECASE)
_ATTRIBUTE = re.compile(r'([\w:-]+)\s*=\s*"([^"]*)"')

TOKEN_FIELD = "__RequestVerificationToken"
RETURN_URL_FIELD = "ReturnUrl"


def find_hidden_input(page: str, name: str) -> Optional[str]:
    """Value of the hidden <input name=...> on an HTML page, if any."""
    for tag in _INPUT_TAG.findall(page or ""):
        attrs = {key.lower(): value for key, value in _ATTRIBUTE.findall(tag)}
        if attrs.get("name") == name and attrs.get("type", "").lower() == "hidden":
            value = attrs.get("value")
            return html.unescape(value) if value else None
    return None


def login(
    client: TrainerRoadClient,
    username: str = None,
    password: str = None,
    return_path: str = None,
) -> Dict[str, Any]:
    """
    Authenticate with TrainerRoad and persist the cookie session.

    GET /app/login?ReturnUrl=..., then POST /app/login

    Args:
        client: TrainerRoadClient instance
        username: TrainerRoad username (uses client's stored username if not provided)
        password: TrainerRoad password (uses client's stored password if not provided)
        return_path: Where upstream should redirect after login
            (defaults to the member's career page)

    Returns:
        {ok, redirect, hasAuthCookie}

    Raises:
        ValueError: If credentials are missing
        AuthenticationError: If the handshake does not complete
    """
    username = username or client._username
    password = password or client._password

    if not username or not password:
        raise ValueError("Missing credentials")

    client._username = username
    client._password = password

    return_path = return_path or f"{DEFAULT_RETURN_PATH}/{username}"
    if not return_path.startswith("/"):
        return_path = f"/{return_path}"
    login_path = f"/app/login?ReturnUrl={quote(return_path, safe='')}"

    page = client.make_request(
        "GET",
        login_path,
        headers={"Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"},
        allow_redirects=False,
    )

    token = find_hidden_input(page.text, TOKEN_FIELD)
    if not token:
        raise AuthenticationError(f"Could not locate {TOKEN_FIELD} on login page.")
    return_url = find_hidden_input(page.text, RETURN_URL_FIELD)
    if not return_url:
        raise AuthenticationError("Could not locate ReturnUrl hidden input on login page.")

    response = client.make_request(
        "POST",
        "/app/login",
        headers={
            "Origin": BASE_URL,
            "Referer": client.url_for(login_path),
        },
        data={
            "Username": username,
            "Password": password,
            RETURN_URL_FIELD: return_url,
            TOKEN_FIELD: token,
        },
        allow_redirects=False,
    )

    if not 300 <= response.status_code < 400:
        raise AuthenticationError(
            f"Login did not redirect. Status={response.status_code}. "
            f"Body preview={response.text[:300]}"
        )

    if not client.has_auth_cookie:
        raise AuthenticationError(
            f"Login redirect succeeded, but {AUTH_COOKIE} cookie is missing."
        )

    location = response.headers.get("Location", "")
    client.save_session(authenticatedAt=utc_now_iso(), lastLoginRedirect=location)

    return {"ok": True, "redirect": location, "hasAuthCookie": client.has_auth_cookie}


def get_member_info(client: TrainerRoadClient) -> Dict[str, Any]:
    """
    Get the authenticated member's profile.

    GET /app/api/member-info

    Returns:
        {memberId, username, ftp, weight, ...}
    """
    return client.request_json("GET", "/app/api/member-info")


def logout(client: TrainerRoadClient) -> None:
    """Forget the cookie session locally. There is no upstream call."""
    client.clear_session()
