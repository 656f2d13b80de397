"""
Authentication tools for the TrainerRoad MCP server.

Provides login, logout, identity, and a capabilities overview.
"""

import json
import logging

from trainerroad_mcp.client_factory import get_client, respond
from trainerroad_mcp.sdk import auth as sdk_auth
from trainerroad_mcp.sdk.session import utc_now_iso

logger = logging.getLogger(__name__)


CAPABILITIES = {
    "authModes": {
        "private": {
            "method": "cookie-session + anti-forgery form post",
            "browserRequired": False,
            "flow": [
                "GET /app/login?ReturnUrl=...",
                "parse __RequestVerificationToken + ReturnUrl",
                "POST /app/login (x-www-form-urlencoded)",
                "store SharedTrainerRoadAuth cookie",
            ],
        },
        "public": {
            "method": "username-based unauthenticated endpoint access",
            "browserRequired": False,
            "endpoint": "GET /app/api/tss/{username}",
            "limitations": [
                "No detailed workout names/durations from public endpoint",
                "No private react-calendar detail endpoints without auth",
            ],
        },
    },
    "endpointCoverage": {
        "privateFull": [
            "GET /app/api/member-info",
            "GET /app/api/react-calendar/{memberId}/timeline",
            "GET /app/api/react-calendar/{memberId}/activities (ids header)",
            "GET /app/api/react-calendar/{memberId}/planned-activities (ids header)",
            "GET /app/api/react-calendar/{memberId}/personal-records (ids header)",
            "GET /app/api/career/{memberId}/levels",
            "GET /app/api/career/{username}/new",
            "GET /app/api/weight-history/{memberId}/all",
            "GET /app/api/plan-builder/current-custom-plan/{username}",
            "GET /app/api/plan-builder/{username}/all-user-plans",
            "GET /app/api/plan-builder/{username}/plan-phases",
            "GET /app/api/ai-ftp-detection/can-use-ai-ftp/{memberId}",
            "GET /app/api/calendar/aiftp/{memberId}/ai-failure-status",
            "GET /app/api/seasons/{memberId}",
            "GET /app/api/onboarding/power-ranking?memberId={memberId}",
            "POST /app/api/personal-records/for-date-range/{memberId}?rowType=...&indoorOnly=...",
        ],
        "publicLimited": [
            "GET /app/api/tss/{username} (day-level TSS + FTP history)",
        ],
    },
    "filterOptions": {
        "from_date / to_date": "Inclusive YYYY-MM-DD range on each record's date",
        "record_type": "Comma-separated types; matches text or numeric codes",
        "contains": "Case-insensitive substring of name/title/zone/type labels",
        "min_tss / max_tss": "Inclusive TSS range; records without TSS are dropped",
        "sort": "date, date-desc, tss, tss-desc, name, name-desc",
        "result_limit": "Keep the first N records after sorting",
        "fields": "Comma-separated dotted paths to keep, e.g. id,name,tss",
        "records_only": "Return only the records envelope",
    },
    "notes": [
        "Tools pick private mode automatically when logged in; pass target or public to read a public profile.",
        "Public mode exposes day-level TSS, ride and planned-TSS signals plus FTP history.",
        "This uses a non-public TrainerRoad web API that could change without notice.",
    ],
}


def register_tools(app):
    """Register authentication and identity tools with the MCP app."""

    @app.tool()
    async def trainerroad_login(
        username: str = None,
        password: str = None,
        return_path: str = None,
    ) -> str:
        """
        Log in to TrainerRoad and save the cookie session.

        Falls back to TR_USERNAME / TR_PASSWORD when arguments are omitted.

        Args:
            username: TrainerRoad username
            password: TrainerRoad password
            return_path: Page upstream redirects to after login (default: your career page)

        Returns:
            JSON with ok, redirect and hasAuthCookie, or an error payload
        """
        client = get_client(username=username, password=password)
        return respond(lambda: sdk_auth.login(client, return_path=return_path))

    @app.tool()
    async def trainerroad_logout() -> str:
        """
        Clear the saved TrainerRoad session.

        Returns:
            Logout confirmation
        """
        client = get_client()
        sdk_auth.logout(client)
        logger.info("TrainerRoad session cleared")
        return json.dumps({"ok": True, "message": "Session cleared."}, indent=2)

    @app.tool()
    async def trainerroad_whoami() -> str:
        """
        Get the logged-in member's profile.

        Returns:
            JSON with memberId, username, ftp, weight and account settings
        """
        client = get_client()
        return respond(lambda: sdk_auth.get_member_info(client))

    @app.tool()
    async def get_capabilities() -> str:
        """
        Describe auth modes, covered endpoints and record filter options.

        Start here to decide between private and public mode.

        Returns:
            JSON capabilities overview
        """
        return json.dumps({"generatedAt": utc_now_iso(), **CAPABILITIES}, indent=2)

    return app
