"""
Query context resolution: private (authenticated) vs. public (day aggregates).

Decision table, evaluated top to bottom:

    identity  force_public  target                  -> mode     username
    --------  ------------  ----------------------  -------  ------------------
    yes       no            none or own username    private  identity username
    any       any           given                   public   target
    yes       any           none                    public   identity username
    no        any           none                    NoTargetError

The first matching row wins. An explicit target always beats the ambient
identity when choosing the public username.

Private-only operations (intent.private_only) turn every non-private outcome,
NoTargetError included, into PrivateModeRequiredError before any public fetch.
"""

from typing import Any, Dict, Optional, Tuple

import requests

from trainerroad_mcp.api.model import QueryContext, QueryIntent
from trainerroad_mcp.api.records import flatten_public_tss_days
from trainerroad_mcp.errors import (
    NoTargetError,
    PrivateModeRequiredError,
    PublicProfileUnavailableError,
    TrainerRoadError,
)
from trainerroad_mcp.sdk import auth as sdk_auth
from trainerroad_mcp.sdk import calendar as sdk_calendar
from trainerroad_mcp.sdk import career as sdk_career
from trainerroad_mcp.sdk.client import TrainerRoadClient
from trainerroad_mcp.sdk.types import QueryMode


def try_get_member_info(client: TrainerRoadClient) -> Optional[Dict[str, Any]]:
    """Authenticated identity, or None when there is none.

    Logs in first when ambient credentials exist but no auth cookie does.
    Any failure here means "no identity", never an error.
    """
    try:
        if not client.has_auth_cookie and client.has_credentials:
            sdk_auth.login(client)
        info = sdk_auth.get_member_info(client)
    except (TrainerRoadError, requests.RequestException):
        return None

    if not isinstance(info, dict):
        return None
    if info.get("memberId") is None or not info.get("username"):
        return None
    return info


def choose_mode(
    identity_username: Optional[str], target: Optional[str], force_public: bool
) -> Tuple[QueryMode, str]:
    """
    Apply the module's decision table.

    Returns:
        (mode, username to query)

    Raises:
        NoTargetError: If public mode is needed and there is no username to use
    """
    if identity_username and not force_public and target in (None, identity_username):
        return QueryMode.PRIVATE, identity_username
    if target:
        return QueryMode.PUBLIC, target
    if identity_username:
        return QueryMode.PUBLIC, identity_username
    raise NoTargetError()


def resolve_query_context(client: TrainerRoadClient, intent: QueryIntent = None) -> QueryContext:
    """
    Decide private vs. public mode and fetch the base data for it.

    Private mode fetches the member's timeline. Public mode fetches the
    public TSS aggregate and never touches member-scoped endpoints.

    Raises:
        NoTargetError: No identity and no target username
        PrivateModeRequiredError: intent.private_only is set and the call resolves
            to public mode, or there is no identity at all
        PublicProfileUnavailableError: Public aggregate could not be fetched
        UpstreamRequestError: Timeline fetch failed in private mode
    """
    intent = intent or QueryIntent()
    identity = try_get_member_info(client)
    try:
        mode, username = choose_mode(
            identity.get("username") if identity else None,
            intent.target,
            intent.force_public,
        )
    except NoTargetError:
        if intent.private_only:
            raise PrivateModeRequiredError(intent.private_only) from None
        raise

    if intent.private_only and mode != QueryMode.PRIVATE:
        raise PrivateModeRequiredError(intent.private_only)

    if mode == QueryMode.PRIVATE:
        timeline = sdk_calendar.get_timeline(client, identity["memberId"], username)
        return QueryContext(
            mode=mode,
            target_username=username,
            member_info=identity,
            timeline=timeline or {},
            time_zone=intent.time_zone,
        )

    try:
        public_tss = sdk_career.get_public_tss(client, username)
    except TrainerRoadError as e:
        raise PublicProfileUnavailableError(username, getattr(e, "status_code", None)) from None
    except requests.RequestException:
        raise PublicProfileUnavailableError(username) from None

    return QueryContext(
        mode=mode,
        target_username=username,
        public_tss=public_tss or {},
        public_days=flatten_public_tss_days(public_tss, intent.time_zone),
        time_zone=intent.time_zone,
    )


def require_private_mode(context: QueryContext, operation: str) -> None:
    """
    Raises:
        PrivateModeRequiredError: If the context was resolved in public mode
    """
    if context.mode != QueryMode.PRIVATE:
        raise PrivateModeRequiredError(operation)
