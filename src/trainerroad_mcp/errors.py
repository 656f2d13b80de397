"""
Error types for the TrainerRoad client.

Every failure the client raises on purpose derives from TrainerRoadError so the
tool layer can convert it into a structured error payload.
"""


class TrainerRoadError(Exception):
    """Base class for all client errors."""

    error_code = "TRAINERROAD_ERROR"
    tip = None


class InvalidTimeZone(TrainerRoadError, ValueError):
    """Timezone string is not a recognized IANA zone."""

    error_code = "INVALID_TIMEZONE"
    tip = 'Use an IANA timezone like "America/New_York".'

    def __init__(self, zone: str):
        self.zone = zone
        super().__init__(
            f'Invalid timezone "{zone}". Use an IANA timezone like "America/New_York".'
        )


class AuthenticationError(TrainerRoadError):
    """Login handshake failed."""

    error_code = "AUTHENTICATION_FAILED"
    tip = "Check your TrainerRoad username and password, then log in again."


class UpstreamRequestError(TrainerRoadError):
    """Non-2xx response, or a body that was expected to be JSON and was not."""

    error_code = "UPSTREAM_REQUEST_FAILED"
    body_limit = 500

    def __init__(self, status_code: int, body: str, path: str, reason: str = ""):
        self.status_code = status_code
        self.body = (body or "")[: self.body_limit]
        self.path = path
        detail = f"{status_code} {reason}".strip()
        super().__init__(f"Request failed: {detail} for {path} -> {self.body}")


class NoTargetError(TrainerRoadError):
    """Public mode requested with neither a target nor an authenticated identity."""

    error_code = "NO_TARGET"
    tip = "Log in for private mode, or pass a target username for public mode."

    def __init__(self):
        super().__init__(
            "No target profile available. Pass a target username for public mode, "
            "or log in for private mode."
        )


class PublicProfileUnavailableError(TrainerRoadError):
    """Public aggregate fetch failed; upstream detail is deliberately dropped."""

    error_code = "PUBLIC_PROFILE_UNAVAILABLE"
    tip = "Check the username spelling, or log in to read your own private data."

    def __init__(self, username: str, upstream_status: int = None):
        self.username = username
        # Kept off the message; 404 and 403 look the same to callers.
        self.upstream_status = upstream_status
        super().__init__(
            f'Public profile data is unavailable for "{username}". '
            "The profile may be private, or the username may not exist."
        )


class PrivateModeRequiredError(TrainerRoadError):
    """A private-only operation was invoked in a public-resolved context."""

    error_code = "PRIVATE_MODE_REQUIRED"
    tip = "Log in first and call without a foreign target or the public flag."

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"{operation} requires private authenticated mode. Log in first and run "
            "without public/target options for full private data access."
        )
