"""
Timeline tools for the TrainerRoad MCP server.

Timeline overview, calendar events and annotations.
"""

from trainerroad_mcp.api import calendar as api_calendar
from trainerroad_mcp.client_factory import build_filters, get_client, resolve_context, respond


def register_tools(app):
    """Register timeline tools with the MCP app."""

    @app.tool()
    async def get_timeline(
        target: str = None,
        public: bool = False,
        timezone: str = None,
        full: bool = False,
    ) -> str:
        """
        Overview of the training calendar.

        Private mode counts activities, planned workouts and events.
        Public mode counts days, ride days and upcoming planned days.

        Args:
            target: Username to read in public mode (default: logged-in member)
            public: Force public mode even when logged in
            timezone: IANA zone for dates (default: TR_TIMEZONE, then host zone)
            full: Include the raw timeline (private) or every day aggregate (public)

        Returns:
            JSON timeline summary
        """
        client = get_client()
        return respond(lambda: api_calendar.get_timeline_summary(
            resolve_context(client, target, public, timezone), full=full,
        ))

    @app.tool()
    async def get_events(
        target: str = None,
        public: bool = False,
        from_date: str = None,
        to_date: str = None,
        record_type: str = None,
        contains: str = None,
        sort: str = None,
        result_limit: int = None,
        fields: str = None,
        full: bool = False,
        records_only: bool = False,
        timezone: str = None,
    ) -> str:
        """
        Races and other calendar events (requires login).

        Args:
            target: Must be empty or your own username; other profiles are not readable
            public: Rejected with PRIVATE_MODE_REQUIRED; this data is never public
            from_date: Keep events on or after YYYY-MM-DD
            to_date: Keep events on or before YYYY-MM-DD
            record_type: Comma-separated activity types to keep
            contains: Case-insensitive text match on the event name
            sort: date, date-desc, tss, tss-desc, name or name-desc
            result_limit: Maximum records returned
            fields: Comma-separated fields to keep (e.g. "name,dateOnly,racePriority")
            full: Return raw event payloads instead of compact records
            records_only: Return only the records envelope
            timezone: IANA zone for dates

        Returns:
            JSON with event records
        """
        client = get_client()

        def query():
            filters = build_filters(
                from_date, to_date, record_type, contains,
                sort=sort, result_limit=result_limit, fields=fields,
            )
            context = resolve_context(client, target, public, timezone, private_only="events")
            return api_calendar.get_events(context, full=full, filters=filters)

        return respond(query, records_only)

    @app.tool()
    async def get_annotations(
        target: str = None,
        public: bool = False,
        from_date: str = None,
        to_date: str = None,
        record_type: str = None,
        contains: str = None,
        sort: str = None,
        result_limit: int = None,
        fields: str = None,
        full: bool = False,
        records_only: bool = False,
        timezone: str = None,
    ) -> str:
        """
        Calendar annotations: notes, time off, injury, illness, plan markers (requires login).

        Args:
            target: Must be empty or your own username; other profiles are not readable
            public: Rejected with PRIVATE_MODE_REQUIRED; this data is never public
            from_date: Keep annotations on or after YYYY-MM-DD
            to_date: Keep annotations on or before YYYY-MM-DD
            record_type: Comma-separated labels or codes (e.g. "time-off,injury" or "2")
            contains: Case-insensitive text match on the label
            sort: date, date-desc, name or name-desc
            result_limit: Maximum records returned
            fields: Comma-separated fields to keep
            full: Return raw annotation payloads instead of compact records
            records_only: Return only the records envelope
            timezone: IANA zone for dates

        Returns:
            JSON with annotation records (typeLabel, dateOnly, durationDays, ...)
        """
        client = get_client()

        def query():
            filters = build_filters(
                from_date, to_date, record_type, contains,
                sort=sort, result_limit=result_limit, fields=fields,
            )
            context = resolve_context(client, target, public, timezone, private_only="annotations")
            return api_calendar.get_annotations(context, full=full, filters=filters)

        return respond(query, records_only)

    return app
