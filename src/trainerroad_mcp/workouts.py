"""
Workout tools for the TrainerRoad MCP server.

Today's workouts, upcoming planned workouts and completed history.
Each works logged in (full detail) or against a public profile (day TSS).
"""

from trainerroad_mcp.api import workouts as api_workouts
from trainerroad_mcp.client_factory import build_filters, get_client, resolve_context, respond
from trainerroad_mcp.utils import parse_date_only_input


def register_tools(app):
    """Register workout tools with the MCP app."""

    @app.tool()
    async def get_today_workouts(
        date: str = None,
        details: bool = False,
        target: str = None,
        public: bool = False,
        timezone: str = None,
        record_type: str = None,
        contains: str = None,
        fields: str = None,
        records_only: bool = False,
    ) -> str:
        """
        Planned and completed workouts for one day.

        Args:
            date: Day to show, YYYY-MM-DD (default: today in the chosen timezone)
            details: Fetch full workout details and personal records (private mode)
            target: Username to read in public mode
            public: Force public mode even when logged in
            timezone: IANA zone for dates and local start/end times
            record_type: "planned" or "completed" to keep only one kind
            contains: Case-insensitive text match on workout name
            fields: Comma-separated fields to keep (e.g. "recordType,name,started,tss")
            records_only: Return only the records envelope

        Returns:
            JSON with planned/completed records (private) or the day aggregate (public)
        """
        client = get_client()

        def query():
            filters = build_filters(record_type=record_type, contains=contains, fields=fields)
            parse_date_only_input(date)
            context = resolve_context(client, target, public, timezone)
            return api_workouts.get_today(client, context, date=date, details=details, filters=filters)

        return respond(query, records_only)

    @app.tool()
    async def get_future_workouts(
        from_date: str = None,
        to_date: str = None,
        days: int = 60,
        details: bool = False,
        target: str = None,
        public: bool = False,
        timezone: str = None,
        record_type: str = None,
        contains: str = None,
        min_tss: float = None,
        max_tss: float = None,
        sort: str = None,
        result_limit: int = None,
        fields: str = None,
        records_only: bool = False,
    ) -> str:
        """
        Upcoming planned workouts.

        Args:
            from_date: Window start, YYYY-MM-DD (default: today)
            to_date: Window end, YYYY-MM-DD (default: today + days)
            days: Window length when to_date is omitted (default: 60)
            details: Fetch full planned workout details (private mode)
            target: Username to read in public mode
            public: Force public mode even when logged in
            timezone: IANA zone for dates
            record_type: Comma-separated planned item types to keep
            contains: Case-insensitive text match on workout name
            min_tss: Minimum TSS
            max_tss: Maximum TSS
            sort: date, date-desc, tss, tss-desc, name or name-desc
            result_limit: Maximum records returned
            fields: Comma-separated fields to keep
            records_only: Return only the records envelope

        Returns:
            JSON with planned workouts (private) or days with planned TSS (public)
        """
        client = get_client()

        def query():
            filters = build_filters(
                record_type=record_type, contains=contains, min_tss=min_tss, max_tss=max_tss,
                sort=sort, result_limit=result_limit, fields=fields,
            )
            # Window dates are validated before any network call.
            for value in (from_date, to_date):
                parse_date_only_input(value)
            return api_workouts.get_future_workouts(
                client,
                resolve_context(client, target, public, timezone),
                from_date=from_date,
                to_date=to_date,
                days=days,
                details=details,
                filters=filters,
            )

        return respond(query, records_only)

    @app.tool()
    async def get_past_workouts(
        from_date: str = None,
        to_date: str = None,
        days: int = 60,
        limit: int = 30,
        details: bool = False,
        target: str = None,
        public: bool = False,
        timezone: str = None,
        record_type: str = None,
        contains: str = None,
        min_tss: float = None,
        max_tss: float = None,
        sort: str = None,
        result_limit: int = None,
        fields: str = None,
        records_only: bool = False,
    ) -> str:
        """
        Completed workouts, newest first.

        Private records include startedAtLocal, endedAtLocal and
        crossesMidnightLocal for the chosen timezone.

        Args:
            from_date: Window start, YYYY-MM-DD (default: today - days)
            to_date: Window end, YYYY-MM-DD (default: today)
            days: Window length when from_date is omitted (default: 60)
            limit: Most recent workouts kept before filtering (default: 30)
            details: Fetch full activity details and personal record counts (private mode)
            target: Username to read in public mode
            public: Force public mode even when logged in
            timezone: IANA zone for dates and local times
            record_type: Comma-separated activity types to keep
            contains: Case-insensitive text match on workout name
            min_tss: Minimum TSS
            max_tss: Maximum TSS
            sort: date, date-desc, tss, tss-desc, name or name-desc
            result_limit: Maximum records returned
            fields: Comma-separated fields to keep
            records_only: Return only the records envelope

        Returns:
            JSON with completed workouts (private) or ride days (public)
        """
        client = get_client()

        def query():
            filters = build_filters(
                record_type=record_type, contains=contains, min_tss=min_tss, max_tss=max_tss,
                sort=sort, result_limit=result_limit, fields=fields,
            )
            # Window dates are validated before any network call.
            for value in (from_date, to_date):
                parse_date_only_input(value)
            return api_workouts.get_past_workouts(
                client,
                resolve_context(client, target, public, timezone),
                from_date=from_date,
                to_date=to_date,
                days=days,
                limit=limit,
                details=details,
                filters=filters,
            )

        return respond(query, records_only)

    return app
