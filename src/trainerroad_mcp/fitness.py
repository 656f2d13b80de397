"""
Fitness tools for the TrainerRoad MCP server.

FTP and its AI prediction, progression levels, weight, power, and career.
Everything except get_ftp is private-only.
"""

from trainerroad_mcp.api import fitness as api_fitness
from trainerroad_mcp.client_factory import build_filters, get_client, resolve_context, respond
from trainerroad_mcp.utils import parse_date_only_input


def register_tools(app):
    """Register fitness tools with the MCP app."""

    @app.tool()
    async def get_ftp(
        history_limit: int = 50,
        target: str = None,
        public: bool = False,
        timezone: str = None,
    ) -> str:
        """
        Current FTP and FTP history.

        Works for public profiles too (history only).

        Args:
            history_limit: Most recent history points to return (default: 50)
            target: Username to read in public mode
            public: Force public mode even when logged in
            timezone: IANA zone for dates

        Returns:
            JSON with currentFtp, ftpHistoryCount and history records
        """
        client = get_client()
        return respond(lambda: api_fitness.get_ftp(
            client, resolve_context(client, target, public, timezone), history_limit=history_limit,
        ))

    @app.tool()
    async def get_ftp_prediction(
        target: str = None,
        public: bool = False,
        timezone: str = None,
    ) -> str:
        """
        AI FTP Detection outlook (requires login).

        Predicted FTP, prediction date, days until it, change vs. current FTP,
        and how many planned workouts fall before it.

        Args:
            target: Must be empty or your own username
            public: Rejected with PRIVATE_MODE_REQUIRED
            timezone: IANA zone for dates

        Returns:
            JSON with prediction fields and projected progression levels
        """
        client = get_client()
        return respond(lambda: api_fitness.get_ftp_prediction(
            client, resolve_context(client, target, public, timezone, private_only="ftp-prediction"),
        ))

    @app.tool()
    async def get_progression_levels(
        target: str = None,
        public: bool = False,
        record_type: str = None,
        contains: str = None,
        sort: str = None,
        result_limit: int = None,
        fields: str = None,
        records_only: bool = False,
        timezone: str = None,
    ) -> str:
        """
        Progression levels per training zone (requires login).

        Includes the latest level change and AI FTP Detection's projected levels.

        Args:
            target: Must be empty or your own username
            public: Rejected with PRIVATE_MODE_REQUIRED
            record_type: Comma-separated zone keys or progression ids (e.g. "threshold,vo2-max")
            contains: Case-insensitive text match on zone label
            sort: date, date-desc, name or name-desc (default: zone order)
            result_limit: Maximum records returned
            fields: Comma-separated fields to keep (e.g. "zoneLabel,recentLevel,aiDelta")
            records_only: Return only the records envelope
            timezone: IANA zone for dates

        Returns:
            JSON with one record per zone
        """
        client = get_client()

        def query():
            filters = build_filters(
                record_type=record_type, contains=contains,
                sort=sort, result_limit=result_limit, fields=fields,
            )
            context = resolve_context(client, target, public, timezone, private_only="levels")
            return api_fitness.get_levels(client, context, filters=filters)

        return respond(query, records_only)

    @app.tool()
    async def get_weight_history(
        target: str = None,
        public: bool = False,
        from_date: str = None,
        to_date: str = None,
        sort: str = None,
        result_limit: int = None,
        fields: str = None,
        records_only: bool = False,
        timezone: str = None,
    ) -> str:
        """
        Body-weight history (requires login).

        Args:
            target: Must be empty or your own username
            public: Rejected with PRIVATE_MODE_REQUIRED
            from_date: Keep entries on or after YYYY-MM-DD
            to_date: Keep entries on or before YYYY-MM-DD
            sort: date or date-desc
            result_limit: Maximum records returned
            fields: Comma-separated fields to keep
            records_only: Return only the records envelope
            timezone: IANA zone for dates

        Returns:
            JSON with weight records (value, units, dateOnly)
        """
        client = get_client()

        def query():
            filters = build_filters(from_date, to_date, sort=sort, result_limit=result_limit, fields=fields)
            context = resolve_context(client, target, public, timezone, private_only="weight-history")
            return api_fitness.get_weight_history(client, context, filters=filters)

        return respond(query, records_only)

    @app.tool()
    async def get_power_ranking(target: str = None, public: bool = False) -> str:
        """
        Best-power percentile ranking by duration (requires login).

        Args:
            target: Must be empty or your own username
            public: Rejected with PRIVATE_MODE_REQUIRED

        Returns:
            JSON with watts and watts/kg rankings per duration
        """
        client = get_client()
        return respond(lambda: api_fitness.get_power_ranking(
            client, resolve_context(client, target, public, private_only="power-ranking"),
        ))

    @app.tool()
    async def get_power_records(
        start_date: str = None,
        end_date: str = None,
        row_type: int = 101,
        indoor_only: bool = False,
        slot: int = 1,
        limit: int = 25,
        full: bool = False,
        target: str = None,
        public: bool = False,
        timezone: str = None,
    ) -> str:
        """
        Personal power records in a date range (requires login).

        Args:
            start_date: YYYY-MM-DD (default: 2013-05-10)
            end_date: YYYY-MM-DD (default: today)
            row_type: Upstream record table (default: 101)
            indoor_only: Only indoor rides
            slot: Result slot (default: 1)
            limit: Top records by watts (default: 25)
            full: Return every raw record instead of the top compact ones
            target: Must be empty or your own username
            public: Rejected with PRIVATE_MODE_REQUIRED
            timezone: IANA zone used for the default end date

        Returns:
            JSON with power records (seconds, watts, workoutDate, workoutRecordName)
        """
        client = get_client()

        def query():
            for value in (start_date, end_date):
                parse_date_only_input(value)
            return api_fitness.get_power_records(
                client,
                resolve_context(client, target, public, timezone, private_only="power-records"),
                start_date=start_date,
                end_date=end_date,
                row_type=row_type,
                indoor_only=indoor_only,
                slot=slot,
                limit=limit,
                full=full,
            )

        return respond(query)

    @app.tool()
    async def get_career(target: str = None, public: bool = False) -> str:
        """
        Career page summary and training seasons (requires login).

        Args:
            target: Must be empty or your own username
            public: Rejected with PRIVATE_MODE_REQUIRED

        Returns:
            JSON with the raw career summary and seasons
        """
        client = get_client()
        return respond(lambda: api_fitness.get_career(
            client, resolve_context(client, target, public, private_only="career"),
        ))

    return app
