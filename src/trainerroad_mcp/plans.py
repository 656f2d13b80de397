"""
Training plan tools for the TrainerRoad MCP server.

Delegates to api.plans for the heavy lifting.
"""

from trainerroad_mcp.api import plans as api_plans
from trainerroad_mcp.client_factory import build_filters, get_client, resolve_context, respond


def register_tools(app):
    """Register training plan tools with the MCP app."""

    @app.tool()
    async def get_training_plan(
        view: str = "phases",
        full: bool = False,
        target: str = None,
        public: bool = False,
        from_date: str = None,
        to_date: str = None,
        record_type: str = None,
        contains: str = None,
        sort: str = None,
        result_limit: int = None,
        fields: str = None,
        records_only: bool = False,
        timezone: str = None,
    ) -> str:
        """
        Plan Builder data (requires login).

        Args:
            view: Which collection becomes records: "current", "phases" (default) or "plans"
            full: Also include the collections not selected by view
            target: Must be empty or your own username
            public: Rejected with PRIVATE_MODE_REQUIRED
            from_date: Keep records starting on or after YYYY-MM-DD
            to_date: Keep records starting on or before YYYY-MM-DD
            record_type: Comma-separated phase types to keep (e.g. "base,build")
            contains: Case-insensitive text match on plan name
            sort: date, date-desc, name or name-desc
            result_limit: Maximum records returned
            fields: Comma-separated fields to keep
            records_only: Return only the records envelope
            timezone: IANA zone for dates

        Returns:
            JSON with plan records and counts of plans, phases and the current plan
        """
        client = get_client()

        def query():
            filters = build_filters(
                from_date, to_date, record_type, contains,
                sort=sort, result_limit=result_limit, fields=fields,
            )
            context = resolve_context(client, target, public, timezone, private_only="plan")
            return api_plans.get_plan(client, context, view=view, full=full, filters=filters)

        return respond(query, records_only)

    return app
