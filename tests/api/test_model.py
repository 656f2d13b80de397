"""Tests for api/model.py — FilterConfig, QueryIntent, QueryContext."""

import pytest

from trainerroad_mcp.api.model import FilterConfig, QueryContext, QueryIntent
from trainerroad_mcp.sdk.types import QueryMode


class TestFilterConfig:
    def test_from_dict_aliases(self):
        config = FilterConfig.from_dict({
            "from": "2024-01-01",
            "to_date": "2024-01-31",
            "type": "Ride, run",
            "contains": "Pettit",
            "min_tss": "10",
            "sort": "TSS-desc",
            "result_limit": "5",
            "fields": ["id", " name "],
        })
        assert config.from_date == "2024-01-01"
        assert config.to_date == "2024-01-31"
        assert config.types == ("ride", "run")
        assert config.contains == "pettit"
        assert config.min_tss == 10
        assert config.sort == "load-desc"
        assert config.result_limit == 5
        assert config.fields == ("id", "name")

    def test_from_none_is_empty(self):
        assert FilterConfig.from_dict(None).is_empty is True

    @pytest.mark.parametrize("limit", [0, -3, "abc", 2.5])
    def test_bad_limits_are_ignored(self, limit):
        assert FilterConfig.from_dict({"result_limit": limit}).result_limit is None

    def test_invalid_sort(self):
        with pytest.raises(ValueError, match="Invalid sort 'fastest'"):
            FilterConfig.from_dict({"sort": "fastest"})

    def test_invalid_date(self):
        with pytest.raises(ValueError, match="Expected YYYY-MM-DD"):
            FilterConfig.from_dict({"from": "01/02/2024"})

    def test_summary(self):
        summary = FilterConfig.from_dict({"type": "ride"}).summary(10, 3)
        assert summary["type"] == ["ride"]
        assert summary["inputCount"] == 10
        assert summary["outputCount"] == 3
        assert summary["from"] is None


class TestQueryIntent:
    def test_blank_target_is_none(self):
        assert QueryIntent(target="  ").target is None
        assert QueryIntent(target=" alice ").target == "alice"


class TestQueryContext:
    def test_private_requires_member_id(self):
        with pytest.raises(ValueError, match="memberId"):
            QueryContext(mode=QueryMode.PRIVATE, target_username="rider", member_info={"username": "rider"})

    def test_public_rejects_member_identity(self):
        with pytest.raises(ValueError, match="must not carry"):
            QueryContext(mode=QueryMode.PUBLIC, target_username="alice", member_info={"memberId": 1})

    def test_member_views(self, private_context, public_context):
        assert private_context.member == {"memberId": 4242, "username": "rider"}
        assert private_context.is_private is True
        assert public_context.member == {"username": "alice"}
        assert public_context.member_id is None
