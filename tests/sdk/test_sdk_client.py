"""Tests for SDK client (HTTP transport, cookie jar, batching, errors)."""

import json
import pytest
from unittest.mock import patch

from trainerroad_mcp.errors import UpstreamRequestError
from trainerroad_mcp.sdk.client import CookieJar, TrainerRoadClient, chunked, run_concurrently
from trainerroad_mcp.sdk.types import AUTH_COOKIE, BATCH_SIZE
from tests.conftest import make_response


class TestCookieJar:
    def test_last_write_wins(self):
        jar = CookieJar({"a": "1"})
        jar.set("a", "2")
        assert jar.get("a") == "2"
        assert len(jar) == 1

    def test_cookie_header(self):
        jar = CookieJar({"a": "1", "b": "2"})
        assert jar.cookie_header() == "a=1; b=2"

    def test_apply_response_includes_redirect_hops(self):
        jar = CookieJar()
        hop = make_response(302, cookies={"hop": "h"})
        final = make_response(200, cookies={"final": "f", "hop": "h2"}, history=[hop])

        jar.apply_response(final)

        assert jar.to_dict() == {"hop": "h2", "final": "f"}

    def test_deletion_header_overwrites_existing_cookie(self):
        jar = CookieJar({"A": "1"})

        jar.apply_response(make_response(200, set_cookies=["A=; Max-Age=0; Path=/"]))

        assert jar.get("A") == ""

    def test_expired_cookie_still_applied(self):
        jar = CookieJar({"A": "1"})

        jar.apply_response(make_response(
            200, set_cookies=["A=gone; Expires=Thu, 01 Jan 1970 00:00:00 GMT; Domain=other.example"],
        ))

        assert jar.get("A") == "gone"

    def test_apply_set_cookies_skips_nameless_segments(self):
        jar = CookieJar()
        jar.apply_set_cookies(["=orphan", "novalue", " b = 2 ; HttpOnly", "c=x=y"])
        assert jar.to_dict() == {"b": "2", "c": "x=y"}

    def test_response_without_raw_headers_is_ignored(self):
        jar = CookieJar({"a": "1"})
        response = make_response(200)
        response.raw = None

        jar.apply_response(response)

        assert jar.to_dict() == {"a": "1"}

    def test_clear(self):
        jar = CookieJar({"a": "1"})
        jar.clear()
        assert len(jar) == 0
        assert "a" not in jar


class TestClientInit:
    def test_loads_cookies_from_session_file(self, session_file):
        session_file.write_text(json.dumps({"cookies": {AUTH_COOKIE: "abc"}}))
        client = TrainerRoadClient(session_file=session_file)
        assert client.has_auth_cookie is True

    def test_no_session_file(self):
        client = TrainerRoadClient()
        assert client.has_auth_cookie is False
        assert client.save_session() is None

    def test_has_credentials(self):
        assert TrainerRoadClient(username="u", password="p").has_credentials is True
        assert TrainerRoadClient(username="u").has_credentials is False

    def test_url_for(self):
        client = TrainerRoadClient()
        assert client.url_for("app/api/x") == "https://www.trainerroad.com/app/api/x"
        assert client.url_for("/app/api/x") == "https://www.trainerroad.com/app/api/x"
        assert client.url_for("https://other.example/x") == "https://other.example/x"


class TestMakeRequest:
    def test_sends_jar_cookies_and_stores_new_ones(self, client):
        client.jar.set("existing", "1")
        with patch.object(client._session, "request") as mock_request:
            mock_request.return_value = make_response(200, body={}, cookies={"fresh": "2"})
            client.make_request("GET", "/app/api/member-info")

            kwargs = mock_request.call_args.kwargs
            assert kwargs["cookies"] == {"existing": "1"}
            assert kwargs["headers"]["User-Agent"]
            assert mock_request.call_args[0][0] == "GET"

        assert client.jar.get("fresh") == "2"

    def test_expired_auth_cookie_is_replaced_and_not_counted(self, client):
        client.jar.set(AUTH_COOKIE, "stale")
        with patch.object(client._session, "request") as mock_request:
            mock_request.return_value = make_response(
                200, body={}, set_cookies=[f"{AUTH_COOKIE}=; Max-Age=0; Path=/"],
            )
            client.make_request("GET", "/app/api/member-info")
            mock_request.return_value = make_response(200, body={})
            client.make_request("GET", "/app/api/member-info")

            assert mock_request.call_args.kwargs["cookies"] == {AUTH_COOKIE: ""}

        assert client.has_auth_cookie is False


class TestRequestJson:
    def test_sends_api_headers(self, client):
        with patch.object(client._session, "request") as mock_request:
            mock_request.return_value = make_response(200, body={"ok": True})
            result = client.request_json("GET", "/app/api/x", referer_username="rider", use_cache=True)

            headers = mock_request.call_args.kwargs["headers"]
            assert headers["trainerroad-jsonformat"] == "camel-case"
            assert headers["tr-cache-control"] == "use-cache"
            assert headers["Referer"] == "https://www.trainerroad.com/app/career/rider"

        assert result == {"ok": True}

    def test_empty_body_returns_none(self, client):
        with patch.object(client._session, "request") as mock_request:
            mock_request.return_value = make_response(200, body="")
            assert client.request_json("GET", "/app/api/x") is None

    def test_non_2xx_raises_with_truncated_body(self, client):
        with patch.object(client._session, "request") as mock_request:
            mock_request.return_value = make_response(500, body="x" * 2000, reason="Server Error")
            with pytest.raises(UpstreamRequestError) as exc_info:
                client.request_json("GET", "/app/api/x")

        error = exc_info.value
        assert error.status_code == 500
        assert len(error.body) == 500
        assert "/app/api/x" in str(error)
        assert "500 Server Error" in str(error)

    def test_invalid_json_raises(self, client):
        with patch.object(client._session, "request") as mock_request:
            mock_request.return_value = make_response(200, body="<html>login</html>")
            with pytest.raises(UpstreamRequestError, match="invalid JSON"):
                client.request_json("GET", "/app/api/x")


class TestFetchBatched:
    def test_batches_ids_in_order(self, client):
        ids = list(range(250))
        with patch.object(client, "request_json") as mock_json:
            mock_json.side_effect = lambda *a, **kw: [{"id": i} for i in kw["headers"]["ids"].split(",")]
            result = client.fetch_batched("/app/api/react-calendar/1/activities", ids, referer_username="rider")

        assert mock_json.call_count == 3
        sent = [c.kwargs["headers"]["ids"].split(",") for c in mock_json.call_args_list]
        assert [len(batch) for batch in sent] == [BATCH_SIZE, BATCH_SIZE, 50]
        assert sent[0][0] == "0"
        assert sent[2][-1] == "249"
        assert [r["id"] for r in result] == [str(i) for i in ids]
        assert all(c.kwargs["use_cache"] is True for c in mock_json.call_args_list)

    def test_empty_ids_makes_no_call(self, client):
        with patch.object(client, "request_json") as mock_json:
            assert client.fetch_batched("/x", []) == []
            assert client.fetch_batched("/x", [], merge_by_key=True) == {}
            mock_json.assert_not_called()

    def test_merge_by_key(self, client):
        with patch.object(client, "request_json") as mock_json:
            mock_json.side_effect = [{"1": ["a"]}, {"101": ["b"]}]
            result = client.fetch_batched("/x", range(101), merge_by_key=True)

        assert result == {"1": ["a"], "101": ["b"]}

    def test_null_batch_payload_is_skipped(self, client):
        with patch.object(client, "request_json", return_value=None):
            assert client.fetch_batched("/x", [1, 2]) == []


class TestSessionPersistence:
    def test_save_and_clear(self, client, session_file):
        client.jar.set(AUTH_COOKIE, "abc")
        client.save_session(authenticatedAt="2024-01-01T00:00:00.000Z")

        saved = json.loads(session_file.read_text())
        assert saved["cookies"] == {AUTH_COOKIE: "abc"}
        assert saved["authenticatedAt"] == "2024-01-01T00:00:00.000Z"

        client.clear_session()
        assert not session_file.exists()
        assert client.has_auth_cookie is False


class TestHelpers:
    def test_chunked(self):
        assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]
        assert list(chunked([], 2)) == []

    def test_run_concurrently_preserves_order(self):
        assert run_concurrently(lambda: 1, lambda: 2, lambda: 3) == [1, 2, 3]

    def test_run_concurrently_propagates_errors(self):
        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            run_concurrently(lambda: 1, boom)
