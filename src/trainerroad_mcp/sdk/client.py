"""
TrainerRoad HTTP Client.

Handles HTTP transport, the cookie session, and request/response error
handling. Domain-specific endpoint calls are in the sibling modules
(sdk.auth, sdk.calendar, sdk.career, ...).

This uses a non-public TrainerRoad web API that could change without notice.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from http.cookiejar import DefaultCookiePolicy
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

import requests

from trainerroad_mcp.errors import UpstreamRequestError
from trainerroad_mcp.sdk.session import SessionStore
from trainerroad_mcp.sdk.types import (
    APP_URL,
    AUTH_COOKIE,
    BASE_URL,
    BATCH_SIZE,
    CACHE_CONTROL_HEADER,
    CACHE_CONTROL_USE_CACHE,
    DEFAULT_USER_AGENT,
    JSON_FORMAT_CAMEL,
    JSON_FORMAT_HEADER,
)

logger = logging.getLogger(__name__)


class _DetachedCookiePolicy(DefaultCookiePolicy):
    """Keeps requests.Session from storing or replaying cookies on its own.

    CookieJar below is the only place cookies live.
    """

    def set_ok(self, cookie, request):
        return False

    def return_ok(self, cookie, request):
        return False


class CookieJar:
    """Name -> value cookie map. Last write wins per cookie name."""

    def __init__(self, cookies: Dict[str, str] = None):
        self._cookies: Dict[str, str] = dict(cookies or {})
        self._lock = threading.Lock()

    def __contains__(self, name: str) -> bool:
        return name in self._cookies

    def __len__(self) -> int:
        return len(self._cookies)

    def get(self, name: str) -> Optional[str]:
        return self._cookies.get(name)

    def set(self, name: str, value: str) -> None:
        with self._lock:
            self._cookies[name] = value

    def clear(self) -> None:
        with self._lock:
            self._cookies.clear()

    def to_dict(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._cookies)

    def cookie_header(self) -> str:
        return "; ".join(f"{name}={value}" for name, value in self.to_dict().items())

    def apply_set_cookies(self, headers: Iterable[str]) -> None:
        """Store name=value from each Set-Cookie header, ignoring its attributes.

        Expiry is not honoured: a deletion header overwrites the value with "".
        """
        with self._lock:
            for header in headers:
                name, sep, value = header.split(";", 1)[0].partition("=")
                name = name.strip()
                if not sep or not name:
                    continue
                self._cookies[name] = value.strip()

    def apply_response(self, response: requests.Response) -> None:
        """Apply the raw Set-Cookie headers of a response and its redirect hops."""
        for hop in [*getattr(response, "history", []), response]:
            self.apply_set_cookies(_set_cookie_headers(hop))


def _set_cookie_headers(response) -> List[str]:
    # requests folds repeated Set-Cookie into one header; urllib3 keeps them apart.
    raw_headers = getattr(getattr(response, "raw", None), "headers", None)
    if raw_headers is None or not hasattr(raw_headers, "getlist"):
        return []
    return list(raw_headers.getlist("Set-Cookie"))


def run_concurrently(*calls: Callable[[], Any]) -> List[Any]:
    """Run zero-argument callables in parallel; results come back in call order.

    The first exception raised by any call propagates after all have finished.
    """
    with ThreadPoolExecutor(max_workers=max(len(calls), 1)) as pool:
        futures = [pool.submit(call) for call in calls]
    return [future.result() for future in futures]


def chunked(values: List[Any], size: int) -> Iterator[List[Any]]:
    """Yield consecutive slices of at most `size` items."""
    for start in range(0, len(values), size):
        yield values[start:start + size]


class TrainerRoadClient:
    """
    TrainerRoad HTTP transport.

    Owns the cookie jar and its session file. The jar is loaded once at
    construction and written only by login and logout.
    """

    def __init__(
        self,
        username: str = None,
        password: str = None,
        session_file=None,
        user_agent: str = DEFAULT_USER_AGENT,
        base_url: str = BASE_URL,
    ):
        self._username = username
        self._password = password
        self._user_agent = user_agent
        self._base_url = base_url.rstrip("/")
        self._store = SessionStore(session_file) if session_file else None

        self.jar = CookieJar(self._store.load_cookies() if self._store else None)

        self._session = requests.Session()
        self._session.cookies.set_policy(_DetachedCookiePolicy())

    @property
    def username(self) -> Optional[str]:
        return self._username

    @property
    def has_credentials(self) -> bool:
        return bool(self._username and self._password)

    @property
    def has_auth_cookie(self) -> bool:
        return bool(self.jar.get(AUTH_COOKIE))

    @property
    def session_store(self) -> Optional[SessionStore]:
        return self._store

    def url_for(self, path: str) -> str:
        if path.startswith("http"):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self._base_url}{path}"

    def make_request(
        self,
        method: str,
        path: str,
        params: Dict = None,
        headers: Dict[str, str] = None,
        data: Any = None,
        json_data: Any = None,
        allow_redirects: bool = True,
    ) -> requests.Response:
        """
        Send one request with the cookie jar attached.

        Every response (and redirect hop) updates the jar.

        Args:
            method: HTTP method (GET/POST)
            path: Path under the TrainerRoad site (e.g. "/app/api/member-info") or full URL
            params: Query parameters
            headers: Extra request headers
            data: Form body
            json_data: JSON body
            allow_redirects: Follow redirects

        Returns:
            The raw requests.Response
        """
        request_headers = {
            "User-Agent": self._user_agent,
            "Accept": "application/json, text/plain, */*",
        }
        request_headers.update(headers or {})

        response = self._session.request(
            method.upper(),
            self.url_for(path),
            params=params,
            headers=request_headers,
            data=data,
            json=json_data,
            cookies=self.jar.to_dict(),
            allow_redirects=allow_redirects,
        )
        self.jar.apply_response(response)
        logger.debug(f"{method.upper()} {path} -> {response.status_code}")
        return response

    def api_headers(
        self,
        referer_username: str = None,
        use_cache: bool = False,
        extra: Dict[str, str] = None,
    ) -> Dict[str, str]:
        """Headers TrainerRoad's web app sends with its JSON calls."""
        headers = {JSON_FORMAT_HEADER: JSON_FORMAT_CAMEL}
        if use_cache:
            headers[CACHE_CONTROL_HEADER] = CACHE_CONTROL_USE_CACHE
        if referer_username:
            headers["Referer"] = f"{APP_URL}/career/{referer_username}"
        headers.update(extra or {})
        return headers

    def request_json(
        self,
        method: str,
        path: str,
        params: Dict = None,
        json_data: Any = None,
        referer_username: str = None,
        use_cache: bool = False,
        headers: Dict[str, str] = None,
    ) -> Any:
        """
        Make a JSON API request.

        Returns:
            Decoded JSON payload (None for an empty body)

        Raises:
            UpstreamRequestError: On a non-2xx status or a body that is not JSON
        """
        response = self.make_request(
            method,
            path,
            params=params,
            headers=self.api_headers(referer_username, use_cache, headers),
            json_data=json_data,
        )

        if not response.ok:
            raise UpstreamRequestError(
                response.status_code, response.text, path, response.reason or ""
            )

        if not response.content or not response.text.strip():
            return None

        try:
            return response.json()
        except ValueError:
            raise UpstreamRequestError(
                response.status_code, response.text, path, "invalid JSON"
            )

    def fetch_batched(
        self,
        path: str,
        ids: Iterable[Any],
        referer_username: str = None,
        merge_by_key: bool = False,
    ):
        """
        Fetch a multi-id endpoint in batches of BATCH_SIZE.

        Ids travel in an `ids` header. Batches run one after another.

        Args:
            path: Endpoint path
            ids: Ids to fetch
            referer_username: Username for the Referer header
            merge_by_key: Merge dict payloads instead of concatenating lists

        Returns:
            Concatenated list, or merged dict when merge_by_key is set
        """
        id_list = [str(i) for i in ids]
        if merge_by_key:
            merged: Dict[str, Any] = {}
        else:
            results: List[Any] = []

        for batch in chunked(id_list, BATCH_SIZE):
            payload = self.request_json(
                "GET",
                path,
                referer_username=referer_username,
                use_cache=True,
                headers={"ids": ",".join(batch)},
            )
            if merge_by_key:
                merged.update(payload or {})
            else:
                results.extend(payload or [])

        return merged if merge_by_key else results

    # ── Session persistence ──────────────────────────────────────────────

    def save_session(self, **extra: Any) -> Optional[Dict[str, Any]]:
        """Persist the cookie jar plus metadata to the session file."""
        if self._store is None:
            return None
        return self._store.save(self.jar.to_dict(), **extra)

    def clear_session(self) -> None:
        """Forget all cookies and delete the session file."""
        self.jar.clear()
        if self._store is not None:
            self._store.clear()
