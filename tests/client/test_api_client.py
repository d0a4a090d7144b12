"""
tests/client/test_api_client.py

Tests for ApiClient.

Every test routes the client through an ``httpx.MockTransport`` whose
handler plays the API server, so request headers, bodies and counts can
be asserted without any sockets.
"""

from __future__ import annotations

import json
from typing import Callable, List

import httpx
import pytest

from mediagate.client.api_client import ApiClient, RequestAttempt
from mediagate.client.session import AuthSession, InMemoryTokenStore
from mediagate.core.exceptions import AuthError, NetworkError, SessionExpiredError

BASE_URL = "http://api.test/api"


# ── Helpers ────────────────────────────────────────────────────────────────────

class RecordingNavigator:
    def __init__(self) -> None:
        self.paths: List[str] = []

    def navigate(self, path: str) -> None:
        self.paths.append(path)


class FakeServer:
    """
    Scripted API server. ``profile_statuses`` is consumed one per call to
    the profile endpoint; the refresh endpoint answers ``refresh_status``.
    """

    def __init__(self, profile_statuses: List[int], refresh_status: int = 200) -> None:
        self.profile_statuses = list(profile_statuses)
        self.refresh_status = refresh_status
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/auth/refresh":
            if self.refresh_status != 200:
                return httpx.Response(self.refresh_status, json={"message": "invalid refresh token"})
            return httpx.Response(200, json={"accessToken": "fresh-access"})

        status = self.profile_statuses.pop(0)
        body = {"profilePic": "https://cdn/x.jpg"} if status == 200 else {"message": "error"}
        return httpx.Response(status, json=body)

    def calls_to(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


def _session(access: str | None = "stale-access", refresh: str | None = "refresh-1") -> AuthSession:
    session = AuthSession(InMemoryTokenStore())
    if access:
        session.replace_access_token(access)
    if refresh:
        session._store.set("refreshToken", refresh)
    return session


def _client(handler: Callable, session: AuthSession, navigator=None) -> ApiClient:
    return ApiClient(
        session,
        base_url=BASE_URL,
        navigator=navigator,
        transport=httpx.MockTransport(handler),
    )


# ── Bearer credential ─────────────────────────────────────────────────────────

class TestBearer:

    @pytest.mark.asyncio
    async def test_attaches_access_token(self) -> None:
        server = FakeServer([200])
        async with _client(server, _session(access="token-abc")) as api:
            await api.get("/auth/check")

        assert server.requests[0].headers["Authorization"] == "Bearer token-abc"

    @pytest.mark.asyncio
    async def test_no_token_means_no_header(self) -> None:
        server = FakeServer([200])
        async with _client(server, _session(access=None)) as api:
            response = await api.get("/auth/check")

        assert response.status_code == 200
        assert "Authorization" not in server.requests[0].headers

    @pytest.mark.asyncio
    @pytest.mark.parametrize("verb", ["get", "post", "put", "patch", "delete"])
    async def test_all_verbs_use_their_method(self, verb: str) -> None:
        server = FakeServer([200])
        async with _client(server, _session()) as api:
            await getattr(api, verb)("/things")

        assert server.requests[0].method == verb.upper()

    def test_default_timeout_is_ten_seconds(self) -> None:
        api = ApiClient(_session(), base_url=BASE_URL)
        assert api._http.timeout == httpx.Timeout(10.0)


# ── 401 → refresh → retry ─────────────────────────────────────────────────────

class TestRefreshAndRetry:

    @pytest.mark.asyncio
    async def test_single_401_is_retried_once_with_new_token(self) -> None:
        server = FakeServer([401, 200])
        session = _session()

        async with _client(server, session) as api:
            response = await api.put("/auth/update-profile", json={"profilePic": "https://cdn/x.jpg"})

        assert response.status_code == 200
        assert response.json() == {"profilePic": "https://cdn/x.jpg"}

        first, retry = server.calls_to("/api/auth/update-profile")
        assert first.headers["Authorization"] == "Bearer stale-access"
        assert retry.headers["Authorization"] == "Bearer fresh-access"
        assert retry.method == "PUT"
        assert json.loads(retry.content) == {"profilePic": "https://cdn/x.jpg"}
        assert session.access_token == "fresh-access"

    @pytest.mark.asyncio
    async def test_multipart_body_is_replayed_unchanged(self) -> None:
        server = FakeServer([401, 200])

        async with _client(server, _session()) as api:
            response = await api.post(
                "/auth/update-profile",
                files={"file": ("a.png", b"\x89PNG-bytes", "image/png")},
                data={"folder": "profile_pictures"},
            )

        assert response.status_code == 200
        first, retry = server.calls_to("/api/auth/update-profile")
        assert retry.content == first.content
        assert b"\x89PNG-bytes" in retry.content
        assert retry.headers["Content-Type"] == first.headers["Content-Type"]
        assert retry.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert retry.headers["Authorization"] == "Bearer fresh-access"

    @pytest.mark.asyncio
    async def test_streamed_body_is_replayed_unchanged(self) -> None:
        server = FakeServer([401, 200])

        async def chunks():
            yield b"part-1;"
            yield b"part-2"

        async with _client(server, _session()) as api:
            await api.put("/auth/update-profile", content=chunks())

        first, retry = server.calls_to("/api/auth/update-profile")
        assert first.content == retry.content == b"part-1;part-2"

    @pytest.mark.asyncio
    async def test_refresh_call_sends_refresh_token_without_bearer(self) -> None:
        server = FakeServer([401, 200])

        async with _client(server, _session(refresh="refresh-xyz")) as api:
            await api.get("/auth/check")

        (refresh,) = server.calls_to("/api/auth/refresh")
        assert refresh.method == "POST"
        assert json.loads(refresh.content) == {"refreshToken": "refresh-xyz"}
        assert "Authorization" not in refresh.headers

    @pytest.mark.asyncio
    async def test_second_401_is_not_retried_again(self) -> None:
        server = FakeServer([401, 401])

        async with _client(server, _session()) as api:
            with pytest.raises(AuthError) as exc_info:
                await api.get("/auth/check")

        assert exc_info.value.status_code == 401
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        assert len(server.calls_to("/api/auth/check")) == 2
        assert len(server.calls_to("/api/auth/refresh")) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("access", ["stale-access", "still-valid-looking", None])
    @pytest.mark.parametrize("refresh_status", [400, 401, 500])
    async def test_refresh_failure_clears_session(self, access, refresh_status) -> None:
        server = FakeServer([401], refresh_status=refresh_status)
        session = _session(access=access)
        navigator = RecordingNavigator()

        async with _client(server, session, navigator) as api:
            with pytest.raises(SessionExpiredError):
                await api.get("/auth/check")

        assert session.access_token is None
        assert session.refresh_token is None
        assert navigator.paths == ["/login?session_expired=true"]
        assert len(server.calls_to("/api/auth/check")) == 1

    @pytest.mark.asyncio
    async def test_missing_refresh_token_expires_without_calling_refresh(self) -> None:
        server = FakeServer([401])
        session = _session(refresh=None)

        async with _client(server, session) as api:
            with pytest.raises(SessionExpiredError):
                await api.get("/auth/check")

        assert server.calls_to("/api/auth/refresh") == []
        assert session.access_token is None

    @pytest.mark.asyncio
    async def test_refresh_response_without_token_expires_session(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/auth/refresh":
                return httpx.Response(200, json={"unexpected": True})
            return httpx.Response(401)

        session = _session()
        async with _client(handler, session) as api:
            with pytest.raises(SessionExpiredError):
                await api.get("/auth/check")

        assert session.refresh_token is None


# ── Other error statuses ──────────────────────────────────────────────────────

class TestErrorStatuses:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, route",
        [(403, "/forbidden"), (404, "/not-found"), (500, "/server-error")],
    )
    async def test_mapped_statuses_navigate_and_raise(self, status, route) -> None:
        server = FakeServer([status])
        navigator = RecordingNavigator()

        async with _client(server, _session(), navigator) as api:
            with pytest.raises(NetworkError) as exc_info:
                await api.get("/things")

        assert navigator.paths == [route]
        assert exc_info.value.status_code == status
        assert exc_info.value.response.status_code == status

    @pytest.mark.asyncio
    async def test_unmapped_status_raises_without_navigation(self) -> None:
        server = FakeServer([422])
        navigator = RecordingNavigator()

        async with _client(server, _session(), navigator) as api:
            with pytest.raises(NetworkError) as exc_info:
                await api.post("/things", json={})

        assert navigator.paths == []
        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_errors_raise_without_navigator(self) -> None:
        server = FakeServer([500])

        async with _client(server, _session()) as api:
            with pytest.raises(NetworkError):
                await api.get("/things")

    @pytest.mark.asyncio
    async def test_transport_failure_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        async with _client(handler, _session()) as api:
            with pytest.raises(NetworkError) as exc_info:
                await api.get("/things")

        assert exc_info.value.status_code is None


class TestRequestAttempt:

    def test_as_retry_returns_new_attempt(self) -> None:
        request = httpx.Request("GET", "http://api.test/x")
        attempt = RequestAttempt(request)

        retry = attempt.as_retry(request)

        assert attempt.retried is False
        assert retry.retried is True

    def test_is_immutable(self) -> None:
        attempt = RequestAttempt(httpx.Request("GET", "http://api.test/x"))
        with pytest.raises(AttributeError):
            attempt.retried = True  # type: ignore[misc]


class TestRequestBodies:

    @pytest.mark.asyncio
    async def test_multipart_post_is_sent(self) -> None:
        server = FakeServer([200])

        async with _client(server, _session()) as api:
            response = await api.post("/things", files={"file": ("a.png", b"123", "image/png")})

        assert response.status_code == 200
        assert b"123" in server.requests[0].content

    @pytest.mark.asyncio
    async def test_buffered_stream_is_not_sent_chunked(self) -> None:
        server = FakeServer([200])

        async def chunks():
            yield b"abc"

        async with _client(server, _session()) as api:
            await api.put("/things", content=chunks())

        sent = server.requests[0]
        assert "Transfer-Encoding" not in sent.headers
        assert sent.headers["Content-Length"] == "3"
