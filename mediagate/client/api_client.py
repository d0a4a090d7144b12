"""
mediagate/client/api_client.py

Async HTTP client for the application API with bearer auth and a single
token refresh on 401.

Per request:

    Pending ──401, not retried──► refresh ──ok──► replay (retried) ──► Resolved | Rejected
       │                             └──fail──► session cleared ──► SessionExpiredError
       └──anything else──────────────────────────────────────────► Resolved | Rejected

A replayed request is never refreshed again, so a refresh token that keeps
producing rejected access tokens cannot cause a loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx

from mediagate.client.session import AuthSession
from mediagate.core.config import settings
from mediagate.core.constants import ERROR_ROUTES, REFRESH_ENDPOINT, SESSION_EXPIRED_ROUTE
from mediagate.core.exceptions import AuthError, NetworkError, SessionExpiredError
from mediagate.core.logger import get_logger

logger = get_logger(__name__)


class Navigator(Protocol):
    """Something that can send the user elsewhere (a UI router, a CLI prompt...)."""

    def navigate(self, path: str) -> None:
        ...


@dataclass(frozen=True)
class RequestAttempt:
    """One send of an outbound request and whether it is already a retry."""

    request: httpx.Request
    retried: bool = False

    def as_retry(self, request: httpx.Request) -> "RequestAttempt":
        return RequestAttempt(request=request, retried=True)


def _with_bearer(request: httpx.Request, token: Optional[str]) -> httpx.Request:
    """
    Copy ``request`` with the Authorization header set to ``token``.

    The body must already be read (``await request.aread()``) so multipart
    and streamed bodies can be replayed byte for byte.
    """
    headers = httpx.Headers(request.headers)
    # A buffered body is sent with Content-Length, never chunked.
    headers.pop("Transfer-Encoding", None)
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.Request(
        method=request.method,
        url=request.url,
        headers=headers,
        content=request.content or None,
        extensions=request.extensions,
    )


class ApiClient:
    """
    Thin wrapper over ``httpx.AsyncClient``.

    Usage
    -----
    >>> async with ApiClient(session) as api:
    ...     response = await api.put("/auth/update-profile", json={"profilePic": url})
    """

    def __init__(
        self,
        session: AuthSession,
        base_url: str | None = None,
        timeout: float | None = None,
        navigator: Navigator | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            session   : Token pair used for every request.
            base_url  : API root. Defaults to ``settings.default_api_base_url()``.
            timeout   : Per-request timeout in seconds (default 10).
            navigator : Receives redirect targets for session expiry and
                        error statuses. Without one the errors are only raised.
            transport : Custom httpx transport (tests pass ``httpx.MockTransport``).
        """
        self._session = session
        self._navigator = navigator
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.default_api_base_url(),
            timeout=timeout or settings.api_timeout_seconds,
            transport=transport,
        )

    # ── Verbs ──────────────────────────────────────────────────────────────────

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request with the current bearer token.

        Raises:
            SessionExpiredError: A 401 could not be recovered by refreshing.
            AuthError:           The request was still 401 after one refresh.
            NetworkError:        Any other error status or transport failure.
        """
        request = self._http.build_request(method, url, **kwargs)
        await request.aread()
        attempt = RequestAttempt(_with_bearer(request, self._session.access_token))
        return await self._send(attempt)

    # ── Lifecycle ──────────────────────────────────────────────────────────────

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ── Internals ──────────────────────────────────────────────────────────────

    async def _send(self, attempt: RequestAttempt) -> httpx.Response:
        request = attempt.request
        try:
            response = await self._http.send(request)
        except httpx.TransportError as exc:
            logger.error("%s %s failed: %s", request.method, request.url, exc)
            raise NetworkError(f"Request failed: {exc}") from exc

        if response.status_code == 401 and not attempt.retried:
            token = await self._refresh_access_token()
            return await self._send(attempt.as_retry(_with_bearer(request, token)))

        if response.is_error:
            self._categorize(response.status_code)
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                error_cls = AuthError if response.status_code == 401 else NetworkError
                raise error_cls(str(exc), status_code=response.status_code, response=response) from exc

        return response

    async def _refresh_access_token(self) -> str:
        """Exchange the refresh token for a new access token, or end the session."""
        refresh_token = self._session.refresh_token
        if not refresh_token:
            self._expire_session()
            raise SessionExpiredError("Session expired: no refresh token stored", status_code=401)

        try:
            response = await self._http.post(REFRESH_ENDPOINT, json={"refreshToken": refresh_token})
            response.raise_for_status()
            access_token = response.json()["accessToken"]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Token refresh failed: %s", exc)
            self._expire_session()
            status = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
            raise SessionExpiredError("Session expired", status_code=status) from exc

        self._session.replace_access_token(access_token)
        logger.info("Access token refreshed.")
        return access_token

    def _expire_session(self) -> None:
        self._session.clear()
        if self._navigator is not None:
            self._navigator.navigate(SESSION_EXPIRED_ROUTE)

    def _categorize(self, status_code: int) -> None:
        route = ERROR_ROUTES.get(status_code)
        if route is None:
            logger.error("Unhandled error status: %d", status_code)
            return
        logger.warning("Request failed with %d - redirecting to %s", status_code, route)
        if self._navigator is not None:
            self._navigator.navigate(route)
