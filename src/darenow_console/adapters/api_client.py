"""HTTP request pipeline that signs calls with the right session token."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from darenow_console.domain.errors import (
    ApiError,
    Unauthorized,
    Unreachable,
    remote_message,
)
from darenow_console.domain.requests import RequestScope, SessionBearingRequest
from darenow_console.domain.sessions import ChangeKind, Variant
from darenow_console.services.routing import Navigator
from darenow_console.services.session_store import SessionStore
from darenow_console.services.sync import SessionSynchronizer

_logger = logging.getLogger(__name__)


class ApiClient(Protocol):
    """Interface for calls to the remote console API."""

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, object] | None = None,
        json: object | None = None,
    ) -> object:
        """Send a session-signed request and return the decoded body."""

    async def request_anonymous(
        self,
        method: str,
        path: str,
        params: dict[str, object] | None = None,
        json: object | None = None,
    ) -> object:
        """Send an unsigned request without session side effects."""


@dataclass
class HttpxApiClient(ApiClient):
    """Request pipeline implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    store: SessionStore
    synchronizer: SessionSynchronizer
    navigator: Navigator | None = None
    admin_token_fallback: bool = True
    timeout: float = 10.0

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        base_url: str,
        store: SessionStore,
        synchronizer: SessionSynchronizer,
        navigator: Navigator | None = None,
        admin_token_fallback: bool = True,
        timeout: float = 10.0,
    ) -> "HttpxApiClient":
        """Create a pipeline with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            store=store,
            synchronizer=synchronizer,
            navigator=navigator,
            admin_token_fallback=admin_token_fallback,
            timeout=timeout,
        )

    def resolve_token(self, scope: RequestScope) -> str | None:
        """Pick the bearer token for a request scope."""
        if scope is RequestScope.PUBLIC:
            return None
        if scope is RequestScope.RESTAURANT:
            token = self.store.token(Variant.RESTAURANT)
            if token is None and self.admin_token_fallback:
                token = self.store.token(Variant.ADMIN)
            return token
        return self.store.token(Variant.ADMIN)

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, object] | None = None,
        json: object | None = None,
    ) -> object:
        """Send a session-signed request and return the decoded body."""
        described = SessionBearingRequest.build(method, path)
        headers: dict[str, str] = {}
        token = self.resolve_token(described.scope)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        response = await self._send(described, headers, params, json)
        if response.status_code == httpx.codes.UNAUTHORIZED:
            self._handle_unauthorized(described, response)
        return _decode(response)

    async def request_anonymous(
        self,
        method: str,
        path: str,
        params: dict[str, object] | None = None,
        json: object | None = None,
    ) -> object:
        """Send an unsigned request without session side effects."""
        described = SessionBearingRequest.build(method, path)
        response = await self._send(described, {}, params, json)
        return _decode(response)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _send(
        self,
        described: SessionBearingRequest,
        headers: dict[str, str],
        params: dict[str, object] | None,
        json: object | None,
    ) -> httpx.Response:
        url = f"{self.base_url.rstrip('/')}{described.path}"
        try:
            return await self.http_client.request(
                described.method,
                url,
                headers=headers,
                params=params,
                json=json,
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            _logger.warning(
                "Request %s %s failed: %s", described.method, described.path, exc
            )
            raise Unreachable(str(exc) or "Network error") from exc

    def _handle_unauthorized(
        self, described: SessionBearingRequest, response: httpx.Response
    ) -> None:
        message = remote_message(_safe_json(response), "Unauthorized")
        variant = described.scope.variant
        if variant is None:
            raise Unauthorized(message)
        _logger.warning(
            "Clearing %s session after 401 from %s %s",
            variant,
            described.method,
            described.path,
        )
        self.store.clear(variant)
        self.synchronizer.notify(variant, ChangeKind.LOGOUT)
        if self.navigator is not None:
            self.navigator.redirect_to_login(variant)
        raise Unauthorized(message, variant=variant, session_cleared=True)


def _safe_json(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return None


def _decode(response: httpx.Response) -> object:
    if response.is_error:
        message = remote_message(
            _safe_json(response),
            response.reason_phrase or f"HTTP {response.status_code}",
        )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise Unauthorized(message)
        raise ApiError(response.status_code, message)
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise Unreachable("Response body is not valid JSON") from exc
