"""Shared test fixtures."""

import json
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from darenow_console.adapters.api_client import HttpxApiClient
from darenow_console.adapters.memory_storage import InMemoryStorage
from darenow_console.config import Settings
from darenow_console.containers import ConsoleContainer, build_container
from darenow_console.services.auth import AuthService
from darenow_console.services.routing import Navigator, RouteGuard
from darenow_console.services.session_store import SessionStore
from darenow_console.services.sync import SessionSynchronizer

BASE_URL = "https://api.test/api"

StubReply = tuple[int, object] | Callable[[httpx.Request], httpx.Response]


@dataclass
class StubApi:
    """Stub remote API keyed by ``"METHOD /path"`` without the base prefix."""

    replies: dict[str, StubReply] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def reply(self, route: str, status: int = 200, body: object = None) -> None:
        self.replies[route] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        reply = self.replies.get(f"{request.method} {path}", (200, {}))
        if callable(reply):
            return reply(request)
        status, body = reply
        if isinstance(body, str | bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def authorization(self, index: int = -1) -> str | None:
        return self.requests[index].headers.get("Authorization")

    def body(self, index: int = -1) -> object:
        return json.loads(self.requests[index].content.decode())


@dataclass
class Console:
    """Wired console parts over one storage context."""

    storage: InMemoryStorage
    store: SessionStore
    synchronizer: SessionSynchronizer
    navigator: Navigator
    api_client: HttpxApiClient
    auth: AuthService


def build_console(
    stub_api: StubApi,
    storage: InMemoryStorage | None = None,
    admin_token_fallback: bool = True,
) -> Console:
    storage = storage or InMemoryStorage()
    store = SessionStore(storage)
    synchronizer = SessionSynchronizer(store)
    synchronizer.attach(storage)
    navigator = Navigator(guard=RouteGuard(store), synchronizer=synchronizer)
    api_client = HttpxApiClient(
        base_url=BASE_URL,
        http_client=httpx.AsyncClient(transport=stub_api.transport()),
        store=store,
        synchronizer=synchronizer,
        navigator=navigator,
        admin_token_fallback=admin_token_fallback,
    )
    auth = AuthService(api_client=api_client, store=store, synchronizer=synchronizer)
    return Console(
        storage=storage,
        store=store,
        synchronizer=synchronizer,
        navigator=navigator,
        api_client=api_client,
        auth=auth,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url=BASE_URL, storage_path=None)


@pytest.fixture
def stub_api() -> StubApi:
    return StubApi()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(storage: InMemoryStorage) -> SessionStore:
    return SessionStore(storage)


@pytest.fixture
def console(stub_api: StubApi, storage: InMemoryStorage) -> Console:
    return build_console(stub_api, storage)


@pytest.fixture
def container(settings: Settings, stub_api: StubApi) -> ConsoleContainer:
    built = build_container(settings)
    built.api_client.http_client = httpx.AsyncClient(transport=stub_api.transport())
    return built
