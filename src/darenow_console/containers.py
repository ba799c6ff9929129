"""Dependency container wiring for the console."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from darenow_console.adapters.api_client import HttpxApiClient
from darenow_console.adapters.file_storage import JsonFileStorage
from darenow_console.adapters.memory_storage import InMemoryStorage
from darenow_console.app_logging import configure_logging
from darenow_console.config import Settings
from darenow_console.services.auth import AuthService
from darenow_console.services.bookings import BookingService
from darenow_console.services.menu import SessionMenu
from darenow_console.services.places import PlaceService
from darenow_console.services.routing import Navigator, RouteGuard
from darenow_console.services.session_store import KeyValueStorage, SessionStore
from darenow_console.services.sync import SessionSynchronizer


@dataclass
class ConsoleContainer:
    """Holds console-wide dependencies."""

    settings: Settings
    storage: KeyValueStorage
    session_store: SessionStore
    synchronizer: SessionSynchronizer
    route_guard: RouteGuard
    navigator: Navigator
    api_client: HttpxApiClient
    auth_service: AuthService
    place_service: PlaceService
    booking_service: BookingService
    session_menu: SessionMenu
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None, storage: KeyValueStorage | None = None
) -> ConsoleContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    if storage is None:
        if resolved_settings.storage_path:
            storage = JsonFileStorage.create(resolved_settings.storage_path)
        else:
            storage = InMemoryStorage()
    session_store = SessionStore(storage)
    synchronizer = SessionSynchronizer(session_store)
    detach = (
        synchronizer.attach(storage) if isinstance(storage, InMemoryStorage) else None
    )
    route_guard = RouteGuard(session_store)
    navigator = Navigator(guard=route_guard, synchronizer=synchronizer)
    api_client = HttpxApiClient.create(
        base_url=resolved_settings.api_base_url,
        store=session_store,
        synchronizer=synchronizer,
        navigator=navigator,
        admin_token_fallback=resolved_settings.restaurant_admin_token_fallback,
        timeout=resolved_settings.request_timeout_seconds,
    )
    auth_service = AuthService(
        api_client=api_client, store=session_store, synchronizer=synchronizer
    )
    place_service = PlaceService(api_client, page_size=resolved_settings.page_size)
    booking_service = BookingService(
        api_client, session_store, page_size=resolved_settings.page_size
    )
    session_menu = SessionMenu(session_store, synchronizer)

    async def close_resources() -> None:
        session_menu.close()
        if detach is not None:
            detach()
        await api_client.close()

    return ConsoleContainer(
        settings=resolved_settings,
        storage=storage,
        session_store=session_store,
        synchronizer=synchronizer,
        route_guard=route_guard,
        navigator=navigator,
        api_client=api_client,
        auth_service=auth_service,
        place_service=place_service,
        booking_service=booking_service,
        session_menu=session_menu,
        close_resources=close_resources,
    )
