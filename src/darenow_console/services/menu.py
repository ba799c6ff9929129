"""Navigation menu state driven by session changes."""

from collections.abc import Callable
from dataclasses import dataclass, field

from darenow_console.domain.sessions import (
    LOGIN_PATHS,
    Session,
    SessionChange,
    Variant,
    place_record,
)
from darenow_console.services.session_store import SessionStore
from darenow_console.services.sync import SessionSynchronizer


@dataclass(frozen=True)
class MenuLink:
    """A navigation entry."""

    label: str
    path: str


@dataclass
class SessionMenu:
    """Keeps the navigation bar in step with both sessions.

    A restaurant session takes precedence over an admin session when both
    are present.
    """

    store: SessionStore
    synchronizer: SessionSynchronizer
    admin: Session | None = field(default=None, init=False)
    restaurant: Session | None = field(default=None, init=False)
    _unsubscribe: Callable[[], None] | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.refresh()
        self._unsubscribe = self.synchronizer.subscribe(self._on_change)

    def refresh(self) -> None:
        """Re-read both sessions from the store."""
        self.admin = self.store.read(Variant.ADMIN)
        self.restaurant = self.store.read(Variant.RESTAURANT)

    def close(self) -> None:
        """Stop listening for session changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def active_variant(self) -> Variant | None:
        """Return the variant the menu is rendered for."""
        if self.restaurant is not None:
            return Variant.RESTAURANT
        if self.admin is not None:
            return Variant.ADMIN
        return None

    def greeting(self) -> str | None:
        """Return the welcome line for the signed-in user."""
        if self.restaurant is not None:
            place = place_record(self.restaurant.profile) or {}
            return f"Welcome, {place.get('name') or 'Restaurant'}"
        if self.admin is not None:
            name = self.admin.profile.get("name")
            return f"Welcome, {name}" if name else "Welcome"
        return None

    def links(self) -> list[MenuLink]:
        """Return the navigation links for the current session state."""
        home = MenuLink("Home", "/")
        variant = self.active_variant
        if variant is Variant.RESTAURANT:
            return [
                home,
                MenuLink("Bookings", "/restaurant/bookings"),
                MenuLink("Create Booking", "/restaurant/create-booking"),
            ]
        if variant is Variant.ADMIN:
            return [
                home,
                MenuLink("Dashboard", "/dashboard"),
                MenuLink("Restaurants", "/restaurants"),
                MenuLink("Update Password", "/update-password"),
            ]
        return [
            home,
            MenuLink("Contact", "/contact"),
            MenuLink("Restaurant Login", LOGIN_PATHS[Variant.RESTAURANT]),
            MenuLink("Admin Login", LOGIN_PATHS[Variant.ADMIN]),
        ]

    def _on_change(self, change: SessionChange) -> None:
        session = self.store.read(change.variant)
        if change.variant is Variant.ADMIN:
            self.admin = session
        else:
            self.restaurant = session
