"""Domain models for console sessions."""

from dataclasses import dataclass
from enum import StrEnum


class Variant(StrEnum):
    """Actor role owning an independent session."""

    ADMIN = "admin"
    RESTAURANT = "restaurant"


class ChangeKind(StrEnum):
    """Kind of session change broadcast to observers."""

    LOGIN = "login"
    LOGOUT = "logout"


class ChangeOrigin(StrEnum):
    """Where a session change was observed."""

    LOCAL = "local"
    STORAGE = "storage"
    RESYNC = "resync"


@dataclass(frozen=True)
class StorageKeys:
    """Physical storage keys for one variant."""

    token: str
    profile: str


STORAGE_KEYS: dict[Variant, StorageKeys] = {
    Variant.ADMIN: StorageKeys(token="token", profile="user"),
    Variant.RESTAURANT: StorageKeys(token="restaurantToken", profile="restaurant"),
}

LOGIN_PATHS: dict[Variant, str] = {
    Variant.ADMIN: "/login",
    Variant.RESTAURANT: "/restaurant/login",
}

LANDING_PATHS: dict[Variant, str] = {
    Variant.ADMIN: "/dashboard",
    Variant.RESTAURANT: "/restaurant/bookings",
}


@dataclass(frozen=True)
class Session:
    """Bearer token and profile payload for an authenticated variant."""

    variant: Variant
    token: str
    profile: dict[str, object]


@dataclass(frozen=True)
class SessionChange:
    """A login or logout observed for a variant."""

    variant: Variant
    kind: ChangeKind
    origin: ChangeOrigin = ChangeOrigin.LOCAL


def variant_for_key(key: str | None) -> Variant | None:
    """Return the variant owning a storage key, if any."""
    if key is None:
        return None
    for variant, keys in STORAGE_KEYS.items():
        if key in {keys.token, keys.profile}:
            return variant
    return None


def build_admin_profile(
    username: str, admin_data: dict[str, object] | None
) -> dict[str, object]:
    """Build the stored admin profile from the login payload."""
    display = username
    if admin_data and isinstance(admin_data.get("userName"), str):
        display = str(admin_data["userName"]) or username
    return {
        "username": display,
        "name": display,
        "isAdmin": True,
        "adminData": admin_data,
    }


def place_record(profile: dict[str, object] | None) -> dict[str, object] | None:
    """Unwrap a restaurant profile into its place record.

    Restaurant logins store the response payload as returned, which either
    nests the place under ``placeData`` or is the place itself.
    """
    if not isinstance(profile, dict):
        return None
    nested = profile.get("placeData")
    if isinstance(nested, dict):
        return nested
    return profile


def place_id(profile: dict[str, object] | None) -> object | None:
    """Return the place id carried by a restaurant profile, if present."""
    place = place_record(profile)
    if place is None:
        return None
    for key in ("placeId", "id"):
        value = place.get(key)
        if value not in (None, ""):
            return value
    return None
