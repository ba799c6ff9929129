"""Classification of outgoing API requests."""

from dataclasses import dataclass
from enum import StrEnum

from darenow_console.domain.sessions import Variant


class RequestScope(StrEnum):
    """Which credential, if any, an API path needs."""

    ADMIN = "admin"
    RESTAURANT = "restaurant"
    PUBLIC = "public"

    @property
    def variant(self) -> Variant | None:
        """Return the session variant owning this scope."""
        if self is RequestScope.ADMIN:
            return Variant.ADMIN
        if self is RequestScope.RESTAURANT:
            return Variant.RESTAURANT
        return None


_PUBLIC_MARKERS = ("/place/search",)
_RESTAURANT_MARKERS = ("/table-booking", "/place/login")


def classify_path(path: str) -> RequestScope:
    """Classify an API path by its shape."""
    if any(marker in path for marker in _PUBLIC_MARKERS):
        return RequestScope.PUBLIC
    if any(marker in path for marker in _RESTAURANT_MARKERS):
        return RequestScope.RESTAURANT
    if "/place/" in path and "/slots" in path:
        return RequestScope.RESTAURANT
    return RequestScope.ADMIN


@dataclass(frozen=True)
class SessionBearingRequest:
    """An outgoing call and the scope derived from its path."""

    method: str
    path: str
    scope: RequestScope

    @classmethod
    def build(cls, method: str, path: str) -> "SessionBearingRequest":
        """Describe a request, classifying its path."""
        return cls(method=method.upper(), path=path, scope=classify_path(path))
