"""Console routes and navigation outcomes."""

import re
from dataclasses import dataclass
from enum import StrEnum

from darenow_console.domain.sessions import Variant


class GuardState(StrEnum):
    """Outcome of evaluating a navigation attempt."""

    ADMITTED = "admitted"
    REDIRECTED = "redirected"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Route:
    """A console view and the session it requires."""

    pattern: str
    guard: Variant | None = None
    login_for: Variant | None = None
    redirect_to: str | None = None

    def matches(self, path: str) -> bool:
        """Return True when the path fits this route's pattern."""
        return _compile(self.pattern).fullmatch(path) is not None


@dataclass(frozen=True)
class RouteDecision:
    """Where a navigation attempt ends up."""

    state: GuardState
    location: str


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(re.sub(r"\{[^/]+\}", "[^/]+", pattern))


CONSOLE_ROUTES: tuple[Route, ...] = (
    Route("/", redirect_to="/login"),
    Route("/login", login_for=Variant.ADMIN),
    Route("/register"),
    Route("/forgot-password"),
    Route("/reset-password"),
    Route("/contact"),
    Route("/privacy-policy"),
    Route("/terms-conditions"),
    Route("/dashboard", guard=Variant.ADMIN),
    Route("/restaurants", guard=Variant.ADMIN),
    Route("/restaurants/create", guard=Variant.ADMIN),
    Route("/restaurants/edit/{id}", guard=Variant.ADMIN),
    Route("/restaurants/{id}", guard=Variant.ADMIN),
    Route("/update-password", guard=Variant.ADMIN),
    Route("/restaurant/login", login_for=Variant.RESTAURANT),
    Route("/restaurant/bookings", guard=Variant.RESTAURANT),
    Route("/restaurant/create-booking", guard=Variant.RESTAURANT),
)
