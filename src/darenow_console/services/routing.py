"""Route guarding and client-side navigation."""

import logging
from dataclasses import dataclass, field

from darenow_console.domain.routes import (
    CONSOLE_ROUTES,
    GuardState,
    Route,
    RouteDecision,
)
from darenow_console.domain.sessions import LANDING_PATHS, LOGIN_PATHS, Variant
from darenow_console.services.session_store import SessionStore
from darenow_console.services.sync import SessionSynchronizer

_MAX_REDIRECTS = 5

_logger = logging.getLogger(__name__)


@dataclass
class RouteGuard:
    """Decides synchronously whether a view is reachable."""

    store: SessionStore
    routes: tuple[Route, ...] = CONSOLE_ROUTES

    def resolve(self, path: str) -> Route | None:
        """Return the first route matching a path."""
        bare = _strip_query(path)
        for route in self.routes:
            if route.matches(bare):
                return route
        return None

    def evaluate(self, path: str) -> RouteDecision:
        """Admit the path or redirect it, without touching the network."""
        route = self.resolve(path)
        if route is None:
            return RouteDecision(state=GuardState.NOT_FOUND, location=path)
        if route.redirect_to is not None:
            return _redirect(route.redirect_to)
        if route.guard is not None and self.store.read(route.guard) is None:
            return _redirect(LOGIN_PATHS[route.guard])
        if route.login_for is not None and self.store.read(route.login_for):
            return _redirect(LANDING_PATHS[route.login_for])
        return RouteDecision(state=GuardState.ADMITTED, location=path)


@dataclass
class Navigator:
    """History stack that runs every navigation through the guard."""

    guard: RouteGuard
    synchronizer: SessionSynchronizer | None = None
    history: list[str] = field(default_factory=lambda: ["/"])

    @property
    def location(self) -> str:
        """Return the current location."""
        return self.history[-1]

    def navigate(self, path: str, replace: bool = False) -> RouteDecision:
        """Navigate to a path, following guard redirects.

        A redirected target never enters the history: the final location
        takes the slot the target would have had, or overwrites the current
        entry when ``replace`` is set.
        """
        if self.synchronizer is not None:
            self.synchronizer.resync()
        decision = self.guard.evaluate(path)
        hops = 0
        while decision.state is GuardState.REDIRECTED:
            hops += 1
            if hops > _MAX_REDIRECTS:
                raise RuntimeError(f"Redirect loop while navigating to {path}")
            follow = self.guard.evaluate(decision.location)
            if follow.state is not GuardState.REDIRECTED:
                break
            decision = follow
        if replace:
            self.history[-1] = decision.location
        else:
            self.history.append(decision.location)
        if decision.state is GuardState.REDIRECTED:
            _logger.info("Redirected %s to %s", path, decision.location)
        return decision

    def redirect_to_login(self, variant: Variant) -> bool:
        """Send the user to a variant's login view unless already there."""
        login_path = LOGIN_PATHS[variant]
        if _strip_query(self.location) == login_path:
            return False
        self.navigate(login_path)
        return True


def _redirect(location: str) -> RouteDecision:
    return RouteDecision(state=GuardState.REDIRECTED, location=location)


def _strip_query(path: str) -> str:
    return path.split("?", 1)[0].split("#", 1)[0] or "/"
