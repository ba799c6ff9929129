"""Reactive propagation of session changes across observers and contexts."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from darenow_console.domain.sessions import (
    ChangeKind,
    ChangeOrigin,
    SessionChange,
    Variant,
    variant_for_key,
)
from darenow_console.services.session_store import SessionStore, WatchableStorage

_logger = logging.getLogger(__name__)

SessionHandler = Callable[[SessionChange], None]


@dataclass
class SessionSynchronizer:
    """Single subscription point for admin and restaurant session changes.

    Changes arrive from three places: ``notify`` after a local write or
    clear, storage events raised by another context sharing the storage, and
    ``resync`` which re-reads the store to heal missed events.
    """

    store: SessionStore
    _handlers: list[SessionHandler] = field(default_factory=list, init=False)
    _known: dict[Variant, str | None] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        self._known = {variant: self.store.token(variant) for variant in Variant}

    def subscribe(self, handler: SessionHandler) -> Callable[[], None]:
        """Register a handler and return a callable that removes it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def notify(self, variant: Variant, kind: ChangeKind) -> SessionChange:
        """Broadcast a change made in this context."""
        self._known[variant] = self.store.token(variant)
        change = SessionChange(variant=variant, kind=kind, origin=ChangeOrigin.LOCAL)
        self._emit(change)
        return change

    def attach(self, storage: WatchableStorage) -> Callable[[], None]:
        """Listen for session key changes made by other contexts."""
        return storage.watch(self.storage_changed)

    def storage_changed(self, key: str | None) -> list[SessionChange]:
        """Handle a storage event; a ``None`` key means storage was cleared."""
        if key is None:
            variants = list(Variant)
        else:
            variant = variant_for_key(key)
            if variant is None:
                return []
            variants = [variant]
        return self._reconcile(variants, ChangeOrigin.STORAGE)

    def resync(self) -> list[SessionChange]:
        """Re-read the store and report any variant whose session moved."""
        return self._reconcile(list(Variant), ChangeOrigin.RESYNC)

    def _reconcile(
        self, variants: list[Variant], origin: ChangeOrigin
    ) -> list[SessionChange]:
        changes = []
        for variant in variants:
            token = self.store.token(variant)
            if token == self._known.get(variant):
                continue
            self._known[variant] = token
            kind = ChangeKind.LOGIN if token else ChangeKind.LOGOUT
            change = SessionChange(variant=variant, kind=kind, origin=origin)
            self._emit(change)
            changes.append(change)
        return changes

    def _emit(self, change: SessionChange) -> None:
        _logger.debug(
            "Session %s %s (%s)", change.variant, change.kind, change.origin
        )
        for handler in list(self._handlers):
            try:
                handler(change)
            except Exception:
                _logger.exception("Session change handler failed")
