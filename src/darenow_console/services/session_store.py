"""Persistent store for admin and restaurant sessions."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from darenow_console.domain.sessions import STORAGE_KEYS, Session, Variant

_logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Flat string key/value storage."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""


class WatchableStorage(KeyValueStorage, Protocol):
    """Storage that reports changes made by other contexts."""

    def watch(
        self, listener: Callable[[str | None], None]
    ) -> Callable[[], None]:
        """Register a change listener and return a callable removing it."""


@dataclass
class SessionStore:
    """Owns the canonical token and profile pair for each variant."""

    storage: KeyValueStorage

    def write(self, variant: Variant, token: str, profile: dict[str, object]) -> None:
        """Persist a session, replacing any prior one for the variant."""
        if not isinstance(token, str) or not token:
            raise ValueError("Session token must be a non-empty string")
        if not isinstance(profile, dict):
            raise ValueError("Session profile must be a mapping")
        serialized = json.dumps(profile)
        keys = STORAGE_KEYS[variant]
        previous_token = self.storage.get_item(keys.token)
        previous_profile = self.storage.get_item(keys.profile)
        self.storage.set_item(keys.profile, serialized)
        try:
            self.storage.set_item(keys.token, token)
        except Exception:
            _logger.warning("Restoring %s session after failed write", variant)
            self._restore(keys.token, keys.profile, previous_token, previous_profile)
            raise

    def _restore(
        self,
        token_key: str,
        profile_key: str,
        token: str | None,
        profile: str | None,
    ) -> None:
        # A token is never left without its profile.
        if token is None or profile is None:
            self.storage.remove_item(profile_key)
            self.storage.remove_item(token_key)
            return
        self.storage.set_item(profile_key, profile)
        if self.storage.get_item(token_key) != token:
            self.storage.set_item(token_key, token)

    def read(self, variant: Variant) -> Session | None:
        """Return the stored session, or None when absent or unreadable."""
        keys = STORAGE_KEYS[variant]
        token = self.storage.get_item(keys.token)
        raw_profile = self.storage.get_item(keys.profile)
        if not token or raw_profile is None:
            return None
        try:
            profile = json.loads(raw_profile)
        except (TypeError, ValueError):
            _logger.warning("Discarding unreadable %s profile", variant)
            return None
        if not isinstance(profile, dict):
            return None
        return Session(variant=variant, token=token, profile=profile)

    def clear(self, variant: Variant) -> None:
        """Remove both keys for the variant."""
        keys = STORAGE_KEYS[variant]
        self.storage.remove_item(keys.token)
        self.storage.remove_item(keys.profile)

    def token(self, variant: Variant) -> str | None:
        """Return the token of a readable session for the variant."""
        session = self.read(variant)
        return session.token if session else None
