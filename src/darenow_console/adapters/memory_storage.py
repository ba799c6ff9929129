"""In-memory key/value storage shared between console contexts."""

from collections.abc import Callable
from dataclasses import dataclass, field

StorageListener = Callable[[str | None], None]


@dataclass
class _StorageArea:
    items: dict[str, str] = field(default_factory=dict)
    listeners: list[tuple["InMemoryStorage", StorageListener]] = field(
        default_factory=list
    )


class InMemoryStorage:
    """Key/value storage with cross-context change events.

    Each instance is one context (a browser tab, say) over a shared area.
    ``sibling()`` opens another context on the same area. Listeners hear
    about changes made through other contexts only, never their own.
    """

    def __init__(self, area: _StorageArea | None = None) -> None:
        self._area = area or _StorageArea()

    def sibling(self) -> "InMemoryStorage":
        """Open another context over the same storage area."""
        return InMemoryStorage(self._area)

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        return self._area.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store a value and notify other contexts when it changed."""
        if self._area.items.get(key) == value:
            return
        self._area.items[key] = value
        self._broadcast(key)

    def remove_item(self, key: str) -> None:
        """Remove a key and notify other contexts when it existed."""
        if self._area.items.pop(key, None) is None:
            return
        self._broadcast(key)

    def clear(self) -> None:
        """Remove every key; listeners receive ``None`` as the key."""
        if not self._area.items:
            return
        self._area.items.clear()
        self._broadcast(None)

    def watch(self, listener: StorageListener) -> Callable[[], None]:
        """Register a listener for changes made by other contexts."""
        entry = (self, listener)
        self._area.listeners.append(entry)

        def unwatch() -> None:
            if entry in self._area.listeners:
                self._area.listeners.remove(entry)

        return unwatch

    def _broadcast(self, key: str | None) -> None:
        for owner, listener in list(self._area.listeners):
            if owner is not self:
                listener(key)
