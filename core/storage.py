"""
Key/value storage for the little state the client persists.

The only key ever written is the session token (``config.token_key``).
Nothing is shared between browser sessions: each one gets its own store.
Provides:
- SessionStateStorage: keys kept in one browser session's ``st.session_state``
- MemoryStorage: plain dict, used for tests and throwaway sessions
"""
from __future__ import annotations
from typing import Any, Dict, MutableMapping, Optional

from core.logger import get_logger

log = get_logger("core/storage")


class StorageBackend:
    """
    Abstract key/value interface.

    All storage backend implementations must inherit from this class
    and implement all abstract methods.
    """

    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None when the key is absent
        """
        raise NotImplementedError(f"{self.__class__.__name__}.get() must be implemented")

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        raise NotImplementedError(f"{self.__class__.__name__}.set() must be implemented")

    def remove(self, key: str) -> None:
        """Delete ``key``. Missing keys are ignored."""
        raise NotImplementedError(f"{self.__class__.__name__}.remove() must be implemented")


class MemoryStorage(StorageBackend):
    """Dict-backed storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SessionStateStorage(StorageBackend):
    """
    Storage scoped to a single browser session.

    Values live in the mapping handed in (``st.session_state`` in the app)
    under a ``storage:`` prefix, so a token set in one browser is never
    seen by another.
    """

    prefix = "storage:"

    def __init__(self, state: MutableMapping[str, Any]):
        self._state = state

    def get(self, key: str) -> Optional[str]:
        value = self._state.get(self.prefix + key)
        return str(value) if value is not None else None

    def set(self, key: str, value: str) -> None:
        self._state[self.prefix + key] = value
        log.debug(f"Stored key '{key}' in session storage")

    def remove(self, key: str) -> None:
        if self.prefix + key in self._state:
            del self._state[self.prefix + key]
            log.debug(f"Removed key '{key}' from session storage")


def get_storage_backend(state: Optional[MutableMapping[str, Any]] = None) -> StorageBackend:
    """
    Storage backend for one browser session.

    Args:
        state: The session's state mapping; without one a private
            in-memory store is returned

    Returns:
        SessionStateStorage bound to ``state``, MemoryStorage otherwise
    """
    if state is None:
        return MemoryStorage()
    return SessionStateStorage(state)
