"""Application-scoped authentication session."""
from __future__ import annotations
import threading
from typing import Callable, List, Optional

from core.config import config
from core.logger import get_logger
from core.storage import StorageBackend
from core.utils import mask_token

log = get_logger("api/session")

ExpiryListener = Callable[[], None]


class Session:
    """
    Holds the single live bearer token and the setup/login gate state.

    Lifecycle: ``init`` on app start, ``set``/``clear`` on login and logout,
    ``expire`` when the backend answers 401, ``teardown`` on shutdown.
    The token is mirrored into ``storage`` under ``config.token_key``.
    """

    def __init__(self, storage: StorageBackend, key: str = config.token_key):
        self._storage = storage
        self._key = key
        self._token: Optional[str] = None
        self._listeners: List[ExpiryListener] = []
        self._lock = threading.Lock()
        self.setup_required = False
        self.login_required = False
        self.initialized = False

    def init(self) -> "Session":
        self._token = self._storage.get(self._key) or None
        self.login_required = self._token is None
        self.initialized = True
        log.info(f"Session initialized: token={mask_token(self._token)}")
        return self

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def set(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        with self._lock:
            self._token = token
            self._storage.set(self._key, token)
            self.login_required = False
        log.info(f"Session token set: {mask_token(token)}")

    def clear(self) -> None:
        with self._lock:
            self._token = None
            self._storage.remove(self._key)
            self.login_required = True
        log.info("Session cleared")

    def on_expired(self, listener: ExpiryListener) -> None:
        self._listeners.append(listener)

    def expire(self, token_used: Optional[str]) -> bool:
        """
        Handle a 401 for a request sent with ``token_used``.

        Only the first rejection of the live token clears the session and
        notifies listeners; later rejections of the same token are ignored.

        Returns:
            True when this call cleared the session
        """
        with self._lock:
            if self._token is None or token_used != self._token:
                log.debug(f"Ignoring 401 for stale token {mask_token(token_used)}")
                return False
            self._token = None
            self._storage.remove(self._key)
            self.login_required = True
            listeners = list(self._listeners)

        log.warning("Session expired: backend rejected the token")
        for listener in listeners:
            try:
                listener()
            except Exception as e:
                log.error(f"Session expiry listener failed: {e!r}")
        return True

    def teardown(self) -> None:
        """Drop listeners. The stored token is left to the storage owner."""
        self._listeners.clear()
        self.initialized = False
        log.debug("Session torn down")
