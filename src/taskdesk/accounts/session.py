# src/taskdesk/accounts/session.py

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from ..core.errors import AuthError, ErrorCode, ValidationError
from ..core.ports import KeyValueStore
from ..storage.keys import SESSION_KEY
from .directory import AccountDirectory
from .models import Identity, UiMode

LoginListener = Callable[[Identity], None]

logger = logging.getLogger(__name__)


class SessionManager:
    """
    At most one logged-in identity, persisted under `currentUser`.

    The stored projection is copied at login time and is not refreshed
    afterwards (a later password change does not touch it).
    """

    def __init__(self, store: KeyValueStore, directory: AccountDirectory) -> None:
        self._store = store
        self._directory = directory
        self._listeners: list[LoginListener] = []

    def add_login_listener(self, listener: LoginListener) -> None:
        self._listeners.append(listener)

    def current_session(self) -> Identity | None:
        raw = self._store.get_item(SESSION_KEY)
        if raw is None:
            return None
        try:
            identity = Identity.from_dict(json.loads(raw))
        except ValueError:
            identity = None
        if identity is None:
            logger.warning("Stored session is unreadable; treating as logged out.")
        return identity

    def require_session(self) -> Identity:
        identity = self.current_session()
        if identity is None:
            raise AuthError(ErrorCode.NOT_LOGGED_IN, "Please log in first.")
        return identity

    def ui_mode(self) -> UiMode:
        return UiMode.APPLICATION if self.current_session() is not None else UiMode.AUTH

    def login(self, username: str, password: str) -> Identity:
        """
        Authenticate and persist the session, then notify listeners.

        On failure the previous session (if any) is left as it was.
        """
        username = (username or "").strip()
        password = (password or "").strip()
        if not username or not password:
            raise ValidationError(ErrorCode.EMPTY_FIELD, "Please enter your credentials.")

        identity = self._directory.authenticate(username, password)
        self._store.set_item(SESSION_KEY, json.dumps(identity.to_dict()))
        logger.info("Logged in username=%s", identity.username)

        for listener in list(self._listeners):
            try:
                listener(identity)
            except Exception:
                logger.exception("Login listener failed for username=%s", identity.username)
        return identity

    def logout(self) -> None:
        self._store.remove_item(SESSION_KEY)
        logger.info("Logged out.")

    def invalidate_unless(self, username: str) -> bool:
        """Clear the session if it belongs to anyone but `username`. Returns True if cleared."""
        identity = self.current_session()
        if identity is None or identity.username == username:
            return False
        self._store.remove_item(SESSION_KEY)
        logger.info("Session for username=%s invalidated.", identity.username)
        return True
