# src/taskdesk/accounts/admin.py

from __future__ import annotations

import logging

from ..core.errors import AuthError, ErrorCode
from .directory import AccountDirectory
from .models import ADMIN_USERNAME, CredentialRecord, Identity, is_admin_identity
from .session import SessionManager

logger = logging.getLogger(__name__)


def is_admin(session: Identity | None) -> bool:
    """True iff a session exists and its username is exactly `Admin_00`."""
    return is_admin_identity(session)


class AdminAuthority:
    """
    Admin-only operations.

    Each entry point re-reads the session and checks `is_admin` at the call.
    The directory methods underneath carry no check of their own, so any code
    holding the AccountDirectory can bypass this gate.
    """

    def __init__(self, directory: AccountDirectory, sessions: SessionManager) -> None:
        self._directory = directory
        self._sessions = sessions

    def _require_admin(self, action: str) -> Identity:
        session = self._sessions.current_session()
        if session is not None and is_admin(session):
            return session

        logger.warning(
            "Admin action %s denied for username=%s",
            action,
            session.username if session else None,
        )
        raise AuthError(ErrorCode.ADMIN_REQUIRED, "Access Denied: Admin privileges required.")

    def is_admin(self) -> bool:
        return is_admin(self._sessions.current_session())

    def list_accounts(self) -> list[CredentialRecord]:
        """Every record, passwords included (plaintext)."""
        self._require_admin("list_accounts")
        return self._directory.list_accounts()

    def delete_user(self, username: str) -> bool:
        self._require_admin("delete_user")
        if username == ADMIN_USERNAME:
            raise AuthError(ErrorCode.PROTECTED_ACCOUNT, f"{ADMIN_USERNAME} cannot be deleted.")
        return self._directory.delete_user(username)

    def cleanup_all_except_admin(self) -> list[str]:
        self._require_admin("cleanup_all_except_admin")
        removed = self._directory.cleanup_all_except_admin()
        self._sessions.invalidate_unless(ADMIN_USERNAME)
        return removed
