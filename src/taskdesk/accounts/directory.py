# src/taskdesk/accounts/directory.py

from __future__ import annotations

import json
import logging

from ..core.errors import AuthError, ConflictError, ErrorCode, ValidationError
from ..core.ports import KeyValueStore, TaskRepo
from ..storage.keys import USERS_KEY
from .models import (
    ADMIN_USERNAME,
    DEFAULT_ADMIN_EMAIL,
    DEFAULT_ADMIN_PASSWORD,
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
    CredentialRecord,
    Identity,
)

logger = logging.getLogger(__name__)


class AccountDirectory:
    """
    Username -> credential record, persisted as one JSON array under `users`.

    Invariants:
    - usernames are unique case-insensitively
    - emails are unique case-insensitively
    - after bootstrap an `Admin_00` record exists

    Every read goes through `_load_or_default()`: a corrupt stored value is
    replaced by a directory holding only the default admin.
    """

    def __init__(
        self,
        store: KeyValueStore,
        tasks: TaskRepo,
        *,
        admin_email: str = DEFAULT_ADMIN_EMAIL,
        admin_password: str = DEFAULT_ADMIN_PASSWORD,
    ) -> None:
        self._store = store
        self._tasks = tasks
        self._admin_email = admin_email
        self._admin_password = admin_password

    # ---- persistence ----

    def _default_admin(self) -> CredentialRecord:
        return CredentialRecord(
            username=ADMIN_USERNAME,
            email=self._admin_email,
            password=self._admin_password,
        )

    @staticmethod
    def _parse(raw: str) -> list[CredentialRecord]:
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"users must be a JSON array, got {type(data).__name__}")
        return [CredentialRecord.from_dict(item) for item in data]

    def _load_or_default(self) -> list[CredentialRecord]:
        raw = self._store.get_item(USERS_KEY)
        if raw is None:
            return []
        try:
            return self._parse(raw)
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too.
            logger.warning("Account directory corrupt (%s); resetting to default admin only.", e)
            records = [self._default_admin()]
            self._save(records)
            return records

    def _save(self, records: list[CredentialRecord]) -> None:
        self._store.set_item(USERS_KEY, json.dumps([r.to_dict() for r in records]))

    @staticmethod
    def _find_ci(records: list[CredentialRecord], username: str) -> CredentialRecord | None:
        needle = username.lower()
        return next((r for r in records if r.username.lower() == needle), None)

    # ---- bootstrap ----

    def bootstrap_default_admin(self) -> None:
        """Ensure the default admin exists. Idempotent; never raises for bad data."""
        records = self._load_or_default()
        if self._find_ci(records, ADMIN_USERNAME) is not None:
            return
        records.append(self._default_admin())
        self._save(records)
        logger.info("Default admin initialized.")

    # ---- queries ----

    def list_accounts(self) -> list[CredentialRecord]:
        return self._load_or_default()

    def get(self, username: str) -> CredentialRecord | None:
        return next((r for r in self._load_or_default() if r.username == username), None)

    def count(self) -> int:
        return len(self._load_or_default())

    # ---- operations ----

    def register(self, username: str, email: str, password: str) -> CredentialRecord:
        """
        Create an account. Does not log in.

        Checks run in this order: empty fields, username length,
        duplicate username, duplicate email.
        """
        username = (username or "").strip()
        email = (email or "").strip()
        password = (password or "").strip()

        if not username or not email or not password:
            raise ValidationError(ErrorCode.EMPTY_FIELD, "All fields are required.")

        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(
                ErrorCode.USERNAME_TOO_SHORT,
                f"Username must be at least {MIN_USERNAME_LENGTH} characters long.",
            )

        records = self._load_or_default()

        if self._find_ci(records, username) is not None:
            raise ConflictError(ErrorCode.DUPLICATE_USERNAME, "Username already exists!")

        email_ci = email.lower()
        if any(r.email.lower() == email_ci for r in records):
            raise ConflictError(ErrorCode.DUPLICATE_EMAIL, "Email already registered!")

        record = CredentialRecord(username=username, email=email, password=password)
        records.append(record)
        self._save(records)
        logger.info("Registered account username=%s", username)
        return record

    def authenticate(self, username: str, password: str) -> Identity:
        """Username compares case-insensitively, password exactly."""
        needle = (username or "").lower()
        for r in self._load_or_default():
            if r.username.lower() == needle and r.password == password:
                return r.identity()
        logger.info("Authentication failed username=%s", username)
        raise AuthError(
            ErrorCode.INVALID_CREDENTIALS, "Access Denied: Invalid username or password"
        )

    def change_password(self, username: str, current_password: str, new_password: str) -> None:
        """
        Passwords are stripped like login input, so a stored password is always
        one that `login` can reproduce. The length rule applies after stripping.
        """
        current_password = (current_password or "").strip()
        new_password = (new_password or "").strip()
        records = self._load_or_default()
        record = next((r for r in records if r.username == username), None)
        if record is None:
            raise AuthError(ErrorCode.USER_NOT_FOUND, f"No account named {username!r}.")

        if record.password != current_password:
            raise AuthError(ErrorCode.WRONG_CURRENT_PASSWORD, "Incorrect current password.")

        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                ErrorCode.NEW_PASSWORD_TOO_SHORT,
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters.",
            )

        record.password = new_password
        self._save(records)
        logger.info("Password changed username=%s", username)

    def delete_user(self, username: str) -> bool:
        """
        Remove the exact-match record and that user's tasks.

        No authorization check here; callers go through AdminAuthority.
        Returns True if a record was removed.
        """
        records = self._load_or_default()
        kept = [r for r in records if r.username != username]
        removed = len(kept) != len(records)
        if removed:
            self._save(kept)
        self._tasks.delete_all_tasks_for(username)
        logger.info("Deleted account username=%s removed=%s", username, removed)
        return removed

    def cleanup_all_except_admin(self) -> list[str]:
        """
        Remove every record except `Admin_00` and every task list except the admin's.

        Session invalidation is the caller's job (AdminAuthority).
        Returns the removed usernames in directory order.
        """
        records = self._load_or_default()
        kept = [r for r in records if r.username == ADMIN_USERNAME]
        removed = [r.username for r in records if r.username != ADMIN_USERNAME]
        self._save(kept)
        dropped_keys = self._tasks.delete_all_tasks_except(ADMIN_USERNAME)
        logger.info(
            "Account cleanup removed %d accounts and %d task lists.",
            len(removed),
            len(dropped_keys),
        )
        return removed
