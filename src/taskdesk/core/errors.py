# src/taskdesk/core/errors.py

"""
Error taxonomy for account, session, admin and backup operations.

Every error is recoverable and local to one operation: the caller (console
connector) prints it and the user retries. `code` is a stable machine-readable
reason; `str(err)` is the user-facing message.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    # ValidationError
    EMPTY_FIELD = "EmptyField"
    USERNAME_TOO_SHORT = "UsernameTooShort"
    NEW_PASSWORD_TOO_SHORT = "NewPasswordTooShort"
    INVALID_PRIORITY = "InvalidPriority"
    TASK_NOT_FOUND = "TaskNotFound"

    # ConflictError
    DUPLICATE_USERNAME = "DuplicateUsername"
    DUPLICATE_EMAIL = "DuplicateEmail"

    # AuthError
    INVALID_CREDENTIALS = "InvalidCredentials"
    USER_NOT_FOUND = "UserNotFound"
    WRONG_CURRENT_PASSWORD = "WrongCurrentPassword"
    NOT_LOGGED_IN = "NotLoggedIn"
    ADMIN_REQUIRED = "AdminRequired"
    PROTECTED_ACCOUNT = "ProtectedAccount"

    # SnapshotImportError
    MALFORMED_ARTIFACT = "MalformedArtifact"


class TaskdeskError(Exception):
    """Base class for all user-facing errors."""

    kind = "Error"

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind}:{self.code.value}, {self.message!r})"


class ValidationError(TaskdeskError):
    """Malformed or insufficient input."""

    kind = "ValidationError"


class ConflictError(TaskdeskError):
    """Uniqueness violation (username/email already taken)."""

    kind = "ConflictError"


class AuthError(TaskdeskError):
    """Bad credentials or missing authorization."""

    kind = "AuthError"


class SnapshotImportError(TaskdeskError):
    """Backup artifact could not be parsed; nothing was written."""

    kind = "ImportError"
