"""
Notes Backend: Custom Exception Hierarchy
============================================

What:  Typed error kinds raised by the store and services.
How:   Each exception carries a user-facing message and an optional context
       dict. Handlers registered in main.py map each kind to its HTTP status
       and the `{status: "error", code, message}` envelope. Nothing below the
       routing layer knows about HTTP.

Exception Hierarchy:
    NotesBackendError (base)
    ├── ValidationError   → 400 validation_error
    ├── AuthError         → 401 unauthorized
    ├── NotFoundError     → 404 not_found
    ├── ConflictError     → 409 conflict
    └── StorageError      → 500 storage_error

`context` is logged server-side and never returned to the client.
"""

from typing import Any, Dict, Optional


class NotesBackendError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
        status_code / code:  Transport mapping used by the boundary handlers
    """

    status_code = 500
    code = "internal_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesBackendError):
    """
    Raised when client input fails validation.

    When:    Missing email, short password, blank title, non-string content,
             uncoercible pinned/archived, body that is not a JSON object.
    HTTP:    400 Bad Request
    """

    status_code = 400
    code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthError(NotesBackendError):
    """
    Raised when a credential or bearer token is missing, wrong, or expired.

    Login failures use one message for "no such user" and "wrong password".
    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    status_code = 401
    code = "unauthorized"

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConflictError(NotesBackendError):
    """
    Raised when a unique value is already taken (registration email).
    HTTP:    409 Conflict
    """

    status_code = 409
    code = "conflict"

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NotesBackendError):
    """
    Raised when a requested resource does not exist for the caller.

    A note owned by somebody else raises exactly the same error as a note
    that does not exist, so note ids cannot be probed across accounts.
    HTTP:    404 Not Found
    """

    status_code = 404
    code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource[:1].upper()}{resource[1:]} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class StorageError(NotesBackendError):
    """
    Raised when the store reports an inconsistent result for a mutation.

    When:    A delete or update finds no row although the ownership check on
             the same id just succeeded.
    HTTP:    500 Internal Server Error
    """

    status_code = 500
    code = "storage_error"

    def __init__(
        self,
        message: str = "A storage error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
