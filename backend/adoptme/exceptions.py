"""
AdoptMe Backend - Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for every recoverable error scenario.
How:   Each exception carries a user-facing message, an optional context dict
       (logged, never returned) and the HTTP status it maps to. Global
       handlers registered in main.py turn them into
       `{"status": "error", "error": <message>}` responses.
Who:   Raised by services, repositories helpers and route dependencies.

Exception Hierarchy:
    AdoptMeError (base)               → 500
    ├── ValidationError               → 400 malformed or missing input
    ├── NotFoundError                 → 404 entity missing
    ├── PreconditionFailedError       → 400 valid entities, invalid transition
    ├── ConflictError                 → 400 uniqueness violation
    ├── AuthenticationError           → 401 missing/invalid session
    ├── FileStorageError              → 500 upload could not be written
    └── DatabaseError                 → 500 unexpected persistence failure

Messages raised with an explicit `message` are part of the public API
contract (e.g. "Pet is already adopted") and are returned verbatim.
"""

from typing import Any, Dict, Optional


class AdoptMeError(Exception):
    """
    Base exception for all AdoptMe application errors.

    Attributes:
        message:     User-facing error description (safe to return)
        context:     Additional debug info (logged but NOT returned)
        status_code: HTTP status used by the global handlers
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(AdoptMeError):
    """
    Raised when client input fails validation.

    When:  Missing required fields ("Incomplete values"), malformed ids,
           empty or oversized uploads.
    HTTP:  400 Bad Request
    """

    status_code = 400

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


class NotFoundError(AdoptMeError):
    """
    Raised when a requested entity does not exist.

    The default message is "<Resource> not found"; callers whose contract
    fixes a different literal pass `message` explicitly.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        message: Optional[str] = None,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource[:1].upper()}{resource[1:]} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class PreconditionFailedError(AdoptMeError):
    """
    Raised when both entities exist but the requested state transition
    is not allowed (adopting an adopted pet, deleting an owner).
    """

    status_code = 400

    def __init__(
        self,
        reason: str = "Precondition failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=reason, context=context)
        self.reason = reason


class ConflictError(AdoptMeError):
    """
    Raised when a write would break a uniqueness invariant (duplicate email).

    HTTP: 400, kept compatible with the registration contract.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(AdoptMeError):
    """Raised when the session cookie is missing, expired or tampered with."""

    status_code = 401

    def __init__(
        self,
        message: str = "Not authenticated",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(AdoptMeError):
    """
    Raised when an uploaded file cannot be written to the upload volume.

    The response message is generic; the OS error lives in `context`.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(AdoptMeError):
    """
    Raised when a database operation fails unexpectedly.

    Security Note:
        The message returned to the client is always generic. Driver
        errors, SQL and constraint names are logged server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
