"""
Notes API — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the failure modes of the notes API.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching HTTP status.
Who:   Raised by the storage accessor and the database handle; caught by handlers.

Exception Hierarchy:
    NotesError (base)
    ├── BadRequestError        → 400 Bad Request (malformed id or body)
    ├── NotFoundError          → 404 Not Found
    ├── StoreUnavailableError  → 500 Internal Server Error (connectivity)
    └── InternalError          → 500 Internal Server Error (anything else)

The `error` code of each class is the machine-readable value returned in the
response body; `message` is the human-readable part; `context` is logged
server-side only.
"""

from typing import Any, Dict, Optional


class NotesError(Exception):
    """
    Base exception for all notes API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    error_code: str = "internal error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(NotesError):
    """
    Raised when client input cannot be accepted.

    When:  The note id is not a valid identifier, or a request body is
           missing required fields or carries values of the wrong type.
    HTTP:  400 Bad Request
    """

    status_code = 400
    error_code = "bad request"

    def __init__(
        self,
        message: str = "Bad request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(NotesError):
    """
    Raised when no note exists with the requested identifier.

    HTTP:  404 Not Found
    """

    status_code = 404
    error_code = "not found"

    def __init__(
        self,
        resource: str = "note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreUnavailableError(NotesError):
    """
    Raised when the database cannot be reached.

    When:  Connection refused or dropped, the engine was never connected,
           or initialization at startup failed.
    HTTP:  500 Internal Server Error (no retries are attempted)
    """

    status_code = 500
    error_code = "store unavailable"

    def __init__(
        self,
        message: str = "The note store is unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(NotesError):
    """
    Raised when the storage layer fails in any other unexpected way.

    The client only ever sees the generic message; the driver error is kept
    in `context` and logged.
    HTTP:  500 Internal Server Error
    """

    status_code = 500
    error_code = "internal error"

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
