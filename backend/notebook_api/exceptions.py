"""
Notebook API - Custom Exception Hierarchy
=========================================

What:  Defines application-specific exceptions for every failure the API reports.
How:   Each exception class carries a user-facing message, an HTTP status code
       and an optional context dict. Global exception handlers (registered in
       main.py) turn them into `{"message": ...}` JSON responses.
Who:   Raised by the access-scoping layer and the resource services.
When:  During request processing.

Exception Hierarchy:
    NotebookError (base)
    ├── AuthenticationError
    │   ├── AuthMissingError      → 401 Unauthorized (no/malformed header)
    │   └── AuthInvalidError      → 403 Forbidden (credential failed verification)
    ├── ValidationError           → 400 Bad Request (body is not a JSON object)
    ├── InvalidIdentifierError    → 400 Bad Request (path id is not a document id)
    ├── NotFoundError             → 404 Not Found (absent or not owned)
    └── StoreError                → 500 Internal Server Error (document store failed)

Context vs message:
    `message` is safe to return to the client. `context` is logged server-side
    only and may contain ids, exception types and other diagnostics.
"""

from typing import Any, Dict, Optional


class NotebookError(Exception):
    """
    Base exception for all Notebook API errors.

    Attributes:
        message:      User-facing error description (returned in the response body)
        context:      Additional debug info (logged but NOT returned to client)
        status_code:  HTTP status the global handler responds with
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


class AuthenticationError(NotebookError):
    """
    Base for the two terminal authentication states of a request.

    Both subclasses are raised by `authorize()` before any handler logic or
    store access runs. Neither is ever retried.
    """

    status_code = 401


class AuthMissingError(AuthenticationError):
    """
    Raised when the Authorization header is absent or not a Bearer credential.

    HTTP: 401 Unauthorized
    """

    status_code = 401

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Unauthorized", context=context)


class AuthInvalidError(AuthenticationError):
    """
    Raised when a bearer credential is present but fails verification.

    What:    Bad signature, expired, wrong issuer/audience, missing subject,
             or no signing material configured on the server.
    HTTP:    403 Forbidden
    """

    status_code = 403

    def __init__(self, reason: str = "verification failed", context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["reason"] = reason
        super().__init__(message="Invalid token", context=ctx)
        self.reason = reason


class ValidationError(NotebookError):
    """
    Raised when the client sends a request body the API cannot use.

    When:    Body is not valid JSON, or is JSON but not an object.
    HTTP:    400 Bad Request
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


class InvalidIdentifierError(NotebookError):
    """
    Raised when a path id is not a canonical document identifier.

    What:    The id failed to parse, so it is never sent to the store.
    HTTP:    400 Bad Request (distinct from the 404 for a well-formed absent id)
    """

    status_code = 400

    def __init__(
        self,
        resource: str = "resource",
        raw_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if raw_id is not None:
            ctx["raw_id"] = raw_id
        super().__init__(message=f"Invalid {resource} ID", context=ctx)


class NotFoundError(NotebookError):
    """
    Raised when a well-formed, authorized request matches no owned document.

    The message never includes the requested id, so "does not exist" and
    "owned by someone else" produce byte-identical responses.

    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource.capitalize()} not found", context=ctx)


class StoreError(NotebookError):
    """
    Raised when a document store operation fails.

    What:    Connection lost mid-query, pool exhausted, constraint violation, etc.
    HTTP:    500 Internal Server Error

    Security Note:
        The message is a generic per-operation sentence ("Failed to fetch
        notes"). The underlying exception type and ids live in `context` and
        only reach the server log.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
