"""Typed error values that short-circuit a request pipeline.

This module defines the error model used by compiled route handlers. Raising
an ``ApiError`` anywhere in a pipeline (validation, middleware, handler) stops
execution and produces a response with the error's own status code, type tag
and message. Anything else that escapes the pipeline is treated as an
unclassified failure and answered with a generic 500.

Key components:
- **ErrorCode enum**: Machine-readable type tags shared with clients
- **Severity enum**: Error classification for log levels and alerting
- **ApiError**: Base typed error carrying status, type, message and issues
- **Specialized errors**: Fixed status/type shortcuts (validation, auth, etc.)

Errors are immutable once constructed: status, type, message and issues are
exposed through read-only properties so a raised error cannot be altered on
its way to the response.
"""

import hashlib
import traceback
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from api_builder.core.types import ErrorContext, ValidationIssue


def _raise_site() -> str | None:
    """Return ``module:function`` of the innermost frame outside this module."""
    for frame in reversed(traceback.extract_stack()):
        if frame.filename != __file__:
            return f"{Path(frame.filename).stem}:{frame.name}"
    return None


class ErrorCode(Enum):
    """Standardized type tags for API error responses."""

    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    """An unexpected internal error occurred."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Path, query or body input was rejected by its schema."""

    INVALID_BODY = "INVALID_BODY"
    """The request payload could not be parsed."""

    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    UNAUTHORIZED = "UNAUTHORIZED"
    """Authentication is missing or invalid."""

    FORBIDDEN = "FORBIDDEN"
    """The caller is authenticated but not allowed to do this."""

    CONFLICT = "CONFLICT"
    """The request conflicts with the current state of the resource."""


class Severity(Enum):
    """Severity levels used to pick log levels for typed errors."""

    LOW = "LOW"
    """Expected errors caused by client input."""

    MEDIUM = "MEDIUM"
    """Errors that affect a single operation but are part of normal flow."""

    HIGH = "HIGH"
    """Errors worth attention, such as repeated auth failures."""

    CRITICAL = "CRITICAL"
    """Errors requiring immediate attention."""


class ApiError(Exception):
    """Explicit, structured failure that maps directly to a response.

    Raise this (or a subclass) from middleware or a handler to answer the
    request with a specific status code instead of a generic 500. The failure
    hook is never invoked for these errors.

    Args:
        message: Human-readable error message, returned to the client
        code: HTTP status code of the response (defaults to 500)
        type: Machine-readable type tag (string or ErrorCode)
        issues: Optional validation issues, returned to the client unchanged
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context for logs, never returned to the client
        cause: The original exception that caused this error

    Example:
        >>> raise ApiError("Not authenticated.", code=401, type="UNAUTHORIZED")
    """

    def __init__(
        self,
        message: str,
        code: int = 500,
        type: str | ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR,  # noqa: A002
        issues: Sequence[ValidationIssue] | None = None,
        severity: Severity = Severity.MEDIUM,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self._code = code
        self._type = type.value if isinstance(type, ErrorCode) else type
        self._message = message
        self._issues = tuple(issues) if issues is not None else None
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        self.origin = _raise_site()
        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def code(self) -> int:
        """HTTP status code of the response."""
        return self._code

    @property
    def type(self) -> str:
        """Machine-readable type tag."""
        return self._type

    @property
    def message(self) -> str:
        """Human-readable message."""
        return self._message

    @property
    def issues(self) -> tuple[ValidationIssue, ...] | None:
        """Validation issues in the order the validator reported them."""
        return self._issues

    def _generate_fingerprint(self) -> str:
        """Hash class, type tag, status and origin for error grouping.

        The same error raised by the same validator, middleware step or
        handler always gets the same fingerprint.
        """
        fingerprint_data = ":".join(
            (self.__class__.__name__, self._type, str(self._code), self.origin or "")
        )
        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether this error is part of normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Whether this error should be surfaced to alerting (HIGH or CRITICAL)."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        """Return the type tag and message."""
        return f"[{self._type}] {self._message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the error."""
        class_name = self.__class__.__name__
        issues_str = f", issues={len(self._issues)}" if self._issues else ""
        return (
            f"{class_name}(code={self._code}, type='{self._type}', "
            f"message='{self._message}', severity={self.severity.value}{issues_str})"
        )


class ValidationError(ApiError):
    """Raised when path, query or body input is rejected by its schema.

    Args:
        message: Description of the validation failure
        issues: Issues reported by the validator
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str = "Invalid input.",
        issues: Sequence[ValidationIssue] | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code=400,
            type=ErrorCode.VALIDATION_ERROR,
            issues=issues if issues is not None else (),
            severity=Severity.LOW,
            context=context,
            cause=cause,
        )


class InvalidBodyError(ApiError):
    """Raised when a payload cannot be parsed while a body schema is configured."""

    def __init__(
        self,
        message: str = "Invalid JSON body provided.",
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code=400,
            type=ErrorCode.INVALID_BODY,
            severity=Severity.LOW,
            context=context,
            cause=cause,
        )


class UnauthorizedError(ApiError):
    """Raised when a caller is not authenticated."""

    def __init__(
        self,
        message: str = "Not authenticated.",
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code=401,
            type=ErrorCode.UNAUTHORIZED,
            severity=Severity.HIGH,
            context=context,
            cause=cause,
        )


class ForbiddenError(ApiError):
    """Raised when a caller lacks permission for an action."""

    def __init__(
        self,
        message: str = "Forbidden.",
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code=403,
            type=ErrorCode.FORBIDDEN,
            severity=Severity.HIGH,
            context=context,
            cause=cause,
        )


class NotFoundError(ApiError):
    """Raised when a requested resource does not exist."""

    def __init__(
        self,
        message: str = "Not found.",
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code=404,
            type=ErrorCode.NOT_FOUND,
            severity=Severity.LOW,
            context=context,
            cause=cause,
        )


class ConflictError(ApiError):
    """Raised when a request conflicts with the current resource state."""

    def __init__(
        self,
        message: str = "Conflict.",
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code=409,
            type=ErrorCode.CONFLICT,
            severity=Severity.MEDIUM,
            context=context,
            cause=cause,
        )
