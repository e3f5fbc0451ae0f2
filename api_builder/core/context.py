"""Request context management utilities for correlation IDs and request tracking."""

import uuid
from contextvars import ContextVar, Token

# Context variable for storing correlation ID across async boundaries
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


class RequestContext:
    """Manages request context using contextvars for async-safe storage.

    Compiled route handlers store the correlation ID here so that handler and
    middleware code can read it without threading it through arguments.
    """

    @staticmethod
    def set_correlation_id(correlation_id: str) -> Token[str | None]:
        """Set the correlation ID for the current context.

        Args:
            correlation_id: The correlation ID to store in the context.

        Returns:
            Token[str | None]: Token restoring the previous value via reset().
        """
        return _correlation_id_var.set(correlation_id)

    @staticmethod
    def reset(token: Token[str | None]) -> None:
        """Restore the correlation ID that was current before a set."""
        _correlation_id_var.reset(token)

    @staticmethod
    def get_correlation_id() -> str | None:
        """Get the correlation ID from the current context.

        Returns:
            str | None: The correlation ID if set, None otherwise.
        """
        return _correlation_id_var.get()

    @staticmethod
    def clear() -> None:
        """Clear all context variables."""
        _correlation_id_var.set(None)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracking.

    Returns:
        str: A string representation of a UUID4.

    Examples:
        >>> len(generate_correlation_id())
        36
    """
    return str(uuid.uuid4())


def generate_request_id() -> str:
    """Generate a unique request ID for individual request tracking.

    Request IDs are unique per pipeline run, while correlation IDs can span
    multiple services in a distributed system.

    Returns:
        str: A prefixed UUID4 string in format 'req-<uuid4>'.

    Examples:
        >>> generate_request_id().startswith('req-')
        True
    """
    return f"req-{uuid.uuid4()}"
