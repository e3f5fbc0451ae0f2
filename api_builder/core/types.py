"""Type aliases for dynamic data structures throughout the package.

This module centralizes type definitions for data that cannot be statically
typed, providing clear semantic meaning for these types.

Values held by these aliases end up in logs and response bodies, so they
should stay JSON-serializable.
"""

from typing import Any

# Context dictionary for error details and debugging information
type ErrorContext = dict[str, Any]  # flexible error context

# Single validation issue as reported by a validator, passed through as-is
# Pydantic-backed validators report {"path": [...], "message": str, "code": str}
type ValidationIssue = Any

# Flat mapping of raw path/query parameter names to values
type RawParams = dict[str, Any]

# Cumulative middleware context threaded into the handler
type PipelineContext = dict[str, Any]
