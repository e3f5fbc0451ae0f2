"""API Builder - declarative, immutable request pipelines for Starlette apps.

A route is described by chaining configuration calls on a builder and
compiling it with an HTTP method and a handler. Each compiled endpoint
validates its inputs, threads a cumulative context through the middleware
chain, calls the handler and maps every outcome to a JSON response.

Architecture Overview:
- **API Layer**: Builder, per-request pipeline, validator adapter, responses
- **Core Layer**: Configuration, typed errors, logging and request context

Example:
    >>> from api_builder import create_api_handler, get_settings, setup_logging
    >>> setup_logging(get_settings())
    >>> endpoint = create_api_handler().query(Filters).get(list_items)
    >>> Route("/items", endpoint, methods=["GET"])
"""

from api_builder.api.builder import ApiBuilder, create_api_handler
from api_builder.api.pipeline import FailureInput, HandlerInput
from api_builder.api.signals import any_of, is_host_signal, never
from api_builder.api.validation import (
    PydanticValidator,
    ValidationResult,
    Validator,
)
from api_builder.core.config import get_settings
from api_builder.core.exceptions import (
    ApiError,
    ConflictError,
    ErrorCode,
    ForbiddenError,
    InvalidBodyError,
    NotFoundError,
    Severity,
    UnauthorizedError,
    ValidationError,
)
from api_builder.core.logging import setup_logging

__all__ = [
    "ApiBuilder",
    "ApiError",
    "ConflictError",
    "ErrorCode",
    "FailureInput",
    "ForbiddenError",
    "HandlerInput",
    "InvalidBodyError",
    "NotFoundError",
    "PydanticValidator",
    "Severity",
    "UnauthorizedError",
    "ValidationError",
    "ValidationResult",
    "Validator",
    "any_of",
    "create_api_handler",
    "get_settings",
    "is_host_signal",
    "never",
    "setup_logging",
]
