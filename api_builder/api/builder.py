"""Declarative, immutable builder for route handlers.

``ApiBuilder`` accumulates the configuration of a route: schemas for path
parameters, query parameters and body, an ordered chain of middleware steps,
a failure hook and the control-signal predicate. Every configuration call
returns a new builder and leaves the original untouched, so partially
configured builders can be shared and branched freely::

    authed = create_api_handler().use(require_user).failed(report_failure)

    get_post = authed.context(PostParams).get(read_post)
    update_post = authed.context(PostParams).body(PostUpdate).patch(write_post)

The terminal methods (``get``, ``post``, ``put``, ``patch``, ``delete``)
compile the configuration into a Starlette-compatible endpoint. They can also
be used as decorators.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Generic, TypeVar, overload

from api_builder.api.pipeline import (
    BodyT,
    ContextT,
    FailureHook,
    Middleware,
    QueryT,
    RouteEndpoint,
    compile_route_handler,
)
from api_builder.api.signals import ControlSignalPredicate, is_host_signal
from api_builder.api.validation import Validator, as_validator

if TYPE_CHECKING:
    from collections.abc import Callable

    from api_builder.api.constants import HttpMethod
    from api_builder.api.pipeline import HandlerInput

S = TypeVar("S")


@dataclass(frozen=True, slots=True)
class ApiBuilder(Generic[ContextT, QueryT, BodyT]):
    """Immutable route configuration.

    Attributes:
        context_validator: Validator for path parameters.
        query_validator: Validator for query parameters.
        body_validator: Validator for the JSON body.
        middlewares: Middleware steps, in execution order.
        failure_hook: Called once for unclassified errors.
        is_control_signal: Decides which raised values belong to the host.
    """

    context_validator: Validator | None = None
    query_validator: Validator | None = None
    body_validator: Validator | None = None
    middlewares: tuple[Middleware, ...] = ()
    failure_hook: FailureHook | None = None
    is_control_signal: ControlSignalPredicate = is_host_signal

    @overload
    def context(self, schema: type[S]) -> ApiBuilder[S, QueryT, BodyT]: ...
    @overload
    def context(self, schema: Any) -> ApiBuilder[Any, QueryT, BodyT]: ...  # noqa: ANN401
    def context(self, schema: Any) -> ApiBuilder[Any, QueryT, BodyT]:
        """Validate route parameters (e.g. ``{id}``) with ``schema``."""
        return replace(self, context_validator=as_validator(schema))  # type: ignore[return-value]

    @overload
    def query(self, schema: type[S]) -> ApiBuilder[ContextT, S, BodyT]: ...
    @overload
    def query(self, schema: Any) -> ApiBuilder[ContextT, Any, BodyT]: ...  # noqa: ANN401
    def query(self, schema: Any) -> ApiBuilder[ContextT, Any, BodyT]:
        """Validate URL query parameters (e.g. ``?include=true``) with ``schema``."""
        return replace(self, query_validator=as_validator(schema))  # type: ignore[return-value]

    @overload
    def body(self, schema: type[S]) -> ApiBuilder[ContextT, QueryT, S]: ...
    @overload
    def body(self, schema: Any) -> ApiBuilder[ContextT, QueryT, Any]: ...  # noqa: ANN401
    def body(self, schema: Any) -> ApiBuilder[ContextT, QueryT, Any]:
        """Validate the JSON request body with ``schema``.

        The body is only read for POST, PUT and PATCH.
        """
        return replace(self, body_validator=as_validator(schema))  # type: ignore[return-value]

    def use(self, middleware: Middleware) -> ApiBuilder[ContextT, QueryT, BodyT]:
        """Append a middleware step.

        The step receives a ``HandlerInput`` whose ``ctx`` holds the merged
        output of all earlier steps, and returns a mapping that is
        shallow-merged on top of it (or None to add nothing). Steps run after
        validation, one at a time, in the order they were added.
        """
        return replace(self, middlewares=(*self.middlewares, middleware))

    def failed(self, hook: FailureHook) -> ApiBuilder[ContextT, QueryT, BodyT]:
        """Install the hook invoked for unexpected errors.

        The hook receives a ``FailureInput`` and runs only for errors that are
        neither ``ApiError`` nor host control signals. Its return value is
        ignored and anything it raises is logged and swallowed. Replaces any
        previously installed hook.
        """
        return replace(self, failure_hook=hook)

    def passthrough(
        self, predicate: ControlSignalPredicate
    ) -> ApiBuilder[ContextT, QueryT, BodyT]:
        """Replace the predicate deciding which errors are re-raised to the host."""
        return replace(self, is_control_signal=predicate)

    def get(
        self, handler: Callable[[HandlerInput[ContextT, QueryT, BodyT]], Any]
    ) -> RouteEndpoint:
        """Compile a GET endpoint."""
        return self._compile("GET", handler)

    def post(
        self, handler: Callable[[HandlerInput[ContextT, QueryT, BodyT]], Any]
    ) -> RouteEndpoint:
        """Compile a POST endpoint. Plain results answer with 201."""
        return self._compile("POST", handler)

    def put(
        self, handler: Callable[[HandlerInput[ContextT, QueryT, BodyT]], Any]
    ) -> RouteEndpoint:
        """Compile a PUT endpoint."""
        return self._compile("PUT", handler)

    def patch(
        self, handler: Callable[[HandlerInput[ContextT, QueryT, BodyT]], Any]
    ) -> RouteEndpoint:
        """Compile a PATCH endpoint."""
        return self._compile("PATCH", handler)

    def delete(
        self, handler: Callable[[HandlerInput[ContextT, QueryT, BodyT]], Any]
    ) -> RouteEndpoint:
        """Compile a DELETE endpoint."""
        return self._compile("DELETE", handler)

    def _compile(
        self,
        method: HttpMethod,
        handler: Callable[[HandlerInput[ContextT, QueryT, BodyT]], Any],
    ) -> RouteEndpoint:
        return compile_route_handler(self, method, handler)


def create_api_handler(
    *, is_control_signal: ControlSignalPredicate | None = None
) -> ApiBuilder[None, None, None]:
    """Create a builder with no schemas, middleware or failure hook.

    Args:
        is_control_signal: Predicate for host control signals. Defaults to
            Starlette ``HTTPException`` detection.

    Returns:
        ApiBuilder[None, None, None]: A fresh builder.
    """
    if is_control_signal is None:
        return ApiBuilder()
    return ApiBuilder(is_control_signal=is_control_signal)
