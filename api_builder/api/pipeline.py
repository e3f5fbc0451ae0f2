"""Per-request execution of a compiled route handler.

A ``RequestPipeline`` is created once per (builder, method, handler) triple
and runs independently for every request:

1. Validate path parameters against the context schema
2. Validate query parameters against the query schema
3. For POST/PUT/PATCH, parse and validate the JSON body
4. Run the middleware chain, shallow-merging each step's output into the
   cumulative context (later keys win)
5. Invoke the terminal handler
6. Encode the result (``Response`` objects pass through untouched)
7. On failure, re-raise host control signals, answer typed errors with their
   own status, and answer everything else with a generic 500 after giving the
   failure hook a chance to observe it

Stages run strictly one after another. The only per-request mutable state is
the context accumulator, which is allocated inside ``run`` and discarded when
it returns.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import orjson
from loguru import logger
from starlette.requests import Request
from starlette.responses import Response

from api_builder.api.constants import (
    CREATE_METHOD,
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_500_INTERNAL_SERVER_ERROR,
    REQUEST_BODY_METHODS,
    HttpMethod,
)
from api_builder.api.schemas.errors import ErrorResponse
from api_builder.api.utils.responses import ORJSONResponse
from api_builder.api.validation import validate_input
from api_builder.core.config import PipelineConfig, get_settings
from api_builder.core.context import (
    RequestContext,
    generate_correlation_id,
    generate_request_id,
)
from api_builder.core.error_context import describe_request, sanitize_error_context
from api_builder.core.exceptions import ApiError, InvalidBodyError, Severity
from api_builder.core.types import PipelineContext, RawParams

if TYPE_CHECKING:
    from api_builder.api.builder import ApiBuilder

ContextT = TypeVar("ContextT")
QueryT = TypeVar("QueryT")
BodyT = TypeVar("BodyT")

# Log level of the record written when a typed error answers a request
_SEVERITY_LOG_LEVELS: dict[Severity, str] = {
    Severity.LOW: "DEBUG",
    Severity.MEDIUM: "INFO",
    Severity.HIGH: "WARNING",
    Severity.CRITICAL: "ERROR",
}


@dataclass(frozen=True, slots=True)
class HandlerInput(Generic[ContextT, QueryT, BodyT]):
    """Everything a middleware step or handler receives for one request.

    Attributes:
        context: Validated path parameters, None without a context schema.
        query: Validated query parameters, None without a query schema.
        body: Validated body, None without a body schema or for GET/DELETE.
        ctx: Cumulative middleware context accumulated so far.
        request: The raw Starlette request, unchanged.
    """

    context: ContextT
    query: QueryT
    body: BodyT
    request: Request
    ctx: PipelineContext = field(default_factory=dict)

    @property
    def req(self) -> Request:
        """Alias of ``request``."""
        return self.request


@dataclass(frozen=True, slots=True)
class FailureInput:
    """Argument of the failure hook."""

    request: Request
    error: Exception


type Middleware = Callable[
    [HandlerInput[Any, Any, Any]],
    Mapping[str, Any] | None | Awaitable[Mapping[str, Any] | None],
]
type Handler = Callable[[HandlerInput[Any, Any, Any]], Any]
type FailureHook = Callable[[FailureInput], Awaitable[None] | None]
type RouteEndpoint = Callable[..., Awaitable[Response]]


async def _resolve(value: Any) -> Any:  # noqa: ANN401 - sync or async user callables
    """Await ``value`` if it is awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


class RequestPipeline:
    """Runs one compiled route handler against incoming requests.

    Args:
        builder: The immutable builder configuration to execute.
        method: HTTP method the handler is bound to.
        handler: Terminal handler receiving the assembled HandlerInput.
    """

    def __init__(
        self, builder: ApiBuilder[Any, Any, Any], method: HttpMethod, handler: Handler
    ) -> None:
        self.builder = builder
        self.method = method
        self.handler = handler

    async def run(
        self,
        request: Request,
        params: Mapping[str, Any] | Awaitable[Mapping[str, Any]] | None = None,
    ) -> Response:
        """Execute the pipeline for one request.

        Args:
            request: The incoming request.
            params: Route parameters, or an awaitable resolving to them.
                Defaults to ``request.path_params``.

        Returns:
            Response: The handler's response or the mapped failure response.

        Raises:
            Exception: Host control signals, re-raised unchanged.
        """
        config = get_settings().pipeline_config
        correlation_id = (
            RequestContext.get_correlation_id()
            or request.headers.get(config.correlation_id_header)
            or generate_correlation_id()
        )
        token = RequestContext.set_correlation_id(correlation_id)
        try:
            with logger.contextualize(
                correlation_id=correlation_id,
                request_id=generate_request_id(),
                method=self.method,
                path=request.url.path,
            ):
                response, built = await self._execute(request, params, config)
        finally:
            RequestContext.reset(token)

        if built and config.echo_correlation_id:
            response.headers[config.correlation_id_header] = correlation_id
        return response

    async def _execute(
        self,
        request: Request,
        params: Mapping[str, Any] | Awaitable[Mapping[str, Any]] | None,
        config: PipelineConfig,
    ) -> tuple[Response, bool]:
        """Run stages 1-6, mapping failures to responses.

        Returns:
            tuple[Response, bool]: The response and whether the pipeline built it.
        """
        try:
            handler_input = await self._validate(request, params, config)
            ctx = await self._run_middlewares(handler_input)
            result = await _resolve(
                self.handler(_with_ctx(handler_input, ctx))
            )
            if isinstance(result, Response):
                return result, False
            return self._encode(result), True
        except Exception as error:
            if self.builder.is_control_signal(error):
                raise
            return await self._handle_failure(request, error, config), True

    async def _validate(
        self,
        request: Request,
        params: Mapping[str, Any] | Awaitable[Mapping[str, Any]] | None,
        config: PipelineConfig,
    ) -> HandlerInput[Any, Any, Any]:
        """Validate path params, query params and body.

        Raises:
            ValidationError: If a schema rejects its input.
            InvalidBodyError: If the body cannot be parsed.
        """
        builder = self.builder
        message = config.validation_error_message

        raw_params: RawParams = dict(
            request.path_params if params is None else await _resolve(params)
        )

        context = None
        if builder.context_validator is not None:
            context = await validate_input(builder.context_validator, raw_params, message)

        query = None
        if builder.query_validator is not None:
            query = await validate_input(
                builder.query_validator, dict(request.query_params), message
            )

        body = None
        if self.method in REQUEST_BODY_METHODS and builder.body_validator is not None:
            raw_body = await request.body()
            try:
                payload = orjson.loads(raw_body)
            except orjson.JSONDecodeError as e:
                raise InvalidBodyError(config.invalid_body_message, cause=e) from e
            body = await validate_input(builder.body_validator, payload, message)

        return HandlerInput(context=context, query=query, body=body, request=request)

    async def _run_middlewares(
        self, handler_input: HandlerInput[Any, Any, Any]
    ) -> PipelineContext:
        """Run middleware steps in order and merge their outputs.

        Raises:
            TypeError: If a step returns something other than a mapping or None.
        """
        ctx: PipelineContext = {}
        for middleware in self.builder.middlewares:
            partial = await _resolve(middleware(_with_ctx(handler_input, ctx)))
            if partial is None:
                continue
            if not isinstance(partial, Mapping):
                msg = (
                    f"Middleware {getattr(middleware, '__name__', middleware)!r} "
                    f"returned {type(partial).__name__}, expected a mapping"
                )
                raise TypeError(msg)
            ctx = {**ctx, **partial}
        return ctx

    def _encode(self, result: Any) -> Response:  # noqa: ANN401 - handler-defined
        """Encode a plain handler result as JSON."""
        status_code = HTTP_201_CREATED if self.method == CREATE_METHOD else HTTP_200_OK
        return ORJSONResponse(content=result, status_code=status_code)

    async def _handle_failure(
        self, request: Request, error: Exception, config: PipelineConfig
    ) -> Response:
        """Map a failure to a response.

        Typed errors answer with their own status and skip the failure hook.
        Anything else goes to the failure hook and answers with a generic 500.
        """
        if isinstance(error, ApiError):
            logger.log(
                _SEVERITY_LOG_LEVELS[error.severity],
                "Request failed with {error_type}: {error_message}",
                error_type=error.type,
                error_message=error.message,
                status_code=error.code,
                severity=error.severity.value,
                origin=error.origin,
                fingerprint=error.fingerprint,
            )
            return ORJSONResponse(
                content=ErrorResponse.from_error(error).to_content(),
                status_code=error.code,
            )

        hook = self.builder.failure_hook
        if hook is not None:
            try:
                await _resolve(hook(FailureInput(request=request, error=error)))
            except Exception as hook_error:  # noqa: BLE001 - hook errors never propagate
                logger.opt(exception=hook_error).error(
                    "Error within failure hook: {exception_type}",
                    exception_type=type(hook_error).__name__,
                )

        logger.opt(exception=error).error(
            "Unhandled API error: {exception_type}",
            exception_type=type(error).__name__,
            **sanitize_error_context(error, describe_request(request)),
        )
        return ORJSONResponse(
            content=ErrorResponse.internal(config.internal_error_message).to_content(),
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        )


def _with_ctx(
    handler_input: HandlerInput[Any, Any, Any], ctx: PipelineContext
) -> HandlerInput[Any, Any, Any]:
    """Copy of ``handler_input`` carrying its own copy of ``ctx``."""
    return HandlerInput(
        context=handler_input.context,
        query=handler_input.query,
        body=handler_input.body,
        request=handler_input.request,
        ctx=dict(ctx),
    )


def compile_route_handler(
    builder: ApiBuilder[Any, Any, Any], method: HttpMethod, handler: Handler
) -> RouteEndpoint:
    """Compile a builder and handler into a route endpoint.

    The endpoint is a plain coroutine function so Starlette routes accept it
    directly: ``Route("/items/{id}", endpoint, methods=["GET"])``.

    Args:
        builder: The builder configuration to execute.
        method: HTTP method the endpoint is bound to.
        handler: Terminal handler.

    Returns:
        RouteEndpoint: ``async (request, params=None) -> Response``.
    """
    pipeline = RequestPipeline(builder, method, handler)

    async def endpoint(
        request: Request,
        params: Mapping[str, Any] | Awaitable[Mapping[str, Any]] | None = None,
    ) -> Response:
        return await pipeline.run(request, params)

    endpoint.__name__ = getattr(handler, "__name__", "endpoint")
    endpoint.__qualname__ = getattr(handler, "__qualname__", endpoint.__name__)
    endpoint.__doc__ = handler.__doc__
    return endpoint
