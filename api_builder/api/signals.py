"""Detection of host-framework control-flow signals.

Some exceptions are not failures of the route handler but instructions for
the host framework: Starlette's ``HTTPException`` (used for redirects,
not-found responses and similar) is rendered by the application's own
exception handlers. Compiled route handlers re-raise such signals unchanged
instead of converting them into error responses.

The check is a plain predicate so applications built on other conventions can
install their own with ``ApiBuilder.passthrough``.
"""

from collections.abc import Callable

from starlette.exceptions import HTTPException

type ControlSignalPredicate = Callable[[BaseException], bool]


def is_host_signal(error: BaseException) -> bool:
    """Return True for Starlette/FastAPI ``HTTPException`` instances."""
    return isinstance(error, HTTPException)


def never(_error: BaseException) -> bool:
    """Predicate that treats nothing as a control signal."""
    return False


def any_of(*predicates: ControlSignalPredicate) -> ControlSignalPredicate:
    """Combine predicates; the result is True when any of them is.

    Example:
        >>> builder.passthrough(any_of(is_host_signal, is_redirect))
    """

    def predicate(error: BaseException) -> bool:
        return any(check(error) for check in predicates)

    return predicate
