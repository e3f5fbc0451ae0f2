"""Validator adapter between route handlers and the schema engine.

Schemas passed to ``.context()``, ``.query()`` and ``.body()`` are normalized
into objects exposing ``validate(data)``. Pydantic models, ``TypeAdapter``
instances and plain type annotations are wrapped in ``PydanticValidator``;
anything that already has a ``validate`` method is used as-is, which lets
applications plug in other engines. Validators may be synchronous or return
an awaitable.

A validator answers with a ``ValidationResult``: either the validated and
coerced data, or an ordered list of issues shaped
``{"path": [...], "message": str, "code": str}``.
"""

import inspect
from collections.abc import Awaitable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from api_builder.core.exceptions import ValidationError
from api_builder.core.types import ValidationIssue


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating one input."""

    success: bool
    data: Any = None
    issues: tuple[ValidationIssue, ...] = field(default=())

    @classmethod
    def ok(cls, data: Any) -> "ValidationResult":  # noqa: ANN401 - validated data is schema-defined
        """Successful result carrying validated data."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, issues: Sequence[ValidationIssue]) -> "ValidationResult":
        """Failed result carrying the reported issues."""
        return cls(success=False, issues=tuple(issues))


@runtime_checkable
class Validator(Protocol):
    """Anything that can validate raw input."""

    def validate(
        self, data: Any  # noqa: ANN401 - raw request input
    ) -> ValidationResult | Awaitable[ValidationResult]:
        """Validate ``data`` and return the outcome."""
        ...


def issues_from_pydantic(exc: PydanticValidationError) -> list[ValidationIssue]:
    """Convert pydantic errors into issue records.

    Args:
        exc: The pydantic validation error.

    Returns:
        list[ValidationIssue]: One record per error, in pydantic's order.
    """
    return [
        {"path": list(error["loc"]), "message": error["msg"], "code": error["type"]}
        for error in exc.errors(include_url=False, include_context=False)
    ]


class PydanticValidator:
    """Validator backed by pydantic.

    Args:
        schema: A pydantic model class, a TypeAdapter, or any type annotation
            pydantic can build an adapter for.
    """

    def __init__(self, schema: Any) -> None:  # noqa: ANN401 - any pydantic-adaptable type
        self.schema = schema
        self._adapter: TypeAdapter[Any] = (
            schema if isinstance(schema, TypeAdapter) else TypeAdapter(schema)
        )

    def validate(self, data: Any) -> ValidationResult:  # noqa: ANN401 - raw request input
        """Validate and coerce ``data``.

        Args:
            data: Raw input (path params, query params or parsed body).

        Returns:
            ValidationResult: Coerced data, or the issues pydantic reported.
        """
        try:
            return ValidationResult.ok(self._adapter.validate_python(data))
        except PydanticValidationError as e:
            return ValidationResult.fail(issues_from_pydantic(e))

    def __repr__(self) -> str:
        """Return a representation naming the wrapped schema."""
        return f"PydanticValidator({self.schema!r})"


def as_validator(schema: Any) -> Validator | None:  # noqa: ANN401 - schema is engine-defined
    """Normalize a schema into a validator.

    Args:
        schema: Pydantic model, TypeAdapter, type annotation, an object with a
            ``validate`` method, or None.

    Returns:
        Validator | None: The validator, or None when no schema was given.
    """
    if schema is None:
        return None
    # BaseModel subclasses carry a deprecated ``validate`` classmethod
    if isinstance(schema, TypeAdapter) or (
        isinstance(schema, type) and issubclass(schema, BaseModel)
    ):
        return PydanticValidator(schema)
    if callable(getattr(schema, "validate", None)):
        return schema  # type: ignore[no-any-return]
    return PydanticValidator(schema)


def _coerce_result(result: object) -> ValidationResult:
    """Accept ValidationResult or a ``{success, data | issues}`` mapping.

    Raises:
        TypeError: If a validator returned anything else.
    """
    if isinstance(result, ValidationResult):
        return result
    if isinstance(result, Mapping) and "success" in result:
        if result["success"]:
            return ValidationResult.ok(result.get("data"))
        return ValidationResult.fail(result.get("issues") or ())
    msg = f"Validator returned unsupported result: {type(result).__name__}"
    raise TypeError(msg)


async def validate_input(
    validator: Validator,
    data: Any,  # noqa: ANN401 - raw request input
    message: str = "Invalid input.",
) -> Any:  # noqa: ANN401 - validated data is schema-defined
    """Run a validator against raw input.

    Args:
        validator: The validator to run.
        data: Raw input to validate.
        message: Message for the raised error on failure.

    Returns:
        Any: Validated and coerced data.

    Raises:
        ValidationError: If the validator rejects the input.
    """
    outcome = validator.validate(data)
    if inspect.isawaitable(outcome):
        outcome = await outcome

    result = _coerce_result(outcome)
    if not result.success:
        raise ValidationError(message, issues=result.issues)
    return result.data
