"""Error response schema shared by every failure a pipeline answers.

All failures produce the same body shape: a human-readable ``message`` and a
machine-readable ``type``. Validation failures and explicitly raised typed
errors may add ``issues``; internal error details never appear here.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from api_builder.core.exceptions import ApiError, ErrorCode


class ErrorResponse(BaseModel):
    """Standardized error response body."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "message": "Invalid input.",
                    "type": "VALIDATION_ERROR",
                    "issues": [
                        {
                            "path": ["id"],
                            "message": "Input should be a valid integer",
                            "code": "int_parsing",
                        }
                    ],
                },
                {
                    "message": "An internal server error occurred.",
                    "type": "INTERNAL_SERVER_ERROR",
                },
            ]
        },
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid input.", "Not authenticated."],
    )

    type: str = Field(
        ...,
        description="Machine-readable error type",
        examples=["VALIDATION_ERROR", "INVALID_BODY", "INTERNAL_SERVER_ERROR"],
    )

    issues: list[Any] | None = Field(
        default=None,
        description="Validation issues, unchanged and in the order reported",
    )

    @classmethod
    def from_error(cls, error: ApiError) -> "ErrorResponse":
        """Build the response body for a typed error."""
        return cls(
            message=error.message,
            type=error.type,
            issues=list(error.issues) if error.issues is not None else None,
        )

    @classmethod
    def internal(cls, message: str) -> "ErrorResponse":
        """Build the generic body returned for unclassified errors."""
        return cls(message=message, type=ErrorCode.INTERNAL_SERVER_ERROR.value)

    def to_content(self) -> dict[str, Any]:
        """Dump to content for ORJSONResponse, omitting ``issues`` when absent."""
        return self.model_dump(exclude_none=True)
