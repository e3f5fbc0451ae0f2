"""High-performance JSON response class using orjson serialization.

Plain values returned by route handlers, and every error body built by the
pipeline, are rendered through ``ORJSONResponse``. Compared to the standard
``JSONResponse`` it natively handles datetime, UUID and dataclass values and
encodes pydantic models at any nesting depth.
"""

from typing import Any

import orjson
from pydantic import BaseModel
from starlette.responses import JSONResponse


def _default(value: Any) -> Any:  # noqa: ANN401 - orjson fallback hook
    """Encode values orjson does not support natively.

    Raises:
        TypeError: If the value cannot be encoded.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    msg = f"Type is not JSON serializable: {type(value).__name__}"
    raise TypeError(msg)


class ORJSONResponse(JSONResponse):
    """Starlette response class using orjson for JSON serialization.

    Attributes:
        media_type: The media type for the response.
    """

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json")

        # Use consistent sorting for predictable output
        return orjson.dumps(content, default=_default, option=orjson.OPT_SORT_KEYS)
