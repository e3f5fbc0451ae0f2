"""API-related constants."""

from typing import Final, Literal

type HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

# Methods whose semantics imply a payload
REQUEST_BODY_METHODS: Final[frozenset[str]] = frozenset({"POST", "PUT", "PATCH"})

# Status codes for plain (non-Response) handler results
HTTP_200_OK = 200
HTTP_201_CREATED = 201
HTTP_500_INTERNAL_SERVER_ERROR = 500

# Method whose successful plain results answer with 201
CREATE_METHOD: Final[str] = "POST"
