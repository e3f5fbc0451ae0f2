"""Fixtures for API layer unit tests."""

import pytest
from pydantic import BaseModel, Field


class PostParams(BaseModel):
    """Route parameters of ``/posts/{id}``."""

    id: int = Field(gt=0)


class PostFilters(BaseModel):
    """Query parameters of ``/posts``."""

    include: bool = False
    page: int = 1


class PostCreate(BaseModel):
    """Body of a create/update request."""

    title: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)


@pytest.fixture
def post_params() -> type[PostParams]:
    """Path parameter schema."""
    return PostParams


@pytest.fixture
def post_filters() -> type[PostFilters]:
    """Query schema."""
    return PostFilters


@pytest.fixture
def post_create() -> type[PostCreate]:
    """Body schema."""
    return PostCreate
