"""Fixtures for API utils tests."""

from datetime import UTC, datetime
from uuid import UUID

import pytest
from pydantic import BaseModel


class Author(BaseModel):
    """Nested model."""

    name: str


class Article(BaseModel):
    """Model with nested model, datetime and UUID fields."""

    id: UUID
    title: str
    author: Author
    published_at: datetime


@pytest.fixture
def sample_article() -> Article:
    """Provide a populated Article instance."""
    return Article(
        id=UUID("12345678-1234-5678-1234-567812345678"),
        title="Pipelines",
        author=Author(name="Ada"),
        published_at=datetime(2024, 6, 14, 12, 0, tzinfo=UTC),
    )
