"""Shared fixtures for integration tests.

Routes compiled by the builder are mounted on a real FastAPI application and
exercised over ASGI with httpx, so host exception handling, routing and
response rendering all take part.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field
from starlette.responses import PlainTextResponse

from api_builder import (
    FailureInput,
    HandlerInput,
    NotFoundError,
    UnauthorizedError,
    create_api_handler,
)
from api_builder.core.context import RequestContext


class PostParams(BaseModel):
    """Path parameters for single-post routes."""

    id: int = Field(gt=0)


class PostFilters(BaseModel):
    """Query parameters for listing posts."""

    include: bool = False


class PostCreate(BaseModel):
    """Body for creating a post."""

    title: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)


POSTS: dict[int, dict[str, Any]] = {1: {"id": 1, "title": "Hello"}}


def require_user(data: HandlerInput[Any, Any, Any]) -> dict[str, Any]:
    """Authenticate via a bearer header."""
    header = data.request.headers.get("authorization", "")
    if not header.startswith("Bearer "):
        raise UnauthorizedError
    return {"user": header.removeprefix("Bearer ")}


async def load_post(data: HandlerInput[PostParams, Any, Any]) -> dict[str, Any]:
    """Resolve the post named by the path."""
    post = POSTS.get(data.context.id)
    if post is None:
        msg = f"Post {data.context.id} not found."
        raise NotFoundError(msg)
    return {"post": post}


@pytest.fixture
def failures() -> list[FailureInput]:
    """Collect failure hook invocations."""
    return []


@pytest.fixture
def app(failures: list[FailureInput]) -> FastAPI:
    """Build an application whose routes are compiled pipelines."""
    api = create_api_handler().failed(failures.append)
    authed = api.use(require_user)
    single = authed.context(PostParams).use(load_post)

    @single.get
    def read_post(data: HandlerInput[PostParams, Any, Any]) -> dict[str, Any]:
        return {"post": data.ctx["post"], "user": data.ctx["user"]}

    @authed.query(PostFilters).get
    def list_posts(data: HandlerInput[Any, PostFilters, Any]) -> dict[str, Any]:
        return {"items": list(POSTS.values()), "include": data.query.include}

    @authed.body(PostCreate).post
    async def create_post(data: HandlerInput[Any, Any, PostCreate]) -> PostCreate:
        return data.body

    @single.delete
    def delete_post(_: HandlerInput[PostParams, Any, Any]) -> None:
        raise HTTPException(status_code=410, detail="Gone")

    @api.get
    def crash(_: HandlerInput[Any, Any, Any]) -> None:
        msg = "database password=hunter2 leaked"
        raise RuntimeError(msg)

    @api.get
    def plain(_: HandlerInput[Any, Any, Any]) -> PlainTextResponse:
        return PlainTextResponse("pong", headers={"X-Custom": "1"})

    @api.get
    def correlation(_: HandlerInput[Any, Any, Any]) -> dict[str, str | None]:
        return {"correlation_id": RequestContext.get_correlation_id()}

    application = FastAPI()
    application.add_route("/posts/{id}", read_post, methods=["GET"])
    application.add_route("/posts/{id}", delete_post, methods=["DELETE"])
    application.add_route("/posts", list_posts, methods=["GET"])
    application.add_route("/posts", create_post, methods=["POST"])
    application.add_route("/crash", crash, methods=["GET"])
    application.add_route("/plain", plain, methods=["GET"])
    application.add_route("/correlation", correlation, methods=["GET"])
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an httpx client bound to the application."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
