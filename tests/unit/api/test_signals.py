"""Unit tests for control-signal predicates."""

import pytest
from fastapi import HTTPException as FastAPIHTTPException
from starlette.exceptions import HTTPException

from api_builder.api.signals import any_of, is_host_signal, never
from api_builder.core.exceptions import NotFoundError


@pytest.mark.unit
class TestSignals:
    """Predicates deciding which errors belong to the host framework."""

    @pytest.mark.parametrize(
        "error",
        [
            HTTPException(status_code=404),
            HTTPException(status_code=307, headers={"Location": "/"}),
            FastAPIHTTPException(status_code=403, detail="Forbidden"),
        ],
    )
    def test_http_exceptions_are_host_signals(self, error: Exception) -> None:
        """Starlette and FastAPI HTTPException instances are signals."""
        assert is_host_signal(error) is True

    @pytest.mark.parametrize(
        "error",
        [RuntimeError("boom"), NotFoundError("Missing."), KeyError("k")],
    )
    def test_other_errors_are_not_signals(self, error: Exception) -> None:
        """Typed and unexpected errors are handled by the pipeline."""
        assert is_host_signal(error) is False

    def test_never(self) -> None:
        """``never`` rejects everything, including HTTPException."""
        assert never(HTTPException(status_code=404)) is False

    def test_any_of_combines_predicates(self) -> None:
        """``any_of`` is True when at least one predicate is."""

        def is_lookup(error: BaseException) -> bool:
            return isinstance(error, LookupError)

        predicate = any_of(is_host_signal, is_lookup)

        assert predicate(HTTPException(status_code=404)) is True
        assert predicate(KeyError("k")) is True
        assert predicate(ValueError("v")) is False
        assert any_of()(HTTPException(status_code=404)) is False
