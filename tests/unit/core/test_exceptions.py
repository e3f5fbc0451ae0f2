"""Unit tests for the typed error hierarchy.

Covers:
- ErrorCode and Severity enums
- ApiError read-only fields, representation and fingerprinting
- Fixed status/type shortcut subclasses
- Exception chaining
"""

import pytest

from api_builder.core.exceptions import (
    ApiError,
    ConflictError,
    ErrorCode,
    ForbiddenError,
    InvalidBodyError,
    NotFoundError,
    Severity,
    UnauthorizedError,
    ValidationError,
)


@pytest.mark.unit
class TestErrorCode:
    """Test the ErrorCode enum."""

    def test_values_match_names(self) -> None:
        """Every type tag's value is its own name."""
        for member in ErrorCode:
            assert member.value == member.name

    def test_invalid_value_rejected(self) -> None:
        """Unknown tags are not enum members."""
        with pytest.raises(ValueError, match="'NOPE' is not a valid"):
            ErrorCode("NOPE")


@pytest.mark.unit
class TestApiError:
    """Test the base typed error."""

    def test_defaults(self) -> None:
        """Only the message is required."""
        error = ApiError("Boom.")

        assert error.code == 500
        assert error.type == "INTERNAL_SERVER_ERROR"
        assert error.message == "Boom."
        assert error.issues is None
        assert error.severity == Severity.MEDIUM
        assert error.context == {}
        assert error.cause is None

    def test_accepts_free_form_type_tag(self) -> None:
        """Type tags are not limited to ErrorCode members."""
        error = ApiError("Not authenticated.", code=401, type="UNAUTHORIZED")

        assert error.code == 401
        assert error.type == "UNAUTHORIZED"

    def test_fields_are_read_only(self) -> None:
        """Status, type, message and issues cannot be reassigned."""
        error = ApiError("Boom.")

        for name in ("code", "type", "message", "issues"):
            with pytest.raises(AttributeError):
                setattr(error, name, None)

    def test_issues_are_copied_to_tuple(self) -> None:
        """Issues are frozen in their original order."""
        issues = [
            {"path": ["b"], "message": "b", "code": "x"},
            {"path": ["a"], "message": "a", "code": "y"},
        ]

        error = ApiError("Bad.", code=400, issues=issues)
        issues.append({"path": [], "message": "late", "code": "z"})

        assert error.issues == (
            {"path": ["b"], "message": "b", "code": "x"},
            {"path": ["a"], "message": "a", "code": "y"},
        )

    def test_str_and_repr(self) -> None:
        """String forms include the type tag and message."""
        error = ApiError("Bad.", code=400, type="BAD", issues=[{"path": []}])

        assert str(error) == "[BAD] Bad."
        assert repr(error) == (
            "ApiError(code=400, type='BAD', message='Bad.', severity=MEDIUM, issues=1)"
        )

    def test_cause_is_chained(self) -> None:
        """The cause becomes ``__cause__``."""
        cause = ValueError("inner")

        error = ApiError("Outer.", cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause

    def test_fingerprint_is_stable_for_same_site(self) -> None:
        """Errors raised from the same place share a fingerprint."""
        fingerprints = {ApiError("Boom.").fingerprint for _ in range(3)}

        assert len(fingerprints) == 1
        (fingerprint,) = fingerprints
        assert len(fingerprint) == 16
        int(fingerprint, 16)

    def test_origin_names_raising_function(self) -> None:
        """The origin is the function that built the error, not this module."""

        def load_post() -> NotFoundError:
            return NotFoundError()

        assert load_post().origin == "test_exceptions:load_post"

    def test_fingerprint_differs_by_origin(self) -> None:
        """The same error from two places gets two fingerprints."""

        def require_user() -> UnauthorizedError:
            return UnauthorizedError()

        def require_admin() -> UnauthorizedError:
            return UnauthorizedError()

        assert require_user().fingerprint != require_admin().fingerprint
        assert require_user().fingerprint == require_user().fingerprint

    def test_fingerprint_differs_by_type(self) -> None:
        """Different type tags never collide."""
        assert ApiError("x", type="A").fingerprint != ApiError("x", type="B").fingerprint

    @pytest.mark.parametrize(
        ("severity", "expected", "alert"),
        [
            (Severity.LOW, True, False),
            (Severity.MEDIUM, True, False),
            (Severity.HIGH, False, True),
            (Severity.CRITICAL, False, True),
        ],
    )
    def test_severity_classification(
        self, severity: Severity, expected: bool, alert: bool
    ) -> None:
        """Severity drives is_expected and should_alert."""
        error = ApiError("x", severity=severity)

        assert error.is_expected is expected
        assert error.should_alert is alert


@pytest.mark.unit
class TestSpecializedErrors:
    """Test the fixed status/type shortcuts."""

    @pytest.mark.parametrize(
        ("error_class", "code", "error_type", "message", "severity"),
        [
            (ValidationError, 400, ErrorCode.VALIDATION_ERROR, "Invalid input.", Severity.LOW),
            (
                InvalidBodyError,
                400,
                ErrorCode.INVALID_BODY,
                "Invalid JSON body provided.",
                Severity.LOW,
            ),
            (
                UnauthorizedError,
                401,
                ErrorCode.UNAUTHORIZED,
                "Not authenticated.",
                Severity.HIGH,
            ),
            (ForbiddenError, 403, ErrorCode.FORBIDDEN, "Forbidden.", Severity.HIGH),
            (NotFoundError, 404, ErrorCode.NOT_FOUND, "Not found.", Severity.LOW),
            (ConflictError, 409, ErrorCode.CONFLICT, "Conflict.", Severity.MEDIUM),
        ],
    )
    def test_defaults(
        self,
        error_class: type[ApiError],
        code: int,
        error_type: ErrorCode,
        message: str,
        severity: Severity,
    ) -> None:
        """Each shortcut fixes its status, type and default message."""
        error = error_class()

        assert isinstance(error, ApiError)
        assert error.code == code
        assert error.type == error_type.value
        assert error.message == message
        assert error.severity == severity

    def test_validation_error_always_has_issues(self) -> None:
        """Validation errors report an empty issue list by default."""
        assert ValidationError().issues == ()

    def test_custom_message_and_context(self) -> None:
        """Shortcuts accept a message and log context."""
        error = NotFoundError("Post 7 not found.", context={"post_id": 7})

        assert error.message == "Post 7 not found."
        assert error.context == {"post_id": 7}
        assert error.issues is None
