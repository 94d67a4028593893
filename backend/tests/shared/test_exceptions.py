"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    TaskboardError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    RequestTimeoutError,
    ExternalServiceError,
)


class TestTaskboardError:
    def test_message(self):
        """TaskboardError should store message."""
        error = TaskboardError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """Code should default to the class name."""
        assert TaskboardError("Test error").code == "TaskboardError"
        assert NotFoundError("missing").code == "NotFoundError"

    def test_custom_code_and_details(self):
        error = TaskboardError("Test error", code="CUSTOM_ERROR", details={"key": "value"})
        assert error.code == "CUSTOM_ERROR"
        assert error.details == {"key": "value"}

    def test_default_details(self):
        assert TaskboardError("Test error").details == {}

    def test_to_dict_is_error_envelope(self):
        error = TaskboardError("Test error", code="TEST_ERROR", details={"key": "value"})
        assert error.to_dict() == {
            "success": False,
            "error": "Test error",
            "code": "TEST_ERROR",
            "details": {"key": "value"},
        }

    def test_to_dict_omits_empty_details(self):
        result = TaskboardError("Test error").to_dict()
        assert "details" not in result
        assert result["success"] is False


class TestSubclasses:
    @pytest.mark.parametrize(
        "cls",
        [NotFoundError, ValidationError, ConflictError, AuthenticationError, AuthorizationError],
    )
    def test_inherit_from_base(self, cls):
        error = cls("boom")
        assert isinstance(error, TaskboardError)
        assert error.message == "boom"

    def test_database_error_defaults(self):
        error = DatabaseError()
        assert error.message == "Database operation failed"
        assert error.code == "DATABASE_ERROR"

    def test_request_timeout_error(self):
        error = RequestTimeoutError(30.0)
        assert error.message == "Request timeout"
        assert error.code == "REQUEST_TIMEOUT"
        assert error.details == {"timeout_seconds": 30.0}

    def test_external_service_error_records_service(self):
        error = ExternalServiceError("Supabase down", service="supabase")
        assert error.service == "supabase"
        assert error.details["service"] == "supabase"
