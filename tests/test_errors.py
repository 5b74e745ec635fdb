"""Tests for remote error classification and message precedence."""

from __future__ import annotations

from storysync.sync.errors import (
    UNKNOWN_ERROR_MESSAGE,
    MessageList,
    RemoteCreateError,
    StructuredDescription,
    TransportError,
    TransportFailure,
    UnknownFailure,
    classify_remote_error,
)


class TestClassifyRemoteError:
    """Test the precedence of remote error shapes."""

    def test_structured_description_wins(self) -> None:
        """Test errors.description is used even when errorMessages is present."""
        body = {
            "errorMessages": ["Something else went wrong"],
            "errors": {"description": "Operation value must be a string"},
        }
        error = classify_remote_error(body, "Request failed with status code 400")

        assert error == StructuredDescription("Operation value must be a string")
        assert error.message == "Operation value must be a string"

    def test_message_list_joined(self) -> None:
        """Test errorMessages are joined with a comma."""
        body = {"errorMessages": ["Project does not exist", "Issue type is invalid"], "errors": {}}
        error = classify_remote_error(body, "Request failed with status code 400")

        assert isinstance(error, MessageList)
        assert error.message == "Project does not exist, Issue type is invalid"

    def test_other_field_errors_are_not_descriptions(self) -> None:
        """Test per-field errors other than description fall through."""
        body = {"errorMessages": [], "errors": {"summary": "You must specify a summary of the issue."}}
        error = classify_remote_error(body, "Request failed with status code 400")

        assert error == TransportFailure("Request failed with status code 400")

    def test_empty_message_list_falls_through(self) -> None:
        """Test an empty errorMessages list is ignored."""
        error = classify_remote_error({"errorMessages": []}, "Request failed with status code 500")
        assert error.message == "Request failed with status code 500"

    def test_non_json_body_uses_transport_message(self) -> None:
        """Test a missing body falls back to the transport message."""
        error = classify_remote_error(None, "Connection refused")
        assert error == TransportFailure("Connection refused")

    def test_unknown_error(self) -> None:
        """Test nothing usable yields the unknown error message."""
        error = classify_remote_error("<html>Bad Gateway</html>", None)
        assert error == UnknownFailure()
        assert error.message == UNKNOWN_ERROR_MESSAGE == "Unknown error"


class TestTrackerClientError:
    """Test exception wrapping of remote errors."""

    def test_user_message_from_remote_error(self) -> None:
        """Test the user message comes from the classified remote error."""
        error = RemoteCreateError(
            "Request failed with status code 400",
            remote_error=MessageList(("Project does not exist",)),
            status_code=400,
        )
        assert error.user_message == "Project does not exist"
        assert error.status_code == 400
        assert str(error) == "Request failed with status code 400"

    def test_defaults_to_exception_message(self) -> None:
        """Test errors without a body use their own message."""
        assert TransportError("Connection reset").user_message == "Connection reset"

    def test_empty_message_is_unknown(self) -> None:
        """Test an empty message renders as unknown."""
        assert TransportError("").user_message == "Unknown error"
