"""Unit tests for custom exception classes.

Tests the exception hierarchy, default error codes, details propagation,
and the HTTP status mapping used by the API exception handler.
"""

import pytest

from strategy_sync.exceptions import (
    StrategySyncError,
    UnsupportedActionError,
    RuleEvaluationError,
    CollaboratorFailure,
    InvalidTransitionError,
    FindingNotFoundError,
    FileImportError,
    StorageError,
    ClaudeClientError,
    InputValidationError,
)
from strategy_sync.main import status_code_for


class TestStrategySyncError:
    def test_base_error_attributes(self):
        err = StrategySyncError("Something failed", error_code="ERR_TEST", details={"key": "value"})
        assert err.message == "Something failed"
        assert err.error_code == "ERR_TEST"
        assert err.details == {"key": "value"}
        assert str(err) == "Something failed"

    def test_base_error_defaults(self):
        err = StrategySyncError("Minimal error")
        assert err.error_code == "ERR_UNKNOWN"
        assert err.details is None

    def test_is_exception_subclass(self):
        assert isinstance(StrategySyncError("test"), Exception)


class TestSubclassErrorCodes:
    """Each subclass must carry its own default error_code."""

    @pytest.mark.parametrize(
        "exc_class, code",
        [
            (UnsupportedActionError, "ERR_ACTION_001"),
            (RuleEvaluationError, "ERR_RULE_001"),
            (CollaboratorFailure, "ERR_COLLAB_001"),
            (InvalidTransitionError, "ERR_WIZARD_001"),
            (FindingNotFoundError, "ERR_FINDING_001"),
            (FileImportError, "ERR_IMPORT_001"),
            (StorageError, "ERR_STORE_001"),
            (ClaudeClientError, "ERR_CLAUDE_001"),
            (InputValidationError, "ERR_INPUT_001"),
        ],
    )
    def test_error_code(self, exc_class, code):
        err = exc_class("failure", details={"id": "x"})
        assert err.error_code == code
        assert err.message == "failure"
        assert err.details == {"id": "x"}
        assert isinstance(err, StrategySyncError)


class TestStatusCodeFor:
    def test_not_found(self):
        assert status_code_for(FindingNotFoundError("missing")) == 404

    def test_client_errors(self):
        assert status_code_for(InputValidationError("bad")) == 400
        assert status_code_for(FileImportError("bad file")) == 400

    def test_collaborator_errors(self):
        assert status_code_for(CollaboratorFailure("save failed")) == 502
        assert status_code_for(ClaudeClientError("cli failed")) == 502

    def test_everything_else_is_internal(self):
        assert status_code_for(StorageError("disk")) == 500
        assert status_code_for(StrategySyncError("unknown")) == 500
