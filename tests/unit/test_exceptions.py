"""Unit tests for custom exception classes.

Tests the exception hierarchy, default error codes, HTTP status codes,
and details propagation for all custom exceptions in the proposal wizard.
"""

from app.exceptions import (
    ProposalWizardError,
    InputValidationError,
    ClaudeClientError,
    ClaudeAuthenticationError,
    ClaudeRateLimitError,
    ClaudeOverloadedError,
    GenerationError,
    SectionNotFoundError,
    SectionStateError,
    ExportError,
    StorageError,
)


class TestProposalWizardError:
    def test_base_error_attributes(self):
        err = ProposalWizardError("Something failed", error_code="ERR_TEST", details={"key": "value"})
        assert err.message == "Something failed"
        assert err.error_code == "ERR_TEST"
        assert err.details == {"key": "value"}
        assert str(err) == "Something failed"

    def test_base_error_defaults(self):
        err = ProposalWizardError("Minimal error")
        assert err.error_code == "ERR_UNKNOWN"
        assert err.details is None
        assert err.status_code == 500


class TestSubclassErrorCodes:
    """Each subclass must carry its own default error_code."""

    def test_generation_error_code(self):
        err = GenerationError("gen fail")
        assert err.error_code == "ERR_GEN_001"
        assert isinstance(err, ProposalWizardError)

    def test_storage_error_code(self):
        err = StorageError("storage fail")
        assert err.error_code == "ERR_STORE_001"

    def test_export_error_code(self):
        assert ExportError("export fail").error_code == "ERR_EXPORT_001"

    def test_claude_client_error_code(self):
        err = ClaudeClientError("claude fail")
        assert err.error_code == "ERR_CLAUDE_001"
        assert isinstance(err, ProposalWizardError)

    def test_claude_client_error_custom_code(self):
        err = ClaudeClientError("empty", error_code="ERR_CLAUDE_EMPTY")
        assert err.error_code == "ERR_CLAUDE_EMPTY"


class TestStatusCodes:
    """API 응답 상태 코드는 예외 클래스가 결정합니다."""

    def test_input_validation_is_400(self):
        err = InputValidationError("bad input", details={"missing_fields": ["timeline"]})
        assert err.status_code == 400
        assert err.error_code == "ERR_INPUT_001"
        assert err.details == {"missing_fields": ["timeline"]}

    def test_authentication_is_401(self):
        err = ClaudeAuthenticationError("invalid key")
        assert err.status_code == 401
        assert isinstance(err, ClaudeClientError)

    def test_rate_limit_is_429(self):
        assert ClaudeRateLimitError("slow down").status_code == 429

    def test_overloaded_is_server_error(self):
        assert ClaudeOverloadedError("busy").status_code == 500

    def test_not_found_is_404(self):
        assert SectionNotFoundError("missing").status_code == 404

    def test_state_error_is_409(self):
        assert SectionStateError("generating").status_code == 409
