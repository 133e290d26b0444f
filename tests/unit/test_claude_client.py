"""ClaudeClient unit tests.

Tests retry/backoff behaviour and error classification without network calls:
- the SDK handle is replaced by a MagicMock whose messages.create is an AsyncMock
- asyncio.sleep is patched so retries do not actually wait
"""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from app.services.claude_client import ClaudeClient, backoff_delay, classify_error
from app.exceptions import (
    ClaudeAuthenticationError,
    ClaudeClientError,
    ClaudeOverloadedError,
    ClaudeRateLimitError,
    GenerationError,
)

SLEEP_PATH = "app.services.claude_client.asyncio.sleep"


class FakeAPIError(Exception):
    """status_code 속성을 가진 SDK 예외 대용."""

    def __init__(self, status_code: int, message: str = "api error"):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _response(text: str):
    return SimpleNamespace(content=[SimpleNamespace(text=text)])


@pytest.fixture
def client():
    """SDK 핸들을 mock으로 바꾼 ClaudeClient."""
    claude = ClaudeClient(api_key="test-key", model="test-model")
    claude._client = MagicMock()
    claude._client.messages.create = AsyncMock(return_value=_response("generated text"))
    return claude


class TestBackoffDelay:
    def test_doubles_from_base(self):
        assert backoff_delay(1) == 1.0
        assert backoff_delay(2) == 2.0
        assert backoff_delay(3) == 4.0

    def test_capped(self):
        assert backoff_delay(10) == 10.0
        assert backoff_delay(5, base=1.0, cap=10.0) == 10.0


class TestClassifyError:
    @pytest.mark.parametrize("status_code", [401, 403])
    def test_auth_status_codes(self, status_code):
        assert isinstance(classify_error(FakeAPIError(status_code)), ClaudeAuthenticationError)

    def test_rate_limit(self):
        assert isinstance(classify_error(FakeAPIError(429)), ClaudeRateLimitError)

    def test_overloaded(self):
        assert isinstance(classify_error(FakeAPIError(529)), ClaudeOverloadedError)

    def test_unknown_error_is_generic(self):
        error = classify_error(RuntimeError("connection reset"))
        assert type(error) is ClaudeClientError
        assert error.message == "connection reset"

    def test_domain_error_passes_through(self):
        original = ClaudeClientError("already classified")
        assert classify_error(original) is original


class TestIsConfigured:
    def test_with_key(self):
        assert ClaudeClient(api_key="sk-test").is_configured is True

    def test_without_key(self):
        assert ClaudeClient(api_key="").is_configured is False


class TestGenerate:
    async def test_success_on_first_attempt(self, client):
        with patch(SLEEP_PATH, new=AsyncMock()) as sleep:
            result = await client.generate("prompt", max_tokens=100, temperature=0.5)

        assert result == "generated text"
        sleep.assert_not_called()
        kwargs = client._client.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["max_tokens"] == 100
        assert kwargs["temperature"] == 0.5
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    async def test_auth_error_is_not_retried(self, client):
        client._client.messages.create = AsyncMock(side_effect=FakeAPIError(401, "invalid x-api-key"))

        with patch(SLEEP_PATH, new=AsyncMock()) as sleep:
            with pytest.raises(ClaudeAuthenticationError):
                await client.generate("prompt")

        assert client._client.messages.create.call_count == 1
        sleep.assert_not_called()

    async def test_rate_limit_is_not_retried(self, client):
        client._client.messages.create = AsyncMock(side_effect=FakeAPIError(429, "rate limited"))

        with patch(SLEEP_PATH, new=AsyncMock()) as sleep:
            with pytest.raises(ClaudeRateLimitError):
                await client.generate("prompt")

        assert client._client.messages.create.call_count == 1
        sleep.assert_not_called()

    async def test_fails_twice_then_succeeds(self, client):
        client._client.messages.create = AsyncMock(side_effect=[
            FakeAPIError(500, "server error"),
            FakeAPIError(529, "overloaded"),
            _response("third time lucky"),
        ])

        with patch(SLEEP_PATH, new=AsyncMock()) as sleep:
            result = await client.generate("prompt", max_retries=3)

        assert result == "third time lucky"
        assert client._client.messages.create.call_count == 3
        assert [call.args[0] for call in sleep.call_args_list] == [1.0, 2.0]

    async def test_empty_content_is_retried(self, client):
        client._client.messages.create = AsyncMock(side_effect=[
            SimpleNamespace(content=[]),
            _response("   "),
            _response("finally"),
        ])

        with patch(SLEEP_PATH, new=AsyncMock()):
            assert await client.generate("prompt") == "finally"

    async def test_exhaustion_message_includes_last_error(self, client):
        client._client.messages.create = AsyncMock(side_effect=FakeAPIError(529, "Overloaded"))

        with patch(SLEEP_PATH, new=AsyncMock()):
            with pytest.raises(GenerationError) as exc_info:
                await client.generate("prompt", max_retries=3)

        assert exc_info.value.message == "Failed to generate content after 3 attempts: Overloaded"
        assert exc_info.value.details["attempts"] == 3
        assert exc_info.value.details["overloaded"] is True
        assert client._client.messages.create.call_count == 3

    async def test_zero_retries_means_single_attempt(self, client):
        client._client.messages.create = AsyncMock(side_effect=FakeAPIError(500, "server error"))

        with patch(SLEEP_PATH, new=AsyncMock()) as sleep:
            with pytest.raises(GenerationError):
                await client.generate("prompt", max_retries=0)

        assert client._client.messages.create.call_count == 1
        sleep.assert_not_called()
