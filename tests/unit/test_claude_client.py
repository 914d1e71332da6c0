"""ClaudeClient unit tests.

The CLI call is replaced with a patched subprocess.run so no process is spawned:
- Successful completion returns stripped stdout
- Non-zero return codes and timeouts are retried
- Exhausted retries raise ClaudeClientError
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from strategy_sync.exceptions import ClaudeClientError
from strategy_sync.services.claude_client import ClaudeClient


RUN_PATH = "strategy_sync.services.claude_client.subprocess.run"


def _completed(stdout="", returncode=0, stderr=""):
    return MagicMock(stdout=stdout, returncode=returncode, stderr=stderr)


@pytest.fixture
def client():
    """재시도 대기 없는 ClaudeClient."""
    return ClaudeClient(max_retries=3, retry_delay=0)


class TestComplete:
    async def test_returns_stripped_stdout(self, client):
        with patch(RUN_PATH, return_value=_completed("  Align your OKRs.\n")) as run:
            reply = await client.complete("system", "user question")

        assert reply == "Align your OKRs."
        run.assert_called_once()

    async def test_prompt_contains_both_parts(self, client):
        with patch(RUN_PATH, return_value=_completed("ok")) as run:
            await client.complete("Answer in English.", "What is my MRR?")

        command = run.call_args.args[0]
        assert command[:2] == ["claude", "-p"]
        prompt = command[2]
        assert "Answer in English." in prompt
        assert prompt.endswith("What is my MRR?")
        assert "--model" in command


class TestRetry:
    async def test_nonzero_return_code_is_retried(self, client):
        responses = [_completed(returncode=1, stderr="overloaded"), _completed("second try")]
        with patch(RUN_PATH, side_effect=responses) as run:
            reply = await client.complete("system", "user")

        assert reply == "second try"
        assert run.call_count == 2

    async def test_timeout_is_retried(self, client):
        responses = [subprocess.TimeoutExpired(cmd="claude", timeout=1), _completed("done")]
        with patch(RUN_PATH, side_effect=responses):
            assert await client.complete("system", "user") == "done"

    async def test_all_attempts_fail(self, client):
        with patch(RUN_PATH, return_value=_completed(returncode=2, stderr="not logged in")) as run:
            with pytest.raises(ClaudeClientError) as exc_info:
                await client.complete("system", "user")

        assert run.call_count == 3
        assert exc_info.value.error_code == "ERR_CLAUDE_001"
        assert exc_info.value.details["attempts"] == 3
        assert "not logged in" in exc_info.value.details["error"]

    async def test_missing_cli(self):
        client = ClaudeClient(max_retries=1, retry_delay=0)
        with patch(RUN_PATH, side_effect=FileNotFoundError("claude")):
            with pytest.raises(ClaudeClientError):
                await client.complete("system", "user")


class TestEnvironment:
    def test_path_is_extended(self, client, monkeypatch):
        monkeypatch.setenv("PATH", "/usr/bin")
        env = client._get_env()
        assert env["PATH"].endswith("/usr/bin")
        assert len(env["PATH"]) > len("/usr/bin")
