"""Claude Code CLI client service.

Uses Claude CLI (claude -p) for free-text chat replies.

이 모듈은 Claude CLI를 래핑하여 비동기 AI 호출을 제공합니다.
ClaudeTextResponder가 이 클라이언트를 사용합니다 (settings.text_responder = "claude").

실행 환경:
- Claude CLI가 PATH에 설치되어 있어야 함
- ThreadPoolExecutor를 사용하여 동기 CLI 호출을 비동기로 래핑

재시도 전략:
- 최대 settings.claude_max_retries회 시도
- 지수 백오프 (2초, 4초, 8초)
- 모든 시도가 실패하면 ClaudeClientError
"""

import asyncio
import logging
import os
import subprocess
import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Optional

from strategy_sync.config import get_settings
from strategy_sync.exceptions import ClaudeClientError

logger = logging.getLogger(__name__)


class ClaudeClient:
    """
    Claude Code CLI 래퍼 클래스.

    Attributes:
        _max_retries: 최대 시도 횟수
        _retry_delay: 초기 재시도 대기 시간(초)
        _executor: CLI 실행용 ThreadPoolExecutor
    """

    def __init__(self, max_retries: Optional[int] = None, retry_delay: float = 2):
        settings = get_settings()
        self._model = settings.claude_model
        self._timeout = settings.claude_timeout_seconds
        self._max_retries = max_retries if max_retries is not None else settings.claude_max_retries
        self._retry_delay = retry_delay  # seconds

        # 최소 2, 최대 8, 기본은 CPU 코어 수
        cpu_count = os.cpu_count() or 4
        max_workers = min(8, max(2, cpu_count))
        self._executor = ThreadPoolExecutor(max_workers=max_workers)

        logger.info(f"[ClaudeClient] CLI 모드 초기화 완료 (model={self._model}, workers={max_workers})")

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Send a completion request to Claude via CLI.

        Args:
            system_prompt: System-level instructions
            user_prompt: User message content

        Returns:
            Claude's response text
        """
        full_prompt = f"""당신은 스타트업 창업자의 사업 전략 문서(Canvas, Strategy, OKRs, 재무 추정)를 함께 다듬는 전략 코치입니다.

다음 지침을 따라 작업해 주세요:
{system_prompt}

---

{user_prompt}"""

        return await self._execute_claude_cli(full_prompt)

    def _get_env(self) -> dict:
        """Get environment with proper PATH for Claude CLI."""
        env = os.environ.copy()

        if sys.platform == "win32":
            extra_paths = [
                os.path.expanduser("~\\AppData\\Roaming\\npm"),
            ]
            path_separator = ";"
        else:
            extra_paths = [
                os.path.expanduser("~/.npm-global/bin"),
                "/usr/local/bin",
                "/opt/homebrew/bin",
            ]
            path_separator = ":"

        env["PATH"] = path_separator.join(extra_paths) + path_separator + env.get("PATH", "")
        return env

    def _run_claude_sync(self, prompt: str) -> str:
        """Run Claude CLI synchronously."""
        env = self._get_env()
        logger.info(f"[CLI] 프롬프트 길이: {len(prompt)} chars")
        start_time = datetime.now()

        try:
            result = subprocess.run(
                ["claude", "-p", prompt, "--output-format", "text", "--model", self._model],
                capture_output=True,
                text=True,
                timeout=self._timeout,
                env=env,
                shell=sys.platform == "win32",
                encoding="utf-8",
            )
        except subprocess.TimeoutExpired:
            elapsed = (datetime.now() - start_time).total_seconds()
            logger.error(f"[CLI] 타임아웃! {elapsed:.1f}초")
            raise

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(f"[CLI] 완료: {elapsed:.1f}초, returncode={result.returncode}")

        if result.returncode != 0:
            error_msg = result.stderr or "Unknown error"
            logger.error(f"[CLI] 에러: {error_msg}")
            raise RuntimeError(f"Claude CLI error: {error_msg}")

        return result.stdout.strip()

    async def _execute_claude_cli(self, prompt: str) -> str:
        """
        Claude Code CLI를 비동기로 실행.

        재시도 전략:
        ┌─────────────────────────────────────────────────────┐
        │ 시도 │ 대기 시간 │ 누적 시간 │                      │
        ├─────────────────────────────────────────────────────┤
        │ 1차  │ -         │ 0초       │ 첫 시도              │
        │ 2차  │ 2초       │ 2초       │ 2^0 * 2초            │
        │ 3차  │ 4초       │ 6초       │ 2^1 * 2초            │
        └─────────────────────────────────────────────────────┘

        Raises:
            ClaudeClientError: 모든 시도 실패 (마지막 예외를 details에 포함)
        """
        last_error: Optional[Exception] = None

        for attempt in range(self._max_retries):
            try:
                logger.info(f"[CLI] 시도 {attempt + 1}/{self._max_retries}")
                loop = asyncio.get_running_loop()
                return await loop.run_in_executor(self._executor, self._run_claude_sync, prompt)

            except Exception as e:
                last_error = e
                logger.error(f"[CLI] 시도 {attempt + 1} 실패: {type(e).__name__}: {e}")

                if attempt < self._max_retries - 1:
                    wait_time = self._retry_delay * (2 ** attempt)
                    logger.info(f"[CLI] {wait_time}초 후 재시도...")
                    await asyncio.sleep(wait_time)

        logger.error(f"[CLI] 모든 시도 실패: {last_error}")
        raise ClaudeClientError(
            "Claude CLI 호출에 실패했습니다",
            details={"attempts": self._max_retries, "error": str(last_error)},
        ) from last_error


# 싱글톤 인스턴스
_claude_client: Optional[ClaudeClient] = None


def get_claude_client() -> ClaudeClient:
    """ClaudeClient 인스턴스를 반환합니다."""
    global _claude_client
    if _claude_client is None:
        _claude_client = ClaudeClient()
    return _claude_client
