"""
Execution gateway for the external code sandbox (Piston-compatible API).
"""
from sqlalchemy.engine import Engine
from typing import Optional
import logging
import time

import requests

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.schemas.execution import ExecutionResult
from app.services.submission_service import record_submission

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> int:
    return int(round((time.perf_counter() - start) * 1000))


class ExecutionService:
    """Service for running learner code in the sandbox."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        request_timeout_ms: Optional[int] = None,
    ):
        """Initialize the execution service."""
        self.base_url = (base_url or settings.sandbox_url).rstrip("/")
        self.language = settings.sandbox_language
        self.version = settings.sandbox_version
        self.request_timeout_ms = request_timeout_ms or settings.sandbox_request_timeout_ms
        logger.info(f"ExecutionService initialized for {self.base_url} ({self.language} {self.version})")

    def build_payload(self, code: str, time_budget_ms: int, memory_budget_bytes: int) -> dict:
        """Build the sandbox request body."""
        return {
            "language": self.language,
            "version": self.version,
            "files": [{"name": "main.py", "content": code}],
            "run_timeout": time_budget_ms,
            "compile_memory_limit": memory_budget_bytes,
        }

    def execute(
        self,
        code: str,
        time_budget_ms: Optional[int] = None,
        memory_budget_bytes: Optional[int] = None,
    ) -> ExecutionResult:
        """
        Run code in the sandbox and normalize the outcome.

        The sandbox enforces `time_budget_ms` itself; this client gives up after
        `request_timeout_ms`, which must be larger so a clean sandbox timeout
        can still be reported. Transport errors, non-2xx responses and
        malformed bodies come back as a failed ExecutionResult, never raised.

        Args:
            code: Python source to run
            time_budget_ms: Sandbox run timeout (defaults to settings)
            memory_budget_bytes: Sandbox memory limit (defaults to settings)

        Returns:
            ExecutionResult with output, error and caller-measured execution_time

        Raises:
            ValidationError: If the run timeout is not below the request timeout
        """
        if time_budget_ms is None:
            time_budget_ms = settings.sandbox_run_timeout_ms
        if memory_budget_bytes is None:
            memory_budget_bytes = settings.sandbox_memory_limit_bytes

        if time_budget_ms >= self.request_timeout_ms:
            raise ValidationError(
                f"Run timeout ({time_budget_ms}ms) must be below the request timeout ({self.request_timeout_ms}ms)"
            )

        payload = self.build_payload(code, time_budget_ms, memory_budget_bytes)
        start = time.perf_counter()

        try:
            response = requests.post(
                f"{self.base_url}/execute",
                json=payload,
                timeout=self.request_timeout_ms / 1000,
            )
            if not 200 <= response.status_code < 300:
                message = f"Sandbox returned HTTP {response.status_code}"
                logger.warning(f"{message}: {response.text[:200]}")
                return ExecutionResult.failure(message, _elapsed_ms(start))
            data = response.json()
        except requests.exceptions.RequestException as e:
            # Includes timeouts, connection errors and undecodable JSON bodies
            logger.warning(f"Sandbox request failed: {type(e).__name__}: {str(e)}")
            return ExecutionResult.failure(str(e), _elapsed_ms(start))

        run = data.get("run") if isinstance(data, dict) else None
        if not isinstance(run, dict):
            message = data.get("message") if isinstance(data, dict) else None
            logger.warning(f"Unexpected sandbox response format: {data}")
            return ExecutionResult.failure(message or "Unexpected sandbox response", _elapsed_ms(start))

        stdout = run.get("stdout") or ""
        stderr = run.get("stderr") or None
        return ExecutionResult(
            output=stdout,
            error=stderr,
            execution_time=_elapsed_ms(start),
            passed=not stderr,
        )


def run_code(
    engine: Engine,
    user_id: int,
    lesson_id: int,
    code: str,
    service: Optional[ExecutionService] = None,
) -> ExecutionResult:
    """
    Execute code for a lesson and record exactly one submission for the attempt.

    Runs synchronously; the API calls it in a worker thread so an abandoned
    request still lets the sandbox call and the submission write finish.
    """
    service = service or execution_service
    result = service.execute(code)

    record_submission(
        engine,
        user_id=user_id,
        lesson_id=lesson_id,
        code=code,
        output=result.output,
        error=result.error,
        passed=result.passed,
    )

    logger.info(
        f"Executed code for user {user_id}, lesson {lesson_id} in {result.execution_time}ms (passed={result.passed})"
    )
    return result


# Create a singleton instance
execution_service = ExecutionService()
