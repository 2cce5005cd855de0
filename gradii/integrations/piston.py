"""Client for the Piston code execution API.

Piston runs untrusted snippets in a sandbox. Only the languages used by
coding interviews are exposed, each pinned to one runtime version.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from gradii.core.errors import UpstreamServiceError, ValidationError
from gradii.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PistonRuntime:
    language: str
    version: str
    file_name: str


SUPPORTED_RUNTIMES: Dict[str, PistonRuntime] = {
    "java": PistonRuntime("java", "15.0.2", "Solution.java"),
    "python": PistonRuntime("python", "3.10.0", "solution.py"),
    "cpp": PistonRuntime("cpp", "10.2.0", "solution.cpp"),
    "php": PistonRuntime("php", "8.2.3", "solution.php"),
}

COMPILE_TIMEOUT_MS = 10000
RUN_TIMEOUT_MS = 3000


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running a snippet."""

    success: bool
    output: str
    error: str
    exit_code: Optional[int]
    language: str
    version: str


class PistonClient:
    """Async client for the Piston ``/execute`` and ``/runtimes`` endpoints.

    - Uses ``httpx.AsyncClient``; pass one in to share a connection pool or to
      mock the transport in tests.
    - Maps transport errors and non-2xx responses to ``UpstreamServiceError``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 20.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = client or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def supported_languages() -> List[str]:
        return list(SUPPORTED_RUNTIMES)

    @staticmethod
    def runtime_for(language: str) -> PistonRuntime:
        """Resolve the pinned runtime of a language.

        Raises:
            ValidationError: If the language is not supported.
        """
        runtime = SUPPORTED_RUNTIMES.get((language or "").strip().lower())
        if runtime is None:
            raise ValidationError(f"Unsupported language: {language}")
        return runtime

    async def execute(self, language: str, code: str, stdin: str = "") -> ExecutionResult:
        """Run ``code`` in the sandbox.

        Args:
            language: One of the supported languages
            code: Source code, written to the runtime's conventional file name
            stdin: Data passed on standard input

        Returns:
            ExecutionResult; ``success`` is True only for exit code 0 with empty stderr

        Raises:
            ValidationError: If the language is unsupported or the code is empty.
            UpstreamServiceError: If Piston is unreachable or answers with an error.
        """
        runtime = self.runtime_for(language)
        if not code or not code.strip():
            raise ValidationError("Code and language are required")

        payload: Dict[str, Any] = {
            "language": runtime.language,
            "version": runtime.version,
            "files": [{"name": runtime.file_name, "content": code}],
            "stdin": stdin or "",
            "args": [],
            "compile_timeout": COMPILE_TIMEOUT_MS,
            "run_timeout": RUN_TIMEOUT_MS,
            "compile_memory_limit": -1,
            "run_memory_limit": -1,
        }
        logger.debug("PistonClient.execute: POST %s/execute language=%s", self._base_url, runtime.language)
        data = await self._request("POST", "/execute", json=payload)

        run = data.get("run") or {}
        compile_stage = data.get("compile") or {}
        stdout = run.get("stdout") or ""
        stderr = run.get("stderr") or ""
        exit_code = run.get("code")
        if compile_stage.get("code") not in (None, 0):
            stderr = compile_stage.get("stderr") or compile_stage.get("output") or stderr
            exit_code = compile_stage.get("code")

        if exit_code != 0 or stderr:
            return ExecutionResult(
                success=False,
                output=stdout,
                error=stderr or "Code execution failed",
                exit_code=exit_code,
                language=runtime.language,
                version=runtime.version,
            )
        return ExecutionResult(
            success=True,
            output=stdout or "Code executed successfully (no output)",
            error="",
            exit_code=exit_code,
            language=runtime.language,
            version=runtime.version,
        )

    async def runtimes(self) -> int:
        """Return how many runtimes the Piston instance offers."""
        data = await self._request("GET", "/runtimes")
        return len(data) if isinstance(data, list) else 0

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._http.request(method, f"{self._base_url}{path}", **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Piston API error: %s %s -> %s", method, path, e.response.status_code)
            raise UpstreamServiceError(f"Piston API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Piston API unreachable: %s %s: %s", method, path, e)
            raise UpstreamServiceError("Code execution service is unavailable") from e
        except ValueError as e:
            raise UpstreamServiceError("Code execution service returned an invalid response") from e
