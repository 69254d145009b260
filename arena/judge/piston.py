"""
Client for the Piston code execution API.

Untrusted code never runs in this process: every test case is a single
``POST /execute`` call to Piston. Failures of any kind (compile errors,
crashes, time limits, transport problems) are reported through
``ExecutionResult.error`` instead of being raised.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

# our language names -> Piston runtime names
LANGUAGE_MAP = {
    "python": "python",
    "c": "c",
    "cpp": "c++",
    "java": "java",
}

FILE_EXTENSIONS = {
    "python": "py",
    "c": "c",
    "cpp": "cpp",
    "java": "java",
}

TIME_LIMIT_EXCEEDED = "Time Limit Exceeded"


@dataclass
class ExecutionResult:
    output: str = ""
    error: Optional[str] = None


def interpret_result(data: dict[str, Any]) -> ExecutionResult:
    """
    Turn a Piston ``/execute`` response body into an ExecutionResult.

    Args:
        data: Decoded JSON body with ``compile`` (optional) and ``run`` stages

    Returns:
        ExecutionResult: trimmed stdout on success, otherwise an error message
    """
    compile_stage = data.get("compile")
    if compile_stage and compile_stage.get("code") != 0:
        details = compile_stage.get("stderr") or compile_stage.get("output") or ""
        return ExecutionResult(error=f"Compilation Error:\n{details}")

    run_stage = data.get("run") or {}
    if run_stage.get("code") == 0:
        return ExecutionResult(output=(run_stage.get("stdout") or "").strip())

    if run_stage.get("signal") == "SIGKILL":
        return ExecutionResult(error=TIME_LIMIT_EXCEEDED)

    details = run_stage.get("stderr") or run_stage.get("output") or "Unknown error"
    return ExecutionResult(error=f"Runtime Error:\n{details}")


def _api_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"{response.status_code} {response.reason_phrase}".strip()


class PistonClient:
    """Async Piston client holding one pooled HTTP connection set."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        compile_timeout_ms: int = 10000,
        run_timeout_ms: int = 5000,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        self.compile_timeout_ms = compile_timeout_ms
        self.run_timeout_ms = run_timeout_ms
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def build_payload(self, language: str, code: str, stdin: str) -> dict[str, Any]:
        return {
            "language": LANGUAGE_MAP[language],
            "version": "*",
            "files": [
                {"name": f"main.{FILE_EXTENSIONS[language]}", "content": code}
            ],
            "stdin": stdin,
            "compile_timeout": self.compile_timeout_ms,
            "run_timeout": self.run_timeout_ms,
            "compile_memory_limit": -1,
            "run_memory_limit": -1,
        }

    async def execute(self, language: str, code: str, stdin: str) -> ExecutionResult:
        """
        Run ``code`` once with ``stdin`` as standard input.

        Args:
            language: One of the keys of LANGUAGE_MAP
            code: Program source
            stdin: Standard input for the program

        Returns:
            ExecutionResult: output or error, never raises for execution
            or transport failures
        """
        if language not in LANGUAGE_MAP:
            return ExecutionResult(error=f"Unsupported language: {language}")

        try:
            response = await self._client.post(
                "/execute",
                json=self.build_payload(language, code, stdin)
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException:
            logger.warning("Piston call timed out (%s)", language)
            return ExecutionResult(error=TIME_LIMIT_EXCEEDED)
        except httpx.HTTPStatusError as e:
            message = _api_error_message(e.response)
            logger.warning("Piston API error: %s", message)
            return ExecutionResult(error=f"API Error: {message}")
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Piston execution failed: %s", e)
            return ExecutionResult(error=f"Execution failed: {e}")

        return interpret_result(data)
