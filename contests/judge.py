# contests/judge.py
from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

# ---------- Judge0 client ----------

LANGUAGE_IDS = {
    "python": 71,
    "javascript": 63,
    "typescript": 74,
    "cpp": 54,
    "c": 50,
    "java": 62,
    "go": 60,
    "rust": 73,
}

DEFAULT_TIME_LIMIT = 5  # seconds
DEFAULT_MEMORY_LIMIT = 128  # MB

# Judge0 status ids
STATUS_TIME_LIMIT = 5
STATUS_COMPILATION_ERROR = 6
RUNTIME_ERROR_STATUSES = range(7, 13)

UNAVAILABLE_MESSAGE = "Code execution service temporarily unavailable"
MOCK_OUTPUT = "Mock output - Configure JUDGE0_API_KEY for real execution"

SESSION = requests.Session()


@dataclass
class ExecutionResult:
    output: str = ""
    execution_time: float = 0.0  # ms
    memory_used: float = 0.0  # MB
    error: str = ""
    status_id: Optional[int] = None

    @property
    def timed_out(self) -> bool:
        return self.status_id == STATUS_TIME_LIMIT

    @property
    def failed_to_compile(self) -> bool:
        return self.status_id == STATUS_COMPILATION_ERROR

    @property
    def crashed(self) -> bool:
        return self.status_id in RUNTIME_ERROR_STATUSES

    @property
    def unavailable(self) -> bool:
        """The code never ran: service down, bad reply or unsupported language."""
        return self.status_id is None and bool(self.error)


def _b64encode(value: str) -> str:
    return base64.b64encode((value or "").encode("utf-8")).decode("ascii")


def _b64decode(value: Optional[str]) -> str:
    if not value:
        return ""
    return base64.b64decode(value).decode("utf-8", errors="replace")


def execute_code(
    code: str,
    language: str,
    stdin: str = "",
    time_limit: Optional[int] = None,
    memory_limit: Optional[int] = None,
) -> ExecutionResult:
    """Run ``code`` once and return its decoded output.

    Without ``JUDGE0_API_KEY`` a canned result is returned so the contest
    flow can be exercised locally. Network failures never raise; they come
    back as an ``ExecutionResult`` with ``error`` set.
    """

    api_key = getattr(settings, "JUDGE0_API_KEY", "")
    if not api_key:
        logger.warning("Judge0 API not configured, using mock response")
        return ExecutionResult(output=MOCK_OUTPUT, execution_time=50.0, memory_used=10.0)

    language_id = LANGUAGE_IDS.get(language)
    if language_id is None:
        return ExecutionResult(error=f"Unsupported language: {language}")

    host = getattr(settings, "JUDGE0_HOST", "judge0-ce.p.rapidapi.com")
    payload = {
        "language_id": language_id,
        "source_code": _b64encode(code),
        "stdin": _b64encode(stdin) if stdin else "",
        "cpu_time_limit": time_limit or DEFAULT_TIME_LIMIT,
        "memory_limit": (memory_limit or DEFAULT_MEMORY_LIMIT) * 1024,
    }
    headers = {
        "Content-Type": "application/json",
        "X-RapidAPI-Key": api_key,
        "X-RapidAPI-Host": host,
    }
    try:
        response = SESSION.post(
            f"https://{host}/submissions",
            params={"base64_encoded": "true", "wait": "true"},
            json=payload,
            headers=headers,
            timeout=getattr(settings, "JUDGE0_TIMEOUT", 30),
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Judge0 request failed for %r: %s", language, exc)
        return ExecutionResult(error=UNAVAILABLE_MESSAGE)

    try:
        stdout = _b64decode(data.get("stdout"))
        stderr = _b64decode(data.get("stderr"))
        compile_output = _b64decode(data.get("compile_output"))
    except (binascii.Error, UnicodeDecodeError) as exc:
        logger.warning("Judge0 returned undecodable output for %r: %s", language, exc)
        return ExecutionResult(error=UNAVAILABLE_MESSAGE)
    try:
        execution_time = float(data.get("time") or 0) * 1000
    except (TypeError, ValueError):
        execution_time = 0.0
    return ExecutionResult(
        output=stdout,
        execution_time=execution_time,
        memory_used=(data.get("memory") or 0) / 1024,
        error=stderr or compile_output,
        status_id=(data.get("status") or {}).get("id"),
    )
