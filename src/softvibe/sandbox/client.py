from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, Optional

import requests

from softvibe.config.schema import SandboxConfig
from softvibe.errors import SandboxRejectedError, SandboxUnreachableError, UnsupportedLanguageError
from softvibe.utils.logging import get_logger

logger = get_logger(__name__, component="sandbox")

NO_OUTPUT = "Execution finished with no output."
UNREACHABLE = "Failed to connect to the execution sandbox."


def encode_text(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_text(encoded: str) -> str:
    """Decode a base64 field from the sandbox, tolerating embedded newlines and bad UTF-8."""
    try:
        raw = base64.b64decode(encoded)
    except (binascii.Error, ValueError) as exc:
        raise SandboxUnreachableError(f"{UNREACHABLE} Malformed response field.") from exc
    return raw.decode("utf-8", errors="replace")


def format_result(result: Dict[str, Any]) -> str:
    """
    Pick the single piece of output shown to the learner.

    Precedence: stdout, then stderr, then compiler output, then a sandbox system message,
    then the status description, then a fixed "no output" line.
    """
    if result.get("stdout"):
        return decode_text(result["stdout"])
    if result.get("stderr"):
        return f"Error: {decode_text(result['stderr'])}"
    if result.get("compile_output"):
        return f"Compilation Error:\n{decode_text(result['compile_output'])}"
    if result.get("message"):
        return f"System Message: {decode_text(result['message'])}"
    status = result.get("status") or {}
    if isinstance(status, dict) and status.get("description"):
        return str(status["description"])
    return NO_OUTPUT


class ExecutionClient:
    """Submit code to a Judge0-compatible sandbox and wait for the result."""

    def __init__(self, config: SandboxConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def language_id(self, language: str) -> int:
        """Map a source-language tag to the sandbox's numeric id."""
        try:
            return self.config.language_ids[language.lower()]
        except KeyError:
            raise UnsupportedLanguageError(language) from None

    def execute(self, code: str, language: str, stdin: str = "") -> str:
        lang_id = self.language_id(language)
        url = f"{self.config.base_url.rstrip('/')}/submissions"
        payload = {
            "source_code": encode_text(code),
            "language_id": lang_id,
            "stdin": encode_text(stdin or ""),
        }
        logger.info("sandbox.submit", language=language, language_id=lang_id)
        try:
            response = self.session.post(
                url,
                params={"base64_encoded": "true", "wait": "true"},
                json=payload,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.error("sandbox.failed", error=str(exc))
            raise SandboxUnreachableError(UNREACHABLE) from exc
        return format_result(self._read_result(response))

    def _read_result(self, response: requests.Response) -> Dict[str, Any]:
        """Decode the JSON body; error replies carrying an `error` or `message` field are surfaced."""
        try:
            result = response.json()
        except ValueError:
            result = None
        if response.status_code >= 400:
            detail = None
            if isinstance(result, dict):
                detail = result.get("error") or result.get("message")
            if isinstance(detail, str) and detail:
                logger.warning("sandbox.rejected", status=response.status_code, detail=detail)
                raise SandboxRejectedError(response.status_code, detail)
            logger.error("sandbox.failed", status=response.status_code)
            raise SandboxUnreachableError(UNREACHABLE)
        if not isinstance(result, dict):
            logger.error("sandbox.failed", error="response body is not a JSON object")
            raise SandboxUnreachableError(UNREACHABLE)
        return result
