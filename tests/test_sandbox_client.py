"""Tests for the Judge0-style execution client."""

from __future__ import annotations

import base64

import pytest
import requests

from softvibe.config.schema import SandboxConfig
from softvibe.errors import SandboxRejectedError, SandboxUnreachableError, UnsupportedLanguageError
from softvibe.sandbox import ExecutionClient, format_result
from softvibe.sandbox.client import NO_OUTPUT

from conftest import FakeSession


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def make_client(session: FakeSession) -> ExecutionClient:
    return ExecutionClient(SandboxConfig(base_url="https://sandbox.test/"), session=session)


def test_submission_payload(http_session, executor):
    output = executor.execute("print('héllo')", "Python", stdin="42")

    assert output == "hello\n"
    call = http_session.calls[0]
    assert call["url"] == "https://sandbox.test/submissions"
    assert call["params"] == {"base64_encoded": "true", "wait": "true"}
    assert call["json"]["language_id"] == 71
    assert base64.b64decode(call["json"]["source_code"]).decode("utf-8") == "print('héllo')"
    assert call["json"]["stdin"] == b64("42")


@pytest.mark.parametrize("language, expected", [("python", 71), ("JAVA", 62), ("C", 50)])
def test_language_mapping(executor, language, expected):
    assert executor.language_id(language) == expected


def test_unsupported_language_raises_before_network(http_session, executor):
    with pytest.raises(UnsupportedLanguageError, match="Rust"):
        executor.execute("fn main() {}", "Rust")
    assert http_session.calls == []


@pytest.mark.parametrize(
    "result, expected",
    [
        ({"stdout": b64("ok"), "stderr": b64("warn")}, "ok"),
        ({"stderr": b64("Traceback"), "compile_output": b64("cc fail")}, "Error: Traceback"),
        ({"compile_output": b64("missing ;"), "status": {"description": "Compilation Error"}},
         "Compilation Error:\nmissing ;"),
        ({"message": b64("Exited with error status 1")}, "System Message: Exited with error status 1"),
        ({"status": {"description": "Accepted"}}, "Accepted"),
        ({"stdout": None, "stderr": None}, NO_OUTPUT),
    ],
)
def test_output_precedence(result, expected):
    assert format_result(result) == expected


def test_transport_failure():
    session = FakeSession(error=requests.ConnectionError("dns failure"))
    with pytest.raises(SandboxUnreachableError):
        make_client(session).execute("print(1)", "Python")


def test_rejection_reports_sandbox_reason():
    session = FakeSession(payload={"error": "You have exceeded the daily quota"}, status_code=429)
    with pytest.raises(SandboxRejectedError, match="daily quota") as excinfo:
        make_client(session).execute("print(1)", "Python")
    assert excinfo.value.status_code == 429


def test_server_error_without_reason_is_unreachable():
    session = FakeSession(payload=ValueError("<html>Bad Gateway</html>"), status_code=502)
    with pytest.raises(SandboxUnreachableError):
        make_client(session).execute("print(1)", "Python")


def test_unparseable_body():
    session = FakeSession(payload=ValueError("not json"))
    with pytest.raises(SandboxUnreachableError):
        make_client(session).execute("print(1)", "Python")
