"""Error taxonomy shared by the network clients and the learning service."""

from __future__ import annotations


class SoftvibeError(RuntimeError):
    """Base class for recoverable, user-facing failures."""


class CredentialMissingError(SoftvibeError):
    """The tutor endpoint has no API key configured."""


class TutorUnavailableError(SoftvibeError):
    """The language-model service could not be reached or returned an error."""


class SandboxUnreachableError(SoftvibeError):
    """The code-execution sandbox could not be reached or answered garbage."""


class UnsupportedLanguageError(SoftvibeError):
    """The sandbox has no language id for the requested source language."""

    def __init__(self, language: str):
        super().__init__(f"Unsupported language for sandbox execution: {language}")
        self.language = language


class SandboxRejectedError(SoftvibeError):
    """The sandbox answered but refused the submission (quota, validation, auth)."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"The execution sandbox rejected the submission ({status_code}): {detail}")
        self.status_code = status_code
        self.detail = detail
