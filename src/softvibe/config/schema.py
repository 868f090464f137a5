from __future__ import annotations

from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field, field_validator

DEFAULT_SYSTEM_INSTRUCTION = (
    "You are a friendly and encouraging coding tutor for the softvibe platform.\n"
    "Your student is learning {language}.\n"
    "Analyze the provided code and the lesson context.\n"
    "If the user asks for help, provide a hint, not the full solution immediately.\n"
    "If the code has errors, explain them simply.\n"
    "Keep responses concise (under 150 words) and formatted with Markdown."
)


class TutorConfig(BaseModel):
    """Chat model settings for the AI tutor."""

    name: str = Field("gpt-4o-mini", description="LLM identifier.")
    temperature: float = Field(0.2, ge=0, le=2)
    max_output_tokens: int = Field(512, ge=64)
    api_key_env: str = Field("OPENAI_API_KEY", description="Environment variable holding the credential.")
    base_url: str | None = Field(None, description="Optional OpenAI-compatible endpoint override.")
    system_instruction: str = Field(DEFAULT_SYSTEM_INSTRUCTION)


class SandboxConfig(BaseModel):
    """Remote code execution endpoint (Judge0 CE compatible)."""

    base_url: str = Field("https://ce.judge0.com")
    timeout_seconds: float = Field(30.0, gt=0)
    language_ids: Dict[str, int] = Field(
        default_factory=lambda: {"python": 71, "java": 62, "c": 50},
        description="Lower-cased language tag to Judge0 language id.",
    )

    @field_validator("language_ids")
    @classmethod
    def lowercase_language_keys(cls, value: Dict[str, int]) -> Dict[str, int]:
        """Normalize language keys so lookups are case-insensitive."""
        return {key.lower(): lang_id for key, lang_id in value.items()}


class ConnectivityConfig(BaseModel):
    """How the initial online/offline state is determined."""

    probe_url: str | None = Field(
        None, description="URL probed at startup; when unset the app starts online."
    )
    probe_timeout_seconds: float = Field(2.0, gt=0)


class PathsConfig(BaseModel):
    """Filesystem layout for durable learner state."""

    storage_file: Path = Field(Path("data/softvibe_storage.json"))
    catalog_file: Path | None = Field(
        None, description="Optional catalog YAML; the packaged catalog is used when unset."
    )


class SessionConfig(BaseModel):
    """Interaction tuning for the learning session."""

    submit_delay_seconds: float = Field(0.5, ge=0)
    hours_per_lesson: float = Field(0.5, ge=0)
    hours_per_project: float = Field(2.0, ge=0)


class LoggingConfig(BaseModel):
    """Controls for logging output and format."""

    level: str = Field("INFO")
    use_json: bool = False


class Settings(BaseModel):
    """Top-level project configuration aggregating all sub-settings."""

    project_name: str = Field("softvibe")
    tutor: TutorConfig = Field(default_factory=TutorConfig)
    sandbox: SandboxConfig = Field(default_factory=SandboxConfig)
    connectivity: ConnectivityConfig = Field(default_factory=ConnectivityConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
