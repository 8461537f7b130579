"""Controller configuration model.

Config structure (.aicc/config.yml):
    provider: groq
    models:
      groq: llama3-70b-8192
      ollama: qwen2.5-coder:7b
    timeouts:
      ollama: 300
    credentials:
      groq: gsk-...
    working_dir: ~/Scratch
    interpreter: /usr/bin/python3
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, field_validator

from aicc.domain.constants import DEFAULT_PROVIDER_ID


class ControllerConfig(BaseModel):
    """Top-level controller configuration (parsed from YAML)."""

    model_config = ConfigDict(extra="forbid")

    provider: str = DEFAULT_PROVIDER_ID
    models: dict[str, str] = Field(default_factory=dict)
    timeouts: dict[str, PositiveFloat] = Field(default_factory=dict)
    credentials: dict[str, str] = Field(default_factory=dict)
    working_dir: Path | None = None
    interpreter: str | None = None

    @field_validator("working_dir")
    @classmethod
    def _expand_working_dir(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        value = value.expanduser()
        # Relative paths would follow the caller's current directory.
        if not value.is_absolute():
            raise ValueError(f"working_dir must be an absolute path, got '{value}'")
        return value

    def unknown_provider_keys(self, known: list[str]) -> list[str]:
        """Provider ids referenced by per-provider maps but absent from ``known``."""
        referenced = {*self.models, *self.timeouts, *self.credentials}
        return sorted(referenced - set(known))
