from typing import Literal

from pydantic import BaseModel, Field


class BaseOutput(BaseModel):
    schema_version: int = 1
    command: Literal["run", "providers", "models", "check"]
    exit_code: int
    error: str | None = None


class RunOutput(BaseOutput):
    command: Literal["run"] = "run"
    provider: str | None = None
    model: str | None = None
    code: str | None = None
    accepted: bool | None = None
    reason: str | None = None
    confirmed: bool = False
    executed: bool = False
    exit_status: int | None = None
    stdout: str | None = None
    stderr: str | None = None
    display: str | None = None


class ProviderSummary(BaseModel):
    """Summary of a single catalog entry for providers output."""
    id: str
    name: str
    model: str
    requires_credential: bool
    connected: bool
    selected: bool


class ProvidersOutput(BaseOutput):
    command: Literal["providers"] = "providers"
    providers: list[ProviderSummary] = Field(default_factory=list)


class ModelsOutput(BaseOutput):
    command: Literal["models"] = "models"
    provider: str
    selected: str | None = None
    models: list[str] = Field(default_factory=list)


class CheckOutput(BaseOutput):
    command: Literal["check"] = "check"
    path: str
    accepted: bool
    reason: str | None = None
