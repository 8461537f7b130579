"""Conversation history record."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationEntry(BaseModel):
    """One executed request, kept as follow-up context for later prompts.

    ``execution_result`` is the display string produced for the run
    (stdout, the success fallback, or an error-prefixed message).
    """

    model_config = ConfigDict(frozen=True)

    user_request: str
    generated_code: str
    execution_result: str | None = None
    timestamp: datetime = Field(default_factory=_utcnow)
