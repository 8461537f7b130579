"""Controller event payload model."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from aicc.domain.events.event_types import ControllerEventType


class ControllerEvent(BaseModel):
    """Immutable event payload for controller notifications."""

    model_config = {"frozen": True}

    event_type: ControllerEventType
    timestamp: datetime
    provider_id: str | None = None
    model: str | None = None
    exit_status: int | None = None
    reason: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
