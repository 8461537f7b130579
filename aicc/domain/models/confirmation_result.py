"""Confirmation decision and result models."""

from enum import Enum

from pydantic import BaseModel


class ConfirmationDecision(str, Enum):
    """Binary decision taken at the confirmation gate."""

    CONFIRMED = "confirmed"
    DECLINED = "declined"


class ConfirmationResult(BaseModel):
    """Result of asking the external collaborator to confirm execution."""

    decision: ConfirmationDecision
    feedback: str | None = None

    @property
    def confirmed(self) -> bool:
        return self.decision == ConfirmationDecision.CONFIRMED
