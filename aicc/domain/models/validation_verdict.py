"""Safety gate verdict."""

from pydantic import BaseModel, ConfigDict, model_validator


class ValidationVerdict(BaseModel):
    """Accept/reject decision from the CodeValidator.

    A rejection always carries a reason: either the matched denylist token
    or the "no recognized safe operation" message.
    """

    model_config = ConfigDict(frozen=True)

    accepted: bool
    reason: str | None = None

    @model_validator(mode="after")
    def _validate_rejection_has_reason(self) -> "ValidationVerdict":
        if not self.accepted and not (self.reason and self.reason.strip()):
            raise ValueError("Rejection requires a reason")
        return self

    @classmethod
    def accept(cls) -> "ValidationVerdict":
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: str) -> "ValidationVerdict":
        return cls(accepted=False, reason=reason)
