"""Canonical generated-code artifact."""

from pydantic import BaseModel, ConfigDict


class GeneratedCode(BaseModel):
    """Normalized code returned by any provider.

    ``code`` is fence-stripped and trimmed; ``description`` is a short
    human-readable label shown at the confirmation gate.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    description: str
