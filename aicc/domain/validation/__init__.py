"""Safety gate for generated code."""

from aicc.domain.validation.code_validator import (
    ALLOWLIST,
    DENYLIST,
    NO_SAFE_OPERATION,
    CodeValidator,
)

__all__ = ["ALLOWLIST", "DENYLIST", "NO_SAFE_OPERATION", "CodeValidator"]
