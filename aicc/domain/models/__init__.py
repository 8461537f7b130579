"""Domain models for the AI Computer Controller."""

from .provider_config import (
    AuthScheme,
    PromptClass,
    ProviderConfig,
    RequestShape,
    ResponseShape,
)
from .generated_code import GeneratedCode
from .validation_verdict import ValidationVerdict
from .execution_result import ExecutionResult
from .conversation import ConversationEntry
from .confirmation_result import ConfirmationDecision, ConfirmationResult


__all__ = [
    "AuthScheme",
    "PromptClass",
    "ProviderConfig",
    "RequestShape",
    "ResponseShape",
    "GeneratedCode",
    "ValidationVerdict",
    "ExecutionResult",
    "ConversationEntry",
    "ConfirmationDecision",
    "ConfirmationResult",
]
