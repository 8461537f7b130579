"""Controller event types for observer notifications."""

from enum import Enum


class ControllerEventType(str, Enum):
    """Typed notifications published by the orchestrator."""

    # Selection
    PROVIDER_SELECTED = "provider_selected"

    # Generation and safety gate
    CODE_GENERATED = "code_generated"
    CODE_REJECTED = "code_rejected"

    # Execution
    EXECUTION_COMPLETED = "execution_completed"
    EXECUTION_FAILED = "execution_failed"

    # History
    HISTORY_CLEARED = "history_cleared"
