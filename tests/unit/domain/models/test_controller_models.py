import pytest
from pydantic import ValidationError

from aicc.domain.errors import NonZeroExit
from aicc.domain.models import (
    ConfirmationDecision,
    ConfirmationResult,
    ConversationEntry,
    ExecutionResult,
    GeneratedCode,
    ValidationVerdict,
)


class TestValidationVerdict:
    def test_accept(self) -> None:
        verdict = ValidationVerdict.accept()

        assert verdict.accepted is True
        assert verdict.reason is None

    def test_reject_carries_reason(self) -> None:
        assert ValidationVerdict.reject("subprocess").reason == "subprocess"

    def test_rejection_without_reason_is_invalid(self) -> None:
        with pytest.raises(ValidationError):
            ValidationVerdict(accepted=False)

    def test_blank_reason_is_invalid(self) -> None:
        with pytest.raises(ValidationError):
            ValidationVerdict.reject("  ")


class TestExecutionResult:
    def test_success(self) -> None:
        result = ExecutionResult(stdout="ok\n", exit_status=0)

        assert result.succeeded is True
        result.raise_for_status()

    def test_raise_for_status(self) -> None:
        result = ExecutionResult(stderr="Traceback", exit_status=2)

        with pytest.raises(NonZeroExit) as exc_info:
            result.raise_for_status()

        assert exc_info.value.code == 2
        assert exc_info.value.stderr == "Traceback"


class TestConversationEntry:
    def test_timestamp_defaults_to_utc_now(self) -> None:
        entry = ConversationEntry(user_request="r", generated_code="import os")

        assert entry.timestamp.tzinfo is not None
        assert entry.execution_result is None

    def test_frozen(self) -> None:
        entry = ConversationEntry(user_request="r", generated_code="import os")

        with pytest.raises(ValidationError):
            entry.user_request = "other"  # type: ignore[misc]


class TestConfirmationResult:
    def test_confirmed(self) -> None:
        assert ConfirmationResult(decision=ConfirmationDecision.CONFIRMED).confirmed is True

    def test_declined_with_feedback(self) -> None:
        result = ConfirmationResult(decision=ConfirmationDecision.DECLINED, feedback="no")

        assert result.confirmed is False
        assert result.feedback == "no"


def test_generated_code_is_frozen() -> None:
    generated = GeneratedCode(code="import os", description="Generated Python code")

    with pytest.raises(ValidationError):
        generated.code = "import shutil"  # type: ignore[misc]
