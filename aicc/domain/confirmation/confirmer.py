"""Confirmation gate strategies.

Execution of accepted code needs an explicit signal from outside the core.
A Confirmer supplies that signal; the orchestrator never runs code that was
not confirmed.
"""

from abc import ABC, abstractmethod

from aicc.domain.models.confirmation_result import ConfirmationDecision, ConfirmationResult
from aicc.domain.models.generated_code import GeneratedCode
from aicc.domain.models.validation_verdict import ValidationVerdict


class Confirmer(ABC):
    """Abstract interface for confirmation providers (Strategy pattern).

    Built-in implementations:
    - AutoConfirmer: Always confirms (unattended use, ``--yes``)
    - PromptConfirmer: Asks the user on the terminal (interface layer)
    """

    @abstractmethod
    def confirm(
        self,
        *,
        request: str,
        generated: GeneratedCode,
        verdict: ValidationVerdict,
    ) -> ConfirmationResult:
        """Decide whether accepted code may run.

        Only called for code the validator accepted.

        Args:
            request: The user's natural-language request
            generated: Normalized code about to be executed
            verdict: The (accepting) validator verdict

        Returns:
            ConfirmationResult with the decision
        """
        ...

    @property
    @abstractmethod
    def requires_user_input(self) -> bool:
        """Whether this confirmer interacts with a person."""
        ...


class AutoConfirmer(Confirmer):
    """Confirmer that always confirms."""

    def confirm(
        self,
        *,
        request: str,
        generated: GeneratedCode,
        verdict: ValidationVerdict,
    ) -> ConfirmationResult:
        return ConfirmationResult(decision=ConfirmationDecision.CONFIRMED)

    @property
    def requires_user_input(self) -> bool:
        return False
