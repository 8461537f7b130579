"""Terminal confirmation gate."""

import click

from aicc.domain.confirmation.confirmer import Confirmer
from aicc.domain.models.confirmation_result import ConfirmationDecision, ConfirmationResult
from aicc.domain.models.generated_code import GeneratedCode
from aicc.domain.models.validation_verdict import ValidationVerdict


class PromptConfirmer(Confirmer):
    """Shows the generated code on stderr and asks before running it.

    Prompts go to stderr so stdout carries only results (and JSON output).
    """

    def confirm(
        self,
        *,
        request: str,
        generated: GeneratedCode,
        verdict: ValidationVerdict,
    ) -> ConfirmationResult:
        click.echo(f"\n{generated.description}:\n", err=True)
        click.echo(generated.code, err=True)
        click.echo("", err=True)
        if click.confirm("Are you sure you want to execute this operation?", default=False, err=True):
            return ConfirmationResult(decision=ConfirmationDecision.CONFIRMED)
        return ConfirmationResult(
            decision=ConfirmationDecision.DECLINED,
            feedback="Declined by user",
        )

    @property
    def requires_user_input(self) -> bool:
        return True
