import asyncio
import logging
import sys
from pathlib import Path

import click
from pydantic import BaseModel

from aicc.application.config_loader import ConfigLoadError, load_config, resolve_credentials
from aicc.application.llm_client import LLMClient
from aicc.application.orchestrator import Orchestrator, RequestOutcome
from aicc.domain.confirmation.confirmer import AutoConfirmer, Confirmer
from aicc.domain.errors import ControllerError, NonZeroExit, UnsafeCode
from aicc.domain.events.stderr_observer import StderrEventObserver
from aicc.domain.providers.catalog import DEFAULT_CATALOG
from aicc.domain.validation.code_validator import CodeValidator
from aicc.interface.cli.confirmer import PromptConfirmer
from aicc.interface.cli.output_models import (
    CheckOutput,
    ModelsOutput,
    ProviderSummary,
    ProvidersOutput,
    RunOutput,
)

SESSION_QUIT = ":quit"
SESSION_CLEAR = ":clear"
SESSION_HISTORY = ":history"


def _new_client() -> LLMClient:
    # Patched by tests to inject a mock transport.
    return LLMClient()


def _json_emit(model: BaseModel) -> None:
    # Single-line JSON, omit None fields.
    click.echo(model.model_dump_json(exclude_none=True), nl=True)


def _get_json_mode(ctx: click.Context) -> bool:
    obj = ctx.obj or {}
    return bool(obj.get("json", False))


def _format_error(e: Exception) -> str:
    """Format exception into user-friendly message."""
    if isinstance(e, FileNotFoundError):
        return f"File not found: {e.filename}" if e.filename else str(e)
    return str(e)


def _build_orchestrator(
    ctx: click.Context,
    provider: str | None = None,
    model: str | None = None,
) -> Orchestrator:
    cfg = load_config(project_root=Path.cwd(), user_home=Path.home())
    credentials = resolve_credentials(cfg, DEFAULT_CATALOG)
    orchestrator = Orchestrator.from_config(cfg, credentials, client=_new_client())

    if (ctx.obj or {}).get("events"):
        orchestrator.event_emitter.subscribe(StderrEventObserver())

    if provider:
        orchestrator.select_provider(provider)
    if model:
        orchestrator.set_model(orchestrator.selected_provider, model)
    return orchestrator


def _confirmer(yes: bool) -> Confirmer:
    return AutoConfirmer() if yes else PromptConfirmer()


def _run_output(orchestrator: Orchestrator, outcome: RequestOutcome) -> RunOutput:
    result = outcome.result
    return RunOutput(
        exit_code=result.exit_status if result is not None else 0,
        provider=orchestrator.selected_provider,
        model=orchestrator.current_model(),
        code=outcome.generated.code,
        accepted=outcome.verdict.accepted,
        reason=outcome.verdict.reason,
        confirmed=outcome.confirmation.confirmed,
        executed=outcome.executed,
        exit_status=result.exit_status if result is not None else None,
        stdout=result.stdout if result is not None else None,
        stderr=result.stderr if result is not None else None,
        display=outcome.display,
    )


@click.group(help="AI Computer Controller CLI.")
@click.option("--json", "json_output", is_flag=True, help="Emit machine-readable JSON on stdout.")
@click.option("--verbose", is_flag=True, help="Log debug output to stderr.")
@click.option("--events", is_flag=True, help="Emit controller events to stderr.")
@click.pass_context
def cli(ctx: click.Context, json_output: bool, verbose: bool, events: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj["json"] = bool(json_output)
    ctx.obj["events"] = bool(events)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


@cli.command("run")
@click.argument("request")
@click.option("--provider", "provider", required=False, type=str, help="Provider id (overrides config).")
@click.option("--model", "model", required=False, type=str, help="Model for the provider.")
@click.option("--yes", "-y", "yes", is_flag=True, help="Execute without asking for confirmation.")
@click.pass_context
def run_cmd(
    ctx: click.Context,
    request: str,
    provider: str | None,
    model: str | None,
    yes: bool,
) -> None:
    """Generate, check, confirm and execute a script for REQUEST."""
    json_mode = _get_json_mode(ctx)
    try:
        orchestrator = _build_orchestrator(ctx, provider, model)
        outcome = asyncio.run(orchestrator.process(request, _confirmer(yes)))
    except UnsafeCode as e:
        if json_mode:
            _json_emit(RunOutput(exit_code=1, accepted=False, reason=e.reason, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(f"Generated code was rejected: {e.reason}")
    except (ControllerError, ConfigLoadError, ValueError) as e:
        if json_mode:
            _json_emit(RunOutput(exit_code=1, error=_format_error(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(_format_error(e))

    if json_mode:
        output = _run_output(orchestrator, outcome)
        _json_emit(output)
        raise click.exceptions.Exit(output.exit_code)

    if not outcome.executed:
        click.echo("Cancelled.", err=True)
        return

    click.echo(outcome.display)
    try:
        outcome.result.raise_for_status()
    except NonZeroExit as e:
        raise click.exceptions.Exit(e.code)


@cli.command("session")
@click.option("--provider", "provider", required=False, type=str, help="Provider id (overrides config).")
@click.option("--model", "model", required=False, type=str, help="Model for the provider.")
@click.option("--yes", "-y", "yes", is_flag=True, help="Execute without asking for confirmation.")
@click.pass_context
def session_cmd(ctx: click.Context, provider: str | None, model: str | None, yes: bool) -> None:
    """Interactive loop keeping conversation history between requests.

    Enter ':history' to list past requests, ':clear' to forget them, and an
    empty line or ':quit' to leave.
    """
    try:
        orchestrator = _build_orchestrator(ctx, provider, model)
    except (ControllerError, ConfigLoadError, ValueError) as e:
        raise click.ClickException(_format_error(e))

    confirmer = _confirmer(yes)
    provider_config = orchestrator.provider()
    status = "connected" if orchestrator.is_connected() else "no API key"
    click.echo(
        f"Using {provider_config.display_name} ({orchestrator.current_model()}), {status}.",
        err=True,
    )

    while True:
        try:
            line = click.prompt("aicc", default="", show_default=False, prompt_suffix="> ", err=True)
        except click.Abort:
            # End of input
            click.echo("", err=True)
            break
        command = line.strip()
        if not command or command == SESSION_QUIT:
            break
        if command == SESSION_CLEAR:
            orchestrator.clear_history()
            click.echo("History cleared.", err=True)
            continue
        if command == SESSION_HISTORY:
            history = orchestrator.history
            if not history:
                click.echo("No history.", err=True)
            for index, entry in enumerate(history, start=1):
                click.echo(f"{index}. {entry.user_request} -> {entry.execution_result}")
            continue

        try:
            outcome = asyncio.run(orchestrator.process(command, confirmer))
        except UnsafeCode as e:
            click.echo(f"Generated code was rejected: {e.reason}", err=True)
            continue
        except ControllerError as e:
            click.echo(f"Error: {e}", err=True)
            continue

        if outcome.executed:
            click.echo(outcome.display)
        else:
            click.echo("Cancelled.", err=True)


@cli.command("providers")
@click.pass_context
def providers_cmd(ctx: click.Context) -> None:
    """List the supported providers and their connection status."""
    try:
        orchestrator = _build_orchestrator(ctx)
    except (ControllerError, ConfigLoadError) as e:
        if _get_json_mode(ctx):
            _json_emit(ProvidersOutput(exit_code=1, error=_format_error(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(_format_error(e))

    summaries = [
        ProviderSummary(
            id=p.id,
            name=p.display_name,
            model=orchestrator.current_model(p.id),
            requires_credential=p.requires_credential,
            connected=orchestrator.is_connected(p.id),
            selected=p.id == orchestrator.selected_provider,
        )
        for p in orchestrator.catalog.all()
    ]

    if _get_json_mode(ctx):
        _json_emit(ProvidersOutput(exit_code=0, providers=summaries))
        return

    for s in summaries:
        marker = "*" if s.selected else " "
        status = "connected" if s.connected else "no API key"
        click.echo(f"{marker} {s.id:<10} {s.name:<18} {s.model:<28} {status}")


@cli.command("models")
@click.option("--provider", "provider", required=False, type=str, help="Provider id (default: selected).")
@click.pass_context
def models_cmd(ctx: click.Context, provider: str | None) -> None:
    """List models available for a provider."""
    try:
        orchestrator = _build_orchestrator(ctx, provider)
    except (ControllerError, ConfigLoadError) as e:
        if _get_json_mode(ctx):
            _json_emit(ModelsOutput(exit_code=1, provider=provider or "", error=_format_error(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(_format_error(e))

    provider_id = orchestrator.selected_provider
    models = asyncio.run(orchestrator.refresh_models(provider_id))
    selected = orchestrator.current_model(provider_id)

    if _get_json_mode(ctx):
        _json_emit(ModelsOutput(exit_code=0, provider=provider_id, selected=selected, models=models))
        return

    if not models:
        click.echo(f"No models available for {provider_id}.", err=True)
        return
    for name in models:
        marker = "*" if name == selected else " "
        click.echo(f"{marker} {name}")


@cli.command("check")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def check_cmd(ctx: click.Context, path: Path) -> None:
    """Run the safety gate over a script file."""
    verdict = CodeValidator().validate(path.read_text(encoding="utf-8"))
    exit_code = 0 if verdict.accepted else 1

    if _get_json_mode(ctx):
        _json_emit(
            CheckOutput(
                exit_code=exit_code,
                path=str(path),
                accepted=verdict.accepted,
                reason=verdict.reason,
            )
        )
        raise click.exceptions.Exit(exit_code)

    if verdict.accepted:
        click.echo(f"Accepted: {path}")
        return
    click.echo(f"Rejected: {verdict.reason}")
    raise click.exceptions.Exit(exit_code)
