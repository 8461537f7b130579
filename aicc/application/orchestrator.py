"""Request orchestration: prompt, generate, validate, confirm, execute, record.

The orchestrator is the single owned service object holding the mutable
state of a session: selected provider, per-provider model selection, the
pending generated code and the conversation history. It performs no locking;
callers must not start a second generate/execute while one is in flight.
"""

import logging
import warnings
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from aicc.application.config_models import ControllerConfig
from aicc.application.llm_client import LLMClient
from aicc.application.prompt_builder import build_prompt
from aicc.domain.confirmation.confirmer import Confirmer
from aicc.domain.constants import DEFAULT_PROVIDER_ID, ERROR_PREFIX, SUCCESS_MESSAGE
from aicc.domain.errors import LaunchFailure, ProviderError, UnsafeCode
from aicc.domain.events.emitter import ControllerEventEmitter
from aicc.domain.events.event import ControllerEvent
from aicc.domain.events.event_types import ControllerEventType
from aicc.domain.execution.sandbox import ExecutionSandbox
from aicc.domain.models.confirmation_result import ConfirmationResult
from aicc.domain.models.conversation import ConversationEntry
from aicc.domain.models.execution_result import ExecutionResult
from aicc.domain.models.generated_code import GeneratedCode
from aicc.domain.models.provider_config import ProviderConfig
from aicc.domain.models.validation_verdict import ValidationVerdict
from aicc.domain.persistence.conversation_store import ConversationStore
from aicc.domain.providers.catalog import DEFAULT_CATALOG, ProviderCatalog
from aicc.domain.validation.code_validator import CodeValidator

logger = logging.getLogger(__name__)


def render_display(result: ExecutionResult) -> str:
    """Reduce an execution result to the single string shown to the user.

    - exit 0, empty stdout: the success fallback message
    - exit 0: stdout verbatim
    - otherwise: "Error: " followed by stderr, or a generic exit-code message
    """
    if result.succeeded:
        return result.stdout if result.stdout else SUCCESS_MESSAGE
    detail = result.stderr or f"Process failed with exit code {result.exit_status}"
    return f"{ERROR_PREFIX}{detail}"


@dataclass
class RequestOutcome:
    """Everything one pass through the pipeline produced.

    ``result`` and ``display`` are None when the confirmation was declined.
    """

    request: str
    generated: GeneratedCode
    verdict: ValidationVerdict
    confirmation: ConfirmationResult
    result: ExecutionResult | None = None
    display: str | None = None

    @property
    def executed(self) -> bool:
        return self.result is not None


@dataclass
class Orchestrator:
    """Sequences PromptBuilder -> LLMClient -> CodeValidator -> confirmation
    -> ExecutionSandbox -> ConversationStore.

    Two-phase contract per user action: ``generate`` completes (or fails)
    before ``execute`` is called for its code.
    """

    catalog: ProviderCatalog = field(default_factory=lambda: DEFAULT_CATALOG)
    credentials: Mapping[str, str] = field(default_factory=dict)
    store: ConversationStore = field(default_factory=ConversationStore)
    validator: CodeValidator = field(default_factory=CodeValidator)
    sandbox: ExecutionSandbox = field(default_factory=ExecutionSandbox)
    client: LLMClient = field(default_factory=LLMClient)
    event_emitter: ControllerEventEmitter = field(default_factory=ControllerEventEmitter)
    selected_provider: str = DEFAULT_PROVIDER_ID
    models: dict[str, str] = field(default_factory=dict)
    timeouts: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.catalog.lookup(self.selected_provider)
        self._pending: tuple[str, GeneratedCode] | None = None

    @classmethod
    def from_config(
        cls,
        config: ControllerConfig,
        credentials: Mapping[str, str],
        *,
        catalog: ProviderCatalog = DEFAULT_CATALOG,
        **overrides: Any,
    ) -> "Orchestrator":
        """Build an orchestrator from loaded configuration.

        Unknown provider ids in per-provider maps are warned about and ignored;
        an unknown selected provider raises UnknownProvider.
        """
        unknown = config.unknown_provider_keys(catalog.list_providers())
        if unknown:
            warnings.warn(
                f"Unknown provider ids in config ignored: {unknown}",
                UserWarning,
                stacklevel=2,
            )

        known = set(catalog.list_providers())
        kwargs: dict[str, Any] = {
            "catalog": catalog,
            "credentials": dict(credentials),
            "sandbox": ExecutionSandbox(
                interpreter=config.interpreter,
                working_dir=config.working_dir,
            ),
            "selected_provider": config.provider,
            "models": {k: v for k, v in config.models.items() if k in known},
            "timeouts": {k: v for k, v in config.timeouts.items() if k in known},
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    # ========================================================================
    # Provider and model selection
    # ========================================================================

    def provider(self, provider_id: str | None = None) -> ProviderConfig:
        """Catalog entry for ``provider_id`` (default: the selected provider)."""
        return self.catalog.lookup(provider_id or self.selected_provider)

    def select_provider(self, provider_id: str) -> ProviderConfig:
        """Make ``provider_id`` the provider used when none is given.

        Raises:
            UnknownProvider: If the id is not in the catalog
        """
        provider = self.catalog.lookup(provider_id)
        self.selected_provider = provider.id
        self._emit(ControllerEventType.PROVIDER_SELECTED, provider_id=provider.id)
        return provider

    def current_model(self, provider_id: str | None = None) -> str:
        provider = self.provider(provider_id)
        return self.models.get(provider.id) or provider.default_model

    def set_model(self, provider_id: str, model: str) -> None:
        provider = self.catalog.lookup(provider_id)
        if not model.strip():
            raise ValueError("model must not be empty")
        self.models[provider.id] = model.strip()

    def credential_for(self, provider_id: str | None = None) -> str | None:
        provider = self.provider(provider_id)
        if not provider.requires_credential:
            return None
        return self.credentials.get(provider.id)

    def is_connected(self, provider_id: str | None = None) -> bool:
        """True when the provider needs no credential or has a non-empty one."""
        provider = self.provider(provider_id)
        if not provider.requires_credential:
            return True
        credential = self.credentials.get(provider.id)
        return bool(credential and credential.strip())

    async def refresh_models(self, provider_id: str | None = None) -> list[str]:
        """List the provider's models and keep the selection valid.

        If the selected model is missing from a non-empty listing, the first
        listed model becomes the selection. A failed listing is logged and
        yields an empty list.
        """
        provider = self.provider(provider_id)
        try:
            models = await self.client.list_models(provider)
        except ProviderError as e:
            logger.warning(f"Failed to list models for {provider.id}: {e}")
            return []

        if models and self.current_model(provider.id) not in models:
            logger.info(f"Model {self.current_model(provider.id)} unavailable, using {models[0]}")
            self.models[provider.id] = models[0]
        return models

    # ========================================================================
    # History
    # ========================================================================

    @property
    def history(self) -> tuple[ConversationEntry, ...]:
        return self.store.snapshot()

    def clear_history(self) -> None:
        self.store.clear()
        self._emit(ControllerEventType.HISTORY_CLEARED)

    # ========================================================================
    # Pipeline
    # ========================================================================

    @property
    def pending(self) -> GeneratedCode | None:
        """Code from the last generate() not yet executed or discarded."""
        return self._pending[1] if self._pending else None

    def discard(self) -> None:
        self._pending = None

    async def generate(
        self,
        request: str,
        provider_id: str | None = None,
        credential: str | None = None,
    ) -> GeneratedCode:
        """Build the prompt for ``request`` and ask the provider for code.

        Args:
            request: Natural-language instruction
            provider_id: Provider to use (default: the selected provider)
            credential: Explicit credential (default: from the credential map)

        Raises:
            ValueError: If the request is blank
            UnknownProvider, MissingCredential, TransportFailure,
            MalformedResponse, Timeout: Generation failed; nothing is retried
        """
        request = request.strip()
        if not request:
            raise ValueError("Request must not be empty")

        provider = self.provider(provider_id)
        if credential is None:
            credential = self.credential_for(provider.id)
        model = self.current_model(provider.id)

        prompt = build_prompt(request, self.store.snapshot(), provider.prompt_class)
        generated = await self.client.generate(
            provider,
            prompt,
            credential,
            model=model,
            timeout=self.timeouts.get(provider.id),
        )

        self._pending = (request, generated)
        self._emit(ControllerEventType.CODE_GENERATED, provider_id=provider.id, model=model)
        return generated

    def validate(self, generated: GeneratedCode) -> ValidationVerdict:
        """Run the safety gate over generated code."""
        verdict = self.validator.validate(generated.code)
        if not verdict.accepted:
            self._emit(ControllerEventType.CODE_REJECTED, reason=verdict.reason)
        return verdict

    async def execute(self, generated: GeneratedCode, request: str | None = None) -> ExecutionResult:
        """Run confirmed code and record exactly one history entry.

        The code is validated again; rejected code never reaches the sandbox.
        A non-zero exit is returned, not raised, and still recorded.

        Args:
            generated: Code to run
            request: Request that produced it (default: the pending request)

        Raises:
            UnsafeCode: The safety gate rejects the code
            LaunchFailure: The interpreter could not be started (the failure
                is recorded in history before re-raising)
        """
        verdict = self.validate(generated)
        if not verdict.accepted:
            raise UnsafeCode(verdict.reason or "")

        if request is None:
            request = self._pending[0] if self._pending else ""
        self._pending = None

        try:
            result = await self.sandbox.execute(generated.code)
        except LaunchFailure as e:
            self._record(request, generated, f"{ERROR_PREFIX}{e}")
            self._emit(ControllerEventType.EXECUTION_FAILED, reason=str(e))
            raise

        self._record(request, generated, render_display(result))
        self._emit(ControllerEventType.EXECUTION_COMPLETED, exit_status=result.exit_status)
        return result

    async def process(
        self,
        request: str,
        confirmer: Confirmer,
        provider_id: str | None = None,
    ) -> RequestOutcome:
        """Run the full pipeline for one request.

        Raises:
            UnsafeCode: The validator rejected the generated code; the
                confirmer is not consulted and nothing is executed
            ProviderError, LaunchFailure: As raised by generate()/execute()
        """
        generated = await self.generate(request, provider_id)
        request = request.strip()

        verdict = self.validate(generated)
        if not verdict.accepted:
            self.discard()
            raise UnsafeCode(verdict.reason or "")

        confirmation = confirmer.confirm(request=request, generated=generated, verdict=verdict)
        if not confirmation.confirmed:
            self.discard()
            return RequestOutcome(
                request=request,
                generated=generated,
                verdict=verdict,
                confirmation=confirmation,
            )

        result = await self.execute(generated, request=request)
        return RequestOutcome(
            request=request,
            generated=generated,
            verdict=verdict,
            confirmation=confirmation,
            result=result,
            display=render_display(result),
        )

    def _record(self, request: str, generated: GeneratedCode, display: str) -> None:
        self.store.append(
            ConversationEntry(
                user_request=request,
                generated_code=generated.code,
                execution_result=display,
            )
        )

    def _emit(self, event_type: ControllerEventType, **kwargs: Any) -> None:
        self.event_emitter.emit(
            ControllerEvent(
                event_type=event_type,
                timestamp=datetime.now(timezone.utc),
                **kwargs,
            )
        )
