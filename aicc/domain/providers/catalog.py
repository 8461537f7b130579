"""Static table of the supported LLM backends."""

from types import MappingProxyType
from typing import Iterable

from aicc.domain.constants import LOCAL_REQUEST_TIMEOUT
from aicc.domain.errors import UnknownProvider
from aicc.domain.models.provider_config import (
    AuthScheme,
    PromptClass,
    ProviderConfig,
    RequestShape,
    ResponseShape,
)

# Groq exposes no discovery endpoint we rely on; these ids are known to work.
GROQ_MODELS = (
    "openai/gpt-oss-20b",
    "llama3-8b-8192",
    "llama3-70b-8192",
    "mixtral-8x7b-32768",
    "gemma2-9b-it",
    "llama2-70b-4096",
)

BUILTIN_PROVIDERS: tuple[ProviderConfig, ...] = (
    ProviderConfig(
        id="deepseek",
        display_name="DeepSeek",
        endpoint_url="https://api.deepseek.com/v1/chat/completions",
        auth_scheme=AuthScheme.BEARER_HEADER,
        request_shape=RequestShape.CHAT_MESSAGES,
        response_shape=ResponseShape.CHOICES,
        default_model="deepseek-chat",
        credential_env="DEEPSEEK_API_KEY",
    ),
    ProviderConfig(
        id="openai",
        display_name="OpenAI",
        endpoint_url="https://api.openai.com/v1/chat/completions",
        auth_scheme=AuthScheme.BEARER_HEADER,
        request_shape=RequestShape.CHAT_MESSAGES,
        response_shape=ResponseShape.CHOICES,
        default_model="gpt-4",
        credential_env="OPENAI_API_KEY",
    ),
    ProviderConfig(
        id="anthropic",
        display_name="Anthropic Claude",
        endpoint_url="https://api.anthropic.com/v1/messages",
        auth_scheme=AuthScheme.API_KEY_HEADER,
        request_shape=RequestShape.ANTHROPIC_MESSAGES,
        response_shape=ResponseShape.CONTENT_BLOCKS,
        default_model="claude-3-sonnet-20240229",
        protocol_version="2023-06-01",
        credential_env="ANTHROPIC_API_KEY",
    ),
    ProviderConfig(
        id="groq",
        display_name="Groq",
        endpoint_url="https://api.groq.com/openai/v1/chat/completions",
        auth_scheme=AuthScheme.BEARER_HEADER,
        request_shape=RequestShape.CHAT_MESSAGES,
        response_shape=ResponseShape.CHOICES,
        default_model="openai/gpt-oss-20b",
        credential_env="GROQ_API_KEY",
        known_models=GROQ_MODELS,
    ),
    ProviderConfig(
        id="ollama",
        display_name="Ollama (Local)",
        endpoint_url="http://localhost:11434/api/generate",
        auth_scheme=AuthScheme.NONE,
        request_shape=RequestShape.PROMPT_GENERATE,
        response_shape=ResponseShape.GENERATE,
        prompt_class=PromptClass.RESOURCE_CONSTRAINED,
        default_model="llama3.2:3b",
        requires_credential=False,
        request_timeout=LOCAL_REQUEST_TIMEOUT,
        models_url="http://localhost:11434/api/tags",
    ),
)


class ProviderCatalog:
    """Read-only lookup of provider definitions by id.

    The table is fixed at construction; entries are frozen models, so the
    catalog is safe to share between concurrent readers.
    """

    def __init__(self, providers: Iterable[ProviderConfig] = BUILTIN_PROVIDERS) -> None:
        table: dict[str, ProviderConfig] = {}
        for provider in providers:
            if provider.id in table:
                raise ValueError(f"Duplicate provider id: {provider.id!r}")
            table[provider.id] = provider
        self._providers = MappingProxyType(table)

    def lookup(self, provider_id: str) -> ProviderConfig:
        """Return the definition for ``provider_id``.

        Raises:
            UnknownProvider: If the id is not in the table
        """
        try:
            return self._providers[provider_id]
        except KeyError:
            raise UnknownProvider(provider_id, self.list_providers()) from None

    def list_providers(self) -> list[str]:
        """Provider ids in table order."""
        return list(self._providers.keys())

    def all(self) -> list[ProviderConfig]:
        return list(self._providers.values())

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __len__(self) -> int:
        return len(self._providers)


DEFAULT_CATALOG = ProviderCatalog()
