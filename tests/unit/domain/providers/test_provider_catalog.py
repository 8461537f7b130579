import pytest

from aicc.domain.errors import UnknownProvider
from aicc.domain.models.provider_config import (
    AuthScheme,
    PromptClass,
    ProviderConfig,
    RequestShape,
    ResponseShape,
)
from aicc.domain.providers.catalog import DEFAULT_CATALOG, GROQ_MODELS, ProviderCatalog


def _provider(provider_id: str) -> ProviderConfig:
    return ProviderConfig(
        id=provider_id,
        display_name=provider_id.title(),
        endpoint_url=f"https://{provider_id}.example/v1/chat",
        auth_scheme=AuthScheme.BEARER_HEADER,
        request_shape=RequestShape.CHAT_MESSAGES,
        response_shape=ResponseShape.CHOICES,
        default_model="m-1",
    )


class TestBuiltinCatalog:
    def test_lists_five_providers_in_order(self) -> None:
        assert DEFAULT_CATALOG.list_providers() == [
            "deepseek",
            "openai",
            "anthropic",
            "groq",
            "ollama",
        ]

    def test_lookup_returns_definition(self) -> None:
        provider = DEFAULT_CATALOG.lookup("anthropic")

        assert provider.display_name == "Anthropic Claude"
        assert provider.auth_scheme == AuthScheme.API_KEY_HEADER
        assert provider.protocol_version == "2023-06-01"
        assert provider.response_shape == ResponseShape.CONTENT_BLOCKS

    def test_lookup_unknown_raises_with_available_ids(self) -> None:
        with pytest.raises(UnknownProvider) as exc_info:
            DEFAULT_CATALOG.lookup("bard")

        assert exc_info.value.provider_id == "bard"
        assert "ollama" in exc_info.value.available
        assert "bard" in str(exc_info.value)

    def test_local_provider_needs_no_credential_and_waits_longer(self) -> None:
        ollama = DEFAULT_CATALOG.lookup("ollama")

        assert ollama.requires_credential is False
        assert ollama.auth_scheme == AuthScheme.NONE
        assert ollama.prompt_class == PromptClass.RESOURCE_CONSTRAINED
        assert ollama.request_timeout == 120.0

    @pytest.mark.parametrize("provider_id", ["deepseek", "openai", "anthropic", "groq"])
    def test_cloud_providers_need_credential(self, provider_id: str) -> None:
        provider = DEFAULT_CATALOG.lookup(provider_id)

        assert provider.requires_credential is True
        assert provider.request_timeout == 30.0
        assert provider.prompt_class == PromptClass.STANDARD

    def test_groq_has_fixed_model_list(self) -> None:
        groq = DEFAULT_CATALOG.lookup("groq")

        assert groq.known_models == GROQ_MODELS
        assert groq.default_model in groq.known_models

    def test_contains_and_len(self) -> None:
        assert "openai" in DEFAULT_CATALOG
        assert "bard" not in DEFAULT_CATALOG
        assert len(DEFAULT_CATALOG) == 5


class TestCustomCatalog:
    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate provider id"):
            ProviderCatalog([_provider("a"), _provider("a")])

    def test_custom_entries_are_looked_up(self) -> None:
        catalog = ProviderCatalog([_provider("a"), _provider("b")])

        assert catalog.list_providers() == ["a", "b"]
        assert catalog.lookup("b").display_name == "B"

    def test_provider_config_is_frozen(self) -> None:
        provider = _provider("a")

        with pytest.raises(Exception):
            provider.default_model = "other"  # type: ignore[misc]

    def test_request_timeout_must_be_positive(self) -> None:
        with pytest.raises(Exception):
            ProviderConfig(
                id="a",
                display_name="A",
                endpoint_url="https://a.example",
                auth_scheme=AuthScheme.NONE,
                request_shape=RequestShape.PROMPT_GENERATE,
                response_shape=ResponseShape.GENERATE,
                default_model="m",
                request_timeout=0,
            )
