"""Provider definitions: endpoint, auth scheme and wire shapes."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from aicc.domain.constants import CLOUD_REQUEST_TIMEOUT


class AuthScheme(str, Enum):
    """How the credential is attached to an outbound request."""

    BEARER_HEADER = "bearer_header"    # Authorization: Bearer <key>
    API_KEY_HEADER = "api_key_header"  # x-api-key: <key> + protocol version header
    NONE = "none"                      # No credential


class RequestShape(str, Enum):
    """Body layout of the outbound request."""

    CHAT_MESSAGES = "chat_messages"            # OpenAI-compatible chat completion
    ANTHROPIC_MESSAGES = "anthropic_messages"  # Versioned messages API
    PROMPT_GENERATE = "prompt_generate"        # Flat prompt, streaming disabled


class ResponseShape(str, Enum):
    """Envelope layout of a successful response."""

    CHOICES = "choices"                # {choices: [{message: {content}}]}
    CONTENT_BLOCKS = "content_blocks"  # {content: [{text}]}
    GENERATE = "generate"              # {response}


class PromptClass(str, Enum):
    """Prompt verbosity tier selected per provider."""

    STANDARD = "standard"
    RESOURCE_CONSTRAINED = "resource_constrained"


class ProviderConfig(BaseModel):
    """Immutable definition of one LLM backend.

    Attributes:
        id: Catalog key (e.g. "openai", "ollama")
        display_name: Human-readable provider name
        endpoint_url: URL the generation request is POSTed to
        auth_scheme: How the credential is attached
        request_shape: Request body layout
        response_shape: Response envelope layout
        prompt_class: Prompt tier used for this provider
        default_model: Model used when no selection was made
        requires_credential: Whether generate() needs a non-empty credential
        request_timeout: Seconds before the HTTP call is abandoned
        protocol_version: Value of the protocol-version header (API-key auth only)
        credential_env: Environment variable conventionally holding the key
        models_url: Model-listing side endpoint, if the provider has one
        known_models: Fixed model list for providers without discovery
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    display_name: str
    endpoint_url: str
    auth_scheme: AuthScheme
    request_shape: RequestShape
    response_shape: ResponseShape
    prompt_class: PromptClass = PromptClass.STANDARD
    default_model: str
    requires_credential: bool = True
    request_timeout: float = Field(default=CLOUD_REQUEST_TIMEOUT, gt=0)
    protocol_version: str | None = None
    credential_env: str | None = None
    models_url: str | None = None
    known_models: tuple[str, ...] = ()
