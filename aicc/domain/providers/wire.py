"""Per-provider wire transforms.

Each provider is a tagged variant: its ``ProviderConfig`` names an auth scheme,
a request shape and a response shape, and the tables below map each tag to a
pure transform function. Adding a backend means adding a catalog entry, and a
table entry only when it introduces a new shape.
"""

import re
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from aicc.domain.constants import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, DEFAULT_TOP_P
from aicc.domain.errors import MalformedResponse
from aicc.domain.models.provider_config import (
    AuthScheme,
    ProviderConfig,
    RequestShape,
    ResponseShape,
)

FENCE = "```"

# Opening fence naming the scripting language, e.g. ```python or ```py
_LANGUAGE_FENCE = re.compile(r"```(?:python3?|py)\b", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------


class _ChatMessage(BaseModel):
    content: str | None = None


class _ChatChoice(BaseModel):
    message: _ChatMessage


class ChatCompletionEnvelope(BaseModel):
    """{choices: [{message: {content}}]}"""

    choices: list[_ChatChoice]


class _ContentBlock(BaseModel):
    text: str | None = None


class MessagesEnvelope(BaseModel):
    """{content: [{text}]}"""

    content: list[_ContentBlock]


class GenerateEnvelope(BaseModel):
    """{response}"""

    response: str | None = None


class _ModelTag(BaseModel):
    name: str


class ModelTagsEnvelope(BaseModel):
    """{models: [{name}]} returned by the local model-listing endpoint."""

    models: list[_ModelTag]


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------


def _bearer_headers(provider: ProviderConfig, credential: str | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {credential or ''}"}


def _api_key_headers(provider: ProviderConfig, credential: str | None) -> dict[str, str]:
    headers = {"x-api-key": credential or ""}
    if provider.protocol_version:
        headers["anthropic-version"] = provider.protocol_version
    return headers


def _no_auth_headers(provider: ProviderConfig, credential: str | None) -> dict[str, str]:
    return {}


HEADER_BUILDERS: dict[AuthScheme, Callable[[ProviderConfig, str | None], dict[str, str]]] = {
    AuthScheme.BEARER_HEADER: _bearer_headers,
    AuthScheme.API_KEY_HEADER: _api_key_headers,
    AuthScheme.NONE: _no_auth_headers,
}


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


def _chat_messages_body(model: str, prompt: str) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": DEFAULT_TEMPERATURE,
        "max_tokens": DEFAULT_MAX_TOKENS,
    }


def _anthropic_messages_body(model: str, prompt: str) -> dict[str, Any]:
    return {
        "model": model,
        "max_tokens": DEFAULT_MAX_TOKENS,
        "messages": [{"role": "user", "content": prompt}],
    }


def _prompt_generate_body(model: str, prompt: str) -> dict[str, Any]:
    return {
        "model": model,
        "prompt": prompt,
        "stream": False,
        "options": {
            "temperature": DEFAULT_TEMPERATURE,
            "top_p": DEFAULT_TOP_P,
            "num_predict": DEFAULT_MAX_TOKENS,
        },
    }


BODY_BUILDERS: dict[RequestShape, Callable[[str, str], dict[str, Any]]] = {
    RequestShape.CHAT_MESSAGES: _chat_messages_body,
    RequestShape.ANTHROPIC_MESSAGES: _anthropic_messages_body,
    RequestShape.PROMPT_GENERATE: _prompt_generate_body,
}


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def _validate(envelope: type[BaseModel], body: bytes | str) -> Any:
    try:
        return envelope.model_validate_json(body)
    except ValidationError as e:
        raise MalformedResponse(
            f"Response does not match {envelope.__name__}: {e.error_count()} error(s)"
        ) from e


def _parse_choices(body: bytes | str) -> str | None:
    envelope: ChatCompletionEnvelope = _validate(ChatCompletionEnvelope, body)
    if not envelope.choices:
        return None
    return envelope.choices[0].message.content


def _parse_content_blocks(body: bytes | str) -> str | None:
    envelope: MessagesEnvelope = _validate(MessagesEnvelope, body)
    if not envelope.content:
        return None
    return envelope.content[0].text


def _parse_generate(body: bytes | str) -> str | None:
    envelope: GenerateEnvelope = _validate(GenerateEnvelope, body)
    return envelope.response


RESPONSE_PARSERS: dict[ResponseShape, Callable[[bytes | str], str | None]] = {
    ResponseShape.CHOICES: _parse_choices,
    ResponseShape.CONTENT_BLOCKS: _parse_content_blocks,
    ResponseShape.GENERATE: _parse_generate,
}


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def build_headers(provider: ProviderConfig, credential: str | None) -> dict[str, str]:
    """Auth headers for ``provider``; the JSON content type is added by the client."""
    return HEADER_BUILDERS[provider.auth_scheme](provider, credential)


def build_body(provider: ProviderConfig, model: str, prompt: str) -> dict[str, Any]:
    return BODY_BUILDERS[provider.request_shape](model, prompt)


def extract_content(provider: ProviderConfig, body: bytes | str) -> str:
    """Reduce a provider envelope to its canonical content string.

    Raises:
        MalformedResponse: If the body does not parse into the declared
            envelope, or the content field is absent or blank
    """
    content = RESPONSE_PARSERS[provider.response_shape](body)
    if content is None or not content.strip():
        raise MalformedResponse(f"'{provider.id}' response has no content")
    return content


def parse_model_tags(body: bytes | str) -> list[str]:
    envelope: ModelTagsEnvelope = _validate(ModelTagsEnvelope, body)
    return [tag.name for tag in envelope.models]


def strip_code_fences(content: str) -> str:
    """Remove markdown code fences around generated code.

    Strips surrounding whitespace, drops every opening fence that names the
    language and every remaining bare fence, then trims again. No fence
    survives one pass, so the function is idempotent.
    """
    text = content.strip()
    text = _LANGUAGE_FENCE.sub("", text)
    text = text.replace(FENCE, "")
    return text.strip()
