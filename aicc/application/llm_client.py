"""LLM client: dispatches a prompt to one provider and normalizes the reply.

Transport, auth and envelope differences live in ``aicc.domain.providers.wire``;
this module owns the HTTP exchange and the mapping of transport problems onto
the typed provider errors. Failed calls are never retried.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from aicc.domain.constants import GENERATED_DESCRIPTION, MODEL_LIST_TIMEOUT
from aicc.domain.errors import MalformedResponse, MissingCredential, Timeout, TransportFailure
from aicc.domain.models.generated_code import GeneratedCode
from aicc.domain.models.provider_config import ProviderConfig
from aicc.domain.providers.wire import (
    build_body,
    build_headers,
    extract_content,
    parse_model_tags,
    strip_code_fences,
)

logger = logging.getLogger(__name__)

_ERROR_DETAIL_LIMIT = 200


class LLMClient:
    """Sends prompts to LLM providers over HTTP.

    Args:
        http_client: Shared ``httpx.AsyncClient``; left open by this class.
            When omitted a client is opened per call.
        transport: Transport for per-call clients (tests pass
            ``httpx.MockTransport``)
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http_client = http_client
        self._transport = transport

    async def generate(
        self,
        provider: ProviderConfig,
        prompt: str,
        credential: str | None,
        *,
        model: str | None = None,
        timeout: float | None = None,
    ) -> GeneratedCode:
        """Generate code for ``prompt`` with ``provider``.

        Args:
            provider: Catalog entry of the backend to call
            prompt: Fully built prompt text
            credential: API key, ignored by providers that need none
            model: Model id (default: the provider's default model)
            timeout: Seconds override (default: the provider's request timeout)

        Returns:
            GeneratedCode with fence-stripped, trimmed code

        Raises:
            MissingCredential: Provider needs a credential and none was given;
                raised before any network activity
            TransportFailure: Non-200 status or connection failure
            MalformedResponse: Body does not match the provider's envelope,
                or carries no code
            Timeout: No answer within the timeout
        """
        credential = credential.strip() if credential else None
        if provider.requires_credential and not credential:
            raise MissingCredential(provider.id)

        model = model or provider.default_model
        timeout = timeout or provider.request_timeout
        headers = build_headers(provider, credential)
        body = build_body(provider, model, prompt)

        logger.debug(f"Using provider {provider.id} ({model}) at {provider.endpoint_url}")
        response = await self._send(
            provider, "POST", provider.endpoint_url, timeout, headers=headers, json=body
        )
        logger.debug(f"HTTP status from {provider.id}: {response.status_code}")

        if response.status_code != 200:
            raise TransportFailure(response.status_code, _error_detail(response))

        code = strip_code_fences(extract_content(provider, response.content))
        if not code:
            raise MalformedResponse(f"'{provider.id}' response contains no code")

        return GeneratedCode(
            code=code,
            description=f"{GENERATED_DESCRIPTION} ({provider.display_name}, {model})",
        )

    async def list_models(self, provider: ProviderConfig) -> list[str]:
        """Available model names for ``provider``.

        Queries the model-listing endpoint when the provider has one, returns
        the fixed list for providers without discovery, otherwise only the
        default model.

        Raises:
            TransportFailure, MalformedResponse, Timeout: Listing call failed
        """
        if provider.models_url:
            response = await self._send(provider, "GET", provider.models_url, MODEL_LIST_TIMEOUT)
            if response.status_code != 200:
                raise TransportFailure(response.status_code, _error_detail(response))
            return parse_model_tags(response.content)

        if provider.known_models:
            return list(provider.known_models)

        return [provider.default_model]

    async def _send(
        self,
        provider: ProviderConfig,
        method: str,
        url: str,
        timeout: float,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            async with self._session() as client:
                return await client.request(method, url, timeout=timeout, **kwargs)
        except httpx.TimeoutException as e:
            raise Timeout(provider.id, timeout) from e
        except httpx.TransportError as e:
            raise TransportFailure(None, str(e) or type(e).__name__) from e

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(transport=self._transport) as client:
            yield client


def _error_detail(response: httpx.Response) -> str:
    text = response.text.strip()
    if len(text) > _ERROR_DETAIL_LIMIT:
        return text[:_ERROR_DETAIL_LIMIT] + "..."
    return text
