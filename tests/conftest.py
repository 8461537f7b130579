import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from aicc.application.llm_client import LLMClient

CREDENTIAL_ENV_VARS = (
    "DEEPSEEK_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GROQ_API_KEY",
    "AICC_DEEPSEEK_API_KEY",
    "AICC_OPENAI_API_KEY",
    "AICC_ANTHROPIC_API_KEY",
    "AICC_GROQ_API_KEY",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent tests from accidentally using developer machine credentials.

    If a test needs a key, it should set it explicitly via monkeypatch.
    """
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def home_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated home directory; Path.home() resolves here."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


def chat_reply(content: str | None) -> dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def messages_reply(text: str | None) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


def generate_reply(text: str | None) -> dict[str, Any]:
    return {"model": "llama3.2:3b", "response": text, "done": True}


class RecordingTransport:
    """Answers every request with a fixed response and remembers the requests.

    ``handler`` may be given instead of a fixed reply to compute responses.
    """

    def __init__(
        self,
        status_code: int = 200,
        payload: Any = None,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> None:
        self.status_code = status_code
        self.payload = payload
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        if isinstance(self.payload, (bytes, str)):
            return httpx.Response(self.status_code, content=self.payload)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def client(self) -> LLMClient:
        return LLMClient(transport=httpx.MockTransport(self))


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory for RecordingTransport instances."""
    return RecordingTransport


@pytest.fixture
def replies() -> dict[str, Callable[[str | None], dict[str, Any]]]:
    """Builders for each response envelope, keyed by shape."""
    return {
        "choices": chat_reply,
        "content_blocks": messages_reply,
        "generate": generate_reply,
    }
