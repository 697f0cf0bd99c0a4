"""Chat-completion client for OpenAI-compatible endpoints."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List

import requests

from ..config import Config
from ..errors import ExtractionError, ParseError, TransportError
from ..memory import Message
from ..schemas import ChatCompletionRequest, MessagePayload

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120


class CompletionBackend:
    """Abstract base class for chat-completion providers."""

    def complete(self, messages: Iterable[Message]) -> str:
        raise NotImplementedError


class OpenAICompletionClient(CompletionBackend):
    """Client that posts to ``{base_url}/chat/completions`` once per call."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        model: str,
        timeout: float | None = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "OpenAICompletionClient":
        return cls(
            base_url=config.openai_base_url,
            api_key=config.openai_api_key,
            model=config.default_model,
            **kwargs,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_payload(self, messages: Iterable[Message]) -> dict:
        request = ChatCompletionRequest(
            model=self.model,
            messages=[
                MessagePayload(role=msg.role, content=msg.content) for msg in messages
            ],
        )
        return request.model_dump()

    def complete(self, messages: Iterable[Message]) -> str:
        payload = self.build_payload(messages)
        logger.debug("Sending request to: %s", self.url)
        logger.debug("Request payload: %s", payload)
        try:
            response = requests.post(
                self.url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Failed to send request: {exc}") from exc
        logger.debug("Response status: %s", response.status_code)
        logger.debug("Response body: %s", response.text)
        try:
            data = response.json()
        except ValueError as exc:
            raise ParseError(
                f"Failed to parse JSON (HTTP {response.status_code})"
            ) from exc
        return extract_reply(data, status_code=response.status_code)


def extract_reply(data: Any, *, status_code: int | None = None) -> str:
    """Pull ``choices[0].message.content`` out of a decoded response body."""
    content = None
    choices = data.get("choices") if isinstance(data, dict) else None
    if isinstance(choices, list) and choices:
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        if isinstance(message, dict):
            content = message.get("content")
    if isinstance(content, str):
        return content
    details: List[str] = []
    if status_code is not None:
        details.append(f"HTTP {status_code}")
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        details.append(str(error["message"]))
    suffix = f" ({'; '.join(details)})" if details else ""
    raise ExtractionError(f"Failed to extract content from response{suffix}")
