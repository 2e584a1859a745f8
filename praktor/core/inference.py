"""
Inference client.

Issues one blocking HTTP request per turn. The selected wire adapter
turns the conversation into the request body and the response body
back into an `InferenceResult`; this module owns the transport and
classifies every failure into a `ProviderError` subclass.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Sequence, Type

import requests

from praktor.core.conversation import Message
from praktor.models.anthropic_adapter import AnthropicAdapter
from praktor.models.base import (
    HTTPStatusError,
    InferenceResult,
    ProviderConfig,
    ProviderError,
    RequestEncodingError,
    ResponseDecodingError,
    TransportError,
    WireAdapter,
)
from praktor.models.openai_adapter import OpenAIAdapter
from praktor.tools.base import ToolRegistry

logger = logging.getLogger(__name__)

ADAPTERS: Dict[str, Type[WireAdapter]] = {
    OpenAIAdapter.wire_format: OpenAIAdapter,
    AnthropicAdapter.wire_format: AnthropicAdapter,
}

DEFAULT_MAX_TOKENS = 4096


def select_adapter(config: ProviderConfig) -> WireAdapter:
    """
    Instantiate the wire adapter matching the provider's wire format.

    Raises:
        ProviderError: If no adapter handles the wire format.
    """
    adapter_cls = ADAPTERS.get(config.wire_format)
    if adapter_cls is None:
        raise ProviderError(f"Unsupported wire format '{config.wire_format}'.")
    return adapter_cls(config)


class InferenceClient:
    """
    Sends the conversation to the configured provider and normalizes the reply.
    """

    def __init__(
        self,
        adapter: WireAdapter,
        tools: ToolRegistry,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        system_prompt: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.adapter = adapter
        self.tools = tools
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt
        self.session = session or requests.Session()

    @property
    def config(self) -> ProviderConfig:
        return self.adapter.config

    def complete(self, messages: Sequence[Message]) -> InferenceResult:
        """
        Run one inference step over the full conversation.

        Args:
            messages: The conversation so far, in append order.

        Returns:
            The normalized text and tool calls of the model's reply.

        Raises:
            ProviderError: On any encoding, transport, status, decoding
                or provider-reported failure.
        """
        payload = self.adapter.build_request(
            messages,
            self.tools.list_tools(),
            max_tokens=self.max_tokens,
            system=self.system_prompt,
        )
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as exc:
            raise RequestEncodingError(f"Could not serialize request: {exc}") from exc

        logger.debug(
            "POST %s (%s, %d messages)", self.config.url, self.config.model, len(messages)
        )
        try:
            resp = self.session.post(
                self.config.url,
                data=body.encode("utf-8"),
                headers=self.adapter.headers(),
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Request to {self.config.url} failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise HTTPStatusError(resp.status_code, resp.text)

        data = self._decode(resp)
        return self.adapter.parse_response(data)

    @staticmethod
    def _decode(resp: Any) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as exc:
            raise ResponseDecodingError(f"Response is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ResponseDecodingError("Response JSON is not an object.")
        return data
