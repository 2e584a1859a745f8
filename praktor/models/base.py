"""
Base types for wire adapters.

A wire adapter translates the normalized conversation and tool set into
the JSON request body a provider expects, and parses that provider's
JSON response back into a normalized `InferenceResult`. Concrete
adapters live in their own modules; exactly one is selected per process
from the resolved `ProviderConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from praktor.core.conversation import Message, ToolCall
from praktor.tools.base import Tool

OPENAI = "openai"
ANTHROPIC = "anthropic"


@dataclass(frozen=True)
class ProviderConfig:
    """
    Endpoint, credentials and model for the selected provider.

    Resolved once at startup and never changed afterwards.
    """

    url: str
    api_key: str
    model: str
    wire_format: str
    name: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    anthropic_version: str = "2023-06-01"
    request_timeout: Optional[float] = None


@dataclass
class InferenceResult:
    """
    Normalized response returned by adapters.

    `text` is the assistant's free text (possibly empty) and
    `tool_calls` the tools it asked for, in the order it asked. `raw`
    holds the decoded provider payload for debugging.
    """

    text: str
    tool_calls: List[ToolCall] = field(default_factory=list)
    raw: Any = None


class ProviderError(Exception):
    """Raised when an inference request cannot be completed."""


class RequestEncodingError(ProviderError):
    """The request payload could not be serialized."""


class TransportError(ProviderError):
    """The HTTP request did not produce a response."""


class HTTPStatusError(ProviderError):
    """The provider answered with a non-success status code."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error (HTTP {status_code}): {body}")


class ResponseDecodingError(ProviderError):
    """The response body was not the JSON shape the adapter expects."""


class ProviderReportedError(ProviderError):
    """The provider returned an error object in an otherwise valid response."""

    def __init__(self, message: str, error: Any = None) -> None:
        self.error = error
        super().__init__(f"API error: {message}")


class EmptyResponseError(ProviderError):
    """The response carried no choices to read."""


class WireAdapter:
    """
    Abstract base class for wire adapters.

    Subclasses implement `headers`, `build_request` and
    `parse_response` for one provider protocol.
    """

    wire_format = ""

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config

    def headers(self) -> Dict[str, str]:
        raise NotImplementedError

    def build_request(
        self,
        messages: Sequence[Message],
        tools: Sequence[Tool],
        max_tokens: int,
        system: Optional[str] = None,
    ) -> Dict[str, Any]:
        raise NotImplementedError

    def parse_response(self, data: Dict[str, Any]) -> InferenceResult:
        raise NotImplementedError

    @staticmethod
    def error_message(error: Any) -> str:
        """Pull a readable message out of a provider error object."""
        if isinstance(error, dict):
            return str(error.get("message") or error.get("type") or error)
        return str(error)

    @staticmethod
    def check_tool_call_ids(tool_calls: Sequence[ToolCall]) -> None:
        """
        Reject tool calls whose ids cannot be answered unambiguously.

        Raises:
            ResponseDecodingError: If an id is missing, empty or repeated
                within the turn.
        """
        seen = set()
        for call in tool_calls:
            if not isinstance(call.id, str) or not call.id:
                raise ResponseDecodingError(f"Tool call {call.name!r} has no id.")
            if call.id in seen:
                raise ResponseDecodingError(f"Tool call id {call.id!r} is repeated in one turn.")
            seen.add(call.id)
