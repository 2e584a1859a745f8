"""
OpenAI-compatible wire adapter.

Speaks the Chat Completions protocol used by OpenAI and OpenRouter.
Normalized messages map almost one to one onto the wire format: the
tool role, `tool_calls` and `tool_call_id` all exist natively.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from praktor.core.conversation import Message, ToolCall
from praktor.models.base import (
    OPENAI,
    EmptyResponseError,
    InferenceResult,
    ProviderReportedError,
    ResponseDecodingError,
    WireAdapter,
)
from praktor.tools.base import Tool

logger = logging.getLogger(__name__)


class OpenAIAdapter(WireAdapter):
    """
    OpenAIAdapter builds Chat Completions requests and reads their responses.
    """

    wire_format = OPENAI

    def headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        headers.update(self.config.headers)
        return headers

    def build_request(
        self,
        messages: Sequence[Message],
        tools: Sequence[Tool],
        max_tokens: int,
        system: Optional[str] = None,
    ) -> Dict[str, Any]:
        wire_messages: List[Dict[str, Any]] = []
        if system:
            wire_messages.append({"role": "system", "content": system})
        wire_messages.extend(self._convert_message(m) for m in messages)

        payload: Dict[str, Any] = {
            "model": self.config.model,
            "messages": wire_messages,
        }
        if tools:
            payload["tools"] = [self._convert_tool(t) for t in tools]
        if max_tokens:
            payload["max_tokens"] = max_tokens
        return payload

    @staticmethod
    def _convert_tool(tool: Tool) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": {
                    "type": "object",
                    "properties": tool.input_schema.get("properties", {}),
                },
            },
        }

    @staticmethod
    def _convert_message(message: Message) -> Dict[str, Any]:
        converted: Dict[str, Any] = {"role": message.role, "content": message.content}
        if message.tool_calls:
            converted["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": call.arguments},
                }
                for call in message.tool_calls
            ]
        if message.tool_call_id is not None:
            converted["tool_call_id"] = message.tool_call_id
        return converted

    def parse_response(self, data: Dict[str, Any]) -> InferenceResult:
        error = data.get("error")
        if error:
            raise ProviderReportedError(self.error_message(error), error=error)

        choices = data.get("choices")
        if not choices:
            raise EmptyResponseError("no choices in response")
        try:
            message = choices[0]["message"]
            text = message.get("content") or ""
            tool_calls = [
                ToolCall(
                    id=call["id"],
                    name=call["function"]["name"],
                    arguments=call["function"].get("arguments") or "",
                )
                for call in message.get("tool_calls") or []
            ]
        except (KeyError, TypeError, AttributeError) as exc:
            raise ResponseDecodingError(f"Malformed chat completion: {exc!r}") from exc
        self.check_tool_call_ids(tool_calls)

        logger.debug("OpenAI response: %d chars, %d tool call(s)", len(text), len(tool_calls))
        return InferenceResult(text=text, tool_calls=tool_calls, raw=data)
