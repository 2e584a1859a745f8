"""
Anthropic-compatible wire adapter.

Speaks the Messages API. This protocol has no tool role, so the
normalized conversation is reshaped on the way out: tool results
become user messages holding a `tool_result` block, and assistant
messages with tool calls become a list of `text` and `tool_use`
blocks. Responses are content-block lists that are folded back into
text plus tool calls.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from praktor.core.conversation import ASSISTANT, TOOL, Message, ToolCall
from praktor.models.base import (
    ANTHROPIC,
    InferenceResult,
    ProviderReportedError,
    RequestEncodingError,
    ResponseDecodingError,
    WireAdapter,
)
from praktor.tools.base import Tool

logger = logging.getLogger(__name__)


class AnthropicAdapter(WireAdapter):
    """
    AnthropicAdapter builds Messages API requests and reads their responses.
    """

    wire_format = ANTHROPIC

    def headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.config.api_key,
            "anthropic-version": self.config.anthropic_version,
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
        payload: Dict[str, Any] = {
            "model": self.config.model,
            "messages": [self._convert_message(m) for m in messages],
        }
        if system:
            payload["system"] = system
        if tools:
            payload["tools"] = [
                {
                    "name": tool.name,
                    "description": tool.description,
                    "input_schema": tool.input_schema,
                }
                for tool in tools
            ]
        payload["max_tokens"] = max_tokens
        return payload

    def _convert_message(self, message: Message) -> Dict[str, Any]:
        if message.role == TOOL:
            return {
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": message.tool_call_id,
                        "content": message.content,
                    }
                ],
            }

        if message.role == ASSISTANT and message.tool_calls:
            blocks: List[Dict[str, Any]] = []
            # The Messages API rejects empty text blocks.
            if message.content:
                blocks.append({"type": "text", "text": message.content})
            for call in message.tool_calls:
                blocks.append(
                    {
                        "type": "tool_use",
                        "id": call.id,
                        "name": call.name,
                        "input": self._decode_arguments(call),
                    }
                )
            return {"role": ASSISTANT, "content": blocks}

        return {"role": message.role, "content": message.content}

    @staticmethod
    def _decode_arguments(call: ToolCall) -> Any:
        if not call.arguments:
            return {}
        try:
            return json.loads(call.arguments)
        except json.JSONDecodeError as exc:
            raise RequestEncodingError(
                f"Tool call {call.id!r} has arguments that are not valid JSON: {exc}"
            ) from exc

    def parse_response(self, data: Dict[str, Any]) -> InferenceResult:
        error = data.get("error")
        if error:
            raise ProviderReportedError(self.error_message(error), error=error)

        content = data.get("content")
        if content is None:
            content = []
        if not isinstance(content, list):
            raise ResponseDecodingError("Response 'content' is not a list of blocks.")

        parts: List[str] = []
        tool_calls: List[ToolCall] = []
        try:
            for block in content:
                block_type = block.get("type")
                if block_type == "text":
                    parts.append(block.get("text") or "")
                elif block_type == "tool_use":
                    tool_calls.append(
                        ToolCall(
                            id=block["id"],
                            name=block["name"],
                            arguments=json.dumps(block.get("input") or {}),
                        )
                    )
                else:
                    logger.debug("Ignoring content block of type %r", block_type)
        except (KeyError, TypeError, AttributeError) as exc:
            raise ResponseDecodingError(f"Malformed content block: {exc!r}") from exc
        self.check_tool_call_ids(tool_calls)

        text = "".join(parts)
        logger.debug("Anthropic response: %d chars, %d tool call(s)", len(text), len(tool_calls))
        return InferenceResult(text=text, tool_calls=tool_calls, raw=data)
