"""
Conversation store.

The conversation is an append-only, ordered log of normalized messages.
It is owned by the agent loop; wire adapters only read it. Appends are
validated so that every tool result answers a tool call issued by the
assistant message that opened the current batch of results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

USER = "user"
ASSISTANT = "assistant"
TOOL = "tool"

ROLES = (USER, ASSISTANT, TOOL)


class ConversationError(ValueError):
    """Raised when a message would break the conversation's ordering rules."""


@dataclass(frozen=True)
class ToolCall:
    """
    A tool invocation requested by the model.

    `arguments` is the serialized JSON text produced by the model. The
    loop never interprets it; only the tool handler does.
    """

    id: str
    name: str
    arguments: str = ""


@dataclass(frozen=True)
class Message:
    """A single normalized message."""

    role: str
    content: str = ""
    tool_calls: Tuple[ToolCall, ...] = field(default_factory=tuple)
    tool_call_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ConversationError(f"Unknown message role: {self.role!r}")
        if self.tool_calls and self.role != ASSISTANT:
            raise ConversationError("Only assistant messages may carry tool calls.")
        if (self.tool_call_id is not None) != (self.role == TOOL):
            raise ConversationError("tool_call_id is required on, and only on, tool messages.")
        # Accept lists from callers but store an immutable tuple.
        if not isinstance(self.tool_calls, tuple):
            object.__setattr__(self, "tool_calls", tuple(self.tool_calls))

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=USER, content=content)

    @classmethod
    def assistant(cls, content: str, tool_calls: Sequence[ToolCall] = ()) -> "Message":
        return cls(role=ASSISTANT, content=content, tool_calls=tuple(tool_calls))

    @classmethod
    def tool_result(cls, tool_call_id: str, content: str) -> "Message":
        return cls(role=TOOL, content=content, tool_call_id=tool_call_id)


class Conversation:
    """
    Append-only message log.

    Messages are never reordered or replaced. A tool message is accepted
    only while the most recent assistant message with tool calls still
    has an unanswered call with the same id.
    """

    def __init__(self) -> None:
        self._messages: List[Message] = []
        self._pending: List[str] = []

    def append(self, message: Message) -> None:
        if message.role == TOOL:
            if message.tool_call_id not in self._pending:
                raise ConversationError(
                    f"Tool result for unknown or already answered call {message.tool_call_id!r}."
                )
            self._pending.remove(message.tool_call_id)
        elif self._pending:
            raise ConversationError(
                f"{len(self._pending)} tool call(s) still await results: {', '.join(self._pending)}"
            )
        if message.tool_calls:
            ids = [call.id for call in message.tool_calls]
            if len(set(ids)) != len(ids):
                raise ConversationError("Tool call ids must be unique within a turn.")
            self._pending = ids
        self._messages.append(message)

    def pending_tool_calls(self) -> List[str]:
        """Ids of tool calls from the last assistant turn that have no result yet."""
        return list(self._pending)

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)
