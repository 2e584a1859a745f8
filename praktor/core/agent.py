"""
Agent loop.

Defines the chat agent: a small state machine that alternates between
reading user input, asking the model for its next turn and running the
tools the model requested. While the model keeps asking for tools the
loop re-invokes inference with the tool results, without new input.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, List, Optional

from praktor.console import Console
from praktor.core.conversation import Conversation, ConversationError, Message, ToolCall
from praktor.core.dispatcher import ToolDispatcher
from praktor.core.inference import InferenceClient

logger = logging.getLogger(__name__)

LineSource = Callable[[], Optional[str]]


class AgentState(enum.Enum):
    AWAITING_USER_INPUT = "awaiting_user_input"
    INFERRING = "inferring"
    EXECUTING_TOOLS = "executing_tools"
    TERMINAL = "terminal"


class Agent:
    """
    Tool-using chat agent.

    The model answers through native tool calling:

    - A reply without tool calls ends the turn and the user is prompted
      again.
    - A reply with tool calls is recorded as one assistant message; each
      call is dispatched in order and answered with one tool message,
      then the model is asked again.

    Fatal provider errors propagate out of `run`. Tool failures never do.
    """

    def __init__(
        self,
        client: InferenceClient,
        dispatcher: ToolDispatcher,
        console: Console,
        get_user_message: Optional[LineSource] = None,
    ) -> None:
        self.client = client
        self.dispatcher = dispatcher
        self.console = console
        self.get_user_message = get_user_message or console.read_user_message
        self.conversation = Conversation()
        self.state = AgentState.AWAITING_USER_INPUT
        self._tool_calls: List[ToolCall] = []

    def run(self) -> Conversation:
        """
        Drive the loop until the line source is exhausted.

        Returns:
            The conversation accumulated during the session.

        Raises:
            ProviderError: If an inference request fails.
        """
        while self.state is not AgentState.TERMINAL:
            self.state = self.step()
        return self.conversation

    def step(self) -> AgentState:
        """Perform the work of the current state and return the next one."""
        if self.state is AgentState.AWAITING_USER_INPUT:
            return self._await_user_input()
        if self.state is AgentState.INFERRING:
            return self._infer()
        if self.state is AgentState.EXECUTING_TOOLS:
            return self._execute_tools()
        return AgentState.TERMINAL

    def _await_user_input(self) -> AgentState:
        line = self.get_user_message()
        if line is None:
            logger.debug("End of input after %d messages", len(self.conversation))
            return AgentState.TERMINAL
        self.conversation.append(Message.user(line))
        return AgentState.INFERRING

    def _infer(self) -> AgentState:
        pending = self.conversation.pending_tool_calls()
        if pending:
            raise ConversationError(f"Refusing to infer with unanswered tool calls: {pending}")

        result = self.client.complete(self.conversation.messages)

        if result.text:
            self.console.assistant(result.text)
            self.conversation.append(Message.assistant(result.text))

        if not result.tool_calls:
            return AgentState.AWAITING_USER_INPUT

        self.conversation.append(Message.assistant(result.text, result.tool_calls))
        self._tool_calls = list(result.tool_calls)
        return AgentState.EXECUTING_TOOLS

    def _execute_tools(self) -> AgentState:
        for call in self._tool_calls:
            self.console.tool_call(call.name, call.arguments)
            output = self.dispatcher.dispatch(call)
            self.conversation.append(Message.tool_result(call.id, output))
        self._tool_calls = []
        return AgentState.INFERRING
