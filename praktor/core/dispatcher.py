"""
Tool dispatcher.

Resolves tool calls against the registry and runs them. Nothing raised
here reaches the agent loop: an unknown tool or a failing handler is
reported back to the model as an ordinary tool result.
"""

import logging

from praktor.core.conversation import ToolCall
from praktor.tools.base import ToolRegistry

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """
    Executes tool calls and always returns a result string.
    """

    def __init__(self, tools: ToolRegistry) -> None:
        self.tools = tools

    def dispatch(self, call: ToolCall) -> str:
        tool = self.tools.get_tool(call.name)
        if tool is None:
            logger.warning("Model requested unknown tool %r", call.name)
            return f"Error: tool '{call.name}' not found"

        logger.info("Running tool %s (call %s)", call.name, call.id)
        try:
            return tool.run(call.arguments)
        except Exception as exc:  # noqa: BLE001
            logger.info("Tool %s failed: %s", call.name, exc)
            return f"Error: {exc}"
