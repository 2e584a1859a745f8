"""
Base classes for tools.

Tools are simple, self-contained actions that the model can request
through native tool calls. Each tool declares a static input schema,
parses the raw JSON arguments the model produced, performs the action,
and returns a string result. Tools are registered in a `ToolRegistry`
for lookup by name.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class ToolError(Exception):
    """Raised when a tool rejects its input or cannot complete."""


@dataclass
class Tool:
    """
    Represents a tool that the agent can invoke.

    Each tool has a name, a description sent to the model, and a JSON
    schema describing its input. The `run` method must be implemented by
    subclasses to execute the tool with the raw argument text and return
    a result as a string. Failures are raised, not returned.
    """

    name: str
    description: str
    input_schema: Dict[str, Any] = field(default_factory=dict)

    def run(self, arguments: str) -> str:
        raise NotImplementedError

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "Tool":
        raise NotImplementedError

    @staticmethod
    def parse_arguments(arguments: str) -> Dict[str, Any]:
        """
        Decode the serialized arguments of a tool call.

        An empty string decodes to an empty mapping.

        Raises:
            ToolError: If the text is not a JSON object.
        """
        if not arguments or not arguments.strip():
            return {}
        try:
            parsed = json.loads(arguments)
        except json.JSONDecodeError as exc:
            raise ToolError(f"invalid arguments: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ToolError("invalid arguments: expected a JSON object")
        return parsed


class ToolRegistry:
    """
    Registers and retrieves tools by name.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, Tool] = {}

    def register_tool(self, tool: Tool) -> None:
        """Register a tool. Raises ValueError on duplicate names."""
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered.")
        self._tools[tool.name] = tool

    def get_tool(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def list_tools(self) -> List[Tool]:
        return list(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
