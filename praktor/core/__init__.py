"""
Core logic for the agent.

This subpackage provides the conversation store, the inference client
that talks to the selected provider, the tool dispatcher, the agent
loop that coordinates them, and prompt management.
"""

__all__ = [
    "agent",
    "conversation",
    "dispatcher",
    "inference",
    "prompts",
]
