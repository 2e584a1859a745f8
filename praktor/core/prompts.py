"""
Prompt management.

This module provides a simple PromptManager class that reads prompt
settings from the loaded YAML configuration. The agent relies on
native tool calling, so no system prompt is sent unless one is
configured.
"""

from typing import Dict, Optional


class PromptManager:
    """
    Store and access the optional system prompt.

    The prompt can be configured in the YAML file under `prompts.system`.
    """

    def __init__(self, prompts_cfg: Optional[Dict] = None) -> None:
        self.prompts_cfg = prompts_cfg or {}

    def get_system_prompt(self) -> Optional[str]:
        """
        Retrieve the system prompt.

        Returns:
            The configured prompt, or None when unset or blank.
        """
        prompt = self.prompts_cfg.get("system")
        if not prompt or not str(prompt).strip():
            return None
        return str(prompt)
