from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from praktor.config import ConfigError, load_app_config, max_tokens, resolve_provider, section
from praktor.console import Console
from praktor.core.agent import Agent
from praktor.core.dispatcher import ToolDispatcher
from praktor.core.inference import DEFAULT_MAX_TOKENS, InferenceClient, select_adapter
from praktor.core.prompts import PromptManager
from praktor.models.base import ProviderConfig, ProviderError
from praktor.tools.base import ToolRegistry
from praktor.tools.files import EditFileTool, ListFilesTool, ReadFileTool

DEFAULT_CONFIG_PATH = "config.yaml"
LOG_LEVEL_ENV = "PRAKTOR_LOG_LEVEL"

logger = logging.getLogger("praktor")


# --------------------------------------------------------------------------------------
# Builders
# --------------------------------------------------------------------------------------


def build_tool_registry(cfg: Dict[str, Any]) -> ToolRegistry:
    """
    Build the registry holding the three file tools.

    The tool set is fixed; the `tools:` section only supplies the root
    directory that relative paths are resolved against.
    """
    tools_cfg = section(cfg, "tools")
    registry = ToolRegistry()
    registry.register_tool(ReadFileTool.from_config(tools_cfg))
    registry.register_tool(ListFilesTool.from_config(tools_cfg))
    registry.register_tool(EditFileTool.from_config(tools_cfg))
    return registry


def build_agent(
    cfg: Dict[str, Any],
    provider: ProviderConfig,
    console: Console,
    session: Any = None,
) -> Agent:
    """
    Wire the inference client, dispatcher and loop for the resolved provider.
    """
    tools = build_tool_registry(cfg)
    prompts = PromptManager(section(cfg, "prompts"))
    client = InferenceClient(
        adapter=select_adapter(provider),
        tools=tools,
        max_tokens=max_tokens(cfg, DEFAULT_MAX_TOKENS),
        system_prompt=prompts.get_system_prompt(),
        session=session,
    )
    return Agent(client=client, dispatcher=ToolDispatcher(tools), console=console)


def configure_logging(cfg: Dict[str, Any]) -> None:
    """
    Send log records to stderr so they do not interleave with the chat.
    """
    level_name = os.getenv(LOG_LEVEL_ENV) or section(cfg, "logging").get("level") or "WARNING"
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """
    Load the YAML config given on the command line, or `config.yaml` if present.
    """
    if path:
        return load_app_config(path)
    if os.path.exists(DEFAULT_CONFIG_PATH):
        return load_app_config(DEFAULT_CONFIG_PATH)
    return {}


# --------------------------------------------------------------------------------------
# CLI
# --------------------------------------------------------------------------------------


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Terminal chat agent that can read, list and edit local files."
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to a YAML config file (default: {DEFAULT_CONFIG_PATH} if present).",
    )
    return parser.parse_args(argv)


# --------------------------------------------------------------------------------------
# main()
# --------------------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    # Load environment variables from .env (if present)
    load_dotenv()

    args = parse_args(sys.argv[1:] if argv is None else argv)
    console = Console()

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ConfigError) as exc:
        console.error(str(exc))
        return 1

    configure_logging(config)

    try:
        provider = resolve_provider(config)
        agent = build_agent(config, provider, console)
    except ConfigError as exc:
        console.error(str(exc))
        return 1

    logger.info("Using %s at %s (model %s)", provider.name, provider.url, provider.model)
    console.banner(provider.name)

    try:
        agent.run()
    except ProviderError as exc:
        console.error(str(exc))
    except KeyboardInterrupt:
        console.notice("\n[Session interrupted by user, exiting chat]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
