"""
Configuration loading and provider resolution.

Optional settings are stored in a YAML file. Secrets are never read
from it: API keys come from environment variables (a `.env` file is
loaded into the environment at startup). Provider resolution combines
both into an immutable `ProviderConfig`.
"""

import os
from typing import Any, Dict, Mapping, Optional

import yaml

from praktor.models.base import ANTHROPIC, OPENAI, ProviderConfig

OPENROUTER_API_KEY_ENV = "OPENROUTER_API_KEY"
ANTHROPIC_API_KEY_ENV = "ANTHROPIC_API_KEY"
ANTHROPIC_BASE_URL_ENV = "ANTHROPIC_BASE_URL"

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_MODEL = "anthropic/claude-sonnet-4.5"
OPENROUTER_HEADERS = {
    "HTTP-Referer": "https://praktor.ai",
    "X-Title": "Praktor",
}

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_MODEL = "claude-sonnet-4-5"
ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_MESSAGES_SUFFIX = "/v1/messages"


class ConfigError(RuntimeError):
    """Raised when the configuration or credentials are unusable."""


def load_app_config(path: str) -> Dict[str, Any]:
    """
    Load the application configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A dictionary representing the configuration.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigError: If the file is not valid YAML or its top level is
            not a mapping.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Top-level configuration must be a mapping/dictionary.")

    return data


def section(cfg: Mapping[str, Any], *keys: str) -> Dict[str, Any]:
    """Return a nested mapping from the config, or an empty dict."""
    current: Any = cfg
    for key in keys:
        if not isinstance(current, Mapping):
            return {}
        current = current.get(key)
    return dict(current) if isinstance(current, Mapping) else {}


def normalize_anthropic_url(base_url: str) -> str:
    """
    Make a custom Anthropic base URL point at the messages endpoint.

    >>> normalize_anthropic_url("https://proxy.example.com/")
    'https://proxy.example.com/v1/messages'
    >>> normalize_anthropic_url("https://proxy.example.com/v1")
    'https://proxy.example.com/v1/messages'
    """
    url = base_url.strip().rstrip("/")
    if url.endswith(ANTHROPIC_MESSAGES_SUFFIX):
        return url
    if url.endswith("/v1"):
        return url + "/messages"
    return url + ANTHROPIC_MESSAGES_SUFFIX


def _timeout(provider_cfg: Mapping[str, Any]) -> Optional[float]:
    value = provider_cfg.get("request_timeout")
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"provider.request_timeout must be a number, got {value!r}") from exc


def max_tokens(cfg: Mapping[str, Any], default: int) -> int:
    """Read `agent.max_tokens`, which must be a positive integer."""
    value = section(cfg, "agent").get("max_tokens")
    if value is None:
        return default
    try:
        tokens = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"agent.max_tokens must be an integer, got {value!r}") from exc
    if tokens <= 0:
        raise ConfigError(f"agent.max_tokens must be positive, got {value!r}")
    return tokens


def resolve_provider(
    cfg: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ProviderConfig:
    """
    Decide which provider to talk to.

    An OpenRouter key wins; otherwise an Anthropic key is used, with an
    optional custom base URL.

    Args:
        cfg: The loaded YAML configuration (may be empty).
        env: Environment mapping, defaults to `os.environ`.

    Returns:
        The resolved provider configuration.

    Raises:
        ConfigError: If no supported credential is set.
    """
    cfg = cfg or {}
    env = os.environ if env is None else env
    provider_cfg = section(cfg, "provider")
    timeout = _timeout(provider_cfg)

    openrouter_key = env.get(OPENROUTER_API_KEY_ENV, "")
    if openrouter_key:
        openrouter_cfg = section(provider_cfg, "openrouter")
        headers = dict(OPENROUTER_HEADERS)
        headers.update({str(k): str(v) for k, v in section(openrouter_cfg, "headers").items()})
        return ProviderConfig(
            name="OpenRouter",
            url=openrouter_cfg.get("base_url") or OPENROUTER_URL,
            api_key=openrouter_key,
            model=openrouter_cfg.get("model") or OPENROUTER_MODEL,
            wire_format=OPENAI,
            headers=headers,
            request_timeout=timeout,
        )

    anthropic_key = env.get(ANTHROPIC_API_KEY_ENV, "")
    if anthropic_key:
        anthropic_cfg = section(provider_cfg, "anthropic")
        base_url = env.get(ANTHROPIC_BASE_URL_ENV, "")
        return ProviderConfig(
            name="Anthropic",
            url=normalize_anthropic_url(base_url) if base_url else ANTHROPIC_URL,
            api_key=anthropic_key,
            model=anthropic_cfg.get("model") or ANTHROPIC_MODEL,
            wire_format=ANTHROPIC,
            anthropic_version=anthropic_cfg.get("version") or ANTHROPIC_VERSION,
            request_timeout=timeout,
        )

    raise ConfigError(
        f"No credentials found: set {OPENROUTER_API_KEY_ENV} or {ANTHROPIC_API_KEY_ENV}."
    )
