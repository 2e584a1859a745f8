"""
Wire adapters for model providers.

This package collects base types and errors in `base.py` and the two
concrete protocol adapters: OpenAI-compatible (OpenAI, OpenRouter) and
Anthropic-compatible. Supporting another protocol means adding a module
that subclasses `WireAdapter`.
"""

__all__ = [
    "base",
    "openai_adapter",
    "anthropic_adapter",
]
