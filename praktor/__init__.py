"""
Praktor package root.

This package provides configuration loading and provider resolution,
the core agent loop with its conversation store and inference client,
the wire adapters for each provider protocol, the local tools, and the
terminal console.
"""

__all__ = [
    "config",
    "console",
    "core",
    "models",
    "tools",
]
