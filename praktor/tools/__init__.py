"""
Local tools.

Tools implement the capabilities the model may call: reading a file,
listing a directory and editing a file. Tools are registered via the
`ToolRegistry` and advertised to the model in every request.
"""

__all__ = [
    "base",
    "files",
]
