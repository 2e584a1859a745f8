"""
File tools for reading, listing and editing files.

Relative paths are resolved against a configured root directory, which
defaults to the process working directory. File operations are
text-based (UTF-8, newlines preserved). Failures are raised as
`ToolError` or `OSError` and turned into tool results by the dispatcher.
"""

import json
import logging
import os
from typing import Any, Dict, List

from praktor.tools.base import Tool, ToolError

logger = logging.getLogger(__name__)


def _resolve(root_dir: str, rel_path: str) -> str:
    return os.path.join(root_dir, rel_path)


class ReadFileTool(Tool):
    """
    ReadFileTool returns the contents of a text file.

    Tool input schema:
    {
        "path": "relative/path/to/file.txt"
    }
    """

    def __init__(self, root_dir: str = ".") -> None:
        super().__init__(
            name="read_file",
            description=(
                "Read the contents of a given relative file path. Use this when you "
                "want to see what's inside a file. Do not use this with directory names."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "The relative path of a file in the working directory.",
                    },
                },
            },
        )
        self.root_dir = root_dir

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "ReadFileTool":
        return cls(root_dir=cfg.get("root_dir", "."))

    def run(self, arguments: str) -> str:
        tool_input = self.parse_arguments(arguments)
        rel_path = tool_input.get("path", "")
        if not isinstance(rel_path, str) or not rel_path:
            raise ToolError("invalid arguments: 'path' is required")
        path = _resolve(self.root_dir, rel_path)
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
            return f.read()


class ListFilesTool(Tool):
    """
    ListFilesTool recursively lists the entries below a directory.

    The result is a JSON array of paths relative to the listed directory.
    Directories carry a trailing "/" and the directory itself is left out.

    Tool input schema:
    {
        "path": "optional/relative/dir"
    }
    """

    def __init__(self, root_dir: str = ".") -> None:
        super().__init__(
            name="list_files",
            description=(
                "List files and directories at a given path. If no path is provided, "
                "lists files in the current directory."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": (
                            "Optional relative path to list files from. Defaults to "
                            "current directory if not provided."
                        ),
                    },
                },
            },
        )
        self.root_dir = root_dir

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "ListFilesTool":
        return cls(root_dir=cfg.get("root_dir", "."))

    def run(self, arguments: str) -> str:
        try:
            tool_input = self.parse_arguments(arguments)
        except ToolError as exc:
            logger.warning("list_files: %s; listing the current directory", exc)
            tool_input = {}
        rel_path = tool_input.get("path") or "."
        if not isinstance(rel_path, str):
            logger.warning("list_files: ignoring non-string path %r", rel_path)
            rel_path = "."

        base = _resolve(self.root_dir, rel_path)
        if not os.path.exists(base):
            raise FileNotFoundError(f"no such directory: {rel_path}")
        if not os.path.isdir(base):
            raise NotADirectoryError(f"not a directory: {rel_path}")
        return json.dumps(self._walk(base, base))

    def _walk(self, base: str, current: str) -> List[str]:
        entries: List[str] = []
        for name in sorted(os.listdir(current)):
            full_path = os.path.join(current, name)
            rel = os.path.relpath(full_path, base).replace(os.sep, "/")
            if os.path.isdir(full_path) and not os.path.islink(full_path):
                entries.append(rel + "/")
                entries.extend(self._walk(base, full_path))
            else:
                entries.append(rel)
        return entries


class EditFileTool(Tool):
    """
    EditFileTool replaces text in a file, or creates a new file.

    Every literal occurrence of `old_str` is replaced by `new_str`. When
    the file does not exist and `old_str` is empty, the file is created
    with `new_str` as its content.

    Tool input schema:
    {
        "path": "relative/path/to/file.txt",
        "old_str": "text to replace",
        "new_str": "replacement text"
    }
    """

    def __init__(self, root_dir: str = ".") -> None:
        super().__init__(
            name="edit_file",
            description=(
                "Make edits to a text file.\n\n"
                "Replaces 'old_str' with 'new_str' in the given file. 'old_str' and "
                "'new_str' MUST be different from each other.\n\n"
                "If the file specified with path doesn't exist, it will be created.\n"
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "The path to the file",
                    },
                    "old_str": {
                        "type": "string",
                        "description": (
                            "Text to search for - must match exactly and must only "
                            "have one match exactly"
                        ),
                    },
                    "new_str": {
                        "type": "string",
                        "description": "Text to replace old_str with",
                    },
                },
            },
        )
        self.root_dir = root_dir

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "EditFileTool":
        return cls(root_dir=cfg.get("root_dir", "."))

    def run(self, arguments: str) -> str:
        tool_input = self.parse_arguments(arguments)
        rel_path = tool_input.get("path", "")
        old_str = tool_input.get("old_str", "")
        new_str = tool_input.get("new_str", "")
        if not all(isinstance(v, str) for v in (rel_path, old_str, new_str)):
            raise ToolError("invalid arguments: 'path', 'old_str' and 'new_str' must be strings")
        if not rel_path or old_str == new_str:
            raise ToolError("invalid input parameters")

        target = _resolve(self.root_dir, rel_path)
        try:
            with open(target, "r", encoding="utf-8", newline="") as f:
                old_content = f.read()
        except FileNotFoundError:
            if old_str == "":
                return self._create(target, rel_path, new_str)
            raise

        new_content = old_content.replace(old_str, new_str)
        if new_content == old_content and old_str != "":
            raise ToolError("old_str not found in file")

        with open(target, "w", encoding="utf-8", newline="") as f:
            f.write(new_content)
        logger.info("edit_file: updated %s", rel_path)
        return "OK"

    @staticmethod
    def _create(target: str, rel_path: str, content: str) -> str:
        parent = os.path.dirname(target)
        try:
            if parent:
                os.makedirs(parent, exist_ok=True)
        except OSError as exc:
            raise ToolError(f"failed to create directory: {exc}") from exc
        try:
            with open(target, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as exc:
            raise ToolError(f"failed to create file: {exc}") from exc
        logger.info("edit_file: created %s", rel_path)
        return f"Successfully created file {rel_path}"
