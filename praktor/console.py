"""
Terminal input and output for the chat session.

Reads one user message per line and prints assistant replies and tool
notices with colored labels.
"""

import sys
from typing import Optional, TextIO

BLUE = "\u001b[94m"
YELLOW = "\u001b[93m"
GREEN = "\u001b[92m"
RED = "\u001b[91m"
RESET = "\u001b[0m"


class Console:
    """
    Line-oriented terminal surface.

    `color=False` drops the ANSI escapes, which is what tests and
    non-TTY output want.
    """

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        color: Optional[bool] = None,
    ) -> None:
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        if color is None:
            color = hasattr(self.stdout, "isatty") and self.stdout.isatty()
        self.color = color

    def _label(self, text: str, color: str) -> str:
        if not self.color:
            return text
        return f"{color}{text}{RESET}"

    def _write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def banner(self, provider_name: str) -> None:
        self._write(f"Chat with Praktor powered by {provider_name} (use 'ctrl-c' to quit)\n")

    def read_user_message(self) -> Optional[str]:
        """Prompt for and return one line, or None at end of input."""
        self._write(f"{self._label('You', BLUE)}: ")
        line = self.stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def assistant(self, text: str) -> None:
        self._write(f"{self._label('Praktor', YELLOW)}: {text}\n")

    def tool_call(self, name: str, arguments: str) -> None:
        self._write(f"{self._label('tool', GREEN)}: {name}({arguments})\n")

    def error(self, message: str) -> None:
        self._write(f"{self._label('Error', RED)}: {message}\n")

    def notice(self, message: str) -> None:
        self._write(f"{message}\n")
