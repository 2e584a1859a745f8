import io
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from praktor.console import Console  # noqa: E402
from praktor.core.conversation import Message  # noqa: E402
from praktor.models.base import ANTHROPIC, OPENAI, InferenceResult, ProviderConfig  # noqa: E402
from praktor.tools.base import ToolRegistry  # noqa: E402
from praktor.tools.files import EditFileTool, ListFilesTool, ReadFileTool  # noqa: E402

_NO_JSON = object()


class DummyResponse:
    """Stands in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = _NO_JSON, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is _NO_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class DummySession:
    """
    Minimal mock for requests.Session that supports session.post(...).

    Queued items are returned in order; exceptions are raised instead.
    """

    def __init__(self, *responses: Any) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, data: bytes = b"", headers: Optional[Dict[str, str]] = None, timeout: Any = None):
        self.calls.append({"url": url, "data": data, "headers": headers or {}, "timeout": timeout})
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class ScriptedClient:
    """Inference client double returning queued results and recording each request."""

    def __init__(self, *results: Any) -> None:
        self._results = list(results)
        self.requests: List[List[Message]] = []

    def complete(self, messages: Sequence[Message]) -> InferenceResult:
        self.requests.append(list(messages))
        item = self._results.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def scripted_lines(*lines: str):
    """Line source yielding the given lines, then end of input."""
    remaining = list(lines)

    def get_user_message() -> Optional[str]:
        return remaining.pop(0) if remaining else None

    return get_user_message


@pytest.fixture
def openai_config() -> ProviderConfig:
    return ProviderConfig(
        name="OpenRouter",
        url="https://openrouter.test/api/v1/chat/completions",
        api_key="or-key",
        model="anthropic/claude-sonnet-4.5",
        wire_format=OPENAI,
        headers={"X-Title": "Praktor"},
    )


@pytest.fixture
def anthropic_config() -> ProviderConfig:
    return ProviderConfig(
        name="Anthropic",
        url="https://anthropic.test/v1/messages",
        api_key="ant-key",
        model="claude-sonnet-4-5",
        wire_format=ANTHROPIC,
    )


@pytest.fixture
def file_tools(tmp_path: Path) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register_tool(ReadFileTool(root_dir=str(tmp_path)))
    registry.register_tool(ListFilesTool(root_dir=str(tmp_path)))
    registry.register_tool(EditFileTool(root_dir=str(tmp_path)))
    return registry


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(console_output: io.StringIO) -> Console:
    return Console(stdin=io.StringIO(""), stdout=console_output, color=False)
