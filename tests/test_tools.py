import json
from pathlib import Path

import pytest

from praktor.tools.base import Tool, ToolError, ToolRegistry
from praktor.tools.files import EditFileTool, ListFilesTool, ReadFileTool


def args(**kwargs) -> str:
    return json.dumps(kwargs)


# ----------------------------------------------------------------------- read_file


def test_read_file_returns_contents(tmp_path: Path):
    (tmp_path / "notes.txt").write_text("line one\nline two\n", encoding="utf-8")
    tool = ReadFileTool(root_dir=str(tmp_path))
    assert tool.run(args(path="notes.txt")) == "line one\nline two\n"


def test_read_file_missing_file_raises(tmp_path: Path):
    tool = ReadFileTool(root_dir=str(tmp_path))
    with pytest.raises(FileNotFoundError):
        tool.run(args(path="nope.txt"))


def test_read_file_on_directory_raises(tmp_path: Path):
    (tmp_path / "sub").mkdir()
    tool = ReadFileTool(root_dir=str(tmp_path))
    with pytest.raises(OSError):
        tool.run(args(path="sub"))


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", "{}"])
def test_read_file_bad_arguments_are_tool_errors(tmp_path: Path, raw: str):
    tool = ReadFileTool(root_dir=str(tmp_path))
    with pytest.raises(ToolError, match="invalid arguments"):
        tool.run(raw)


# ---------------------------------------------------------------------- list_files


def test_list_files_marks_directories_and_excludes_root(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "sub").mkdir()
    tool = ListFilesTool(root_dir=str(tmp_path))
    assert json.loads(tool.run(args(path="."))) == ["a.txt", "sub/"]


def test_list_files_recurses_depth_first(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "sub" / "deep").mkdir(parents=True)
    (tmp_path / "sub" / "b.txt").write_text("b")
    (tmp_path / "z.txt").write_text("z")
    tool = ListFilesTool(root_dir=str(tmp_path))
    assert json.loads(tool.run("{}")) == ["a.txt", "sub/", "sub/b.txt", "sub/deep/", "z.txt"]


def test_list_files_paths_are_relative_to_requested_directory(tmp_path: Path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.txt").write_text("b")
    tool = ListFilesTool(root_dir=str(tmp_path))
    assert json.loads(tool.run(args(path="sub"))) == ["b.txt"]


@pytest.mark.parametrize("raw", ["", "{}", "{not json", '{"path": 7}'])
def test_list_files_defaults_to_current_directory(tmp_path: Path, raw: str):
    (tmp_path / "a.txt").write_text("a")
    tool = ListFilesTool(root_dir=str(tmp_path))
    assert json.loads(tool.run(raw)) == ["a.txt"]


def test_list_files_missing_directory_raises(tmp_path: Path):
    tool = ListFilesTool(root_dir=str(tmp_path))
    with pytest.raises(FileNotFoundError, match="no such directory: missing"):
        tool.run(args(path="missing"))


def test_list_files_on_a_file_raises(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    tool = ListFilesTool(root_dir=str(tmp_path))
    with pytest.raises(NotADirectoryError, match="not a directory: a.txt"):
        tool.run(args(path="a.txt"))


# ----------------------------------------------------------------------- edit_file


def test_edit_file_creates_file_and_parents(tmp_path: Path):
    tool = EditFileTool(root_dir=str(tmp_path))
    result = tool.run(args(path="new/dir/hello.txt", old_str="", new_str="hello"))

    assert result == "Successfully created file new/dir/hello.txt"
    assert (tmp_path / "new" / "dir" / "hello.txt").read_text() == "hello"


def test_edit_file_replaces_single_occurrence(tmp_path: Path):
    target = tmp_path / "code.py"
    target.write_text("x = foo()\nprint(x)\n")
    tool = EditFileTool(root_dir=str(tmp_path))

    assert tool.run(args(path="code.py", old_str="foo", new_str="bar")) == "OK"
    assert target.read_text() == "x = bar()\nprint(x)\n"


def test_edit_file_replaces_every_occurrence(tmp_path: Path):
    target = tmp_path / "t.txt"
    target.write_text("cat cat dog cat")
    tool = EditFileTool(root_dir=str(tmp_path))

    tool.run(args(path="t.txt", old_str="cat", new_str="owl"))
    assert target.read_text() == "owl owl dog owl"


def test_edit_file_preserves_line_endings(tmp_path: Path):
    target = tmp_path / "crlf.txt"
    target.write_bytes(b"one\r\ntwo\r\n")
    tool = EditFileTool(root_dir=str(tmp_path))

    tool.run(args(path="crlf.txt", old_str="two", new_str="2"))
    assert target.read_bytes() == b"one\r\n2\r\n"


def test_edit_file_old_str_not_found_leaves_file_untouched(tmp_path: Path):
    target = tmp_path / "keep.txt"
    original = b"some content\n"
    target.write_bytes(original)
    tool = EditFileTool(root_dir=str(tmp_path))

    with pytest.raises(ToolError, match="old_str not found"):
        tool.run(args(path="keep.txt", old_str="missing", new_str="x"))
    assert target.read_bytes() == original


@pytest.mark.parametrize("exists", [True, False])
def test_edit_file_same_strings_fail_validation(tmp_path: Path, exists: bool):
    if exists:
        (tmp_path / "same.txt").write_text("same")
    tool = EditFileTool(root_dir=str(tmp_path))

    with pytest.raises(ToolError, match="invalid input parameters"):
        tool.run(args(path="same.txt", old_str="same", new_str="same"))
    assert (tmp_path / "same.txt").exists() is exists


def test_edit_file_empty_path_fails_validation(tmp_path: Path):
    tool = EditFileTool(root_dir=str(tmp_path))
    with pytest.raises(ToolError, match="invalid input parameters"):
        tool.run(args(path="", old_str="", new_str="x"))


def test_edit_file_missing_file_with_old_str_raises(tmp_path: Path):
    tool = EditFileTool(root_dir=str(tmp_path))
    with pytest.raises(FileNotFoundError):
        tool.run(args(path="ghost.txt", old_str="a", new_str="b"))
    assert not (tmp_path / "ghost.txt").exists()


def test_edit_file_malformed_arguments_are_tool_errors(tmp_path: Path):
    tool = EditFileTool(root_dir=str(tmp_path))
    with pytest.raises(ToolError, match="invalid arguments"):
        tool.run("path=foo")


# ------------------------------------------------------------------------ registry


def test_registry_rejects_duplicate_names(tmp_path: Path):
    registry = ToolRegistry()
    registry.register_tool(ReadFileTool(root_dir=str(tmp_path)))
    with pytest.raises(ValueError, match="already registered"):
        registry.register_tool(ReadFileTool(root_dir=str(tmp_path)))
    assert len(registry) == 1


def test_registry_lookup_is_exact(file_tools: ToolRegistry):
    assert file_tools.get_tool("read_file") is not None
    assert file_tools.get_tool("READ_FILE") is None
    assert [t.name for t in file_tools.list_tools()] == ["read_file", "list_files", "edit_file"]


def test_tool_schemas_are_json_objects(file_tools: ToolRegistry):
    for tool in file_tools.list_tools():
        assert tool.input_schema["type"] == "object"
        assert "path" in tool.input_schema["properties"]


def test_parse_arguments_accepts_blank_input():
    assert Tool.parse_arguments("") == {}
    assert Tool.parse_arguments("   ") == {}
