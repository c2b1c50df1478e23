"""Tests for tool descriptors and notification formatting."""

import pytest

from claude_afk.tools import (
    BashTool,
    EditTool,
    ReadTool,
    UnknownTool,
    WriteTool,
    describe,
    format_for_notification,
    truncate,
)


# ---------------------------------------------------------------------------
# describe()
# ---------------------------------------------------------------------------

class TestDescribe:
    """tool_name/tool_input -> descriptor."""

    def test_bash_with_description(self):
        d = describe("Bash", {"command": "ls -la", "description": "List files", "timeout": 5000})
        assert d == BashTool(command="ls -la", description="List files")

    def test_bash_without_description(self):
        assert describe("Bash", {"command": "npm test"}) == BashTool(command="npm test", description=None)

    def test_write_short_content_kept(self):
        d = describe("Write", {"file_path": "/a", "content": "hello"})
        assert d == WriteTool(file_path="/a", content_preview="hello")

    def test_write_content_truncated_at_100(self):
        """
        >>> describe("Write", {"file_path": "/a", "content": "x" * 101}).content_preview == "x" * 100 + "..."
        True
        """
        content = "".join(chr(ord("a") + i % 26) for i in range(101))
        d = describe("Write", {"file_path": "/a", "content": content})
        assert d.content_preview == content[:100] + "..."

    def test_write_exactly_100_not_truncated(self):
        d = describe("Write", {"file_path": "/a", "content": "y" * 100})
        assert d.content_preview == "y" * 100

    def test_write_truncation_counts_characters(self):
        d = describe("Write", {"file_path": "/a", "content": "é" * 101})
        assert d.content_preview == "é" * 100 + "..."

    def test_edit_keeps_full_strings(self):
        d = describe("Edit", {"file_path": "/f.py", "old_string": "a" * 80, "new_string": "b"})
        assert d == EditTool(file_path="/f.py", old_string="a" * 80, new_string="b")

    def test_read(self):
        assert describe("Read", {"file_path": "/etc/hosts", "limit": 10}) == ReadTool(file_path="/etc/hosts")

    def test_unknown_tool(self):
        assert describe("Mystery", {"x": 1}) == UnknownTool(tool_name="Mystery", raw_input='{"x":1}')

    @pytest.mark.parametrize("tool_name, tool_input", [
        ("Bash", {"cmd": "ls"}),
        ("Bash", {"command": 42}),
        ("Write", {"file_path": "/a"}),
        ("Edit", {"file_path": "/a", "old_string": "x"}),
        ("Read", {"path": "/a"}),
        ("Read", "not an object"),
        ("Bash", None),
        ("Bash", [1, 2, 3]),
    ])
    def test_shape_mismatch_falls_back_to_unknown(self, tool_name, tool_input):
        d = describe(tool_name, tool_input)
        assert isinstance(d, UnknownTool)
        assert d.tool_name == tool_name

    def test_unknown_raw_input_is_full_payload(self):
        d = describe("Grep", {"pattern": "z" * 500})
        assert len(d.raw_input) > 500


# ---------------------------------------------------------------------------
# format_for_notification()
# ---------------------------------------------------------------------------

class TestFormatForNotification:
    """descriptor -> (title, message)."""

    def test_bash_bare_command(self):
        assert format_for_notification(describe("Bash", {"command": "npm test"})) == ("Bash Command", "npm test")

    def test_bash_with_description(self):
        title, message = format_for_notification(BashTool("git push", "Push branch"))
        assert title == "Bash Command"
        assert message == "Push branch\n\ngit push"

    def test_write(self):
        assert format_for_notification(WriteTool("/a.txt", "hi")) == ("Write File", "/a.txt\n\nhi")

    def test_edit_short(self):
        title, message = format_for_notification(EditTool("/f.py", "old", "new"))
        assert title == "Edit File"
        assert message == "/f.py\n\n- old\n+ new"

    def test_edit_previews_truncated_at_50(self):
        _, message = format_for_notification(EditTool("/f.py", "o" * 51, "n" * 60))
        assert message == "/f.py\n\n- " + "o" * 50 + "...\n+ " + "n" * 50 + "..."

    def test_read(self):
        assert format_for_notification(ReadTool("/etc/hosts")) == ("Read File", "/etc/hosts")

    def test_unknown(self):
        assert format_for_notification(UnknownTool("Mystery", '{"x":1}')) == ("Tool: Mystery", '{"x":1}')

    def test_unknown_truncated_at_200(self):
        _, message = format_for_notification(UnknownTool("Grep", "r" * 250))
        assert message == "r" * 200 + "..."


class TestTruncate:

    def test_under_limit(self):
        assert truncate("abc", 10) == "abc"

    def test_over_limit(self):
        assert truncate("abcdef", 4) == "abcd..."

    def test_empty(self):
        assert truncate("", 5) == ""
