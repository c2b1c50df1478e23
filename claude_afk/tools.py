"""Tool descriptors: what Claude Code wants to run, in phone-sized text.

Pure functions, no I/O. describe() maps a hook's tool_name/tool_input onto
a closed set of descriptor types; format_for_notification() renders one as
a (title, message) pair.

>>> format_for_notification(describe("Read", {"file_path": "/etc/hosts"}))
('Read File', '/etc/hosts')
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

WRITE_PREVIEW_CHARS = 100
EDIT_PREVIEW_CHARS = 50
UNKNOWN_PREVIEW_CHARS = 200
ELLIPSIS = "..."


def truncate(text: str, limit: int) -> str:
    """Cap text at limit characters, marking the cut with an ellipsis.

    >>> truncate("abcdef", 3)
    'abc...'
    >>> truncate("abc", 3)
    'abc'
    """
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


# --- Expected tool_input shapes ---


class _BashInput(BaseModel):
    command: str
    description: Optional[str] = None
    timeout: Optional[int] = None
    run_in_background: Optional[bool] = None


class _WriteInput(BaseModel):
    file_path: str
    content: str


class _EditInput(BaseModel):
    file_path: str
    old_string: str
    new_string: str
    replace_all: Optional[bool] = None


class _ReadInput(BaseModel):
    file_path: str
    offset: Optional[int] = None
    limit: Optional[int] = None


# --- Descriptors ---


@dataclass(frozen=True)
class BashTool:
    command: str
    description: Optional[str] = None


@dataclass(frozen=True)
class WriteTool:
    file_path: str
    content_preview: str


@dataclass(frozen=True)
class EditTool:
    file_path: str
    old_string: str
    new_string: str


@dataclass(frozen=True)
class ReadTool:
    file_path: str


@dataclass(frozen=True)
class UnknownTool:
    tool_name: str
    raw_input: str


ToolDescriptor = Union[BashTool, WriteTool, EditTool, ReadTool, UnknownTool]


def _raw_json(tool_input: Any) -> str:
    """Compact JSON rendering of the raw payload.

    >>> _raw_json({"x": 1})
    '{"x":1}'
    """
    try:
        return json.dumps(tool_input, separators=(",", ":"), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(tool_input)


def describe(tool_name: str, tool_input: Any) -> ToolDescriptor:
    """Build a descriptor for a tool invocation. Never raises.

    Known tools whose input does not match the expected shape fall back to
    UnknownTool carrying the raw payload.

    >>> describe("Bash", {"command": "npm test"})
    BashTool(command='npm test', description=None)
    >>> describe("Mystery", {"x": 1})
    UnknownTool(tool_name='Mystery', raw_input='{"x":1}')
    >>> describe("Read", {"path": "/a"})
    UnknownTool(tool_name='Read', raw_input='{"path":"/a"}')
    """
    try:
        if tool_name == "Bash":
            bash = _BashInput.model_validate(tool_input)
            return BashTool(command=bash.command, description=bash.description)
        if tool_name == "Write":
            write = _WriteInput.model_validate(tool_input)
            return WriteTool(
                file_path=write.file_path,
                content_preview=truncate(write.content, WRITE_PREVIEW_CHARS),
            )
        if tool_name == "Edit":
            edit = _EditInput.model_validate(tool_input)
            return EditTool(
                file_path=edit.file_path,
                old_string=edit.old_string,
                new_string=edit.new_string,
            )
        if tool_name == "Read":
            read = _ReadInput.model_validate(tool_input)
            return ReadTool(file_path=read.file_path)
    except ValidationError as e:
        logger.debug("%s input did not match expected shape: %s", tool_name, e.errors()[:1])

    return UnknownTool(tool_name=str(tool_name), raw_input=_raw_json(tool_input))


def format_for_notification(descriptor: ToolDescriptor) -> tuple[str, str]:
    """Render a descriptor as a (title, message) pair.

    >>> format_for_notification(BashTool("npm test"))
    ('Bash Command', 'npm test')
    >>> format_for_notification(BashTool("npm test", "Run tests"))
    ('Bash Command', 'Run tests\\n\\nnpm test')
    """
    if isinstance(descriptor, BashTool):
        if descriptor.description:
            return "Bash Command", f"{descriptor.description}\n\n{descriptor.command}"
        return "Bash Command", descriptor.command

    if isinstance(descriptor, WriteTool):
        return "Write File", f"{descriptor.file_path}\n\n{descriptor.content_preview}"

    if isinstance(descriptor, EditTool):
        old_preview = truncate(descriptor.old_string, EDIT_PREVIEW_CHARS)
        new_preview = truncate(descriptor.new_string, EDIT_PREVIEW_CHARS)
        return "Edit File", f"{descriptor.file_path}\n\n- {old_preview}\n+ {new_preview}"

    if isinstance(descriptor, ReadTool):
        return "Read File", descriptor.file_path

    # UnknownTool
    return f"Tool: {descriptor.tool_name}", truncate(descriptor.raw_input, UNKNOWN_PREVIEW_CHARS)
