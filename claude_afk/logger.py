"""Diagnostic logging for claude-afk.

Hook invocations share stdout with Claude Code, so every diagnostic goes to
stderr. With CLAUDE_AFK_DEBUG=1 (or --verbose) a debug log is also appended
next to the config file. Tokens are redacted on every handler.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Optional

from claude_afk.config import config_dir
from claude_afk.constants import ENV_DEBUG

LOG_FILENAME = "debug.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_REDACT_PATTERNS = [
    # Bearer tokens
    re.compile(r'(Bearer\s+)\S+', re.IGNORECASE),
    # device_token = "..." / "deviceToken": "..."
    re.compile(r'((?:device_token|deviceToken)["\']?\s*[:=]\s*["\']?)[^"\'\s,}]+', re.IGNORECASE),
]


def _redact(msg: str) -> str:
    """Redact bearer and device tokens from log messages.

    >>> _redact("Authorization: Bearer abc123")
    'Authorization: Bearer ***'
    >>> _redact('{"deviceToken": "xyz"}')
    '{"deviceToken": "***"}'
    """
    for pattern in _REDACT_PATTERNS:
        msg = pattern.sub(lambda m: m.group(1) + "***", msg)
    return msg


class RedactingFilter(logging.Filter):
    """Rewrites the rendered message with tokens masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = _redact(record.getMessage())
        record.args = None
        return True


def debug_enabled() -> bool:
    return os.environ.get(ENV_DEBUG, "") == "1"


def log_file_path() -> Path:
    return config_dir() / LOG_FILENAME


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None):
    """Configure the claude_afk logger hierarchy.

    stderr gets WARNING and above (DEBUG when verbose). The debug file
    handler is attached only when debugging is enabled.
    """
    debug = verbose or debug_enabled()
    root = logging.getLogger("claude_afk")
    root.setLevel(logging.DEBUG if debug else logging.WARNING)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = False

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(logging.DEBUG if verbose else logging.WARNING)
    stream.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    stream.addFilter(RedactingFilter())
    root.addHandler(stream)

    if debug:
        path = log_file or log_file_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path, encoding="utf-8")
        except OSError as e:
            root.warning("Debug log unavailable at %s: %s", path, e)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            file_handler.addFilter(RedactingFilter())
            root.addHandler(file_handler)


def clear_logs(path: Optional[Path] = None) -> bool:
    """Delete the debug log. Returns True if a file was removed."""
    path = path or log_file_path()
    if path.exists():
        path.unlink()
        return True
    return False
