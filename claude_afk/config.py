"""Persisted device credential for claude-afk.

The config is a small TOML record:

    device_token = "..."
    backend_url = "https://claude-afk.treeleaf.dev"
    active = true

It is loaded once per process and passed explicitly to whatever needs it.
Only the CLI management commands (setup, activate, deactivate, clear) save it.
"""

import logging
import os
import sys
import tempfile
import time
from pathlib import Path
from typing import Optional

import tomlkit
from pydantic import BaseModel, ValidationError
from tomlkit.exceptions import TOMLKitError

from claude_afk.constants import APP_NAME, DEFAULT_API_URL, ENV_API_URL, ENV_CONFIG_DIR
from claude_afk.errors import ConfigUnavailable

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"


class AfkConfig(BaseModel):
    """Device credential and notification switch."""

    device_token: Optional[str] = None
    backend_url: str = ""
    active: bool = False

    def should_notify(self) -> bool:
        """Notifications need both a paired device and the active flag.

        >>> AfkConfig(device_token="t", active=True).should_notify()
        True
        >>> AfkConfig(device_token=None, active=True).should_notify()
        False
        >>> AfkConfig(device_token="t", active=False).should_notify()
        False
        """
        return bool(self.device_token) and self.active


def config_dir() -> Path:
    """Directory holding config.toml and the debug log.

    CLAUDE_AFK_CONFIG_DIR overrides the default ~/.config/claude-afk.
    """
    override = os.environ.get(ENV_CONFIG_DIR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / APP_NAME


def config_path() -> Path:
    return config_dir() / CONFIG_FILENAME


def load_config(path: Optional[Path] = None) -> AfkConfig:
    """Load the config, returning defaults when the file does not exist yet.

    Raises ConfigUnavailable if the file exists but cannot be read or parsed.
    """
    path = path or config_path()
    if not path.exists():
        return AfkConfig()

    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8"))
        return AfkConfig.model_validate(doc.unwrap())
    except OSError as e:
        raise ConfigUnavailable(f"Cannot read {path}: {e}") from e
    except (TOMLKitError, ValidationError) as e:
        raise ConfigUnavailable(f"Invalid config in {path}: {e}") from e


def _safe_replace(src: str, dst: str, *, retries: int = 3, delay: float = 0.1):
    """os.replace() with retry for Windows PermissionError."""
    for attempt in range(retries):
        try:
            os.replace(src, dst)
            return
        except PermissionError:
            if sys.platform != "win32" or attempt == retries - 1:
                raise
            time.sleep(delay * (2 ** attempt))


def save_config(config: AfkConfig, path: Optional[Path] = None) -> Path:
    """Write the config atomically (temp file + replace) with 0600 permissions."""
    path = path or config_path()
    if path.is_symlink():
        raise OSError("Refusing to write config through symlink")
    path.parent.mkdir(parents=True, exist_ok=True)

    doc = tomlkit.document()
    # TOML has no null; an absent key means "not paired"
    if config.device_token:
        doc["device_token"] = config.device_token
    doc["backend_url"] = config.backend_url
    doc["active"] = config.active

    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=".config_tmp_", suffix=".toml")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(tomlkit.dumps(doc))
        try:
            os.chmod(tmp, 0o600)
        except OSError:
            pass
        _safe_replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise
    logger.debug("Saved config to %s", path)
    return path


def get_backend_url(config: Optional[AfkConfig] = None) -> str:
    """Resolve the backend URL: env var > stored value > production default.

    Trailing slashes are stripped so paths can be appended directly.
    """
    url = os.environ.get(ENV_API_URL) or (config.backend_url if config else "") or DEFAULT_API_URL
    return url.rstrip("/")
