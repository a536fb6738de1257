"""Runtime configuration: environment variables, config.json, data directory."""
import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# User config: ~/.coursekit/config.json overlaid on the project config.json.
CONFIG_PATH = Path.home() / ".coursekit" / "config.json"
_LOCAL_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"
_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"

_TRUTHY = {"1", "true", "yes", "on"}


def _load_config() -> dict:
    merged: dict = {}
    for path in (_LOCAL_CONFIG_PATH, CONFIG_PATH):
        if path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    merged.update(json.load(f))
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Ignoring unreadable config file %s: %s", path, exc)
    return merged


_user_config = _load_config()


def get(key: str, default=None):
    """Get a config value by dot-separated key, e.g. get('weather.city', 'NYC')."""
    val = _user_config
    for k in key.split("."):
        if isinstance(val, dict):
            val = val.get(k)
        else:
            return default
    return val if val is not None else default


# ---- Data directory -----------------------------------------------------------
# Priority: COURSEKIT_DATA_DIR env var > "data_dir" config key > <repo>/data

_data_dir: Optional[Path] = None


def get_data_dir() -> Path:
    """Return the resolved data directory (bundled and downloaded datasets)."""
    global _data_dir
    if _data_dir is not None:
        return _data_dir
    env_val = os.environ.get("COURSEKIT_DATA_DIR")
    if env_val:
        _data_dir = Path(env_val).expanduser().resolve()
    else:
        configured = get("data_dir")
        _data_dir = Path(configured).expanduser().resolve() if configured else _DEFAULT_DATA_DIR
    return _data_dir


def _reset_data_dir() -> None:
    """Reset the cached data directory (for testing only)."""
    global _data_dir
    _data_dir = None


def bundled_data_path(filename: str) -> Path:
    """Path of a file shipped with the repository (never redirected)."""
    return _DEFAULT_DATA_DIR / filename


def is_offline() -> bool:
    """True when downloads are disabled via COURSEKIT_OFFLINE or the 'offline' key."""
    env_val = os.environ.get("COURSEKIT_OFFLINE")
    if env_val is not None:
        return env_val.strip().lower() in _TRUTHY
    return bool(get("offline", False))


def get_log_level() -> int:
    """Logging level named by COURSEKIT_LOG_LEVEL (default INFO)."""
    name = os.environ.get("COURSEKIT_LOG_LEVEL", get("log_level", "INFO"))
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO
