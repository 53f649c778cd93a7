"""Configuration for floq.

Settings come from, in order of precedence: explicit arguments, ``FLOQ_*``
environment variables, the JSON config file in the config directory
(``~/.floq/config.json`` unless ``FLOQ_CONFIG_DIR`` is set), and defaults.

Example usage:
    config = load_config()
    orm_manager = ORMManager(config.db_path)

    save_config({"db_path": "work.db"})
"""

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
DEFAULT_DB_FILENAME = "floq.db"
DEFAULT_LOG_FILENAME = "floq.log"

# Upper bound of the undo stack
MAX_HISTORY_SIZE = 50


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def get_config_directory() -> Path:
    """Get the config directory path.

    Checks FLOQ_CONFIG_DIR first, then falls back to ~/.floq/, creating
    the directory if needed.
    """
    env_dir = os.environ.get("FLOQ_CONFIG_DIR")
    config_dir = Path(env_dir) if env_dir else Path.home() / ".floq"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Path of the JSON config file."""
    return get_config_directory() / CONFIG_FILENAME


def get_default_db_path() -> str:
    """Get the default database path.

    Checks FLOQ_DB_PATH first, then the config file, then falls back to
    ``floq.db`` inside the config directory.
    """
    return load_config().db_path


@dataclass(frozen=True)
class FloqConfig:
    """Resolved application settings.

    Attributes:
        db_path: SQLite database file.
        log_level: Name of the root log level ("WARNING", "DEBUG", ...).
        log_file: File the TUI logs to; the CLI logs to stderr.
        history_size: Undo depth, capped at MAX_HISTORY_SIZE.
    """

    db_path: str
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    history_size: int = MAX_HISTORY_SIZE

    def with_overrides(self, **overrides: Any) -> "FloqConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _read_config_file(path: Path) -> Dict[str, Any]:
    """Load the raw JSON mapping, returning {} when missing or corrupt."""
    try:
        if not path.exists():
            logger.debug("Config file does not exist: %s", path)
            return {}

        with open(path, encoding="utf-8") as f:
            content = f.read()
        if not content.strip():
            return {}

        data = json.loads(content)
        if not isinstance(data, dict):
            logger.warning("Config file contains non-dict value, ignoring: %s", path)
            return {}
        return data

    except json.JSONDecodeError as e:
        logger.warning("Failed to parse config file %s: %s. Using defaults.", path, e)
        return {}
    except OSError as e:
        logger.warning("Failed to read config file %s: %s. Using defaults.", path, e)
        return {}


def load_config(config_path: Optional[Path] = None) -> FloqConfig:
    """Resolve the effective configuration.

    Args:
        config_path: Optional explicit config file. Defaults to the file in
            the config directory.

    Returns:
        FloqConfig with environment overrides applied.
    """
    path = config_path or get_config_path()
    raw = _read_config_file(path)

    db_path = os.environ.get("FLOQ_DB_PATH") or raw.get("db_path")
    if db_path:
        resolved = Path(db_path).expanduser()
        if not resolved.is_absolute():
            resolved = path.parent / resolved
    else:
        resolved = path.parent / DEFAULT_DB_FILENAME

    log_level = str(raw.get("log_level", "WARNING")).upper()
    if _env_flag("FLOQ_DEBUG"):
        log_level = "DEBUG"

    log_file = os.environ.get("FLOQ_LOG_FILE") or raw.get("log_file")
    if not log_file:
        log_file = str(path.parent / DEFAULT_LOG_FILENAME)

    history_size = raw.get("history_size", MAX_HISTORY_SIZE)
    if not isinstance(history_size, int) or not 0 < history_size <= MAX_HISTORY_SIZE:
        logger.warning(
            "Invalid history_size %r, using %d", history_size, MAX_HISTORY_SIZE
        )
        history_size = MAX_HISTORY_SIZE

    return FloqConfig(
        db_path=str(resolved),
        log_level=log_level,
        log_file=log_file,
        history_size=history_size,
    )


def save_config(updates: Dict[str, Any], config_path: Optional[Path] = None) -> bool:
    """Merge ``updates`` into the config file.

    Returns:
        True if the file was written, False otherwise.
    """
    path = config_path or get_config_path()
    current = _read_config_file(path)
    current.update(updates)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(current, f, indent=2)
        logger.debug("Saved config to %s", path)
        return True
    except OSError as e:
        logger.warning("Failed to save config file %s: %s", path, e)
        return False
