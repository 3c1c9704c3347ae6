"""
Configuration Management Module

Handles loading, validating, and updating application configuration from config.json
Supports merging user overrides over defaults and derives the entity file paths
"""

import copy
import json
from dataclasses import dataclass
from pathlib import Path
import logging

import filelock

from .constants import PROJECTS_FILENAME, TIME_ENTRIES_FILENAME, TODOS_FILENAME

logger = logging.getLogger("project_tracker")


DEFAULT_CONFIG = {
    "paths": {
        "base_dir": "data",
        "themes_dir": "themes",
        "log_dir": "logs",
    },
    "files": {
        "projects": PROJECTS_FILENAME,
        "todos": TODOS_FILENAME,
        "time_entries": TIME_ENTRIES_FILENAME,
    },
    "display": {
        "date_format": "%m/%d/%Y",
        "use_color": True,
        "theme": "Default",
        "due_soon_days": 3,
        "table_padding": 1,
    },
    "projects": {
        "due_days": 42,
        "bf_days": 14,
    },
    "storage": {
        "create_backups": True,
    },
    "logging": {
        "level": "INFO",
        "console": False,
    },
}


@dataclass(frozen=True)
class DataPaths:
    """Resolved locations of the three entity files."""

    base_dir: Path
    projects: Path
    todos: Path
    time_entries: Path
    create_backups: bool = True


def default_config():
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config(config_file=None):
    """
    Load configuration from config.json with sensible defaults

    Args:
        config_file: Optional explicit path; defaults to constants.CONFIG_FILE

    Returns:
        dict: Configuration dictionary
    """
    if config_file is None:
        from .constants import CONFIG_FILE
        config_file = CONFIG_FILE
    config_file = Path(config_file)

    defaults = default_config()

    if not config_file.exists():
        _save_config(config_file, defaults)
        return defaults

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = json.load(f)
        if not isinstance(config, dict):
            raise ValueError("top-level JSON value must be an object")

        # Merge with defaults to ensure all keys exist
        return conform_to_defaults(deep_merge(defaults, config), defaults)
    except json.JSONDecodeError as e:
        logger.error(f"Config file corrupted: {e}. Using defaults.")
        return defaults
    except Exception as e:
        logger.error(f"Error loading config: {e}. Using defaults.")
        return defaults


def deep_merge(defaults: dict, override: dict) -> dict:
    """
    Deep merge override into defaults.

    Nested dicts merge key-by-key; scalars and lists from ``override``
    replace the default wholesale. Neither argument is mutated.

    Args:
        defaults: Default configuration
        override: User-provided configuration

    Returns:
        dict: Merged configuration
    """
    result = copy.deepcopy(defaults)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def conform_to_defaults(config: dict, defaults: dict, prefix: str = '') -> dict:
    """
    Replace values whose shape does not match DEFAULT_CONFIG.

    A section that should be an object but is not, or a scalar that cannot
    take the default's type, is logged and reset to the default. Keys absent
    from the defaults pass through untouched.
    """
    for key, default in defaults.items():
        dotted = f"{prefix}{key}"
        value = config.get(key, default)
        if isinstance(default, dict):
            if isinstance(value, dict):
                config[key] = conform_to_defaults(value, default, dotted + '.')
                continue
        else:
            try:
                config[key] = _coerce_scalar(value, default)
                continue
            except (TypeError, ValueError):
                pass
        logger.error(f"Config value {dotted}={value!r} is invalid. Using default {default!r}.")
        config[key] = copy.deepcopy(default)
    return config


def _coerce_scalar(value, default):
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        raise TypeError("expected true or false")
    if isinstance(default, int):
        if isinstance(value, bool):
            raise TypeError("expected a number")
        return int(value)
    if isinstance(default, str):
        if isinstance(value, str):
            return value
        raise TypeError("expected a string")
    return value


def _save_config(config_file: Path, config: dict):
    """
    Save configuration to file

    Args:
        config_file: Path to config file
        config: Configuration dictionary
    """
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        lock = filelock.FileLock(str(config_file) + '.lock', timeout=10)
        with lock:
            with open(config_file, 'w', encoding='utf-8') as f:
                json.dump(config, f, indent=4)
        return True
    except filelock.Timeout:
        logger.error(f"Failed to acquire lock for {config_file}")
    except Exception as e:
        logger.error(f"Failed to save config: {e}")
    return False


def save_config(config: dict, config_file=None) -> bool:
    if config_file is None:
        from .constants import CONFIG_FILE
        config_file = CONFIG_FILE
    return _save_config(Path(config_file), config)


def set_config_value(dotted_key: str, value, config_file=None) -> dict:
    """
    Update a single key (e.g. ``display.theme``) and persist the config

    Returns:
        dict: The updated configuration
    """
    config = load_config(config_file)
    node = config
    parts = dotted_key.split('.')
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value
    save_config(config, config_file)
    return config


def get_data_paths(config: dict, base_dir=None) -> DataPaths:
    """
    Derive the entity file paths from configuration

    Args:
        config: Loaded configuration
        base_dir: Explicit data directory overriding ``paths.base_dir``

    Returns:
        DataPaths: Resolved file locations
    """
    if base_dir is None:
        base_dir = config.get('paths', {}).get('base_dir', 'data')
    base = Path(base_dir).expanduser()
    if not base.is_absolute():
        from .constants import BASE_DIR
        base = BASE_DIR / base

    files = config.get('files', {})
    return DataPaths(
        base_dir=base,
        projects=base / files.get('projects', PROJECTS_FILENAME),
        todos=base / files.get('todos', TODOS_FILENAME),
        time_entries=base / files.get('time_entries', TIME_ENTRIES_FILENAME),
        create_backups=bool(config.get('storage', {}).get('create_backups', True)),
    )


def resolve_dir(config: dict, key: str) -> Path:
    """Resolve one of the ``paths.*`` directories against BASE_DIR."""
    from .constants import BASE_DIR
    path = Path(config.get('paths', {}).get(key, key)).expanduser()
    return path if path.is_absolute() else BASE_DIR / path
