"""
================================================================================
UTILS MODULE - Shared Utilities and Helpers
================================================================================

Shared infrastructure used across all application components.

Exported Functions:
    Logging:
        - setup_logging() - Initialize logging infrastructure
        - set_run_context(context) - Set execution context
        - logger - Main application logger

    Configuration:
        - load_config() - Load configuration from config.json
        - save_config() - Persist configuration
        - set_config_value() - Update one dotted key and persist
        - get_data_paths() - Resolve the entity file locations

Usage:
    from tracker.utils import logger, load_config
    from tracker.utils.constants import PROJECT_COLUMNS
================================================================================
"""

from .logger import setup_logging, set_run_context, logger
from .config import load_config, save_config, set_config_value, get_data_paths, DataPaths

__all__ = [
    'setup_logging',
    'set_run_context',
    'logger',
    'load_config',
    'save_config',
    'set_config_value',
    'get_data_paths',
    'DataPaths',
]
