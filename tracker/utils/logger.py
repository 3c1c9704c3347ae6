"""
================================================================================
LOGGER - Unified Logging Configuration
================================================================================

Centralized logging infrastructure for all application contexts.

Logging Contexts:
    - 'menu' - Interactive menu sessions
    - 'cli' - Single-shot command invocations
    - 'test' - Unit and integration tests
    - 'imported' - Library/module imports (minimal logging)

Log Destinations:
    1. File Logs - {log_dir}/tracker.{context}.log
    2. Console Output - stderr, only when logging.console is enabled
       (the interactive menus own stdout)
    3. Rotating Backups - 1MB max per file, 3 backup files

Log Format:
    {timestamp} {level} [{context}]: {message}
    Example: 2024-01-08 10:30:45 INFO [menu]: Saved 12 record(s) to projects.csv

Usage:
    from tracker.utils.logger import set_run_context, logger

    set_run_context('cli')
    logger.info('Listing projects')
================================================================================
"""

import sys
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

logger = logging.getLogger("project_tracker")
logger.setLevel(logging.INFO)
logger.propagate = False

LOG_FORMAT = "%(asctime)s %(levelname)s [%(run_context)s]: %(message)s"

# Global run context state
_RUN_CONTEXT = 'imported'


class RunContextFilter(logging.Filter):
    """
    Logging filter that adds run context to all log records
    Allows distinguishing between different execution contexts
    """

    def filter(self, record):
        record.run_context = _RUN_CONTEXT
        return True


def _resolve_level(level):
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def set_run_context(context: str, log_dir=None, level='INFO', console: bool = False):
    """
    Set the execution context for logging and (re)attach handlers

    Args:
        context: String identifier ('menu', 'cli', 'test', etc)
        log_dir: Directory for the rotating log file; no file handler when None
        level: Minimum level name or number
        console: Also echo records to stderr
    """
    global _RUN_CONTEXT
    _RUN_CONTEXT = context

    resolved = _resolve_level(level)
    logger.setLevel(resolved)

    # Clear existing handlers
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    formatter = logging.Formatter(LOG_FORMAT)

    if log_dir is not None:
        try:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                str(log_dir / f"tracker.{context}.log"),
                maxBytes=1_000_000,
                backupCount=3,
                encoding='utf-8'
            )
            file_handler.setLevel(resolved)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(RunContextFilter())
            logger.addHandler(file_handler)
        except OSError as e:
            # Logging must never take the application down
            sys.stderr.write(f"Could not open log file in {log_dir}: {e}\n")

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(resolved)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(RunContextFilter())
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())


def setup_logging(context: str = 'imported', config: dict = None):
    """
    Initialize logging for the application from the loaded configuration

    Args:
        context: Execution context identifier
        config: Configuration dictionary (see tracker.utils.config)
    """
    log_dir = None
    level = 'INFO'
    console = False
    if config:
        from .config import resolve_dir
        log_dir = resolve_dir(config, 'log_dir')
        level = config.get('logging', {}).get('level', 'INFO')
        console = bool(config.get('logging', {}).get('console', False))
    set_run_context(context, log_dir=log_dir, level=level, console=console)
    return logger


def get_run_context() -> str:
    return _RUN_CONTEXT


# Initialize with default context
set_run_context(_RUN_CONTEXT)
