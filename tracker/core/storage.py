"""
Entity Storage Module

Provides schema-aware load/save of the delimited entity files:
- Whole-file reads into generic records (dict per row)
- Required-column validation with default back-fill
- Backup-then-restore-on-failure writes
- Typed load/save helpers for projects, todos and time entries
- Project hour recomputation from time entries

Files are personal-scale, so every save rewrites the whole file. The ``.bak``
sibling written before each save is the only recovery mechanism: there is no
file locking and no atomic rename, so concurrent writers are last-writer-wins
and a crash mid-write can still damage the live file.
"""

import shutil
import logging
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from tracker.decimal_utils import format_hours
from tracker.utils.constants import (
    BACKUP_SUFFIX,
    PROJECT_COLUMNS,
    PROJECT_DEFAULTS,
    TIME_ENTRY_COLUMNS,
    TIME_ENTRY_DEFAULTS,
    TODO_COLUMNS,
    TODO_DEFAULTS,
)
from .errors import StorageError
from .models import Project, TimeEntry, Todo, same_nickname

logger = logging.getLogger("project_tracker")


def backup_path(path) -> Path:
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


# ====================================================================================
# GENERIC RECORDS
# ====================================================================================

def load_entities(path, required_columns, default_values=None, create_if_missing=False) -> List[dict]:
    """
    Load every row of a delimited file as a dict of strings.

    Args:
        path: Entity file
        required_columns: Columns every record must carry
        default_values: Per-column value used when back-filling a missing column
        create_if_missing: Write a header-only file when ``path`` does not exist

    Returns:
        list[dict]: Records; empty when the file is absent, empty or unreadable
    """
    path = Path(path)
    default_values = default_values or {}

    if not path.exists():
        if create_if_missing:
            if save_entities([], path, required_columns, skip_backup=True):
                logger.info(f"Created {path} with header only")
        else:
            logger.warning(f"Data file not found: {path}")
        return []

    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False, encoding='utf-8')
    except pd.errors.EmptyDataError:
        logger.warning(f"Data file is empty: {path}")
        return []
    except (pd.errors.ParserError, UnicodeDecodeError, OSError, ValueError) as e:
        logger.error(f"Could not parse {path}: {e}. Treating as empty.")
        return []

    frame.columns = [str(c).strip() for c in frame.columns]
    missing = [c for c in required_columns if c not in frame.columns]
    if missing:
        logger.warning(f"{path.name} is missing column(s) {', '.join(missing)}; filling defaults")
        for column in missing:
            frame[column] = default_values.get(column, '')

    return frame.to_dict(orient='records')


def _column_union(rows: Iterable[dict]) -> List[str]:
    columns = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def save_entities(records, path, required_columns=None, skip_backup=False, create_backup=True) -> bool:
    """
    Rewrite an entity file from ``records``.

    The existing file is copied to ``<path>.bak`` first unless ``skip_backup``
    is set or backups are disabled. A failed backup aborts the write. A failed
    write restores the backup taken by this call.

    Args:
        records: dicts or record objects exposing ``to_record()``
        path: Entity file
        required_columns: When given, only these columns are written, in order
        skip_backup: Do not copy the current file first
        create_backup: Configured backup switch (``storage.create_backups``)

    Returns:
        bool: True when the file was written
    """
    path = Path(path)
    bak = backup_path(path)
    backed_up = False

    if not skip_backup and create_backup and path.exists():
        try:
            shutil.copy2(path, bak)
            backed_up = True
        except OSError as e:
            logger.error(f"Backup of {path} failed: {e}. Write aborted.")
            return False

    rows = [r.to_record() if hasattr(r, 'to_record') else dict(r) for r in records]
    columns = list(required_columns) if required_columns else _column_union(rows)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        frame = pd.DataFrame(rows, columns=columns).fillna('')
        frame.to_csv(path, index=False, encoding='utf-8')
        logger.info(f"Saved {len(rows)} record(s) to {path.name}")
        return True
    except Exception as e:
        logger.error(f"Failed to write {path}: {e}")
        if backed_up:
            try:
                shutil.copy2(bak, path)
                logger.info(f"[SAFE] Restored {path.name} from backup")
            except OSError as restore_error:
                logger.error(f"Restore of {path.name} from backup failed: {restore_error}")
        return False


# ====================================================================================
# TYPED HELPERS
# ====================================================================================

def load_projects(paths, create_if_missing=True) -> List[Project]:
    records = load_entities(paths.projects, PROJECT_COLUMNS, PROJECT_DEFAULTS, create_if_missing)
    return [Project.from_record(r) for r in records]


def load_todos(paths, create_if_missing=True) -> List[Todo]:
    records = load_entities(paths.todos, TODO_COLUMNS, TODO_DEFAULTS, create_if_missing)
    return [Todo.from_record(r) for r in records]


def load_time_entries(paths, create_if_missing=True) -> List[TimeEntry]:
    records = load_entities(paths.time_entries, TIME_ENTRY_COLUMNS, TIME_ENTRY_DEFAULTS, create_if_missing)
    return [TimeEntry.from_record(r) for r in records]


def save_projects(paths, projects) -> bool:
    return save_entities(projects, paths.projects, PROJECT_COLUMNS, create_backup=paths.create_backups)


def save_todos(paths, todos) -> bool:
    return save_entities(todos, paths.todos, TODO_COLUMNS, create_backup=paths.create_backups)


def save_time_entries(paths, entries) -> bool:
    return save_entities(entries, paths.time_entries, TIME_ENTRY_COLUMNS, create_backup=paths.create_backups)


def persist(saver, paths, records, label: str):
    """Run a typed save and raise StorageError when it reports failure."""
    if not saver(paths, records):
        raise StorageError(f"Could not save {label}; see the log for details")


def find_project(projects, nickname) -> Optional[Project]:
    for project in projects:
        if same_nickname(project.nickname, nickname):
            return project
    return None


# ====================================================================================
# DERIVED HOURS
# ====================================================================================

def project_hours(entries, nickname) -> str:
    total = sum((e.effective_hours() for e in entries if same_nickname(e.nickname, nickname)), start=0)
    return format_hours(total)


def recompute_project_hours(paths, nickname) -> bool:
    """
    Recompute CumulativeHrs for one project from its time entries.

    Each entry contributes its day-field sum, or its own TotalHours when the
    day fields are all blank or zero, so no entry is counted twice.

    Returns:
        bool: False when the project does not exist or the save fails
    """
    projects = load_projects(paths)
    project = find_project(projects, nickname)
    if project is None:
        logger.warning(f"Cannot recompute hours: project '{nickname}' not found")
        return False

    entries = load_time_entries(paths)
    project.cumulative_hrs = project_hours(entries, project.nickname)
    ok = save_projects(paths, projects)
    if ok:
        logger.info(f"CumulativeHrs for {project.nickname} set to {project.cumulative_hrs}")
    return ok


def recompute_all_project_hours(paths) -> int:
    """Recompute every project in one pass; returns how many values changed."""
    projects = load_projects(paths)
    if not projects:
        return 0
    entries = load_time_entries(paths)
    changed = 0
    for project in projects:
        hours = project_hours(entries, project.nickname)
        if hours != project.cumulative_hrs:
            project.cumulative_hrs = hours
            changed += 1
    if changed and not save_projects(paths, projects):
        return 0
    return changed
