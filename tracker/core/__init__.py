"""
================================================================================
CORE MODULE - Records, Storage and Domain Operations
================================================================================

Central package for entity storage and the project/todo/time operations.

Modules:
    models     - Project, Todo, TimeEntry record types
    storage    - load_entities / save_entities and typed helpers
    projects   - Project CRUD and cascades to todos and time entries
    todos      - Todo CRUD
    timesheets - Weekly time entries and summaries
    errors     - Exception taxonomy

Usage:
    from tracker.core import load_entities, save_entities
    from tracker.core.projects import create_project
================================================================================
"""

from tracker.core.errors import (
    TrackerError,
    StorageError,
    ValidationError,
    DuplicateKeyError,
    NotFoundError,
)
from tracker.core.models import Project, Todo, TimeEntry
from tracker.core.storage import (
    load_entities,
    save_entities,
    recompute_project_hours,
    recompute_all_project_hours,
)

__all__ = [
    'TrackerError',
    'StorageError',
    'ValidationError',
    'DuplicateKeyError',
    'NotFoundError',
    'Project',
    'Todo',
    'TimeEntry',
    'load_entities',
    'save_entities',
    'recompute_project_hours',
    'recompute_all_project_hours',
]
