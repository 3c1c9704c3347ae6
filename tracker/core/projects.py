"""
Project operations.

Projects are keyed by Nickname (case-insensitive). Creating a project seeds
a follow-up todo; BFDate/Note edits flow into that todo; closing a project
completes its open todos; deleting one removes its todos and time entries.
"""

import logging
from typing import List

from tracker.utils.constants import (
    DEFAULT_BF_DAYS,
    DEFAULT_DISPLAY_DATE_FORMAT,
    DEFAULT_DUE_DAYS,
    FOLLOW_UP_TEMPLATE,
    PROJECT_STATUS_ACTIVE,
    PROJECT_STATUS_CLOSED,
    TODO_STATUS_COMPLETED,
    TODO_STATUS_PENDING,
)
from tracker.utils.dates import add_days, today_internal
from .errors import DuplicateKeyError, NotFoundError, StorageError, ValidationError
from .models import Project, Todo, coerce_date, new_entity_id, same_nickname, validate_nickname
from .storage import (
    find_project,
    load_projects,
    load_time_entries,
    load_todos,
    persist,
    save_projects,
    save_time_entries,
    save_todos,
)

logger = logging.getLogger("project_tracker")

DATE_COLUMNS = ('DateAssigned', 'DueDate', 'BFDate', 'ClosedDate')
READ_ONLY_COLUMNS = ('Nickname', 'CumulativeHrs')


def _sort_key(column):
    def key(project):
        value = project.get(column)
        return (value == '', value.lower() if isinstance(value, str) else value)
    return key


def list_projects(paths, status=None, include_closed=False, sort_by='DueDate', search=None) -> List[Project]:
    """
    Load, filter and sort projects.

    Closed projects are hidden unless ``include_closed`` is set or ``status``
    asks for them. ``search`` matches Nickname, FullProjectName and the IDs.
    """
    projects = load_projects(paths)
    if status:
        projects = [p for p in projects if p.status.lower() == status.lower()]
    elif not include_closed:
        projects = [p for p in projects if not p.is_closed]
    if search:
        needle = search.lower()
        projects = [
            p for p in projects
            if needle in ' '.join((p.nickname, p.full_project_name, p.id1, p.id2)).lower()
        ]
    return sorted(projects, key=_sort_key(sort_by if sort_by in Project.ATTRS else 'DueDate'))


def get_project(paths, nickname) -> Project:
    project = find_project(load_projects(paths), nickname)
    if project is None:
        raise NotFoundError(f"Project '{nickname}' not found")
    return project


def project_nicknames(paths, include_closed=False) -> List[str]:
    return [p.nickname for p in list_projects(paths, include_closed=include_closed, sort_by='Nickname')]


def _coerce_fields(fields: dict, display_format) -> dict:
    cleaned = {}
    for column, value in (fields or {}).items():
        if column not in Project.ATTRS:
            raise ValidationError(f"Unknown project field '{column}'")
        if column in DATE_COLUMNS:
            value = coerce_date(column, value, display_format)
        cleaned[column] = '' if value is None else str(value).strip()
    return cleaned


def create_project(paths, fields: dict, today=None, due_days=DEFAULT_DUE_DAYS,
                   bf_days=DEFAULT_BF_DAYS, display_format=DEFAULT_DISPLAY_DATE_FORMAT) -> Project:
    """
    Create a project and its seeded follow-up todo.

    DateAssigned defaults to today, DueDate to DateAssigned + ``due_days``
    and BFDate to DateAssigned + ``bf_days`` (never later than DueDate).

    Raises:
        ValidationError: missing/invalid fields
        DuplicateKeyError: the Nickname is taken
        StorageError: a file could not be written; a failed follow-up todo
            save removes the new project again
    """
    cleaned = _coerce_fields(fields, display_format)
    cleaned['CumulativeHrs'] = '0.00'
    project = Project.from_record(cleaned)
    project.nickname = validate_nickname(project.nickname)

    projects = load_projects(paths)
    if find_project(projects, project.nickname) is not None:
        raise DuplicateKeyError(f"A project with nickname '{project.nickname}' already exists")

    if not project.date_assigned:
        project.date_assigned = today_internal(today)
    if not project.due_date:
        project.due_date = add_days(project.date_assigned, due_days)
    if not project.bf_date:
        project.bf_date = min(add_days(project.date_assigned, bf_days), project.due_date)
    project.apply_status(project.status or PROJECT_STATUS_ACTIVE, today)
    project.validate()

    projects.append(project)
    persist(save_projects, paths, projects, 'projects')
    logger.info(f"Created project {project.nickname}")

    if not project.is_closed:
        follow_up = Todo(
            id=new_entity_id(),
            nickname=project.nickname,
            task_description=FOLLOW_UP_TEMPLATE.format(nickname=project.nickname),
            importance='Normal',
            due_date=project.bf_date,
            status=TODO_STATUS_PENDING,
            created_date=today_internal(today),
        )
        todos = load_todos(paths)
        todos.append(follow_up)
        try:
            persist(save_todos, paths, todos, 'todos')
        except StorageError:
            # A project never exists on disk without its follow-up todo
            projects.remove(project)
            if save_projects(paths, projects):
                logger.error(f"Follow-up todo for {project.nickname} not saved; project creation rolled back")
            else:
                logger.error(f"Follow-up todo for {project.nickname} not saved and rollback of projects failed")
            raise
        logger.info(f"Seeded follow-up todo {follow_up.id} for {project.nickname}")

    return project


def _follow_up_description(project: Project) -> str:
    base = FOLLOW_UP_TEMPLATE.format(nickname=project.nickname)
    return f"{base} - {project.note}" if project.note else base


def update_project(paths, nickname, changes: dict, today=None,
                   display_format=DEFAULT_DISPLAY_DATE_FORMAT) -> Project:
    """
    Apply field edits to one project and propagate to its todos.

    Nickname and CumulativeHrs cannot be edited here. A Status change stamps
    or clears ClosedDate; closing completes every open todo of the project.
    """
    projects = load_projects(paths)
    project = find_project(projects, nickname)
    if project is None:
        raise NotFoundError(f"Project '{nickname}' not found")

    cleaned = _coerce_fields(changes, display_format)
    new_nickname = cleaned.pop('Nickname', None)
    if new_nickname is not None and not same_nickname(new_nickname, project.nickname):
        raise ValidationError("Nickname cannot be changed")
    if 'CumulativeHrs' in cleaned:
        raise ValidationError("CumulativeHrs is derived from time entries and cannot be edited")

    old_bf, old_note, was_closed = project.bf_date, project.note, project.is_closed
    new_status = cleaned.pop('Status', None)
    cleaned.pop('ClosedDate', None)

    for column, value in cleaned.items():
        project.set(column, value)
    if new_status:
        project.apply_status(new_status, today)
    project.validate()

    persist(save_projects, paths, projects, 'projects')
    logger.info(f"Updated project {project.nickname}: {', '.join(sorted(changes))}")

    closing = project.is_closed and not was_closed
    bf_changed = project.bf_date != old_bf
    note_changed = project.note != old_note
    if closing or bf_changed or note_changed:
        _propagate_to_todos(paths, project, closing, bf_changed, note_changed, today)
    return project


def _propagate_to_todos(paths, project, closing, bf_changed, note_changed, today):
    todos = load_todos(paths)
    touched = 0
    for todo in todos:
        if not same_nickname(todo.nickname, project.nickname) or todo.is_completed:
            continue
        if closing:
            todo.apply_status(TODO_STATUS_COMPLETED, today)
            touched += 1
            continue
        if todo.is_follow_up_for(project.nickname):
            if bf_changed and project.bf_date:
                todo.due_date = project.bf_date
            if note_changed:
                todo.task_description = _follow_up_description(project)
            touched += 1
    if touched:
        persist(save_todos, paths, todos, 'todos')
        logger.info(f"Updated {touched} todo(s) for {project.nickname}")


def set_project_status(paths, nickname, status, today=None) -> Project:
    return update_project(paths, nickname, {'Status': status}, today=today)


def close_project(paths, nickname, today=None) -> Project:
    return set_project_status(paths, nickname, PROJECT_STATUS_CLOSED, today=today)


def delete_project(paths, nickname, cascade_time_entries=True) -> dict:
    """
    Delete a project plus every todo (and, by default, time entry) that
    references it.

    Returns:
        dict: counts of removed todos and time entries
    """
    projects = load_projects(paths)
    project = find_project(projects, nickname)
    if project is None:
        raise NotFoundError(f"Project '{nickname}' not found")

    remaining = [p for p in projects if p is not project]
    persist(save_projects, paths, remaining, 'projects')

    removed = {'todos': 0, 'time_entries': 0}
    todos = load_todos(paths)
    kept_todos = [t for t in todos if not same_nickname(t.nickname, project.nickname)]
    if len(kept_todos) != len(todos):
        removed['todos'] = len(todos) - len(kept_todos)
        persist(save_todos, paths, kept_todos, 'todos')

    if cascade_time_entries:
        entries = load_time_entries(paths)
        kept_entries = [e for e in entries if not same_nickname(e.nickname, project.nickname)]
        if len(kept_entries) != len(entries):
            removed['time_entries'] = len(entries) - len(kept_entries)
            persist(save_time_entries, paths, kept_entries, 'time entries')

    logger.info(f"Deleted project {project.nickname} "
                f"({removed['todos']} todo(s), {removed['time_entries']} time entr(ies))")
    return removed
