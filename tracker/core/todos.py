"""Todo operations."""

import logging
from typing import List

from tracker.utils.constants import (
    DEFAULT_DISPLAY_DATE_FORMAT,
    IMPORTANCE_RANK,
    TODO_STATUS_COMPLETED,
)
from tracker.utils.dates import days_until, today_internal
from .errors import NotFoundError, ValidationError
from .models import Todo, coerce_date, new_entity_id, same_nickname
from .storage import find_project, load_projects, load_todos, persist, save_todos

logger = logging.getLogger("project_tracker")

DATE_COLUMNS = ('DueDate', 'CreatedDate', 'CompletedDate')

DUE_OVERDUE = 'overdue'
DUE_SOON = 'due_soon'
DUE_OK = 'ok'
DUE_COMPLETED = 'completed'


def _sort_key(todo: Todo):
    return (todo.due_date == '', todo.due_date, IMPORTANCE_RANK.get(todo.importance, 99), todo.created_date)


def list_todos(paths, status=None, nickname=None, include_completed=False, due_before=None) -> List[Todo]:
    """
    Todos sorted by DueDate (blank last), then Importance.

    Args:
        status: Only this status (completed todos included when asked for)
        nickname: Only todos of this project; '' selects unassociated todos
        include_completed: Keep completed todos when no status is given
        due_before: Internal date; keep todos due on or before it
    """
    todos = load_todos(paths)
    if status:
        todos = [t for t in todos if t.status.lower() == status.lower()]
    elif not include_completed:
        todos = [t for t in todos if not t.is_completed]
    if nickname is not None:
        if nickname == '':
            todos = [t for t in todos if not t.nickname]
        else:
            todos = [t for t in todos if same_nickname(t.nickname, nickname)]
    if due_before:
        todos = [t for t in todos if t.due_date and t.due_date <= due_before]
    return sorted(todos, key=_sort_key)


def get_todo(paths, todo_id) -> Todo:
    for todo in load_todos(paths):
        if todo.id == todo_id:
            return todo
    raise NotFoundError(f"Todo '{todo_id}' not found")


def _coerce_fields(fields: dict, display_format) -> dict:
    cleaned = {}
    for column, value in (fields or {}).items():
        if column not in Todo.ATTRS:
            raise ValidationError(f"Unknown todo field '{column}'")
        if column in DATE_COLUMNS:
            value = coerce_date(column, value, display_format)
        cleaned[column] = '' if value is None else str(value).strip()
    return cleaned


def _check_project(paths, nickname) -> str:
    """Resolve an optional project reference to the stored spelling."""
    if not nickname:
        return ''
    project = find_project(load_projects(paths), nickname)
    if project is None:
        raise ValidationError(f"Project '{nickname}' does not exist")
    return project.nickname


def create_todo(paths, fields: dict, today=None, display_format=DEFAULT_DISPLAY_DATE_FORMAT) -> Todo:
    cleaned = _coerce_fields(fields, display_format)
    cleaned.pop('ID', None)
    todo = Todo.from_record(cleaned)
    todo.id = new_entity_id()
    todo.created_date = today_internal(today)
    todo.nickname = _check_project(paths, todo.nickname)
    todo.apply_status(todo.status, today)
    todo.validate()

    todos = load_todos(paths)
    todos.append(todo)
    persist(save_todos, paths, todos, 'todos')
    logger.info(f"Created todo {todo.id}")
    return todo


def update_todo(paths, todo_id, changes: dict, today=None, display_format=DEFAULT_DISPLAY_DATE_FORMAT) -> Todo:
    """Edit one todo; a Status change stamps or clears CompletedDate."""
    todos = load_todos(paths)
    todo = next((t for t in todos if t.id == todo_id), None)
    if todo is None:
        raise NotFoundError(f"Todo '{todo_id}' not found")

    cleaned = _coerce_fields(changes, display_format)
    if cleaned.pop('ID', todo.id) != todo.id:
        raise ValidationError("ID cannot be changed")
    cleaned.pop('CreatedDate', None)
    cleaned.pop('CompletedDate', None)
    new_status = cleaned.pop('Status', None)
    if 'Nickname' in cleaned:
        cleaned['Nickname'] = _check_project(paths, cleaned['Nickname'])

    for column, value in cleaned.items():
        todo.set(column, value)
    if new_status:
        todo.apply_status(new_status, today)
    todo.validate()

    persist(save_todos, paths, todos, 'todos')
    logger.info(f"Updated todo {todo.id}: {', '.join(sorted(changes))}")
    return todo


def complete_todo(paths, todo_id, today=None) -> Todo:
    return update_todo(paths, todo_id, {'Status': TODO_STATUS_COMPLETED}, today=today)


def delete_todo(paths, todo_id) -> Todo:
    todos = load_todos(paths)
    todo = next((t for t in todos if t.id == todo_id), None)
    if todo is None:
        raise NotFoundError(f"Todo '{todo_id}' not found")
    persist(save_todos, paths, [t for t in todos if t is not todo], 'todos')
    logger.info(f"Deleted todo {todo.id}")
    return todo


def todo_due_state(todo: Todo, today=None, due_soon_days=3) -> str:
    """Classify a todo for colouring: completed, overdue, due soon or ok."""
    if todo.is_completed:
        return DUE_COMPLETED
    remaining = days_until(todo.due_date, today)
    if remaining is None:
        return DUE_OK
    if remaining < 0:
        return DUE_OVERDUE
    if remaining <= due_soon_days:
        return DUE_SOON
    return DUE_OK
