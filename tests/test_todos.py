"""
Todo tests: project references, completion stamps, ordering and due states.
"""

import datetime as dt
import unittest

import pytest

from tracker.core import todos as todo_ops
from tracker.core.errors import NotFoundError, ValidationError
from tracker.core.models import Todo
from tracker.core.projects import create_project
from tracker.core.todos import DUE_COMPLETED, DUE_OK, DUE_OVERDUE, DUE_SOON, todo_due_state


@pytest.fixture
def with_project(data_paths, today):
    create_project(data_paths, {'FullProjectName': 'Website', 'Nickname': 'WEBSITE',
                                'DateAssigned': '20240101'}, today=today)
    return data_paths


def test_unassociated_todo(data_paths, today):
    todo = todo_ops.create_todo(data_paths, {'TaskDescription': 'Renew licence'}, today=today)

    assert todo.nickname == ''
    assert todo.importance == 'Normal'
    assert todo.status == 'Pending'
    assert todo.created_date == '20240101'
    assert [t.id for t in todo_ops.list_todos(data_paths, nickname='')] == [todo.id]


def test_project_reference_uses_stored_spelling(with_project, today):
    todo = todo_ops.create_todo(with_project, {'TaskDescription': 'Draft copy', 'Nickname': 'website'},
                                today=today)

    assert todo.nickname == 'WEBSITE'


def test_unknown_project_rejected(data_paths, today):
    with pytest.raises(ValidationError):
        todo_ops.create_todo(data_paths, {'TaskDescription': 'x', 'Nickname': 'GHOST'}, today=today)


def test_description_required(data_paths, today):
    with pytest.raises(ValidationError):
        todo_ops.create_todo(data_paths, {'Importance': 'High'}, today=today)


def test_invalid_importance(data_paths, today):
    with pytest.raises(ValidationError):
        todo_ops.create_todo(data_paths, {'TaskDescription': 'x', 'Importance': 'Urgent'}, today=today)


def test_complete_and_reopen(data_paths, today):
    todo = todo_ops.create_todo(data_paths, {'TaskDescription': 'Renew licence'}, today=today)

    done = todo_ops.complete_todo(data_paths, todo.id, today=dt.date(2024, 1, 9))
    assert done.status == 'Completed'
    assert done.completed_date == '20240109'
    assert todo_ops.list_todos(data_paths) == []
    assert len(todo_ops.list_todos(data_paths, include_completed=True)) == 1

    reopened = todo_ops.update_todo(data_paths, todo.id, {'Status': 'In Progress'}, today=today)
    assert reopened.completed_date == ''


def test_completed_date_not_user_editable(data_paths, today):
    todo = todo_ops.create_todo(data_paths, {'TaskDescription': 'x'}, today=today)

    updated = todo_ops.update_todo(data_paths, todo.id, {'CompletedDate': '20240105'}, today=today)

    assert updated.completed_date == ''


def test_sorted_by_due_date_blank_last_then_importance(data_paths, today):
    for description, due, importance in [
        ('no date', '', 'High'),
        ('later', '20240301', 'High'),
        ('soon low', '20240110', 'Low'),
        ('soon high', '20240110', 'High'),
    ]:
        todo_ops.create_todo(data_paths, {'TaskDescription': description, 'DueDate': due,
                                          'Importance': importance}, today=today)

    order = [t.task_description for t in todo_ops.list_todos(data_paths)]

    assert order == ['soon high', 'soon low', 'later', 'no date']


def test_filters(with_project, today):
    todo_ops.create_todo(with_project, {'TaskDescription': 'loose', 'DueDate': '20240105'}, today=today)
    blocked = todo_ops.create_todo(with_project, {'TaskDescription': 'blocked', 'Nickname': 'WEBSITE',
                                                  'Status': 'On Hold/Deferred'}, today=today)

    assert [t.task_description for t in todo_ops.list_todos(with_project, status='on hold/deferred')] == ['blocked']
    assert len(todo_ops.list_todos(with_project, nickname='WEBSITE')) == 2
    assert [t.task_description for t in todo_ops.list_todos(with_project, due_before='20240106')] == ['loose']
    assert todo_ops.get_todo(with_project, blocked.id).task_description == 'blocked'


def test_delete(data_paths, today):
    todo = todo_ops.create_todo(data_paths, {'TaskDescription': 'x'}, today=today)

    todo_ops.delete_todo(data_paths, todo.id)

    with pytest.raises(NotFoundError):
        todo_ops.get_todo(data_paths, todo.id)
    with pytest.raises(NotFoundError):
        todo_ops.delete_todo(data_paths, todo.id)


def test_id_cannot_change(data_paths, today):
    todo = todo_ops.create_todo(data_paths, {'TaskDescription': 'x'}, today=today)

    with pytest.raises(ValidationError):
        todo_ops.update_todo(data_paths, todo.id, {'ID': 'other'})


class TestDueState(unittest.TestCase):
    """Colour classification used by the todo tables"""

    def setUp(self):
        self.today = dt.date(2024, 1, 10)

    def _todo(self, due, status='Pending'):
        return Todo(id='1', task_description='x', due_date=due, status=status,
                    completed_date='20240101' if status == 'Completed' else '')

    def test_overdue(self):
        self.assertEqual(todo_due_state(self._todo('20240109'), self.today), DUE_OVERDUE)

    def test_due_today_is_due_soon(self):
        self.assertEqual(todo_due_state(self._todo('20240110'), self.today), DUE_SOON)

    def test_window_edge(self):
        self.assertEqual(todo_due_state(self._todo('20240113'), self.today, 3), DUE_SOON)
        self.assertEqual(todo_due_state(self._todo('20240114'), self.today, 3), DUE_OK)

    def test_blank_due_date(self):
        self.assertEqual(todo_due_state(self._todo(''), self.today), DUE_OK)

    def test_completed_wins(self):
        self.assertEqual(todo_due_state(self._todo('20200101', 'Completed'), self.today), DUE_COMPLETED)


def test_follow_up_matching_respects_word_boundary():
    todo = Todo(id='1', nickname='WEB', task_description='Initial setup/follow up for WEBSITE')
    assert not todo.is_follow_up_for('WEB')

    todo = Todo(id='1', nickname='WEB', task_description='Initial setup/follow up for web - call')
    assert todo.is_follow_up_for('WEB')
