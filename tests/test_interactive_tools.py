"""
Scripted walkthroughs of the interactive screens.

Each test builds a Session around a fake input() and a list that collects
everything the screens print, then checks the files on disk.
"""

import datetime as dt

import pytest

from tracker.core import projects as project_ops
from tracker.core.storage import load_time_entries, load_todos
from tracker.core.todos import create_todo
from tracker.tools import build_session, main_menu, run_interactive
from tracker.tools.main_menu import dashboard, recalculate_hours
from tracker.tools.project_menu import add_project, change_project_status, project_menu, remove_project
from tracker.tools.settings_menu import change_theme, toggle_color
from tracker.tools.time_menu import add_entry
from tracker.tools.todo_menu import add_todo, mark_complete
from tracker.utils.config import load_config

SKIP_DAYS = [''] * 7


@pytest.fixture
def make_session(tmp_path, config_file, scripted_input):
    def factory(answers, use_color=False):
        out = []
        session = build_session(base_dir=tmp_path / 'data', input_func=scripted_input(answers),
                                output=out.append, config_file=config_file)
        session.ctx.use_color = use_color
        session.today = dt.date(2024, 1, 1)
        session.out = out
        return session
    return factory


@pytest.fixture
def website(make_session):
    session = make_session([])
    project_ops.create_project(session.paths, {'FullProjectName': 'Website', 'Nickname': 'WEBSITE',
                                               'DateAssigned': '20240101'}, today=session.today)
    return session.paths


def test_add_project_with_defaults(make_session):
    session = make_session(['Website Redesign', 'WEBSITE', 'W-1', '', '01/01/2024', '', '', '', ''])

    add_project(session)

    project = project_ops.get_project(session.paths, 'WEBSITE')
    assert project.id1 == 'W-1'
    assert project.due_date == '20240212'
    assert project.bf_date == '20240115'
    assert load_todos(session.paths)[0].task_description == 'Initial setup/follow up for WEBSITE'
    assert '✓ Project WEBSITE created with a follow-up todo' in session.out


def test_cancel_inside_project_menu(make_session):
    session = make_session(['5', 'Website', 'cancel', 'b'])

    project_menu(session)

    assert 'ℹ Operation cancelled' in session.out
    assert project_ops.list_projects(session.paths, include_closed=True) == []


def test_menu_reports_missing_projects(make_session):
    session = make_session(['6', 'b'])

    project_menu(session)

    assert '✗ No projects exist yet' in session.out


def test_close_project_after_confirmation(make_session, website):
    session = make_session(['WEBSITE', 'Closed', 'y'])

    change_project_status(session)

    assert project_ops.get_project(session.paths, 'WEBSITE').status == 'Closed'
    assert all(t.is_completed for t in load_todos(session.paths))


def test_close_project_declined(make_session, website):
    session = make_session(['WEBSITE', '3', 'n'])

    change_project_status(session)

    assert project_ops.get_project(session.paths, 'WEBSITE').status == 'Active'
    assert 'ℹ Status unchanged' in session.out


def test_remove_project(make_session, website):
    session = make_session(['website', 'y'])

    remove_project(session)

    assert project_ops.list_projects(session.paths, include_closed=True) == []
    assert load_todos(session.paths) == []


def test_add_todo_and_complete_it(make_session, website):
    session = make_session(['Draft copy', 'WEBSITE', 'High', '01/05/2024'])
    add_todo(session)

    todo = [t for t in load_todos(session.paths) if t.task_description == 'Draft copy'][0]
    assert todo.nickname == 'WEBSITE'
    assert todo.importance == 'High'
    assert todo.due_date == '20240105'

    # Draft copy (due 01/05) sorts before the follow-up todo (due 01/15)
    session = make_session(['1'])
    mark_complete(session)

    todo = [t for t in load_todos(session.paths) if t.task_description == 'Draft copy'][0]
    assert todo.status == 'Completed'
    assert todo.completed_date == '20240101'


def test_log_time_by_day(make_session, website):
    session = make_session(['WEBSITE', 'Design', '', '8', '6.5', '', '', '', '', ''])

    add_entry(session)

    entry = load_time_entries(session.paths)[0]
    assert entry.week_start_date == '20240101'
    assert entry.total_hours == '14.50'
    assert project_ops.get_project(session.paths, 'WEBSITE').cumulative_hrs == '14.50'
    assert '✓ Logged 14.50h against WEBSITE' in session.out


def test_log_weekly_total_only(make_session, website):
    session = make_session(['WEBSITE', '', '01/10/2024'] + SKIP_DAYS + ['10'])

    add_entry(session)

    entry = load_time_entries(session.paths)[0]
    assert entry.week_start_date == '20240108'
    assert entry.total_hours == '10.00'


def test_invalid_day_hours_reprompt(make_session, website):
    session = make_session(['WEBSITE', '', '', '25', '2'] + [''] * 6)

    add_entry(session)

    assert load_time_entries(session.paths)[0].total_hours == '2.00'
    assert any('cannot exceed 24' in line for line in session.out)


def test_toggle_color_persists(make_session, config_file):
    session = make_session([], use_color=True)

    toggle_color(session)

    assert session.ctx.use_color is False
    assert load_config(config_file)['display']['use_color'] is False
    assert session.config['display']['use_color'] is False


def test_change_theme_applies_and_persists(make_session, config_file):
    session = make_session(['Ocean', '', 'y'])

    change_theme(session)

    assert session.ctx.theme.name == 'Ocean'
    assert load_config(config_file)['display']['theme'] == 'Ocean'
    assert any('THEME PREVIEW: Ocean' in line for line in session.out)


def test_change_theme_declined(make_session, config_file):
    session = make_session(['Forest', '', 'n'])

    change_theme(session)

    assert session.ctx.theme.name == 'Default'
    assert load_config(config_file)['display']['theme'] == 'Default'


def test_dashboard_counts(make_session, website):
    session = make_session([])
    create_todo(session.paths, {'TaskDescription': 'late', 'DueDate': '20231220'}, today=session.today)

    text = dashboard(session)

    assert 'PROJECT TRACKER' in text
    assert '1 active, 0 on hold' in text
    assert '2 open, 1 overdue, 0 due soon' in text
    assert 'This week:  0.00 hours' in text


def test_recalculate_reports_nothing_to_do(make_session, website):
    session = make_session([])

    recalculate_hours(session)

    assert session.out == ['ℹ All project hours already up to date']


def test_main_menu_quit(make_session):
    session = make_session(['q'])

    main_menu(session)

    assert session.out[-1] == '\nGoodbye.'
    assert any('PROJECT TRACKER' in line for line in session.out)


def test_main_menu_end_of_input(make_session):
    session = make_session(['1', 'b', '9'])

    main_menu(session)

    assert "✗ Invalid choice '9'" in session.out
    assert session.out[-1] == '\nGoodbye.'


def test_run_interactive_returns_session(tmp_path, config_file, scripted_input):
    out = []

    session = run_interactive(base_dir=tmp_path / 'data', config_file=config_file,
                              input_func=scripted_input(['q']), output=out.append)

    assert session.paths.base_dir == tmp_path / 'data'
    assert out[-1] == '\nGoodbye.'
