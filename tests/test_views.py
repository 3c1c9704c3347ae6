"""Entity table layouts used by the menus and the CLI."""

import datetime as dt

from tracker.core.models import Project, Todo
from tracker.tools.views import details_table, projects_table, todos_table, weekly_summary_table
from tracker.ui.ansi import strip_ansi
from tracker.ui.theme import RenderContext


def test_projects_table_shows_display_dates(ctx):
    project = Project(full_project_name='Website', nickname='WEBSITE', due_date='20240212',
                      bf_date='20240115', cumulative_hrs='14.50', status='Active')

    table = projects_table(ctx, [project], today=dt.date(2024, 1, 1))

    assert '02/12/2024' in table
    assert '| Hours |' in table.replace('│', '|')
    assert 'WEBSITE' in table


def test_projects_table_respects_date_format():
    ctx = RenderContext(use_color=False, date_format='%Y-%m-%d')

    table = projects_table(ctx, [Project(full_project_name='Website', nickname='WEBSITE', due_date='20240212')])

    assert '2024-02-12' in table


def test_overdue_todo_row_is_coloured():
    ctx = RenderContext(use_color=True)
    todo = Todo(id='1', task_description='late', due_date='20231220', status='Pending')

    table = todos_table(ctx, [todo], today=dt.date(2024, 1, 1))

    # Default theme paints Overdue red
    assert '\033[31m' in table
    assert '│ 1 │' in strip_ansi(table)


def test_empty_tables_have_entity_messages(ctx):
    assert projects_table(ctx, []) == 'No projects found'
    assert todos_table(ctx, []) == 'No todos found'


def test_weekly_summary_appends_total_row(ctx):
    summary = {
        'week_start': '20240101',
        'rows': [{'Nickname': 'WEBSITE', 'Mon': '8.00', 'Tue': '6.50', 'Wed': '0.00', 'Thu': '0.00',
                  'Fri': '0.00', 'Sat': '0.00', 'Sun': '0.00', 'TotalHours': '14.50'}],
        'day_totals': {'Mon': '8.00', 'Tue': '6.50', 'Wed': '0.00', 'Thu': '0.00', 'Fri': '0.00',
                       'Sat': '0.00', 'Sun': '0.00'},
        'total': '14.50',
    }

    lines = weekly_summary_table(ctx, summary).split('\n')

    assert lines[-2].startswith('│ TOTAL')
    assert lines[-2].rstrip('│ ').endswith('14.50')


def test_weekly_summary_empty(ctx):
    summary = {'week_start': '20240101', 'rows': [], 'day_totals': {}, 'total': '0.00'}

    assert weekly_summary_table(ctx, summary) == 'No hours recorded for this week'


def test_details_table(ctx):
    project = Project(full_project_name='Website', nickname='WEBSITE', date_assigned='20240101')

    table = details_table(ctx, project, ['FullProjectName', 'DateAssigned'])

    assert '│ Project  │ Website    │' in table
    assert '│ Assigned │ 01/01/2024 │' in table
