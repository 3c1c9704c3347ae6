"""
Table layouts for the three entity types.

Shared by the interactive menus and the ``cli.py`` list/filter actions.
"""

from tracker.core.todos import DUE_COMPLETED, DUE_OVERDUE, DUE_SOON, todo_due_state
from tracker.utils.constants import DAY_COLUMNS
from tracker.utils.dates import days_until, to_display_date
from tracker.ui.table import render_table

PROJECT_LIST_COLUMNS = ['Nickname', 'FullProjectName', 'ID1', 'DueDate', 'BFDate', 'CumulativeHrs', 'Status']
TODO_LIST_COLUMNS = ['#', 'Nickname', 'TaskDescription', 'Importance', 'DueDate', 'Status']
TIME_LIST_COLUMNS = ['#', 'WeekStartDate', 'Nickname', 'Description'] + DAY_COLUMNS + ['TotalHours']

HEADERS = {
    'FullProjectName': 'Project',
    'CumulativeHrs': 'Hours',
    'TaskDescription': 'Task',
    'DueDate': 'Due',
    'BFDate': 'BF Date',
    'WeekStartDate': 'Week Of',
    'TotalHours': 'Total',
    'DateAssigned': 'Assigned',
    'ClosedDate': 'Closed',
}

DUE_ROLES = {DUE_OVERDUE: 'Overdue', DUE_SOON: 'DueSoon', DUE_COMPLETED: 'Completed'}


def date_formatter(ctx):
    def fmt(value, record):
        return to_display_date(value, ctx.date_format)
    return fmt


def _numbered(records):
    """Wrap records so the '#' column resolves to a 1-based row number."""
    return [_Numbered(i, r) for i, r in enumerate(records, 1)]


class _Numbered:
    def __init__(self, number, record):
        self.number = number
        self.record = record

    def get(self, column, default=''):
        if column == '#':
            return str(self.number)
        return self.record.get(column, default)


def project_colorizer(ctx, today=None):
    def colorize(project, index):
        if project.get('Status') == 'Closed':
            return 'Completed'
        if project.get('Status') == 'On Hold':
            return 'Accent2'
        remaining = days_until(project.get('DueDate'), today)
        if remaining is None:
            return None
        if remaining < 0:
            return 'Overdue'
        if remaining <= ctx.due_soon_days:
            return 'DueSoon'
        return None
    return colorize


def todo_colorizer(ctx, today=None):
    def colorize(row, index):
        todo = row.record if isinstance(row, _Numbered) else row
        return DUE_ROLES.get(todo_due_state(todo, today, ctx.due_soon_days))
    return colorize


def projects_table(ctx, projects, today=None, columns=None) -> str:
    dates = date_formatter(ctx)
    return render_table(
        ctx, projects, columns or PROJECT_LIST_COLUMNS, headers=HEADERS,
        formatters={c: dates for c in ('DateAssigned', 'DueDate', 'BFDate', 'ClosedDate')},
        alignments={'CumulativeHrs': 'right'},
        max_widths={'FullProjectName': 30},
        row_colorizer=project_colorizer(ctx, today),
        empty_message='No projects found',
    )


def todos_table(ctx, todos, today=None) -> str:
    dates = date_formatter(ctx)
    return render_table(
        ctx, _numbered(todos), TODO_LIST_COLUMNS, headers=HEADERS,
        formatters={'DueDate': dates},
        alignments={'#': 'right'},
        max_widths={'TaskDescription': 45},
        row_colorizer=todo_colorizer(ctx, today),
        empty_message='No todos found',
    )


def time_entries_table(ctx, entries) -> str:
    return render_table(
        ctx, _numbered(entries), TIME_LIST_COLUMNS, headers=HEADERS,
        formatters={'WeekStartDate': date_formatter(ctx)},
        alignments={c: 'right' for c in ['#'] + DAY_COLUMNS + ['TotalHours']},
        max_widths={'Description': 30},
        empty_message='No time entries found',
    )


def weekly_summary_table(ctx, summary) -> str:
    totals = {'Nickname': 'TOTAL', **summary['day_totals'], 'TotalHours': summary['total']}
    rows = summary['rows'] + [totals] if summary['rows'] else []

    def emphasize_total(row, index):
        return 'Accent1' if row.get('Nickname') == 'TOTAL' else None

    return render_table(
        ctx, rows, ['Nickname'] + DAY_COLUMNS + ['TotalHours'], headers=HEADERS,
        alignments={c: 'right' for c in DAY_COLUMNS + ['TotalHours']},
        row_colorizer=emphasize_total, row_separators=False,
        empty_message='No hours recorded for this week',
    )


def details_table(ctx, record, columns) -> str:
    """Two-column field/value view of a single record."""
    dates = {'DateAssigned', 'DueDate', 'BFDate', 'ClosedDate', 'CreatedDate', 'CompletedDate',
             'Date', 'WeekStartDate'}
    rows = []
    for column in columns:
        value = record.get(column)
        if column in dates:
            value = to_display_date(value, ctx.date_format)
        rows.append({'Field': HEADERS.get(column, column), 'Value': value})
    return render_table(ctx, rows, ['Field', 'Value'], max_widths={'Value': 60})
