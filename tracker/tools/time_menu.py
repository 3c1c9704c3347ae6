"""Interactive timesheet screens."""

from functools import partial

from tracker.core import timesheets as time_ops
from tracker.core.errors import NotFoundError
from tracker.core.projects import project_nicknames
from tracker.utils.constants import DAY_COLUMNS, MAX_DAILY_HOURS, TIME_ENTRY_COLUMNS
from tracker.utils.dates import add_days, today_internal, to_display_date, week_start
from tracker.ui.menu import MenuEntry, run_menu
from tracker.ui.prompts import ask, ask_date, ask_hours, confirm, pause
from tracker.ui.render import print_header, print_info, print_success
from .views import details_table, time_entries_table, weekly_summary_table


def pick_entry(session, nickname=None):
    entries = time_ops.list_time_entries(session.paths, nickname=nickname)
    if not entries:
        raise NotFoundError("No time entries to choose from")
    session.output(time_entries_table(session.ctx, entries))
    while True:
        raw = ask('Entry #', required=True, input_func=session.input_func, output=session.output)
        if raw.isdigit() and 1 <= int(raw) <= len(entries):
            return entries[int(raw) - 1]
        session.output(f"    Enter a number from 1 to {len(entries)}")


def _ask_week(session, current=''):
    default = current or week_start(today_internal(session.today))
    return ask_date('Any day in the week', default, display_format=session.date_format,
                    input_func=session.input_func, output=session.output)


def _ask_days(session, entry=None) -> dict:
    """Per-day hours; leaving every day blank asks for a weekly total instead."""
    days = {}
    for day in DAY_COLUMNS:
        current = entry.get(day) if entry else ''
        days[day] = ask_hours(day, current, maximum=MAX_DAILY_HOURS,
                              input_func=session.input_func, output=session.output)
    if not any(days.values()):
        current = entry.total_hours if entry else ''
        days['TotalHours'] = ask_hours('Total hours for the week', current,
                                       input_func=session.input_func, output=session.output) or '0'
    return days


def show_entries(session):
    print_header(session.ctx, 'TIME ENTRIES', output=session.output)
    nickname = ask('Project nickname (blank = all)', input_func=session.input_func, output=session.output)
    entries = time_ops.list_time_entries(session.paths, nickname=nickname or None)
    session.output(time_entries_table(session.ctx, entries))
    pause(session.input_func)


def _print_week(session, monday):
    summary = time_ops.weekly_summary(session.paths, monday)
    print_header(session.ctx, 'WEEKLY SUMMARY',
                 f"Week of {to_display_date(summary['week_start'], session.date_format)}",
                 output=session.output)
    session.output(weekly_summary_table(session.ctx, summary))
    pause(session.input_func)


def show_week(session, offset_weeks=0):
    _print_week(session, add_days(week_start(today_internal(session.today)), 7 * offset_weeks))


def choose_week(session):
    monday = _ask_week(session)
    _print_week(session, monday)


def show_entry_details(session):
    entry = pick_entry(session)
    print_header(session.ctx, 'TIME ENTRY', entry.nickname, output=session.output)
    session.output(details_table(session.ctx, entry, TIME_ENTRY_COLUMNS))
    pause(session.input_func)


def add_entry(session):
    print_header(session.ctx, 'LOG TIME', "Type 'cancel' at any prompt to abort", output=session.output)
    nicknames = project_nicknames(session.paths)
    if not nicknames:
        raise NotFoundError("Create a project before logging time")
    session.output(f"  Projects: {', '.join(nicknames)}")
    fields = {
        'Nickname': ask('Project nickname', required=True, input_func=session.input_func, output=session.output),
        'Description': ask('Description', input_func=session.input_func, output=session.output),
        'WeekStartDate': _ask_week(session),
    }
    fields.update(_ask_days(session))
    entry = time_ops.create_time_entry(session.paths, fields, today=session.today,
                                       display_format=session.date_format)
    print_success(session.ctx, f"Logged {entry.total_hours}h against {entry.nickname}", session.output)


def edit_entry(session):
    entry = pick_entry(session)
    print_header(session.ctx, 'EDIT TIME ENTRY', "Enter keeps the current value, '-' clears it",
                 output=session.output)
    changes = {
        'Nickname': ask('Project nickname', entry.nickname, required=True,
                        input_func=session.input_func, output=session.output),
        'Description': ask('Description', entry.description, input_func=session.input_func,
                           output=session.output),
        'WeekStartDate': _ask_week(session, entry.week_start_date),
    }
    changes.update(_ask_days(session, entry))
    changes = {k: v for k, v in changes.items() if v != entry.get(k)}
    if not changes:
        print_info(session.ctx, "No changes made", session.output)
        return
    updated = time_ops.update_time_entry(session.paths, entry.entry_id, changes,
                                         display_format=session.date_format)
    print_success(session.ctx, f"Entry updated ({updated.total_hours}h)", session.output)


def remove_entry(session):
    entry = pick_entry(session)
    if not confirm(f"Delete {entry.total_hours}h logged against {entry.nickname}?",
                   input_func=session.input_func):
        print_info(session.ctx, "Nothing deleted", session.output)
        return
    time_ops.delete_time_entry(session.paths, entry.entry_id)
    print_success(session.ctx, "Time entry deleted", session.output)


def time_menu(session):
    entries = [
        MenuEntry.header('View'),
        MenuEntry.option('1', 'This week', partial(show_week, session)),
        MenuEntry.option('2', 'Last week', partial(show_week, session, offset_weeks=-1)),
        MenuEntry.option('3', 'Choose a week', partial(choose_week, session)),
        MenuEntry.option('4', 'List entries', partial(show_entries, session)),
        MenuEntry.option('5', 'Entry details', partial(show_entry_details, session)),
        MenuEntry.separator(),
        MenuEntry.header('Manage'),
        MenuEntry.option('6', 'Log time', partial(add_entry, session)),
        MenuEntry.option('7', 'Edit entry', partial(edit_entry, session)),
        MenuEntry.option('8', 'Delete entry', partial(remove_entry, session)),
        MenuEntry.separator(),
        MenuEntry.option('B', 'Back', is_exit=True),
    ]
    return run_menu(session.ctx, 'TIMESHEETS', entries, session.input_func, session.output)
