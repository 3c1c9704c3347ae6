"""
Weekly time entries.

Each entry belongs to the week starting on WeekStartDate (a Monday) and
records hours either per day (Mon..Sun) or as a single TotalHours figure.
Every write recomputes the CumulativeHrs of the affected project(s).
"""

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import List

from tracker.decimal_utils import format_hours, parse_hours, to_decimal
from tracker.utils.constants import DAY_COLUMNS, DEFAULT_DISPLAY_DATE_FORMAT, MAX_DAILY_HOURS
from tracker.utils.dates import today_internal, week_start
from .errors import NotFoundError, StorageError, ValidationError
from .models import TimeEntry, coerce_date, new_entity_id, same_nickname
from .storage import (
    find_project,
    load_projects,
    load_time_entries,
    persist,
    recompute_project_hours,
    save_time_entries,
)

logger = logging.getLogger("project_tracker")

MAX_WEEKLY_HOURS = MAX_DAILY_HOURS * 7
EDITABLE_COLUMNS = ('Nickname', 'Description', 'WeekStartDate', 'TotalHours') + tuple(DAY_COLUMNS)


def list_time_entries(paths, nickname=None, week_start_date=None) -> List[TimeEntry]:
    """Entries newest week first, then by project."""
    entries = load_time_entries(paths)
    if nickname:
        entries = [e for e in entries if same_nickname(e.nickname, nickname)]
    if week_start_date:
        monday = week_start(week_start_date)
        entries = [e for e in entries if e.week_start_date == monday]
    entries.sort(key=lambda e: e.nickname.lower())
    entries.sort(key=lambda e: e.week_start_date, reverse=True)
    return entries


def get_time_entry(paths, entry_id) -> TimeEntry:
    for entry in load_time_entries(paths):
        if entry.entry_id == entry_id:
            return entry
    raise NotFoundError(f"Time entry '{entry_id}' not found")


def _apply_hours(entry: TimeEntry, fields: dict):
    for day in DAY_COLUMNS:
        if day in fields:
            raw = fields[day]
            if raw is None or str(raw).strip() == '':
                entry.set(day, '')
                continue
            try:
                entry.set(day, format_hours(parse_hours(raw, MAX_DAILY_HOURS)))
            except ValueError as e:
                raise ValidationError(f"{day}: {e}")

    if entry.has_day_hours():
        entry.recalculate_total()
    elif 'TotalHours' in fields:
        try:
            entry.total_hours = format_hours(parse_hours(fields['TotalHours'], MAX_WEEKLY_HOURS))
        except ValueError as e:
            raise ValidationError(f"TotalHours: {e}")
    elif any(day in fields for day in DAY_COLUMNS):
        # Every day was cleared and no explicit total given
        entry.total_hours = format_hours(0)


def _link_project(paths, entry: TimeEntry, nickname):
    project = find_project(load_projects(paths), nickname)
    if project is None:
        raise ValidationError(f"Project '{nickname}' does not exist")
    entry.nickname = project.nickname
    entry.id1 = project.id1
    entry.id2 = project.id2


def _recompute(paths, *nicknames):
    seen = []
    for nickname in nicknames:
        if nickname and not any(same_nickname(nickname, s) for s in seen):
            seen.append(nickname)
            if not recompute_project_hours(paths, nickname):
                raise StorageError(f"Could not update CumulativeHrs for {nickname}")


def _check_columns(fields: dict):
    unknown = [c for c in fields if c not in EDITABLE_COLUMNS]
    if unknown:
        raise ValidationError(f"Unknown or read-only time entry field(s): {', '.join(unknown)}")


def create_time_entry(paths, fields: dict, today=None, display_format=DEFAULT_DISPLAY_DATE_FORMAT) -> TimeEntry:
    """
    Record hours against a project.

    ``fields`` takes Nickname (required), Description, WeekStartDate (any day
    of the week; defaults to the current week), the seven day columns and/or
    TotalHours. ID1/ID2 are copied from the project.
    """
    fields = dict(fields or {})
    _check_columns(fields)
    entry = TimeEntry(entry_id=new_entity_id(), date=today_internal(today))
    _link_project(paths, entry, fields.get('Nickname', ''))
    entry.description = str(fields.get('Description') or '').strip()

    week_input = coerce_date('WeekStartDate', fields.get('WeekStartDate'), display_format)
    entry.week_start_date = week_start(week_input or entry.date)

    _apply_hours(entry, fields)
    entry.validate()

    entries = load_time_entries(paths)
    entries.append(entry)
    persist(save_time_entries, paths, entries, 'time entries')
    logger.info(f"Created time entry {entry.entry_id} for {entry.nickname} ({entry.total_hours}h)")
    _recompute(paths, entry.nickname)
    return entry


def update_time_entry(paths, entry_id, changes: dict, display_format=DEFAULT_DISPLAY_DATE_FORMAT) -> TimeEntry:
    changes = dict(changes or {})
    _check_columns(changes)
    entries = load_time_entries(paths)
    entry = next((e for e in entries if e.entry_id == entry_id), None)
    if entry is None:
        raise NotFoundError(f"Time entry '{entry_id}' not found")

    old_nickname = entry.nickname
    if 'Nickname' in changes and not same_nickname(changes['Nickname'], entry.nickname):
        _link_project(paths, entry, changes['Nickname'])
    if 'Description' in changes:
        entry.description = str(changes['Description'] or '').strip()
    if 'WeekStartDate' in changes:
        week_input = coerce_date('WeekStartDate', changes['WeekStartDate'], display_format)
        if week_input:
            entry.week_start_date = week_start(week_input)

    _apply_hours(entry, changes)
    entry.validate()

    persist(save_time_entries, paths, entries, 'time entries')
    logger.info(f"Updated time entry {entry.entry_id}: {', '.join(sorted(changes))}")
    _recompute(paths, old_nickname, entry.nickname)
    return entry


def delete_time_entry(paths, entry_id) -> TimeEntry:
    entries = load_time_entries(paths)
    entry = next((e for e in entries if e.entry_id == entry_id), None)
    if entry is None:
        raise NotFoundError(f"Time entry '{entry_id}' not found")
    persist(save_time_entries, paths, [e for e in entries if e is not entry], 'time entries')
    logger.info(f"Deleted time entry {entry.entry_id}")
    _recompute(paths, entry.nickname)
    return entry


def weekly_summary(paths, week_start_date=None) -> dict:
    """
    Per-project hours for one week.

    Returns:
        dict: ``week_start``, ``rows`` (one dict per project with the day
        columns and TotalHours), ``day_totals`` and ``total``
    """
    monday = week_start(week_start_date)
    rows = OrderedDict()
    day_totals = {day: Decimal(0) for day in DAY_COLUMNS}
    grand_total = Decimal(0)

    for entry in list_time_entries(paths, week_start_date=monday):
        key = entry.nickname.lower()
        if key not in rows:
            rows[key] = {'Nickname': entry.nickname, **{day: Decimal(0) for day in DAY_COLUMNS},
                         'TotalHours': Decimal(0)}
        row = rows[key]
        for day in DAY_COLUMNS:
            hours = to_decimal(entry.get(day))
            row[day] += hours
            day_totals[day] += hours
        hours = entry.effective_hours()
        row['TotalHours'] += hours
        grand_total += hours

    formatted = []
    for row in sorted(rows.values(), key=lambda r: r['Nickname'].lower()):
        formatted.append({k: (format_hours(v) if k != 'Nickname' else v) for k, v in row.items()})
    return {
        'week_start': monday,
        'rows': formatted,
        'day_totals': {day: format_hours(v) for day, v in day_totals.items()},
        'total': format_hours(grand_total),
    }
