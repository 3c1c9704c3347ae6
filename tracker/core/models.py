"""
Typed records for the three entity files.

Each record maps one row of its CSV file. Column names on disk keep their
original CamelCase spelling (``FullProjectName``, ``BFDate``); the attributes
are snake_case. ``from_record`` fills any column absent from the row with the
schema default, so a file missing a column still yields complete records.
"""

import math
import re
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Dict, List

from tracker.decimal_utils import format_hours, is_blank_hours, sum_hours, to_decimal
from tracker.utils.constants import (
    DAY_COLUMNS,
    DEFAULT_DISPLAY_DATE_FORMAT,
    FOLLOW_UP_PATTERN,
    IMPORTANCE_LEVELS,
    NICKNAME_MAX_LENGTH,
    PROJECT_COLUMNS,
    PROJECT_DEFAULTS,
    PROJECT_STATUS_CLOSED,
    PROJECT_STATUSES,
    TIME_ENTRY_COLUMNS,
    TIME_ENTRY_DEFAULTS,
    TODO_COLUMNS,
    TODO_DEFAULTS,
    TODO_STATUS_COMPLETED,
    TODO_STATUSES,
)
from tracker.utils.dates import is_internal_date, to_internal_date, today_internal
from .errors import ValidationError


def new_entity_id() -> str:
    return str(uuid.uuid4())


def _clean(value) -> str:
    # Short CSV rows come back from pandas as float NaN
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ''
    return str(value)


class _Record:
    """Column <-> attribute mapping shared by the record types."""

    COLUMNS: ClassVar[List[str]] = []
    DEFAULTS: ClassVar[Dict[str, str]] = {}
    ATTRS: ClassVar[Dict[str, str]] = {}

    @classmethod
    def from_record(cls, record: dict):
        kwargs = {}
        for column in cls.COLUMNS:
            value = record.get(column)
            if _clean(value).strip() == '':
                value = cls.DEFAULTS.get(column, '')
            kwargs[cls.ATTRS[column]] = _clean(value)
        return cls(**kwargs)

    def to_record(self) -> dict:
        return {column: getattr(self, self.ATTRS[column]) for column in self.COLUMNS}

    def get(self, column: str, default=''):
        attr = self.ATTRS.get(column)
        return getattr(self, attr) if attr else default

    def set(self, column: str, value):
        attr = self.ATTRS.get(column)
        if attr is None:
            raise ValidationError(f"Unknown field '{column}'")
        setattr(self, attr, _clean(value))


def _check_date(label: str, value: str):
    if value and not is_internal_date(value):
        raise ValidationError(f"{label} must be a valid YYYYMMDD date, got '{value}'")


def coerce_date(label: str, value, display_format=DEFAULT_DISPLAY_DATE_FORMAT) -> str:
    """Accept internal, display-format or ISO input and return ``YYYYMMDD``."""
    try:
        return to_internal_date(value, display_format)
    except ValueError:
        raise ValidationError(f"{label}: '{value}' is not a recognizable date")


def validate_nickname(nickname: str) -> str:
    nickname = _clean(nickname).strip()
    if not nickname:
        raise ValidationError("Nickname is required")
    if len(nickname) > NICKNAME_MAX_LENGTH:
        raise ValidationError(f"Nickname must be {NICKNAME_MAX_LENGTH} characters or fewer")
    if ',' in nickname:
        raise ValidationError("Nickname cannot contain commas")
    return nickname


def same_nickname(a: str, b: str) -> bool:
    return bool(a) and bool(b) and a.strip().lower() == b.strip().lower()


@dataclass
class Project(_Record):
    full_project_name: str = ''
    nickname: str = ''
    id1: str = ''
    id2: str = ''
    date_assigned: str = ''
    due_date: str = ''
    bf_date: str = ''
    cumulative_hrs: str = '0.00'
    note: str = ''
    proj_folder: str = ''
    closed_date: str = ''
    status: str = 'Active'

    COLUMNS: ClassVar[List[str]] = PROJECT_COLUMNS
    DEFAULTS: ClassVar[Dict[str, str]] = PROJECT_DEFAULTS
    ATTRS: ClassVar[Dict[str, str]] = {
        'FullProjectName': 'full_project_name',
        'Nickname': 'nickname',
        'ID1': 'id1',
        'ID2': 'id2',
        'DateAssigned': 'date_assigned',
        'DueDate': 'due_date',
        'BFDate': 'bf_date',
        'CumulativeHrs': 'cumulative_hrs',
        'Note': 'note',
        'ProjFolder': 'proj_folder',
        'ClosedDate': 'closed_date',
        'Status': 'status',
    }

    @property
    def is_closed(self) -> bool:
        return self.status == PROJECT_STATUS_CLOSED

    def apply_status(self, status: str, today=None):
        """Set Status and keep ClosedDate in step with it."""
        if status not in PROJECT_STATUSES:
            raise ValidationError(f"Status must be one of {', '.join(PROJECT_STATUSES)}")
        self.status = status
        if status == PROJECT_STATUS_CLOSED:
            if not self.closed_date:
                self.closed_date = today_internal(today)
        else:
            self.closed_date = ''

    def validate(self):
        if not self.full_project_name:
            raise ValidationError("FullProjectName is required")
        self.nickname = validate_nickname(self.nickname)
        if self.status not in PROJECT_STATUSES:
            raise ValidationError(f"Status must be one of {', '.join(PROJECT_STATUSES)}")
        for label, value in (('DateAssigned', self.date_assigned), ('DueDate', self.due_date),
                             ('BFDate', self.bf_date), ('ClosedDate', self.closed_date)):
            _check_date(label, value)
        if self.is_closed != bool(self.closed_date):
            raise ValidationError("ClosedDate must be set exactly when Status is Closed")
        self.cumulative_hrs = format_hours(self.cumulative_hrs)


@dataclass
class Todo(_Record):
    id: str = ''
    nickname: str = ''
    task_description: str = ''
    importance: str = 'Normal'
    due_date: str = ''
    status: str = 'Pending'
    created_date: str = ''
    completed_date: str = ''

    COLUMNS: ClassVar[List[str]] = TODO_COLUMNS
    DEFAULTS: ClassVar[Dict[str, str]] = TODO_DEFAULTS
    ATTRS: ClassVar[Dict[str, str]] = {
        'ID': 'id',
        'Nickname': 'nickname',
        'TaskDescription': 'task_description',
        'Importance': 'importance',
        'DueDate': 'due_date',
        'Status': 'status',
        'CreatedDate': 'created_date',
        'CompletedDate': 'completed_date',
    }

    @property
    def is_completed(self) -> bool:
        return self.status == TODO_STATUS_COMPLETED

    def apply_status(self, status: str, today=None):
        """Set Status and keep CompletedDate in step with it."""
        if status not in TODO_STATUSES:
            raise ValidationError(f"Status must be one of {', '.join(TODO_STATUSES)}")
        self.status = status
        if status == TODO_STATUS_COMPLETED:
            if not self.completed_date:
                self.completed_date = today_internal(today)
        else:
            self.completed_date = ''

    def is_follow_up_for(self, nickname: str) -> bool:
        pattern = FOLLOW_UP_PATTERN.format(nickname=re.escape(nickname))
        return same_nickname(self.nickname, nickname) and bool(
            re.search(pattern, self.task_description, re.IGNORECASE))

    def validate(self):
        if not self.id:
            raise ValidationError("ID is required")
        if not self.task_description:
            raise ValidationError("TaskDescription is required")
        if self.importance not in IMPORTANCE_LEVELS:
            raise ValidationError(f"Importance must be one of {', '.join(IMPORTANCE_LEVELS)}")
        if self.status not in TODO_STATUSES:
            raise ValidationError(f"Status must be one of {', '.join(TODO_STATUSES)}")
        for label, value in (('DueDate', self.due_date), ('CreatedDate', self.created_date),
                             ('CompletedDate', self.completed_date)):
            _check_date(label, value)
        if self.is_completed != bool(self.completed_date):
            raise ValidationError("CompletedDate must be set exactly when Status is Completed")


@dataclass
class TimeEntry(_Record):
    entry_id: str = ''
    date: str = ''
    week_start_date: str = ''
    nickname: str = ''
    id1: str = ''
    id2: str = ''
    description: str = ''
    mon: str = ''
    tue: str = ''
    wed: str = ''
    thu: str = ''
    fri: str = ''
    sat: str = ''
    sun: str = ''
    total_hours: str = '0.00'

    COLUMNS: ClassVar[List[str]] = TIME_ENTRY_COLUMNS
    DEFAULTS: ClassVar[Dict[str, str]] = TIME_ENTRY_DEFAULTS
    ATTRS: ClassVar[Dict[str, str]] = {
        'EntryID': 'entry_id',
        'Date': 'date',
        'WeekStartDate': 'week_start_date',
        'Nickname': 'nickname',
        'ID1': 'id1',
        'ID2': 'id2',
        'Description': 'description',
        'Mon': 'mon',
        'Tue': 'tue',
        'Wed': 'wed',
        'Thu': 'thu',
        'Fri': 'fri',
        'Sat': 'sat',
        'Sun': 'sun',
        'TotalHours': 'total_hours',
    }

    def day_values(self) -> List[str]:
        return [self.get(day) for day in DAY_COLUMNS]

    def has_day_hours(self) -> bool:
        return any(not is_blank_hours(v) for v in self.day_values())

    def day_total(self) -> Decimal:
        return sum_hours(self.day_values())

    def effective_hours(self) -> Decimal:
        """Daily breakdown when it sums to something, else the stored total."""
        day_total = self.day_total()
        if day_total != 0:
            return day_total
        return to_decimal(self.total_hours)

    def recalculate_total(self):
        if self.has_day_hours():
            self.total_hours = format_hours(self.day_total())
        else:
            self.total_hours = format_hours(self.total_hours)

    def validate(self):
        if not self.entry_id:
            raise ValidationError("EntryID is required")
        self.nickname = validate_nickname(self.nickname)
        for label, value in (('Date', self.date), ('WeekStartDate', self.week_start_date)):
            _check_date(label, value)
        self.recalculate_total()
