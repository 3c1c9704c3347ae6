"""
================================================================================
CONSTANTS - System-Wide Configuration Values
================================================================================

Centralized repository for the hardcoded values used by the tracker.
Organized by functional category.

Constant Categories:
    1. File Paths - Config, data, theme and log locations
    2. Entity Schemas - Column lists for every delimited file
    3. Enumerations - Allowed status/importance values
    4. Defaults - Date offsets, hour limits, seeded todo text
    5. Rendering - Cache limits and markers

File Path Constants:
    All paths are relative to BASE_DIR (the working directory).
    Supports monkeypatching for test isolation.

    Example:
        CONFIG_FILE = BASE_DIR / 'configs' / 'config.json'

Note:
    Values in this file are STATIC. For runtime-configurable settings,
    use config.json via tracker.utils.config.
================================================================================
"""

from pathlib import Path

# ==========================================
# FILE PATHS
# ==========================================
BASE_DIR = Path.cwd()
CONFIG_FILE = BASE_DIR / 'configs' / 'config.json'

PROJECTS_FILENAME = 'projects.csv'
TODOS_FILENAME = 'todos.csv'
TIME_ENTRIES_FILENAME = 'time_entries.csv'
BACKUP_SUFFIX = '.bak'

# ==========================================
# ENTITY SCHEMAS
# ==========================================
"""
Column order here is the header order written to disk
"""
PROJECT_COLUMNS = [
    'FullProjectName', 'Nickname', 'ID1', 'ID2', 'DateAssigned', 'DueDate',
    'BFDate', 'CumulativeHrs', 'Note', 'ProjFolder', 'ClosedDate', 'Status',
]

TODO_COLUMNS = [
    'ID', 'Nickname', 'TaskDescription', 'Importance', 'DueDate', 'Status',
    'CreatedDate', 'CompletedDate',
]

DAY_COLUMNS = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']

TIME_ENTRY_COLUMNS = [
    'EntryID', 'Date', 'WeekStartDate', 'Nickname', 'ID1', 'ID2', 'Description',
] + DAY_COLUMNS + ['TotalHours']

PROJECT_DEFAULTS = {'CumulativeHrs': '0.00', 'Status': 'Active'}
TODO_DEFAULTS = {'Importance': 'Normal', 'Status': 'Pending'}
TIME_ENTRY_DEFAULTS = {'TotalHours': '0.00'}

# ==========================================
# ENUMERATIONS
# ==========================================
PROJECT_STATUS_ACTIVE = 'Active'
PROJECT_STATUS_ON_HOLD = 'On Hold'
PROJECT_STATUS_CLOSED = 'Closed'
PROJECT_STATUSES = [PROJECT_STATUS_ACTIVE, PROJECT_STATUS_ON_HOLD, PROJECT_STATUS_CLOSED]

TODO_STATUS_PENDING = 'Pending'
TODO_STATUS_IN_PROGRESS = 'In Progress'
TODO_STATUS_DEFERRED = 'On Hold/Deferred'
TODO_STATUS_COMPLETED = 'Completed'
TODO_STATUSES = [TODO_STATUS_PENDING, TODO_STATUS_IN_PROGRESS, TODO_STATUS_DEFERRED, TODO_STATUS_COMPLETED]

IMPORTANCE_LEVELS = ['High', 'Normal', 'Low']
IMPORTANCE_RANK = {'High': 0, 'Normal': 1, 'Low': 2}

# ==========================================
# DEFAULTS
# ==========================================
NICKNAME_MAX_LENGTH = 15
DEFAULT_DUE_DAYS = 42  # DueDate = DateAssigned + 6 weeks when not supplied
DEFAULT_BF_DAYS = 14  # BFDate = DateAssigned + 2 weeks, never past DueDate
MAX_DAILY_HOURS = 24
FOLLOW_UP_TEMPLATE = 'Initial setup/follow up for {nickname}'
FOLLOW_UP_PATTERN = r'follow up for {nickname}(?!\w)'

INTERNAL_DATE_FORMAT = '%Y%m%d'
DEFAULT_DISPLAY_DATE_FORMAT = '%m/%d/%Y'

# Typed at any prompt to abandon the current operation
CANCEL_SENTINEL = 'cancel'

# ==========================================
# RENDERING
# ==========================================
VISIBLE_LENGTH_CACHE_LIMIT = 2048
ELLIPSIS = '...'
FORMATTER_ERROR_MARKER = '#ERR'

