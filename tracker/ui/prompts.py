"""
Interactive prompt helpers.

Conventions shared by every prompt:
    - Enter on a blank line keeps the current value (when there is one)
    - '-' clears an optional value
    - the cancel sentinel ('cancel') abandons the whole operation by raising
      PromptCancelled, which the menu runner reports and swallows
    - invalid input re-prompts; nothing is retried automatically
"""

from tracker.decimal_utils import format_hours, parse_hours
from tracker.utils.constants import CANCEL_SENTINEL, DEFAULT_DISPLAY_DATE_FORMAT
from tracker.utils.dates import to_display_date, to_internal_date

CLEAR_TOKEN = '-'


class PromptCancelled(Exception):
    pass


def _read(label, input_func=None) -> str:
    reader = input_func or input
    try:
        raw = reader(label)
    except EOFError:
        raise PromptCancelled()
    raw = (raw or '').strip()
    if raw.lower() == CANCEL_SENTINEL:
        raise PromptCancelled()
    return raw


def _label(label, current=None) -> str:
    if current:
        return f"  {label} [{current}]: "
    return f"  {label}: "


def ask(label, current=None, required=False, max_length=None, input_func=None, output=print) -> str:
    """Free-text field. Returns the current value on blank input."""
    while True:
        raw = _read(_label(label, current), input_func)
        if not raw:
            value = current or ''
        elif raw == CLEAR_TOKEN and not required:
            value = ''
        else:
            value = raw
        if required and not value:
            output(f"    {label} is required (type '{CANCEL_SENTINEL}' to abort)")
            continue
        if max_length and len(value) > max_length:
            output(f"    {label} must be {max_length} characters or fewer")
            continue
        return value


def ask_choice(label, choices, current=None, input_func=None, output=print) -> str:
    """Pick from ``choices`` by number or (case-insensitive) name."""
    listing = ', '.join(f"{i}={c}" for i, c in enumerate(choices, 1))
    while True:
        raw = _read(_label(f"{label} ({listing})", current), input_func)
        if not raw and current:
            return current
        if raw.isdigit() and 1 <= int(raw) <= len(choices):
            return choices[int(raw) - 1]
        for choice in choices:
            if choice.lower() == raw.lower():
                return choice
        output(f"    Choose one of: {', '.join(choices)}")


def ask_date(label, current='', required=False, display_format=DEFAULT_DISPLAY_DATE_FORMAT,
             input_func=None, output=print) -> str:
    """Date field entered in the display format; returns ``YYYYMMDD`` ('' when blank)."""
    shown = to_display_date(current, display_format) if current else None
    while True:
        raw = _read(_label(label, shown), input_func)
        if not raw:
            if current or not required:
                return current or ''
            output(f"    {label} is required")
            continue
        if raw == CLEAR_TOKEN and not required:
            return ''
        try:
            return to_internal_date(raw, display_format)
        except ValueError:
            output(f"    '{raw}' is not a valid date")


def ask_hours(label, current='', maximum=None, input_func=None, output=print) -> str:
    """Hours field; returns a two-decimal string or '' when left blank."""
    while True:
        raw = _read(_label(label, current), input_func)
        if not raw:
            return current or ''
        if raw == CLEAR_TOKEN:
            return ''
        try:
            return format_hours(parse_hours(raw, maximum))
        except ValueError as e:
            output(f"    {e}")


def confirm(question, default=False, input_func=None) -> bool:
    hint = 'Y/n' if default else 'y/N'
    raw = _read(f"{question} ({hint}): ", input_func).lower()
    if not raw:
        return default
    return raw in ('y', 'yes')


def pause(input_func=None):
    try:
        (input_func or input)("\nPress Enter to continue...")
    except EOFError:
        pass
