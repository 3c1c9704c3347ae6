"""
Display settings: theme selection and preview, colour toggle, date format.

Changes apply to the running session immediately (the RenderContext is
updated in place, so menus already on screen pick them up on the next
redraw) and are written back to config.json.
"""

from functools import partial

from tracker.utils.config import resolve_dir, set_config_value
from tracker.utils.dates import to_display_date, today_internal
from tracker.ui.menu import MenuEntry, run_menu
from tracker.ui.prompts import ask, ask_choice, confirm, pause
from tracker.ui.render import print_error, print_header, print_success, render_box, render_progress_bar
from tracker.ui.table import render_table
from tracker.ui.theme import COLOR_ROLES, list_themes, load_theme

DATE_FORMATS = ['%m/%d/%Y', '%d/%m/%Y', '%Y-%m-%d', '%d %b %Y']

SAMPLE_ROWS = [
    {'Nickname': 'WEBSITE', 'Status': 'Active', 'Hours': '14.50'},
    {'Nickname': 'AUDIT', 'Status': 'On Hold', 'Hours': '3.00'},
    {'Nickname': 'LEGACY', 'Status': 'Closed', 'Hours': '120.25'},
]


def _persist(session, key, value):
    session.config = set_config_value(key, value, session.config_file)


def _themes_dir(session):
    return resolve_dir(session.config, 'themes_dir')


def theme_preview(ctx) -> str:
    """Sample header, table, messages and progress bar drawn with ``ctx``."""
    roles = {'Active': None, 'On Hold': 'Accent2', 'Closed': 'Completed'}
    lines = [
        render_table(ctx, SAMPLE_ROWS, ['Nickname', 'Status', 'Hours'],
                     alignments={'Hours': 'right'},
                     row_colorizer=lambda row, i: roles.get(row.get('Status'))),
        '',
        '  ' + '  '.join(ctx.paint(role, role) for role in COLOR_ROLES),
        '',
        render_progress_bar(ctx, 2, 3, label='Progress'),
        render_box(ctx, 'Saved successfully', 'success'),
    ]
    return '\n'.join(lines)


def _preview_theme(session):
    name = ask_choice('Theme', list_themes(_themes_dir(session)), current=session.ctx.theme.name,
                     input_func=session.input_func, output=session.output)
    preview = session.ctx.with_theme(load_theme(name, _themes_dir(session)))
    print_header(preview, f'THEME PREVIEW: {preview.theme.name}', output=session.output)
    session.output(theme_preview(preview))
    pause(session.input_func)
    return name


def show_theme_preview(session):
    _preview_theme(session)


def change_theme(session):
    name = _preview_theme(session)
    if not confirm(f"Use theme {name}?", default=True, input_func=session.input_func):
        return
    session.ctx.theme = load_theme(name, _themes_dir(session))
    _persist(session, 'display.theme', session.ctx.theme.name)
    print_success(session.ctx, f"Theme set to {session.ctx.theme.name}", session.output)


def toggle_color(session):
    session.ctx.use_color = not session.ctx.use_color
    _persist(session, 'display.use_color', session.ctx.use_color)
    print_success(session.ctx, f"Colour {'on' if session.ctx.use_color else 'off'}", session.output)


def change_date_format(session):
    today = today_internal(session.today)
    for fmt in DATE_FORMATS:
        session.output(f"  {fmt:<10} {to_display_date(today, fmt)}")
    fmt = ask_choice('Date format', DATE_FORMATS, current=session.ctx.date_format,
                     input_func=session.input_func, output=session.output)
    session.ctx.date_format = fmt
    _persist(session, 'display.date_format', fmt)
    print_success(session.ctx, f"Dates now shown as {to_display_date(today, fmt)}", session.output)


def change_due_soon(session):
    raw = ask('Days counted as "due soon"', str(session.ctx.due_soon_days),
              input_func=session.input_func, output=session.output)
    if not raw.isdigit():
        print_error(session.ctx, "Enter a whole number of days", session.output)
        return
    session.ctx.due_soon_days = int(raw)
    _persist(session, 'display.due_soon_days', int(raw))
    print_success(session.ctx, f"Due-soon window is {raw} day(s)", session.output)


def settings_menu(session):
    entries = [
        MenuEntry.header('Appearance'),
        MenuEntry.option('1', 'Change theme', partial(change_theme, session)),
        MenuEntry.option('2', 'Preview a theme', partial(show_theme_preview, session)),
        MenuEntry.option('3', 'Toggle colour', partial(toggle_color, session)),
        MenuEntry.separator(),
        MenuEntry.header('Dates'),
        MenuEntry.option('4', 'Date format', partial(change_date_format, session)),
        MenuEntry.option('5', 'Due-soon window', partial(change_due_soon, session)),
        MenuEntry.separator(),
        MenuEntry.option('B', 'Back', is_exit=True),
    ]
    return run_menu(session.ctx, 'SETTINGS', entries, session.input_func, session.output)
