"""
================================================================================
MAIN MENU - Dashboard and top-level navigation
================================================================================

The dashboard summarises the data set on every redraw of the main menu:
    - active / on-hold project counts
    - open, overdue and due-soon todos
    - hours logged this week

Each submenu runs its own loop and returns here on 'Back'.
================================================================================
"""

import logging
from functools import partial

from tracker.core.storage import load_projects, load_todos, recompute_all_project_hours
from tracker.core.timesheets import weekly_summary
from tracker.core.todos import DUE_OVERDUE, DUE_SOON, todo_due_state
from tracker.utils.constants import PROJECT_STATUS_ACTIVE, PROJECT_STATUS_ON_HOLD
from tracker.utils.dates import to_display_date
from tracker.ui.menu import MenuEntry, run_menu
from tracker.ui.render import print_info, print_success, render_header
from .project_menu import project_menu
from .session import build_session
from .settings_menu import settings_menu
from .time_menu import time_menu
from .todo_menu import todo_menu

logger = logging.getLogger("project_tracker")


def dashboard(session) -> str:
    ctx = session.ctx
    projects = load_projects(session.paths)
    todos = [t for t in load_todos(session.paths) if not t.is_completed]
    states = [todo_due_state(t, session.today, ctx.due_soon_days) for t in todos]
    week = weekly_summary(session.paths, session.today)

    active = sum(1 for p in projects if p.status == PROJECT_STATUS_ACTIVE)
    on_hold = sum(1 for p in projects if p.status == PROJECT_STATUS_ON_HOLD)
    overdue = states.count(DUE_OVERDUE)
    due_soon = states.count(DUE_SOON)

    lines = [
        render_header(ctx, 'PROJECT TRACKER', f"Week of {to_display_date(week['week_start'], ctx.date_format)}"),
        f"  Projects:   {ctx.paint(str(active), 'Accent1', bold=True)} active, {on_hold} on hold",
        f"  Todos:      {len(todos)} open, "
        f"{ctx.paint(str(overdue), 'Overdue' if overdue else 'Normal', bold=bool(overdue))} overdue, "
        f"{ctx.paint(str(due_soon), 'DueSoon' if due_soon else 'Normal')} due soon",
        f"  This week:  {ctx.paint(week['total'], 'Accent1', bold=True)} hours",
    ]
    return '\n'.join(lines)


def show_dashboard(session):
    session.output(dashboard(session))


def recalculate_hours(session):
    changed = recompute_all_project_hours(session.paths)
    if changed:
        print_success(session.ctx, f"Updated CumulativeHrs on {changed} project(s)", session.output)
    else:
        print_info(session.ctx, "All project hours already up to date", session.output)


def main_menu(session):
    entries = [
        MenuEntry.option('D', 'Dashboard', partial(show_dashboard, session)),
        MenuEntry.separator(),
        MenuEntry.option('1', 'Projects', partial(project_menu, session)),
        MenuEntry.option('2', 'Todos', partial(todo_menu, session)),
        MenuEntry.option('3', 'Timesheets', partial(time_menu, session)),
        MenuEntry.separator(),
        MenuEntry.option('4', 'Recalculate project hours', partial(recalculate_hours, session)),
        MenuEntry.option('5', 'Settings', partial(settings_menu, session)),
        MenuEntry.separator(),
        MenuEntry.option('Q', 'Quit', is_exit=True),
    ]
    show_dashboard(session)
    run_menu(session.ctx, 'MAIN MENU', entries, session.input_func, session.output)
    session.output("\nGoodbye.")


def run_interactive(config=None, base_dir=None, config_file=None, input_func=input, output=print):
    """Build a session and run the main menu until the user quits."""
    session = build_session(config, base_dir, input_func=input_func, output=output, config_file=config_file)
    logger.info(f"Interactive session started (data: {session.paths.base_dir})")
    main_menu(session)
    logger.info("Interactive session ended")
    return session
