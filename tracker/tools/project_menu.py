"""Interactive project screens."""

from functools import partial

from tracker.core import projects as project_ops
from tracker.core.errors import NotFoundError
from tracker.core.todos import list_todos
from tracker.utils.constants import NICKNAME_MAX_LENGTH, PROJECT_COLUMNS, PROJECT_STATUSES, PROJECT_STATUS_CLOSED
from tracker.ui.menu import MenuEntry, run_menu
from tracker.ui.prompts import ask, ask_choice, ask_date, confirm, pause
from tracker.ui.render import print_header, print_info, print_success, print_warning, render_progress_bar
from .views import details_table, projects_table, todos_table

EDITABLE_FIELDS = ['FullProjectName', 'ID1', 'ID2', 'DateAssigned', 'DueDate', 'BFDate', 'Note', 'ProjFolder']
DATE_FIELDS = {'DateAssigned', 'DueDate', 'BFDate'}


def ask_nickname(session, label='Project nickname', include_closed=True) -> str:
    """Prompt for an existing project's nickname, listing the choices first."""
    nicknames = project_ops.project_nicknames(session.paths, include_closed=include_closed)
    if not nicknames:
        raise NotFoundError("No projects exist yet")
    session.output(f"  Projects: {', '.join(nicknames)}")
    return ask(label, required=True, input_func=session.input_func, output=session.output)


def show_projects(session, include_closed=False):
    title = 'ALL PROJECTS' if include_closed else 'ACTIVE PROJECTS'
    print_header(session.ctx, title, output=session.output)
    projects = project_ops.list_projects(session.paths, include_closed=include_closed)
    session.output(projects_table(session.ctx, projects, session.today))
    pause(session.input_func)


def filter_projects(session):
    print_header(session.ctx, 'FILTER PROJECTS', output=session.output)
    status = ask_choice('Status', PROJECT_STATUSES + ['Any'], current='Any',
                        input_func=session.input_func, output=session.output)
    search = ask('Search text (blank for none)', input_func=session.input_func, output=session.output)
    sort_by = ask_choice('Sort by', ['DueDate', 'Nickname', 'DateAssigned', 'BFDate'], current='DueDate',
                         input_func=session.input_func, output=session.output)
    projects = project_ops.list_projects(
        session.paths,
        status=None if status == 'Any' else status,
        include_closed=status == 'Any',
        sort_by=sort_by,
        search=search or None,
    )
    session.output(projects_table(session.ctx, projects, session.today))
    pause(session.input_func)


def show_project_details(session):
    nickname = ask_nickname(session)
    project = project_ops.get_project(session.paths, nickname)
    print_header(session.ctx, project.full_project_name, project.nickname, output=session.output)
    session.output(details_table(session.ctx, project, PROJECT_COLUMNS))

    todos = list_todos(session.paths, nickname=project.nickname, include_completed=True)
    done = sum(1 for t in todos if t.is_completed)
    session.output('')
    session.output(render_progress_bar(session.ctx, done, len(todos), label=f"Todos {done}/{len(todos)}"))
    open_todos = [t for t in todos if not t.is_completed]
    if open_todos:
        session.output(todos_table(session.ctx, open_todos, session.today))
    pause(session.input_func)


def add_project(session):
    print_header(session.ctx, 'NEW PROJECT', f"Type 'cancel' at any prompt to abort", output=session.output)
    ask_ = partial(ask, input_func=session.input_func, output=session.output)
    date_ = partial(ask_date, display_format=session.date_format, input_func=session.input_func,
                    output=session.output)

    fields = {
        'FullProjectName': ask_('Full project name', required=True),
        'Nickname': ask_('Nickname', required=True, max_length=NICKNAME_MAX_LENGTH),
        'ID1': ask_('ID1'),
        'ID2': ask_('ID2'),
        'DateAssigned': date_('Date assigned (blank = today)'),
        'DueDate': date_(f'Due date (blank = assigned + {session.due_days} days)'),
        'BFDate': date_(f'BF date (blank = assigned + {session.bf_days} days)'),
        'Note': ask_('Note'),
        'ProjFolder': ask_('Project folder'),
    }
    project = project_ops.create_project(
        session.paths, fields, today=session.today, due_days=session.due_days,
        bf_days=session.bf_days, display_format=session.date_format,
    )
    print_success(session.ctx, f"Project {project.nickname} created with a follow-up todo", session.output)


def edit_project(session):
    nickname = ask_nickname(session)
    project = project_ops.get_project(session.paths, nickname)
    print_header(session.ctx, f'EDIT {project.nickname}', "Enter keeps the current value, '-' clears it",
                 output=session.output)

    changes = {}
    for column in EDITABLE_FIELDS:
        current = project.get(column)
        if column in DATE_FIELDS:
            value = ask_date(column, current, display_format=session.date_format,
                             input_func=session.input_func, output=session.output)
        else:
            value = ask(column, current, required=column == 'FullProjectName',
                        input_func=session.input_func, output=session.output)
        if value != current:
            changes[column] = value

    if not changes:
        print_info(session.ctx, "No changes made", session.output)
        return
    project_ops.update_project(session.paths, project.nickname, changes, today=session.today,
                               display_format=session.date_format)
    print_success(session.ctx, f"Project {project.nickname} updated ({', '.join(changes)})", session.output)


def change_project_status(session):
    nickname = ask_nickname(session)
    project = project_ops.get_project(session.paths, nickname)
    status = ask_choice('New status', PROJECT_STATUSES, current=project.status,
                        input_func=session.input_func, output=session.output)
    if status == project.status:
        print_info(session.ctx, f"{project.nickname} is already {status}", session.output)
        return

    if status == PROJECT_STATUS_CLOSED:
        open_todos = list_todos(session.paths, nickname=project.nickname)
        if open_todos and not confirm(f"Closing completes {len(open_todos)} open todo(s). Continue?",
                                      input_func=session.input_func):
            print_info(session.ctx, "Status unchanged", session.output)
            return

    project_ops.set_project_status(session.paths, project.nickname, status, today=session.today)
    print_success(session.ctx, f"{project.nickname} is now {status}", session.output)


def remove_project(session):
    nickname = ask_nickname(session)
    project = project_ops.get_project(session.paths, nickname)
    print_warning(session.ctx, f"Deleting {project.nickname} also deletes its todos and time entries",
                  session.output)
    if not confirm(f"Delete project {project.nickname}?", input_func=session.input_func):
        print_info(session.ctx, "Nothing deleted", session.output)
        return
    removed = project_ops.delete_project(session.paths, project.nickname)
    print_success(
        session.ctx,
        f"Deleted {project.nickname}, {removed['todos']} todo(s) and {removed['time_entries']} time entr(ies)",
        session.output,
    )


def project_menu(session):
    entries = [
        MenuEntry.header('View'),
        MenuEntry.option('1', 'Active projects', partial(show_projects, session)),
        MenuEntry.option('2', 'All projects', partial(show_projects, session, include_closed=True)),
        MenuEntry.option('3', 'Filter / search', partial(filter_projects, session)),
        MenuEntry.option('4', 'Project details', partial(show_project_details, session)),
        MenuEntry.separator(),
        MenuEntry.header('Manage'),
        MenuEntry.option('5', 'New project', partial(add_project, session)),
        MenuEntry.option('6', 'Edit project', partial(edit_project, session)),
        MenuEntry.option('7', 'Change status', partial(change_project_status, session)),
        MenuEntry.option('8', 'Delete project', partial(remove_project, session)),
        MenuEntry.separator(),
        MenuEntry.option('B', 'Back', is_exit=True),
    ]
    return run_menu(session.ctx, 'PROJECTS', entries, session.input_func, session.output)
