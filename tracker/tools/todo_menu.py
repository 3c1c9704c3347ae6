"""Interactive todo screens."""

from functools import partial

from tracker.core import todos as todo_ops
from tracker.core.errors import NotFoundError
from tracker.core.projects import project_nicknames
from tracker.utils.constants import IMPORTANCE_LEVELS, TODO_COLUMNS, TODO_STATUSES
from tracker.utils.dates import add_days, today_internal
from tracker.ui.menu import MenuEntry, run_menu
from tracker.ui.prompts import ask, ask_choice, ask_date, confirm, pause
from tracker.ui.render import print_header, print_info, print_success
from .views import details_table, todos_table


def pick_todo(session, include_completed=False):
    """List todos with row numbers and return the one the user picks."""
    todos = todo_ops.list_todos(session.paths, include_completed=include_completed)
    if not todos:
        raise NotFoundError("No todos to choose from")
    session.output(todos_table(session.ctx, todos, session.today))
    while True:
        raw = ask('Todo #', required=True, input_func=session.input_func, output=session.output)
        if raw.isdigit() and 1 <= int(raw) <= len(todos):
            return todos[int(raw) - 1]
        session.output(f"    Enter a number from 1 to {len(todos)}")


def ask_project_link(session, current=''):
    """Optional project nickname; blank or '-' leaves the todo unassociated."""
    nicknames = project_nicknames(session.paths)
    if nicknames:
        session.output(f"  Projects: {', '.join(nicknames)}")
    return ask('Project nickname (optional)', current, input_func=session.input_func, output=session.output)


def show_todos(session, include_completed=False):
    print_header(session.ctx, 'ALL TODOS' if include_completed else 'OPEN TODOS', output=session.output)
    todos = todo_ops.list_todos(session.paths, include_completed=include_completed)
    session.output(todos_table(session.ctx, todos, session.today))
    pause(session.input_func)


def show_due_soon(session):
    horizon = add_days(today_internal(session.today), session.ctx.due_soon_days)
    print_header(session.ctx, 'DUE SOON', f"Open todos due within {session.ctx.due_soon_days} day(s)",
                 output=session.output)
    todos = todo_ops.list_todos(session.paths, due_before=horizon)
    session.output(todos_table(session.ctx, todos, session.today))
    pause(session.input_func)


def filter_todos(session):
    print_header(session.ctx, 'FILTER TODOS', output=session.output)
    status = ask_choice('Status', TODO_STATUSES + ['Open', 'Any'], current='Open',
                        input_func=session.input_func, output=session.output)
    nickname = ask("Project nickname (blank = all, 'none' = unassociated)",
                   input_func=session.input_func, output=session.output)
    if not nickname:
        nickname = None
    elif nickname.lower() == 'none':
        nickname = ''
    todos = todo_ops.list_todos(
        session.paths,
        status=status if status in TODO_STATUSES else None,
        nickname=nickname,
        include_completed=status == 'Any',
    )
    session.output(todos_table(session.ctx, todos, session.today))
    pause(session.input_func)


def show_todo_details(session):
    todo = pick_todo(session, include_completed=True)
    print_header(session.ctx, 'TODO DETAILS', todo.nickname or None, output=session.output)
    session.output(details_table(session.ctx, todo, TODO_COLUMNS))
    pause(session.input_func)


def add_todo(session):
    print_header(session.ctx, 'NEW TODO', "Type 'cancel' at any prompt to abort", output=session.output)
    fields = {
        'TaskDescription': ask('Task', required=True, input_func=session.input_func, output=session.output),
        'Nickname': ask_project_link(session),
        'Importance': ask_choice('Importance', IMPORTANCE_LEVELS, current='Normal',
                                 input_func=session.input_func, output=session.output),
        'DueDate': ask_date('Due date', display_format=session.date_format,
                            input_func=session.input_func, output=session.output),
    }
    todo = todo_ops.create_todo(session.paths, fields, today=session.today, display_format=session.date_format)
    print_success(session.ctx, f"Todo added: {todo.task_description}", session.output)


def edit_todo(session):
    todo = pick_todo(session, include_completed=True)
    print_header(session.ctx, 'EDIT TODO', "Enter keeps the current value, '-' clears it", output=session.output)
    fields = {
        'TaskDescription': ask('Task', todo.task_description, required=True,
                               input_func=session.input_func, output=session.output),
        'Nickname': ask_project_link(session, todo.nickname),
        'Importance': ask_choice('Importance', IMPORTANCE_LEVELS, current=todo.importance,
                                 input_func=session.input_func, output=session.output),
        'DueDate': ask_date('Due date', todo.due_date, display_format=session.date_format,
                            input_func=session.input_func, output=session.output),
        'Status': ask_choice('Status', TODO_STATUSES, current=todo.status,
                             input_func=session.input_func, output=session.output),
    }
    changes = {k: v for k, v in fields.items() if v != todo.get(k)}
    if not changes:
        print_info(session.ctx, "No changes made", session.output)
        return
    todo_ops.update_todo(session.paths, todo.id, changes, today=session.today)
    print_success(session.ctx, "Todo updated", session.output)


def mark_complete(session):
    todo = pick_todo(session)
    todo_ops.complete_todo(session.paths, todo.id, today=session.today)
    print_success(session.ctx, f"Completed: {todo.task_description}", session.output)


def remove_todo(session):
    todo = pick_todo(session, include_completed=True)
    if not confirm(f"Delete '{todo.task_description}'?", input_func=session.input_func):
        print_info(session.ctx, "Nothing deleted", session.output)
        return
    todo_ops.delete_todo(session.paths, todo.id)
    print_success(session.ctx, "Todo deleted", session.output)


def todo_menu(session):
    entries = [
        MenuEntry.header('View'),
        MenuEntry.option('1', 'Open todos', partial(show_todos, session)),
        MenuEntry.option('2', 'All todos', partial(show_todos, session, include_completed=True)),
        MenuEntry.option('3', 'Due soon', partial(show_due_soon, session)),
        MenuEntry.option('4', 'Filter', partial(filter_todos, session)),
        MenuEntry.option('5', 'Todo details', partial(show_todo_details, session)),
        MenuEntry.separator(),
        MenuEntry.header('Manage'),
        MenuEntry.option('6', 'New todo', partial(add_todo, session)),
        MenuEntry.option('7', 'Edit todo', partial(edit_todo, session)),
        MenuEntry.option('8', 'Mark complete', partial(mark_complete, session)),
        MenuEntry.option('9', 'Delete todo', partial(remove_todo, session)),
        MenuEntry.separator(),
        MenuEntry.option('B', 'Back', is_exit=True),
    ]
    return run_menu(session.ctx, 'TODOS', entries, session.input_func, session.output)
