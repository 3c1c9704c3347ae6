#!/usr/bin/env python3
"""
================================================================================
CLI - Command Line Interface
================================================================================

Provides unified command-line access to all tracker features:
    - Interactive menu launcher
    - Single-shot create/list/update/delete/filter/get for projects, todos
      and time entries
    - CumulativeHrs recalculation
    - Theme listing, preview and selection
    - Data health checks and zip backups

Features:
    - Themed tables and messages (same RenderContext as the menus)
    - JSON in (--data) and JSON out (get, --json) for scripting
    - Exit codes: 0 success, 1 failure, 130 interrupted

Usage:
    python cli.py [command] [options]
    python cli.py --help
================================================================================
"""

import sys
import argparse
import io
import json
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from tracker.core import timesheets as time_ops
from tracker.core import todos as todo_ops
from tracker.core import projects as project_ops
from tracker.core.errors import TrackerError, ValidationError
from tracker.core.models import coerce_date
from tracker.core.storage import (
    load_projects,
    load_time_entries,
    load_todos,
    project_hours,
    recompute_all_project_hours,
    recompute_project_hours,
)
from tracker.utils.config import get_data_paths, load_config, resolve_dir, set_config_value
from tracker.utils import constants
from tracker.utils.constants import PROJECT_COLUMNS, TIME_ENTRY_COLUMNS, TODO_COLUMNS
from tracker.utils.dates import to_display_date
from tracker.utils.logger import logger, setup_logging
from tracker.ui.render import print_error, print_header, print_info, print_success
from tracker.ui.theme import RenderContext, list_themes, load_theme
from tracker.tools.main_menu import run_interactive
from tracker.tools.settings_menu import theme_preview
from tracker.tools.views import projects_table, time_entries_table, todos_table, weekly_summary_table

ACTIONS = ['create', 'list', 'update', 'delete', 'filter', 'get']


def _pretty_json(payload: Any):
    """Render JSON to stdout with stable formatting."""
    print(json.dumps(payload, indent=2, sort_keys=True, default=str))


def _parse_data(args) -> dict:
    if not args.data:
        raise ValidationError("--data '<json object>' is required for this action")
    try:
        data = json.loads(args.data)
    except json.JSONDecodeError as e:
        raise ValidationError(f"--data is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise ValidationError("--data must be a JSON object")
    return data


def _require_key(args, label) -> str:
    if not args.key:
        raise ValidationError(f"--key <{label}> is required for this action")
    return args.key


def _write_bytes_to_path(data: bytes, dest: Path) -> Path:
    dest.parent.mkdir(parents=True, exist_ok=True)
    with open(dest, 'wb') as f:
        f.write(data)
    return dest


def _show_records(args, records, table):
    if args.json:
        _pretty_json([r.to_record() for r in records])
    else:
        print(table)
    return True


# ==================================
# INTERACTIVE
# ==================================

def cmd_menu(args):
    setup_logging('menu', args.config)
    run_interactive(args.config, args.data_dir, config_file=args.config_file)
    return True


# ==================================
# PROJECTS
# ==================================

def cmd_projects(args):
    paths, ctx = args.paths, args.ctx
    fmt = ctx.date_format
    defaults = args.config.get('projects', {})

    if args.action == 'create':
        project = project_ops.create_project(
            paths, _parse_data(args),
            due_days=int(defaults.get('due_days', 42)),
            bf_days=int(defaults.get('bf_days', 14)),
            display_format=fmt,
        )
        print_success(ctx, f"Project {project.nickname} created")
        return True

    if args.action == 'get':
        _pretty_json(project_ops.get_project(paths, _require_key(args, 'Nickname')).to_record())
        return True

    if args.action == 'update':
        project = project_ops.update_project(paths, _require_key(args, 'Nickname'), _parse_data(args),
                                             display_format=fmt)
        print_success(ctx, f"Project {project.nickname} updated")
        return True

    if args.action == 'delete':
        removed = project_ops.delete_project(paths, _require_key(args, 'Nickname'))
        print_success(ctx, f"Project {args.key} deleted "
                           f"({removed['todos']} todo(s), {removed['time_entries']} time entr(ies))")
        return True

    if args.action == 'filter' and not (args.status or args.search):
        print_error(ctx, "filter needs --status and/or --search")
        return False

    projects = project_ops.list_projects(
        paths,
        status=args.status,
        include_closed=args.all,
        sort_by=args.sort or 'DueDate',
        search=args.search,
    )
    return _show_records(args, projects, projects_table(ctx, projects))


# ==================================
# TODOS
# ==================================

def cmd_todos(args):
    paths, ctx = args.paths, args.ctx
    fmt = ctx.date_format

    if args.action == 'create':
        todo = todo_ops.create_todo(paths, _parse_data(args), display_format=fmt)
        print_success(ctx, f"Todo created with id {todo.id}")
        return True

    if args.action == 'get':
        _pretty_json(todo_ops.get_todo(paths, _require_key(args, 'ID')).to_record())
        return True

    if args.action == 'update':
        todo = todo_ops.update_todo(paths, _require_key(args, 'ID'), _parse_data(args), display_format=fmt)
        print_success(ctx, f"Todo {todo.id} updated")
        return True

    if args.action == 'delete':
        todo_ops.delete_todo(paths, _require_key(args, 'ID'))
        print_success(ctx, f"Todo {args.key} deleted")
        return True

    nickname = '' if args.unassociated else args.nickname
    if args.action == 'filter' and not (args.status or nickname is not None):
        print_error(ctx, "filter needs --status, --nickname or --unassociated")
        return False

    todos = todo_ops.list_todos(paths, status=args.status, nickname=nickname, include_completed=args.all)
    return _show_records(args, todos, todos_table(ctx, todos))


# ==================================
# TIME ENTRIES
# ==================================

def cmd_time(args):
    paths, ctx = args.paths, args.ctx
    fmt = ctx.date_format

    if args.action == 'create':
        entry = time_ops.create_time_entry(paths, _parse_data(args), display_format=fmt)
        print_success(ctx, f"Time entry {entry.entry_id} created ({entry.total_hours}h on {entry.nickname})")
        return True

    if args.action == 'get':
        _pretty_json(time_ops.get_time_entry(paths, _require_key(args, 'EntryID')).to_record())
        return True

    if args.action == 'update':
        entry = time_ops.update_time_entry(paths, _require_key(args, 'EntryID'), _parse_data(args),
                                           display_format=fmt)
        print_success(ctx, f"Time entry {entry.entry_id} updated ({entry.total_hours}h)")
        return True

    if args.action == 'delete':
        time_ops.delete_time_entry(paths, _require_key(args, 'EntryID'))
        print_success(ctx, f"Time entry {args.key} deleted")
        return True

    if args.action == 'filter' and not (args.nickname or args.week):
        print_error(ctx, "filter needs --nickname and/or --week")
        return False

    week = coerce_date('--week', args.week, fmt) if args.week else None

    if args.summary:
        summary = time_ops.weekly_summary(paths, week)
        if args.json:
            _pretty_json(summary)
        else:
            print_header(ctx, 'WEEKLY SUMMARY', f"Week of {to_display_date(summary['week_start'], fmt)}")
            print(weekly_summary_table(ctx, summary))
        return True

    entries = time_ops.list_time_entries(paths, nickname=args.nickname, week_start_date=week)
    return _show_records(args, entries, time_entries_table(ctx, entries))


# ==================================
# MAINTENANCE
# ==================================

def cmd_recalc(args):
    if args.nickname:
        project_ops.get_project(args.paths, args.nickname)
        if not recompute_project_hours(args.paths, args.nickname):
            print_error(args.ctx, f"Could not update CumulativeHrs for {args.nickname}")
            return False
        print_success(args.ctx, f"CumulativeHrs recalculated for {args.nickname}")
        return True
    changed = recompute_all_project_hours(args.paths)
    print_success(args.ctx, f"CumulativeHrs recalculated ({changed} project(s) changed)")
    return True


def cmd_themes_list(args):
    current = args.ctx.theme.name
    for name in list_themes(resolve_dir(args.config, 'themes_dir')):
        marker = '*' if name.lower() == current.lower() else ' '
        print(f" {marker} {name}")
    return True


def cmd_themes_show(args):
    theme = load_theme(args.name or args.ctx.theme.name, resolve_dir(args.config, 'themes_dir'))
    preview = args.ctx.with_theme(theme)
    print_header(preview, f'THEME PREVIEW: {theme.name}')
    print(theme_preview(preview))
    return True


def cmd_themes_set(args):
    available = list_themes(resolve_dir(args.config, 'themes_dir'))
    match = next((n for n in available if n.lower() == args.name.lower()), None)
    if match is None:
        print_error(args.ctx, f"Unknown theme '{args.name}'. Available: {', '.join(available)}")
        return False
    set_config_value('display.theme', match, args.config_file)
    print_success(args.ctx, f"Theme set to {match}")
    return True


def _check_file(path: Path, columns, label: str) -> dict:
    if not path.exists():
        return {'name': f'{label} File', 'status': 'WARNING', 'message': f'{path.name} not found (created on first use)'}
    try:
        header = list(pd.read_csv(path, nrows=0, dtype=str).columns)
    except pd.errors.EmptyDataError:
        return {'name': f'{label} File', 'status': 'WARNING', 'message': f'{path.name} is empty'}
    except Exception as e:
        return {'name': f'{label} File', 'status': 'ERROR', 'message': f'{path.name} unreadable: {e}'}
    missing = [c for c in columns if c not in header]
    if missing:
        return {'name': f'{label} File', 'status': 'WARNING',
                'message': f'{path.name} missing column(s): {", ".join(missing)} (back-filled on load)'}
    return {'name': f'{label} File', 'status': 'OK', 'message': f'{path.name} header matches schema'}


def _count_invalid(records) -> int:
    invalid = 0
    for record in records:
        try:
            record.validate()
        except ValidationError as e:
            logger.warning(f"Invalid {type(record).__name__} record: {e}")
            invalid += 1
    return invalid


def cmd_health(args):
    try:
        paths = args.paths
        health_status = {'timestamp': datetime.now().isoformat(), 'data_dir': str(paths.base_dir), 'checks': []}

        config_file = Path(args.config_file or constants.CONFIG_FILE)
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                json.load(f)
            health_status['checks'].append({'name': 'Configuration', 'status': 'OK', 'message': f'{config_file.name} is valid JSON'})
        except FileNotFoundError:
            health_status['checks'].append({'name': 'Configuration', 'status': 'WARNING', 'message': 'config.json missing (defaults in use)'})
        except (json.JSONDecodeError, OSError) as e:
            health_status['checks'].append({'name': 'Configuration', 'status': 'ERROR', 'message': f'config.json unreadable: {e}'})

        health_status['checks'].append(_check_file(paths.projects, PROJECT_COLUMNS, 'Projects'))
        health_status['checks'].append(_check_file(paths.todos, TODO_COLUMNS, 'Todos'))
        health_status['checks'].append(_check_file(paths.time_entries, TIME_ENTRY_COLUMNS, 'Time Entries'))

        projects = load_projects(paths, create_if_missing=False)
        todos = load_todos(paths, create_if_missing=False)
        entries = load_time_entries(paths, create_if_missing=False)
        invalid = _count_invalid(projects) + _count_invalid(todos) + _count_invalid(entries)
        if invalid:
            health_status['checks'].append({'name': 'Record Invariants', 'status': 'WARNING', 'message': f'{invalid} record(s) violate field rules'})
        else:
            health_status['checks'].append({'name': 'Record Invariants', 'status': 'OK', 'message': f'{len(projects) + len(todos) + len(entries)} record(s) valid'})

        stale = [p.nickname for p in projects if p.cumulative_hrs != project_hours(entries, p.nickname)]
        if stale:
            health_status['checks'].append({'name': 'Cumulative Hours', 'status': 'WARNING', 'message': f'Out of date for {", ".join(stale)} (run recalc)'})
        else:
            health_status['checks'].append({'name': 'Cumulative Hours', 'status': 'OK', 'message': 'All projects match their time entries'})

        known = {p.nickname.lower() for p in projects}
        orphans = sum(1 for t in todos if t.nickname and t.nickname.lower() not in known)
        orphans += sum(1 for e in entries if e.nickname.lower() not in known)
        if orphans:
            health_status['checks'].append({'name': 'References', 'status': 'WARNING', 'message': f'{orphans} record(s) reference missing projects'})
        else:
            health_status['checks'].append({'name': 'References', 'status': 'OK', 'message': 'All project references resolve'})

        has_errors = any(check['status'] == 'ERROR' for check in health_status['checks'])
        has_warnings = any(check['status'] == 'WARNING' for check in health_status['checks'])
        if has_errors:
            health_status['overall_status'] = 'ERROR'
            health_status['summary'] = 'Data has critical errors'
        elif has_warnings:
            health_status['overall_status'] = 'WARNING'
            health_status['summary'] = 'Data has warnings'
        else:
            health_status['overall_status'] = 'OK'
            health_status['summary'] = 'All checks passed'
        _pretty_json(health_status)
        return not has_errors
    except Exception as e:
        logger.exception("Health check failed")
        print_error(args.ctx, f"Health check failed: {e}")
        return False


def _build_zip_backup_bytes(paths, config_file: Optional[Path]) -> bytes:
    raw_zip = io.BytesIO()
    with zipfile.ZipFile(raw_zip, 'w', zipfile.ZIP_DEFLATED) as zf:
        manifest = {'created': datetime.now().isoformat(), 'version': '1.0', 'includes': []}

        def add_file(path: Path, arcname: str):
            if path is not None and path.exists():
                zf.write(str(path), arcname)
                manifest['includes'].append(arcname)

        add_file(paths.projects, paths.projects.name)
        add_file(paths.todos, paths.todos.name)
        add_file(paths.time_entries, paths.time_entries.name)
        add_file(config_file, 'config.json')
        zf.writestr('manifest.json', json.dumps(manifest, indent=2))

    raw_zip.seek(0)
    return raw_zip.getvalue()


def cmd_backup(args):
    data = _build_zip_backup_bytes(args.paths, Path(args.config_file or constants.CONFIG_FILE))
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    dest = Path(args.output or f'tracker_backup_{timestamp}.zip')
    _write_bytes_to_path(data, dest)
    logger.info(f"Backup written to {dest}")
    print_success(args.ctx, f"Backup written to {dest}")
    return True


# ==================================
# PARSER
# ==================================

def _add_entity_parser(subparsers, name, help_text, key_label, func):
    parser = subparsers.add_parser(name, help=help_text)
    parser.add_argument('action', choices=ACTIONS, help='Operation to perform')
    parser.add_argument('--key', help=f'{key_label} of the record (get/update/delete)')
    parser.add_argument('--data', help="JSON object of fields (create/update), e.g. '{\"Nickname\": \"WEB\"}'")
    parser.add_argument('--status', help='Filter by Status')
    parser.add_argument('--nickname', help='Filter by project nickname')
    parser.add_argument('--json', action='store_true', help='Print list/filter results as JSON')
    parser.set_defaults(func=func)
    return parser


def build_parser():
    parser = argparse.ArgumentParser(
        description='Project Tracker - projects, todos and weekly timesheets',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  %(prog)s menu                                   # Interactive menus
  %(prog)s projects list                          # Active projects
  %(prog)s projects create --data '{"FullProjectName": "Website", "Nickname": "WEBSITE"}'
  %(prog)s projects get --key WEBSITE             # One project as JSON
  %(prog)s todos filter --nickname WEBSITE
  %(prog)s time create --data '{"Nickname": "WEBSITE", "Mon": 8, "Tue": 6.5}'
  %(prog)s time list --summary --week 01/01/2024  # Weekly totals
  %(prog)s themes set Ocean
  %(prog)s health
        '''
    )
    parser.add_argument('--data-dir', dest='data_dir', help='Directory holding the entity files')
    parser.add_argument('--config', dest='config_file', help='Path to config.json')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    parser_menu = subparsers.add_parser('menu', help='Start the interactive menus')
    parser_menu.set_defaults(func=cmd_menu)

    parser_projects = _add_entity_parser(subparsers, 'projects', 'Manage projects', 'Nickname', cmd_projects)
    parser_projects.add_argument('--search', help='Match nickname, name or IDs')
    parser_projects.add_argument('--sort', choices=['DueDate', 'Nickname', 'DateAssigned', 'BFDate'], help='Sort column')
    parser_projects.add_argument('--all', action='store_true', help='Include closed projects')

    parser_todos = _add_entity_parser(subparsers, 'todos', 'Manage todos', 'ID', cmd_todos)
    parser_todos.add_argument('--unassociated', action='store_true', help='Only todos without a project')
    parser_todos.add_argument('--all', action='store_true', help='Include completed todos')

    parser_time = _add_entity_parser(subparsers, 'time', 'Manage weekly time entries', 'EntryID', cmd_time)
    parser_time.add_argument('--week', help='Any date in the week to show')
    parser_time.add_argument('--summary', action='store_true', help='Per-project totals for the week')

    parser_recalc = subparsers.add_parser('recalc', help='Recompute project CumulativeHrs from time entries')
    parser_recalc.add_argument('--nickname', help='Only this project')
    parser_recalc.set_defaults(func=cmd_recalc)

    parser_themes = subparsers.add_parser('themes', help='List, preview or select themes')
    themes_sub = parser_themes.add_subparsers(dest='themes_command')
    themes_sub.required = True
    themes_list = themes_sub.add_parser('list', help='List available themes')
    themes_list.set_defaults(func=cmd_themes_list)
    themes_show = themes_sub.add_parser('show', help='Preview a theme')
    themes_show.add_argument('name', nargs='?', help='Theme name (current theme when omitted)')
    themes_show.set_defaults(func=cmd_themes_show)
    themes_set = themes_sub.add_parser('set', help='Select the theme used from now on')
    themes_set.add_argument('name', help='Theme name')
    themes_set.set_defaults(func=cmd_themes_set)

    parser_health = subparsers.add_parser('health', help='Check config, data files and record consistency')
    parser_health.set_defaults(func=cmd_health)

    parser_backup = subparsers.add_parser('backup', help='Write a zip archive of the data files')
    parser_backup.add_argument('--output', help='Destination path for the zip')
    parser_backup.set_defaults(func=cmd_backup)

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # If no command specified, show help
    if not args.command:
        parser.print_help()
        return 0

    args.config = load_config(args.config_file)
    if args.command != 'menu':
        setup_logging('cli', args.config)
    args.paths = get_data_paths(args.config, args.data_dir)
    args.ctx = RenderContext.from_config(args.config)

    # Run command
    try:
        success = args.func(args)
        return 0 if success else 1
    except KeyboardInterrupt:
        print_info(args.ctx, "\nOperation cancelled by user")
        return 130
    except TrackerError as e:
        logger.warning(f"{args.command} failed: {e}")
        print_error(args.ctx, str(e))
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error in {args.command}")
        print_error(args.ctx, f"Unexpected error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
