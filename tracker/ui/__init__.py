"""
================================================================================
UI MODULE - Themes, Tables, Menus and Prompts
================================================================================

Console presentation layer. Nothing here holds global theme state: every
rendering call takes a RenderContext.

Exported:
    RenderContext, Theme, load_theme, list_themes
    render_table
    render_header, render_box, render_progress_bar, print_* helpers
    MenuEntry, run_menu
    PromptCancelled

Usage:
    from tracker.ui import RenderContext, render_table

    ctx = RenderContext.from_config(config)
    print(render_table(ctx, rows, ['Nickname', 'DueDate']))
================================================================================
"""

from .theme import RenderContext, Theme, load_theme, list_themes
from .table import render_table
from .render import (
    render_header,
    render_box,
    render_progress_bar,
    print_header,
    print_success,
    print_error,
    print_warning,
    print_info,
)
from .menu import MenuEntry, run_menu
from .prompts import PromptCancelled

__all__ = [
    'RenderContext',
    'Theme',
    'load_theme',
    'list_themes',
    'render_table',
    'render_header',
    'render_box',
    'render_progress_bar',
    'print_header',
    'print_success',
    'print_error',
    'print_warning',
    'print_info',
    'MenuEntry',
    'run_menu',
    'PromptCancelled',
]
