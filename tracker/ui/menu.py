"""
Dynamic menu runner.

A menu is an ordered list of MenuEntry objects: headers, separators and keyed
options. ``run_menu`` redraws the menu, reads one line, and dispatches to the
matching option's handler. It returns when an exit option is chosen or a
handler produces a non-None result; otherwise it loops.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from tracker.core.errors import TrackerError
from .prompts import PromptCancelled
from .render import print_error, print_info, render_header

logger = logging.getLogger("project_tracker")

OPTION = 'option'
HEADER = 'header'
SEPARATOR = 'separator'


@dataclass
class MenuEntry:
    kind: str
    label: str = ''
    key: str = ''
    handler: Optional[Callable[[], Any]] = None
    is_exit: bool = False

    @classmethod
    def option(cls, key, label, handler=None, is_exit=False) -> 'MenuEntry':
        return cls(OPTION, label, str(key), handler, is_exit)

    @classmethod
    def header(cls, label) -> 'MenuEntry':
        return cls(HEADER, label)

    @classmethod
    def separator(cls) -> 'MenuEntry':
        return cls(SEPARATOR)


def render_menu(ctx, title, entries: List[MenuEntry], width: int = 40) -> str:
    glyphs = ctx.theme.menu
    lines = [render_header(ctx, title), '']
    for entry in entries:
        if entry.kind == HEADER:
            lines.append(ctx.paint(entry.label, 'Accent2', bold=True))
        elif entry.kind == SEPARATOR:
            lines.append(ctx.paint(glyphs.get('separator', '-') * width, 'TableBorder'))
        else:
            key = ctx.paint(f"[{entry.key}]", 'Accent1', bold=True)
            lines.append(f"  {glyphs.get('bullet', '-')} {key} {entry.label}")
    return '\n'.join(lines)


def dispatch(ctx, entry: MenuEntry, output=print):
    """Run one handler, containing the errors an interactive action can raise."""
    if entry.handler is None:
        return None
    try:
        return entry.handler()
    except PromptCancelled:
        print_info(ctx, "Operation cancelled", output)
    except TrackerError as e:
        logger.warning(f"Menu action '{entry.label}' failed: {e}")
        print_error(ctx, str(e), output)
    except Exception as e:
        logger.exception(f"Unexpected error in menu action '{entry.label}'")
        print_error(ctx, f"Unexpected error: {e}", output)
    return None


def run_menu(ctx, title, entries: List[MenuEntry], input_func=input, output=print,
             prompt='Select an option'):
    """
    Loop until an exit option is chosen or a handler returns non-None.

    Returns:
        The chosen handler's result (None for plain exits or end of input)
    """
    options = {e.key.lower(): e for e in entries if e.kind == OPTION}
    prompt_glyph = ctx.theme.menu.get('prompt', '>')

    while True:
        output(render_menu(ctx, title, entries))
        try:
            choice = input_func(f"\n{prompt} {prompt_glyph} ").strip()
        except EOFError:
            return None

        entry = options.get(choice.lower())
        if entry is None:
            print_error(ctx, f"Invalid choice '{choice}'", output)
            continue

        result = dispatch(ctx, entry, output)
        if entry.is_exit or result is not None:
            return result
