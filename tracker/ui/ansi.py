"""
ANSI helpers.

Every width computation in the renderer goes through ``visible_length`` so
that coloured cells pad and align like plain ones.
"""

import re

from tracker.utils.constants import ELLIPSIS, VISIBLE_LENGTH_CACHE_LIMIT

ANSI_RE = re.compile(r'\x1b\[[0-9;?]*[ -/]*[@-~]')

RESET = '\033[0m'
BOLD = '\033[1m'
DIM = '\033[2m'
UNDERLINE = '\033[4m'

# Colour names accepted in themes (case-insensitive)
COLOR_CODES = {
    'default': '39',
    'black': '30',
    'red': '31',
    'green': '32',
    'yellow': '33',
    'blue': '34',
    'magenta': '35',
    'cyan': '36',
    'white': '37',
    'gray': '90',
    'grey': '90',
    'darkgray': '90',
    'brightred': '91',
    'brightgreen': '92',
    'brightyellow': '93',
    'brightblue': '94',
    'brightmagenta': '95',
    'brightcyan': '96',
    'brightwhite': '97',
}

_visible_length_cache = {}


def color_code(name) -> str:
    """Escape sequence for a colour name; '' for unknown names."""
    if not name:
        return ''
    code = COLOR_CODES.get(str(name).replace(' ', '').replace('_', '').lower())
    return f'\033[{code}m' if code else ''


def colorize(text, color, use_color=True, bold=False) -> str:
    if not use_color:
        return str(text)
    prefix = (BOLD if bold else '') + color_code(color)
    if not prefix:
        return str(text)
    return f"{prefix}{text}{RESET}"


def strip_ansi(text) -> str:
    return ANSI_RE.sub('', str(text))


def visible_length(text) -> int:
    """Length of ``text`` once escape sequences are removed (cached)."""
    text = str(text)
    cached = _visible_length_cache.get(text)
    if cached is not None:
        return cached
    if len(_visible_length_cache) >= VISIBLE_LENGTH_CACHE_LIMIT:
        _visible_length_cache.clear()
    length = len(ANSI_RE.sub('', text))
    _visible_length_cache[text] = length
    return length


def clear_length_cache():
    _visible_length_cache.clear()


def cache_size() -> int:
    return len(_visible_length_cache)


def truncate_visible(text, width: int, ellipsis: str = ELLIPSIS) -> str:
    """
    Cut ``text`` to ``width`` visible characters, ending in ``ellipsis``.

    Escape sequences before the cut point are kept; a reset is appended when
    any were present so styling does not bleed into the next cell.
    """
    text = str(text)
    if width <= 0:
        return ''
    if visible_length(text) <= width:
        return text
    if width <= len(ellipsis):
        return ellipsis[:width]

    keep = width - len(ellipsis)
    out = []
    shown = 0
    styled = False
    pos = 0
    while pos < len(text) and shown < keep:
        match = ANSI_RE.match(text, pos)
        if match:
            out.append(match.group(0))
            styled = True
            pos = match.end()
            continue
        out.append(text[pos])
        shown += 1
        pos += 1
    out.append(ellipsis)
    if styled:
        out.append(RESET)
    return ''.join(out)


def pad_visible(text, width: int, align: str = 'left') -> str:
    text = str(text)
    gap = max(0, width - visible_length(text))
    if align == 'right':
        return ' ' * gap + text
    if align == 'center':
        left = gap // 2
        return ' ' * left + text + ' ' * (gap - left)
    return text + ' ' * gap
