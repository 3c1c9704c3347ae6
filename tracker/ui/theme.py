"""
================================================================================
THEMES - Colour Roles, Border Glyphs and the Render Context
================================================================================

A theme bundles:
    - colors       role -> colour name (see tracker.ui.ansi.COLOR_CODES)
    - border_style one of single/double/rounded/heavy/ascii; the 12 border
                   glyphs are computed from it and may be overridden
                   individually under "borders"
    - header_style Simple / Double / Gradient / Minimal
    - menu         bullet, prompt and separator glyphs
    - progress     filled and empty bar glyphs

Theme sources:
    1. Built-in presets (Default, Ocean, Forest, Minimal, HighContrast)
    2. <themes_dir>/<name>.json

Both are deep-merged over the complete Default theme: nested maps merge
key-by-key, scalars and lists are replaced wholesale. A theme file therefore
only needs the keys it changes.

Example theme file:
    {
        "name": "Sunset",
        "colors": {"Header": "Magenta", "Accent1": "Yellow"},
        "border_style": "rounded"
    }
================================================================================
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from tracker.utils.config import deep_merge, resolve_dir
from tracker.utils.constants import DEFAULT_DISPLAY_DATE_FORMAT
from .ansi import colorize

logger = logging.getLogger("project_tracker")

COLOR_ROLES = [
    'Normal', 'Header', 'Accent1', 'Accent2', 'Success', 'Warning', 'Error',
    'Completed', 'DueSoon', 'Overdue', 'TableBorder',
]

HEADER_STYLES = ['Simple', 'Double', 'Gradient', 'Minimal']

BORDER_KEYS = [
    'top_left', 'top_right', 'bottom_left', 'bottom_right',
    'top_junction', 'bottom_junction', 'left_junction', 'right_junction',
    'cross', 'horizontal', 'vertical', 'header_horizontal',
]

_BORDER_SETS = {
    'single': '┌┐└┘┬┴├┤┼─│─',
    'double': '╔╗╚╝╦╩╠╣╬═║═',
    'rounded': '╭╮╰╯┬┴├┤┼─│─',
    'heavy': '┏┓┗┛┳┻┣┫╋━┃━',
    'ascii': '+++++++++-|=',
}


def border_glyphs(style: str) -> Dict[str, str]:
    """The 12 border glyphs for a named style (unknown styles fall back to single)."""
    glyphs = _BORDER_SETS.get(str(style).lower(), _BORDER_SETS['single'])
    return dict(zip(BORDER_KEYS, glyphs))


DEFAULT_THEME = {
    "name": "Default",
    "colors": {
        "Normal": "White",
        "Header": "Cyan",
        "Accent1": "Blue",
        "Accent2": "Magenta",
        "Success": "Green",
        "Warning": "Yellow",
        "Error": "Red",
        "Completed": "Gray",
        "DueSoon": "Yellow",
        "Overdue": "Red",
        "TableBorder": "Blue",
    },
    "border_style": "single",
    "borders": {},
    "header_style": "Simple",
    "menu": {
        "bullet": "›",
        "prompt": "»",
        "separator": "─",
    },
    "progress": {
        "filled": "█",
        "empty": "░",
    },
}

PRESET_THEMES = {
    "Default": {},
    "Ocean": {
        "name": "Ocean",
        "colors": {"Header": "BrightCyan", "Accent1": "Cyan", "Accent2": "BrightBlue", "TableBorder": "Cyan"},
        "border_style": "rounded",
        "header_style": "Gradient",
    },
    "Forest": {
        "name": "Forest",
        "colors": {"Header": "Green", "Accent1": "BrightGreen", "Accent2": "Yellow", "TableBorder": "Green"},
        "border_style": "double",
        "header_style": "Double",
        "menu": {"bullet": "•"},
    },
    "Minimal": {
        "name": "Minimal",
        "colors": {"Header": "White", "Accent1": "White", "Accent2": "Gray", "TableBorder": "Gray"},
        "border_style": "ascii",
        "header_style": "Minimal",
        "menu": {"bullet": "-", "prompt": ">", "separator": "-"},
        "progress": {"filled": "#", "empty": "."},
    },
    "HighContrast": {
        "name": "HighContrast",
        "colors": {
            "Normal": "BrightWhite", "Header": "BrightYellow", "Accent1": "BrightWhite",
            "Accent2": "BrightCyan", "Success": "BrightGreen", "Warning": "BrightYellow",
            "Error": "BrightRed", "DueSoon": "BrightYellow", "Overdue": "BrightRed",
            "TableBorder": "BrightWhite",
        },
        "border_style": "heavy",
        "header_style": "Double",
    },
}


@dataclass
class Theme:
    name: str
    colors: Dict[str, str]
    border_style: str = 'single'
    header_style: str = 'Simple'
    menu: Dict[str, str] = field(default_factory=dict)
    progress: Dict[str, str] = field(default_factory=dict)
    borders: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        overrides = {k: v for k, v in (self.borders or {}).items() if k in BORDER_KEYS and v}
        self.borders = {**border_glyphs(self.border_style), **overrides}
        if self.header_style not in HEADER_STYLES:
            logger.warning(f"Unknown header style '{self.header_style}' in theme {self.name}; using Simple")
            self.header_style = 'Simple'

    @classmethod
    def from_dict(cls, data: dict) -> 'Theme':
        merged = deep_merge(DEFAULT_THEME, data or {})
        name = str(merged.get('name') or 'Custom')
        for section in ('colors', 'menu', 'progress', 'borders'):
            if section in merged and not isinstance(merged[section], dict):
                logger.warning(f"Theme {name}: '{section}' must be an object; using Default values")
                merged[section] = dict(DEFAULT_THEME.get(section, {}))
        return cls(
            name=name,
            colors=dict(merged['colors']),
            border_style=str(merged.get('border_style', 'single')),
            header_style=str(merged.get('header_style', 'Simple')),
            menu=dict(merged['menu']),
            progress=dict(merged['progress']),
            borders=dict(merged.get('borders') or {}),
        )

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'colors': dict(self.colors),
            'border_style': self.border_style,
            'borders': dict(self.borders),
            'header_style': self.header_style,
            'menu': dict(self.menu),
            'progress': dict(self.progress),
        }

    def color(self, role: str) -> str:
        return self.colors.get(role) or self.colors.get('Normal', '')


def default_theme() -> Theme:
    return Theme.from_dict({})


def _preset_key(name: str) -> Optional[str]:
    for key in PRESET_THEMES:
        if key.lower() == str(name).lower():
            return key
    return None


def load_theme(name: str, themes_dir=None) -> Theme:
    """
    Resolve a theme by name: built-in preset first, then ``<themes_dir>/<name>.json``.

    Unknown names and unreadable files fall back to Default (logged).
    """
    preset = _preset_key(name)
    if preset is not None:
        return Theme.from_dict(PRESET_THEMES[preset] or {'name': preset})

    if themes_dir is not None:
        theme_file = Path(themes_dir) / f"{name}.json"
        if theme_file.exists():
            try:
                with open(theme_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("theme file must contain a JSON object")
                data.setdefault('name', name)
                return Theme.from_dict(data)
            except (json.JSONDecodeError, TypeError, ValueError, OSError) as e:
                logger.error(f"Theme file {theme_file} unreadable: {e}. Using Default.")
                return default_theme()

    logger.warning(f"Theme '{name}' not found. Using Default.")
    return default_theme()


def list_themes(themes_dir=None) -> List[str]:
    names = list(PRESET_THEMES)
    if themes_dir is not None and Path(themes_dir).is_dir():
        for path in sorted(Path(themes_dir).glob('*.json')):
            if _preset_key(path.stem) is None:
                names.append(path.stem)
    return names


def save_theme_file(theme, themes_dir) -> Path:
    data = theme.to_dict() if isinstance(theme, Theme) else dict(theme)
    themes_dir = Path(themes_dir)
    themes_dir.mkdir(parents=True, exist_ok=True)
    target = themes_dir / f"{data.get('name', 'Custom')}.json"
    with open(target, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=4, ensure_ascii=False)
    return target


@dataclass
class RenderContext:
    """Everything a rendering call needs; passed explicitly, never global."""

    theme: Theme = field(default_factory=default_theme)
    use_color: bool = True
    date_format: str = DEFAULT_DISPLAY_DATE_FORMAT
    padding: int = 1
    due_soon_days: int = 3

    @classmethod
    def from_config(cls, config: dict) -> 'RenderContext':
        display = config.get('display', {})
        theme = load_theme(display.get('theme', 'Default'), resolve_dir(config, 'themes_dir'))
        return cls(
            theme=theme,
            use_color=bool(display.get('use_color', True)),
            date_format=display.get('date_format', DEFAULT_DISPLAY_DATE_FORMAT),
            padding=int(display.get('table_padding', 1)),
            due_soon_days=int(display.get('due_soon_days', 3)),
        )

    def paint(self, text, role: str, bold: bool = False) -> str:
        return colorize(text, self.theme.color(role), self.use_color, bold)

    def with_theme(self, theme: Theme) -> 'RenderContext':
        return RenderContext(theme, self.use_color, self.date_format, self.padding, self.due_soon_days)
