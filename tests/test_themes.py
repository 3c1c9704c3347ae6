"""
Theme resolution tests: presets, theme files merged over Default, fallbacks.
"""

import json

import pytest

from tracker.ui.theme import (
    BORDER_KEYS,
    DEFAULT_THEME,
    PRESET_THEMES,
    RenderContext,
    Theme,
    border_glyphs,
    default_theme,
    list_themes,
    load_theme,
    save_theme_file,
)
from tracker.utils.config import default_config, deep_merge


@pytest.fixture
def themes_dir(tmp_path):
    path = tmp_path / 'themes'
    path.mkdir()
    return path


def _write(themes_dir, name, data):
    (themes_dir / f'{name}.json').write_text(
        data if isinstance(data, str) else json.dumps(data), encoding='utf-8')


@pytest.mark.parametrize('name', list(PRESET_THEMES))
def test_every_preset_is_complete(name):
    theme = load_theme(name)

    assert theme.name == name
    assert set(theme.borders) == set(BORDER_KEYS)
    assert set(DEFAULT_THEME['colors']) <= set(theme.colors)


def test_preset_lookup_is_case_insensitive():
    theme = load_theme('ocean')

    assert theme.name == 'Ocean'
    assert theme.borders['top_left'] == '╭'
    assert theme.header_style == 'Gradient'
    assert theme.colors['Error'] == 'Red'


def test_theme_file_merges_over_default(themes_dir):
    _write(themes_dir, 'Sunset', {
        'colors': {'Header': 'Magenta'},
        'border_style': 'rounded',
        'borders': {'cross': '*'},
    })

    theme = load_theme('Sunset', themes_dir)

    assert theme.name == 'Sunset'
    assert theme.colors['Header'] == 'Magenta'
    assert theme.colors['Normal'] == 'White'
    assert theme.borders['cross'] == '*'
    assert theme.borders['top_left'] == '╭'
    assert len(theme.borders) == 12
    assert theme.menu['prompt'] == '»'


def test_unknown_theme_falls_back_to_default(themes_dir):
    assert load_theme('Nope', themes_dir).name == 'Default'
    assert load_theme('Nope').name == 'Default'


@pytest.mark.parametrize('content', ['{"colors": ', '["not", "an", "object"]'])
def test_unreadable_theme_file_falls_back_to_default(themes_dir, content):
    _write(themes_dir, 'Broken', content)

    assert load_theme('Broken', themes_dir).name == 'Default'


@pytest.mark.parametrize('section, value', [('colors', 5), ('menu', []), ('progress', '#'), ('borders', 3)])
def test_wrong_shaped_theme_section_uses_default_values(themes_dir, section, value):
    _write(themes_dir, 'Odd', {section: value, 'header_style': 'Double'})

    theme = load_theme('Odd', themes_dir)
    default = default_theme()

    assert theme.name == 'Odd'
    assert theme.header_style == 'Double'
    assert theme.colors == default.colors
    assert theme.menu == default.menu
    assert theme.progress == default.progress
    assert theme.borders == default.borders


def test_unknown_border_style_and_header_style():
    theme = Theme.from_dict({'name': 'Odd', 'border_style': 'zigzag', 'header_style': 'Fancy'})

    assert theme.borders == border_glyphs('single')
    assert theme.header_style == 'Simple'


def test_unknown_border_keys_ignored():
    theme = Theme.from_dict({'borders': {'diagonal': '/', 'vertical': '!'}})

    assert 'diagonal' not in theme.borders
    assert theme.borders['vertical'] == '!'


def test_list_themes_adds_files_without_duplicating_presets(themes_dir):
    _write(themes_dir, 'Sunset', {})
    _write(themes_dir, 'ocean', {})

    names = list_themes(themes_dir)

    assert names[:len(PRESET_THEMES)] == list(PRESET_THEMES)
    assert names.count('Ocean') == 1
    assert 'ocean' not in names
    assert names[-1] == 'Sunset'


def test_list_themes_without_directory(tmp_path):
    assert list_themes(tmp_path / 'missing') == list(PRESET_THEMES)


def test_saved_theme_is_listed_and_loadable(themes_dir):
    theme = Theme.from_dict({'name': 'Dusk', 'colors': {'Accent1': 'Yellow'}})

    target = save_theme_file(theme, themes_dir)

    assert target.name == 'Dusk.json'
    assert 'Dusk' in list_themes(themes_dir)
    assert load_theme('Dusk', themes_dir).colors['Accent1'] == 'Yellow'


def test_render_context_from_config(isolated_base_dir):
    themes = isolated_base_dir / 'themes'
    themes.mkdir()
    _write(themes, 'Sunset', {'colors': {'Header': 'Magenta'}})
    config = deep_merge(default_config(), {'display': {
        'theme': 'Sunset', 'use_color': False, 'date_format': '%d/%m/%Y',
        'due_soon_days': 5, 'table_padding': 2,
    }})

    ctx = RenderContext.from_config(config)

    assert ctx.theme.name == 'Sunset'
    assert ctx.use_color is False
    assert ctx.date_format == '%d/%m/%Y'
    assert ctx.due_soon_days == 5
    assert ctx.padding == 2


def test_paint_uses_role_colour():
    ctx = RenderContext(use_color=True)

    assert ctx.paint('late', 'Overdue') == '\033[31mlate\033[0m'
    assert ctx.paint('x', 'NoSuchRole') == '\033[37mx\033[0m'
    assert RenderContext(use_color=False).paint('late', 'Overdue') == 'late'


def test_with_theme_keeps_other_settings():
    ctx = RenderContext(use_color=False, padding=3)

    switched = ctx.with_theme(load_theme('Forest'))

    assert switched.theme.name == 'Forest'
    assert switched.padding == 3
    assert ctx.theme.name == 'Default'
