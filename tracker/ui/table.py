"""
Table renderer.

Column width = max(header, widest formatted cell, configured minimum width),
optionally capped, plus padding on both sides. Cells that still do not fit are
truncated with an ellipsis; nothing ever wraps. Formatter and colorizer
failures are contained to the cell/row they happened in.

Formatter signature:  (value, record) -> str
Colorizer signature:  (record, row_index) -> colour role or None
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from tracker.utils.constants import FORMATTER_ERROR_MARKER
from .ansi import pad_visible, truncate_visible, visible_length

logger = logging.getLogger("project_tracker")

Formatter = Callable[[object, object], str]
Colorizer = Callable[[object, int], Optional[str]]


def _cell_value(row, column):
    getter = getattr(row, 'get', None)
    if getter is None:
        return getattr(row, column, '')
    return getter(column, '')


def _format_cell(row, column, formatter: Optional[Formatter]) -> str:
    value = _cell_value(row, column)
    if formatter is not None:
        try:
            text = formatter(value, row)
        except Exception as e:
            logger.warning(f"Formatter for column '{column}' failed: {e}")
            return FORMATTER_ERROR_MARKER
    else:
        text = value
    if text is None:
        return ''
    return str(text).replace('\r', ' ').replace('\n', ' ')


def _row_role(row, index, colorizer: Optional[Colorizer]) -> Optional[str]:
    if colorizer is None:
        return None
    try:
        return colorizer(row, index)
    except Exception as e:
        logger.warning(f"Row colorizer failed on row {index}: {e}")
        return None


def compute_widths(headers: Sequence[str], cells: List[List[str]], columns: Sequence[str],
                   widths=None, max_widths=None, max_width=None) -> List[int]:
    """Content width per column (padding excluded)."""
    widths = widths or {}
    max_widths = max_widths or {}
    result = []
    for i, column in enumerate(columns):
        width = max([visible_length(headers[i])] + [visible_length(r[i]) for r in cells] + [int(widths.get(column, 0))])
        cap = max_widths.get(column, max_width)
        if cap:
            width = min(width, int(cap))
        result.append(max(width, 1))
    return result


def render_table(ctx, rows, columns: Sequence[str], headers: Dict[str, str] = None,
                 formatters: Dict[str, Formatter] = None, alignments: Dict[str, str] = None,
                 widths: Dict[str, int] = None, row_colorizer: Colorizer = None,
                 row_separators: bool = False, max_width: int = None,
                 max_widths: Dict[str, int] = None, empty_message: str = 'No records found') -> str:
    """
    Render ``rows`` (dicts or records exposing ``get``) as a bordered table.

    Args:
        ctx: RenderContext (theme glyphs, colours, padding)
        rows: Records to show, in display order
        columns: Keys to show, in order
        headers: Optional label per column (defaults to the key)
        formatters: Optional per-column formatter
        alignments: 'left' (default), 'right' or 'center' per column
        widths: Minimum content width per column
        row_colorizer: Picks a colour role for a whole row
        row_separators: Draw a rule between data rows
        max_width: Cap for every column's content width
        max_widths: Per-column cap, overriding ``max_width``

    Returns:
        str: The table, or a themed message when there are no rows
    """
    rows = list(rows or [])
    if not rows:
        return ctx.paint(empty_message, 'Warning')

    headers = headers or {}
    formatters = formatters or {}
    alignments = alignments or {}
    labels = [str(headers.get(c, c)) for c in columns]
    cells = [[_format_cell(row, c, formatters.get(c)) for c in columns] for row in rows]
    content = compute_widths(labels, cells, columns, widths, max_widths, max_width)

    pad = ' ' * max(ctx.padding, 0)
    b = ctx.theme.borders
    full = [w + 2 * len(pad) for w in content]

    def rule(left, join, right, glyph):
        return ctx.paint(left + join.join(glyph * w for w in full) + right, 'TableBorder')

    vertical = ctx.paint(b['vertical'], 'TableBorder')

    def line(texts, role=None, bold=False):
        parts = []
        for i, text in enumerate(texts):
            text = truncate_visible(text, content[i])
            if role:
                text = ctx.paint(text, role, bold)
            parts.append(pad + pad_visible(text, content[i], alignments.get(columns[i], 'left')) + pad)
        return vertical + vertical.join(parts) + vertical

    out = [rule(b['top_left'], b['top_junction'], b['top_right'], b['horizontal'])]
    out.append(line(labels, 'Header', bold=True))
    out.append(rule(b['left_junction'], b['cross'], b['right_junction'], b['header_horizontal']))
    separator = rule(b['left_junction'], b['cross'], b['right_junction'], b['horizontal'])

    for index, (row, texts) in enumerate(zip(rows, cells)):
        if row_separators and index:
            out.append(separator)
        out.append(line(texts, _row_role(row, index, row_colorizer)))

    out.append(rule(b['bottom_left'], b['bottom_junction'], b['bottom_right'], b['horizontal']))
    return '\n'.join(out)
