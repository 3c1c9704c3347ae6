"""
Headers, feedback messages/boxes and progress bars.

All functions take the RenderContext explicitly and return strings; the
``print_*`` helpers write through an injectable ``output`` callable.
"""

from .ansi import pad_visible, visible_length

HEADER_WIDTH = 70

MESSAGE_STYLES = {
    'success': ('Success', '✓'),
    'error': ('Error', '✗'),
    'warning': ('Warning', '⚠'),
    'info': ('Accent1', 'ℹ'),
}


def render_header(ctx, title, subtitle=None, width=HEADER_WIDTH) -> str:
    """Section header in the theme's header style."""
    theme = ctx.theme
    b = theme.borders
    style = theme.header_style
    title_line = ctx.paint(pad_visible(title, width, 'center'), 'Header', bold=True)
    lines = []

    if style == 'Minimal':
        lines.append(ctx.paint(title, 'Header', bold=True))
        lines.append(ctx.paint('-' * visible_length(title), 'Accent1'))
    elif style == 'Double':
        lines.append(ctx.paint(b['top_left'] + b['horizontal'] * width + b['top_right'], 'TableBorder'))
        lines.append(ctx.paint(b['vertical'], 'TableBorder') + title_line + ctx.paint(b['vertical'], 'TableBorder'))
        if subtitle:
            sub = ctx.paint(pad_visible(subtitle, width, 'center'), 'Accent2')
            lines.append(ctx.paint(b['vertical'], 'TableBorder') + sub + ctx.paint(b['vertical'], 'TableBorder'))
        lines.append(ctx.paint(b['bottom_left'] + b['horizontal'] * width + b['bottom_right'], 'TableBorder'))
        return '\n'.join(lines)
    elif style == 'Gradient':
        roles = ['Header', 'Accent1', 'Accent2']
        segment = max(1, width // len(roles))
        bar = ''.join(
            ctx.paint(b['header_horizontal'] * (segment if i < len(roles) - 1 else width - segment * i), role)
            for i, role in enumerate(roles)
        )
        lines.extend([bar, title_line, bar])
    else:
        rule = ctx.paint(b['header_horizontal'] * width, 'Accent1')
        lines.extend([rule, title_line, rule])

    if subtitle:
        lines.append(ctx.paint(pad_visible(subtitle, width, 'center') if style != 'Minimal' else subtitle, 'Accent2'))
    return '\n'.join(lines)


def format_message(ctx, text, kind='info') -> str:
    role, icon = MESSAGE_STYLES.get(kind, MESSAGE_STYLES['info'])
    return f"{ctx.paint(icon, role)} {text}"


def render_box(ctx, message, kind='info', min_width=0) -> str:
    """Bordered feedback box; multi-line messages keep their line breaks."""
    role, icon = MESSAGE_STYLES.get(kind, MESSAGE_STYLES['info'])
    b = ctx.theme.borders
    body = str(message).splitlines() or ['']
    body[0] = f"{icon} {body[0]}"
    body[1:] = [f"  {line}" for line in body[1:]]
    inner = max(min_width, max(visible_length(line) for line in body)) + 2

    lines = [ctx.paint(b['top_left'] + b['horizontal'] * inner + b['top_right'], role)]
    for line in body:
        lines.append(
            ctx.paint(b['vertical'], role) + ' ' + pad_visible(line, inner - 2) + ' ' + ctx.paint(b['vertical'], role)
        )
    lines.append(ctx.paint(b['bottom_left'] + b['horizontal'] * inner + b['bottom_right'], role))
    return '\n'.join(lines)


def print_header(ctx, title, subtitle=None, output=print):
    output('')
    output(render_header(ctx, title, subtitle))
    output('')


def print_success(ctx, text, output=print):
    output(format_message(ctx, text, 'success'))


def print_error(ctx, text, output=print):
    output(format_message(ctx, text, 'error'))


def print_warning(ctx, text, output=print):
    output(format_message(ctx, text, 'warning'))


def print_info(ctx, text, output=print):
    output(format_message(ctx, text, 'info'))


def render_progress_bar(ctx, completed, total, width: int = 30, label=None) -> str:
    """Create a progress bar."""
    filled_glyph = ctx.theme.progress.get('filled', '█')
    empty_glyph = ctx.theme.progress.get('empty', '░')
    prefix = f"{label} " if label else ''

    if not total or total <= 0:
        return f"{prefix}[{empty_glyph * width}] 0%"

    pct = min(max(float(completed) / float(total), 0.0), 1.0)
    filled = int(width * pct)
    empty = width - filled
    role = 'Success' if pct >= 1 else 'Accent1'
    bar = ctx.paint(filled_glyph * filled, role) + empty_glyph * empty
    return f"{prefix}[{bar}] {pct * 100:.0f}%"
