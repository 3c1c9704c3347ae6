"""Explicit state handed to every interactive handler."""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from tracker.utils.config import DataPaths, get_data_paths, load_config
from tracker.ui.theme import RenderContext


@dataclass
class Session:
    config: dict
    paths: DataPaths
    ctx: RenderContext
    input_func: Callable[[str], str] = input
    output: Callable[..., Any] = print
    config_file: Optional[Any] = None
    today: Optional[Any] = field(default=None)

    @property
    def date_format(self) -> str:
        return self.ctx.date_format

    @property
    def due_days(self) -> int:
        return int(self.config.get('projects', {}).get('due_days', 42))

    @property
    def bf_days(self) -> int:
        return int(self.config.get('projects', {}).get('bf_days', 14))


def build_session(config=None, base_dir=None, input_func=input, output=print, config_file=None) -> Session:
    config = config if config is not None else load_config(config_file)
    return Session(
        config=config,
        paths=get_data_paths(config, base_dir),
        ctx=RenderContext.from_config(config),
        input_func=input_func,
        output=output,
        config_file=config_file,
    )
