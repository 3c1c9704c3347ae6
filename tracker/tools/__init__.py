"""
Interactive console tools: session state, table views and the menu screens.
"""

from .session import Session, build_session
from .main_menu import main_menu, run_interactive

__all__ = ['Session', 'build_session', 'main_menu', 'run_interactive']
