"""
================================================================================
TRACKER PACKAGE - Project, Todo and Time Tracking
================================================================================

Top-level package containing all application modules organized by function.

Package Structure:
    tracker/core/   - Records, entity storage, domain operations
    tracker/ui/     - Themes, tables, menus and prompts
    tracker/tools/  - Interactive menu trees
    tracker/utils/  - Shared utilities (logging, config, constants, dates)

Design Principles:
    - Separation of concerns
    - Rendering state passed explicitly (no global theme)
    - Test-friendly architecture
================================================================================
"""

__version__ = "1.0.0"
