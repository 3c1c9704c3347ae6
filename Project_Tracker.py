#!/usr/bin/env python3
"""
================================================================================
PROJECT TRACKER - Interactive Launcher
================================================================================

Starts the menu-driven tracker against the data directory from config.json.
Equivalent to ``python cli.py menu``.

Usage:
    python Project_Tracker.py
    python Project_Tracker.py --data-dir ~/work/tracker-data
================================================================================
"""

import sys
import argparse

from tracker.tools.main_menu import run_interactive
from tracker.utils.config import load_config
from tracker.utils.logger import logger, setup_logging


def main(argv=None):
    parser = argparse.ArgumentParser(description='Project Tracker - interactive menus')
    parser.add_argument('--data-dir', dest='data_dir', help='Directory holding the entity files')
    parser.add_argument('--config', dest='config_file', help='Path to config.json')
    args = parser.parse_args(argv)

    config = load_config(args.config_file)
    setup_logging('menu', config)
    try:
        run_interactive(config, args.data_dir, config_file=args.config_file)
        return 0
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except Exception as e:
        logger.exception("Interactive session crashed")
        print(f"Unexpected error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
