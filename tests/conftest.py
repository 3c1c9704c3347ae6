"""
================================================================================
PYTEST CONFIGURATION
================================================================================

Pytest configuration and shared fixtures for the entire test suite.

Global Fixtures:
    - isolated_base_dir: Points BASE_DIR / CONFIG_FILE at a temp directory so
      no test touches the real configs/, data/ or logs/ folders
    - data_paths: DataPaths for an empty per-test data directory
    - ctx: Colourless RenderContext for exact string assertions
    - scripted_input: Builds an input() replacement from a list of answers

Test Isolation Strategy:
    Every test gets its own tmp_path. Entity files, config.json and logs are
    created there and discarded with it.
================================================================================
"""
import sys
import datetime as dt
from pathlib import Path

import pytest

# Ensure project root is on sys.path for cli.py / Project_Tracker.py imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tracker.utils import constants
from tracker.utils.config import default_config, get_data_paths
from tracker.utils.logger import set_run_context
from tracker.ui.theme import RenderContext


@pytest.fixture(autouse=True)
def isolated_base_dir(tmp_path, monkeypatch):
    """Redirect every BASE_DIR-relative path into the test's tmp_path."""
    monkeypatch.setattr(constants, 'BASE_DIR', tmp_path)
    monkeypatch.setattr(constants, 'CONFIG_FILE', tmp_path / 'configs' / 'config.json')
    set_run_context('test')
    yield tmp_path
    # Detach any file handler a test attached so tmp_path can be removed
    set_run_context('test')


@pytest.fixture
def data_paths(tmp_path):
    return get_data_paths(default_config(), tmp_path / 'data')


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / 'configs' / 'config.json'


@pytest.fixture
def ctx():
    return RenderContext(use_color=False)


@pytest.fixture
def today():
    return dt.date(2024, 1, 1)


@pytest.fixture
def scripted_input():
    """Return a factory: scripted_input(['a', 'b']) answers prompts in order, then EOF."""
    def factory(answers):
        remaining = list(answers)
        prompts = []

        def fake_input(prompt=''):
            prompts.append(prompt)
            if not remaining:
                raise EOFError()
            return remaining.pop(0)

        fake_input.prompts = prompts
        fake_input.remaining = remaining
        return fake_input
    return factory
