"""
Run the Project Tracker test suite in-process.

Usage:
    python run_tests.py            # whole suite
    python run_tests.py -k cli     # extra arguments go straight to pytest
"""
import sys

import pytest


def run_tests(extra_args=None):
    """Run test suite"""
    args = ['tests/', '-v'] + list(extra_args or [])
    print(f"Running tracker tests: pytest {' '.join(args)}")
    # pytest.main returns an exit code. 0 for success.
    return pytest.main(args) == 0


if __name__ == '__main__':
    if run_tests(sys.argv[1:]):
        print("All tests passed.")
        sys.exit(0)
    print("One or more tests failed.")
    sys.exit(1)
