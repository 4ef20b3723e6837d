"""Pytest configuration for the tsdef test suite."""

import sys
from pathlib import Path

import pytest

# Make the tsdef package importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

TESTS_DIR = Path(__file__).parent


def pytest_addoption(parser):
    """Add --show-debug to print the debug form of each translate case."""
    parser.addoption(
        "--show-debug",
        action="store_true",
        default=False,
        help="Print the debug form of every translated container",
    )


@pytest.fixture
def show_debug(request) -> bool:
    return bool(request.config.getoption("show_debug"))
