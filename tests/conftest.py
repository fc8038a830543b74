"""Pytest configuration for the gots test suite."""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for gots imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gots.frontend.parser import GoParser  # noqa: E402

from helpers import new_package  # noqa: E402


@pytest.fixture
def pkg():
    """An empty generated package, example.com/api."""
    return new_package()


@pytest.fixture
def parser():
    return GoParser()
