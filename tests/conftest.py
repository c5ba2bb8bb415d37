"""
Pytest configuration for the test suite.

This file is automatically loaded by pytest and applies configuration
to all tests in the tests/ directory.
"""

import os
import sys

import numpy as np
import pytest

# Headless pygame for every test module
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def config():
    """Default configuration with file logging off and a fixed seed."""
    cfg = Config()
    cfg.LOG_TO_FILE = False
    cfg.SEED = 1234
    return cfg


@pytest.fixture
def rng():
    """Seeded random generator for reproducible noise."""
    return np.random.default_rng(1234)
