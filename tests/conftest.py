"""
Pytest configuration and shared fixtures for the coursekit test suite.

Fixtures point the data directory at a temporary folder so nothing a test
writes lands in the repository's data/ directory.
"""

import logging

import pytest

import numpy as np
import pandas as pd

from coursekit import config as coursekit_config
from coursekit.data_loader import load_mtcars, load_temperature_history

# =============================================================================
# Test Configuration
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "mathematical: Statistical and geometric property tests")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test paths."""
    for item in items:
        test_path = str(item.fspath)
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/mathematical/" in test_path:
            item.add_marker(pytest.mark.mathematical)


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Redirect COURSEKIT_DATA_DIR to a fresh temporary directory."""
    monkeypatch.setenv("COURSEKIT_DATA_DIR", str(tmp_path))
    coursekit_config._reset_data_dir()
    load_temperature_history.clear()
    yield tmp_path
    coursekit_config._reset_data_dir()
    load_temperature_history.clear()


@pytest.fixture
def offline(monkeypatch):
    """Disable downloads."""
    monkeypatch.setenv("COURSEKIT_OFFLINE", "1")


@pytest.fixture
def clean_logger():
    """Leave the 'coursekit' logger without handlers after the test."""
    yield
    logger = logging.getLogger("coursekit")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def mtcars():
    return load_mtcars()


@pytest.fixture
def rng():
    return np.random.RandomState(42)


@pytest.fixture
def normal_cloud(rng):
    """200 points from a correlated bivariate normal."""
    cov = np.array([[1.0, 0.5], [0.5, 1.0]])
    return rng.multivariate_normal([0.0, 0.0], cov, size=200)


@pytest.fixture
def scores_wide():
    return pd.DataFrame({
        "Name": ["Ana", "Ben", "Cleo"],
        "English": [78, 62, 91],
        "Maths": [85, 70, 66],
    })
