"""
Pytest configuration and shared fixtures for telemetry integrity tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_common = importlib.import_module("fixtures.common")

make_segment = _common.make_segment
make_segments = _common.make_segments
make_sample_segments = _common.make_sample_segments


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def segment():
    """Provide a default TelemetrySegment for tests."""
    return make_segment()


@pytest.fixture
def sample_segments():
    """Provide the three-segment sample day."""
    return make_sample_segments()


@pytest.fixture
def engine():
    """Provide an engine with default, environment-independent config."""
    from telemetry_integrity.config.runtime import IntegrityConfig
    from telemetry_integrity.merkle.engine import MerkleIntegrityEngine
    return MerkleIntegrityEngine(IntegrityConfig())


@pytest.fixture
def clean_env(monkeypatch):
    """Remove TELEMETRY_INTEGRITY_* variables and reset the default config."""
    import os
    from telemetry_integrity.config import runtime

    for key in list(os.environ):
        if key.startswith(runtime.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    runtime.set_default_config(None)
    yield monkeypatch
    runtime.set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
