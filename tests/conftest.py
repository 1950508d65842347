"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
Shared fakes for the pipeline live in tests/mocks/.
"""

import pytest

from tests.mocks.pipeline_mocks import ScriptedScorer


@pytest.fixture
def scorer():
    """Scorer that accepts every document unless a test scripts otherwise."""
    return ScriptedScorer()
