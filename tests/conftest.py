# tests/conftest.py
from __future__ import annotations

import pytest

from tests.utils import make_loan


@pytest.fixture
def baseline_loan():
    """600k at 6% over 30 years, first payment 2026-03-01."""
    return make_loan()
