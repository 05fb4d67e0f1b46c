from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday
    return datetime(2026, 3, 4, 9, 0, 0)
