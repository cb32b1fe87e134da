from __future__ import annotations

import pytest

from gridcalc.logging import clear_log_dir


@pytest.fixture(autouse=True)
def _detach_event_log():
    """Each test starts and ends without a configured event sink."""
    clear_log_dir()
    yield
    clear_log_dir()
