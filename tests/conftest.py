from __future__ import annotations

import pytest

from iou_tracker.logging import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging():
    configure_logging("console", "WARNING")
