"""Unit tests for structlog configuration."""
from __future__ import annotations

import io
import json
import logging

import pytest

from iou_tracker.logging import configure_logging, get_logger


@pytest.fixture()
def restore_logging():
    yield
    configure_logging("console", "WARNING")


def test_json_records_go_to_given_stream(restore_logging):
    stream = io.StringIO()
    configure_logging("json", "INFO", stream=stream)

    get_logger("iou_tracker.tests").info("track_created", track_id=7)

    record = json.loads(stream.getvalue().splitlines()[-1])
    assert record["event"] == "track_created"
    assert record["track_id"] == 7
    assert record["level"] == "info"
    assert record["logger"] == "iou_tracker.tests"


def test_reconfigure_keeps_a_single_handler(restore_logging):
    before = len(logging.getLogger().handlers)
    configure_logging("console", "INFO", stream=io.StringIO())
    configure_logging("json", "INFO", stream=io.StringIO())
    assert len(logging.getLogger().handlers) == before


def test_ultralytics_capped_at_warning_unless_debugging(restore_logging):
    configure_logging("console", "INFO", stream=io.StringIO())
    assert logging.getLogger("ultralytics").level == logging.WARNING

    configure_logging("console", "DEBUG", stream=io.StringIO())
    assert logging.getLogger("ultralytics").level == logging.DEBUG


def test_unknown_format_rejected():
    with pytest.raises(ValueError, match="log_format"):
        configure_logging("xml")
