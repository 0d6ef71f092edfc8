"""Tests for JSON log formatting"""

import json
import logging

from procureflow.utils.logger import (
    JsonFormatter, CorrelationFilter, set_correlation_id, correlation_id_var
)


def make_record(**extra):
    record = logging.LogRecord("procureflow.test", logging.INFO, __file__, 1, "moved %s", ("REQ-1",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_carries_context_fields():
    record = make_record(request_id="REQ-1", from_status="submitted", to_status="manager_review")
    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "moved REQ-1"
    assert data["level"] == "INFO"
    assert data["request_id"] == "REQ-1"
    assert data["to_status"] == "manager_review"
    assert "actor_id" not in data


def test_filter_stamps_correlation_id():
    token = correlation_id_var.set(None)
    try:
        set_correlation_id("COR-LOG")
        record = make_record()
        assert CorrelationFilter().filter(record)
        assert json.loads(JsonFormatter().format(record))["correlation_id"] == "COR-LOG"
    finally:
        correlation_id_var.reset(token)
