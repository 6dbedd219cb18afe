"""Tests for structured logging."""

import json
import logging

from ragwalla.logging_config import JSONFormatter, bind_context, get_logger


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="ragwalla.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Connected to %s",
        args=("agent_1",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self):
        """Test the record is rendered as one JSON object."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "ragwalla.test"
        assert data["message"] == "Connected to agent_1"
        assert "timestamp" in data
        assert "context" not in data

    def test_context(self):
        """Test bound context is rendered."""
        record = make_record(context={"agent_id": "agent_1", "session_tag": "s"})
        data = json.loads(JSONFormatter().format(record))

        assert data["context"] == {"agent_id": "agent_1", "session_tag": "s"}

    def test_empty_context_omitted(self):
        """Test an adapter bound without identity adds no context key."""
        data = json.loads(JSONFormatter().format(make_record(context={})))

        assert "context" not in data


class TestBindContext:
    """Tests for bind_context."""

    def test_adapter_attaches_context(self, caplog):
        """Test records logged through the adapter carry the context."""
        log = bind_context(get_logger("ragwalla.test"), agent_id="agent_1")

        with caplog.at_level(logging.INFO, logger="ragwalla.test"):
            log.info("hello")

        assert caplog.records[-1].context == {"agent_id": "agent_1"}
