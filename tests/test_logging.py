"""Tests for structured logging."""

import json
import logging

from mealmatch.logging_config import (
    ContextualFormatter,
    LoggingContext,
    StructuredJsonFormatter,
    get_logger,
)


def make_record(message: str = "Aggregated 2 recipes") -> logging.LogRecord:
    return logging.LogRecord(
        name="mealmatch.plan.shopping_list",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestFormatters:
    """Tests for the log formatters."""

    def test_json_includes_context(self):
        """Test JSON lines carry the active request and plan ids."""
        with LoggingContext(request_id="req-1", plan_id="plan-7"):
            data = json.loads(StructuredJsonFormatter().format(make_record()))

        assert data["message"] == "Aggregated 2 recipes"
        assert data["level"] == "INFO"
        assert data["request_id"] == "req-1"
        assert data["plan_id"] == "plan-7"

    def test_json_without_context(self):
        """Test context keys are absent outside a logging context."""
        data = json.loads(StructuredJsonFormatter().format(make_record("œufs")))
        assert "request_id" not in data
        assert data["message"] == "œufs"

    def test_text_format(self):
        """Test the development format shows the plan id."""
        with LoggingContext(plan_id="plan-7"):
            line = ContextualFormatter().format(make_record())
        assert "[plan=plan-7]" in line
        assert line.endswith("Aggregated 2 recipes")


class TestLoggingContext:
    """Tests for LoggingContext."""

    def test_context_restored(self):
        """Test nested contexts restore the outer values on exit."""
        with LoggingContext(request_id="outer"):
            with LoggingContext(request_id="inner"):
                inner = json.loads(StructuredJsonFormatter().format(make_record()))
            outer = json.loads(StructuredJsonFormatter().format(make_record()))

        assert inner["request_id"] == "inner"
        assert outer["request_id"] == "outer"

    def test_adapter_adds_context(self, caplog):
        """Test the adapter attaches context to records."""
        logger = get_logger("mealmatch.tests")
        with caplog.at_level(logging.INFO), LoggingContext(request_id="req-9"):
            logger.info("searching")
        assert caplog.records[-1].request_id == "req-9"
