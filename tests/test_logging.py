"""
Tests for the structured logger.
"""

import logging

import pytest
from util.logging import StructuredLogger


@pytest.fixture
def structured(caplog):
    logger = StructuredLogger("nlq_patterns.test")
    caplog.set_level(logging.DEBUG, logger="nlq_patterns.test")
    return logger


class TestStructuredLogger:
    """Test the operation/status/details line format."""

    def test_log_operation_format(self, structured, caplog):
        structured.log_operation("patterns.load", "success", {"pattern_count": 220})

        assert "Operation: patterns.load, Status: success, Details: {'pattern_count': 220}" in caplog.text

    def test_successful_decode_logged_at_debug(self, structured, caplog):
        structured.log_embedding_decode("b64decode", 450560, 337920)

        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert "embeddings.decode" in record.getMessage()

    def test_degraded_lookup_logged_as_warning(self, structured, caplog):
        structured.log_lookup_build(3, 2, 4608, 3172, status="degraded")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "'expected_bytes': 4608" in record.getMessage()

    def test_config_issues(self, structured, caplog):
        structured.log_config_issues([])
        assert caplog.records == []

        structured.log_config_issues(["Invalid EMBED_PROVIDER: word2vec"])
        assert caplog.records[-1].levelno == logging.WARNING
        assert "config.validate" in caplog.text

    def test_success_metric(self, structured, caplog):
        structured.log_success_metric("items_from_year", False, 0.7, 0.63)

        assert "library.metric, Status: failure" in caplog.text
        assert "'current': 0.63" in caplog.text
