"""
Structured logging for the pattern table and embedding store.
Decode, lookup and table-load events share one operation/status/details format.
"""

import logging
from typing import Any, Dict, List

from nlq_patterns.core.config import get_log_level

class StructuredLogger:
    """Structured logger for pattern table and embedding operations."""

    def __init__(self, name: str = "nlq_patterns"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, get_log_level(), logging.INFO))

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_pattern_table_load(self, source: str, pattern_count: int, category_count: int, status: str = "success"):
        """Log loading of the static pattern table."""
        details = {
            "source": source,
            "pattern_count": pattern_count,
            "category_count": category_count
        }
        self.log_operation("patterns.load", status, details, level=logging.DEBUG)

    def log_embedding_decode(self, decoder: str, encoded_length: int, byte_length: int, status: str = "success"):
        """Log decoding of the base64 embedding blob."""
        details = {
            "decoder": decoder,
            "encoded_length": encoded_length,
            "byte_length": byte_length
        }
        level = logging.WARNING if status != "success" else logging.DEBUG
        self.log_operation("embeddings.decode", status, details, level=level)

    def log_lookup_build(self, pattern_count: int, vector_count: int, expected_bytes: int, actual_bytes: int, status: str = "success"):
        """Log construction of the pattern id -> vector map."""
        details = {
            "pattern_count": pattern_count,
            "vector_count": vector_count,
            "expected_bytes": expected_bytes,
            "actual_bytes": actual_bytes
        }
        level = logging.WARNING if status != "success" else logging.DEBUG
        self.log_operation("embeddings.lookup", status, details, level=level)

    def log_library_init(self, source: str, pattern_count: int, embedding_count: int, duration_ms: float):
        """Log pattern library initialization."""
        details = {
            "source": source,
            "pattern_count": pattern_count,
            "embedding_count": embedding_count,
            "duration_ms": round(duration_ms, 2)
        }
        self.log_operation("library.init", "ready", details, level=logging.DEBUG)

    def log_success_metric(self, pattern_id: str, success: bool, previous: float, current: float):
        """Log a success metric update for a pattern."""
        details = {
            "pattern_id": pattern_id,
            "previous": round(previous, 4),
            "current": round(current, 4)
        }
        status = "success" if success else "failure"
        self.log_operation("library.metric", status, details, level=logging.DEBUG)

    def log_config_issues(self, issues: List[str]):
        """Log configuration validation issues."""
        if not issues:
            return
        self.log_operation("config.validate", "invalid", {"issues": issues}, level=logging.WARNING)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()
