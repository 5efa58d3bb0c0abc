"""
Structured logging for the job tracker.

Provides centralized logging with console and file outputs, log levels,
and counters for monitoring job store traffic and board rollbacks.
"""

import copy
import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

from .env import log_dir as configured_log_dir, log_level as configured_log_level


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for monitoring store calls and board reconciliation.
    """

    def __init__(
        self,
        name: str = "jobtracker",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()
        self.logger.propagate = False

        self.metrics = {
            "store_calls": 0,
            "store_failures": 0,
            "rollbacks": 0,
            "errors_by_type": {},
            "operations": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobtracker_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_store_call(self, operation: str):
        """Record an attempted job store operation (list, create, update, delete)."""
        self.metrics["store_calls"] += 1
        stats = self.metrics["operations"].setdefault(
            operation, {"attempts": 0, "failures": 0}
        )
        stats["attempts"] += 1

    def record_store_failure(self, operation: str, error_type: str):
        """Record a failed job store operation."""
        self.metrics["store_failures"] += 1
        stats = self.metrics["operations"].setdefault(
            operation, {"attempts": 0, "failures": 0}
        )
        stats["failures"] += 1

        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def record_rollback(self):
        """Record a compensating rollback of an optimistic board change."""
        self.metrics["rollbacks"] += 1

    def get_metrics(self) -> dict:
        """Return current metrics with per-operation failure rates."""
        metrics_copy = copy.deepcopy(self.metrics)
        for operation, stats in metrics_copy["operations"].items():
            if stats["attempts"] > 0:
                stats["failure_rate"] = round(
                    stats["failures"] / stats["attempts"], 3
                )

        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Job Store Session Metrics ===")
        self.info(f"Store calls: {metrics['store_calls']} ({metrics['store_failures']} failed)")
        self.info(f"Rollbacks: {metrics['rollbacks']}")

        if metrics["operations"]:
            self.info("Operations:")
            for operation, stats in metrics["operations"].items():
                rate = stats.get("failure_rate", 0) * 100
                self.info(f"  {operation}: {stats['failures']}/{stats['attempts']} failed ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobtracker",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    File output is only enabled when JOBTRACKER_LOG_DIR is set, unless the
    caller passes enable_file/log_dir explicitly.

    Args:
        name: Logger name
        level: Log level (defaults to JOBTRACKER_LOG_LEVEL, then INFO)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        directory = configured_log_dir()
        kwargs.setdefault("log_dir", directory)
        kwargs.setdefault("enable_file", directory is not None)
        _global_logger = StructuredLogger(
            name=name, level=level or configured_log_level(), **kwargs
        )

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
