"""
Tests for logger functionality.
"""

import pytest
from jobtracker.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["store_calls"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")

    def test_log_with_context(self, tmp_path):
        """Context is appended to the message as JSON."""
        logger = StructuredLogger(
            name="test-context",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Job moved", job_id="abc", new_status="Offer")

        content = next(tmp_path.glob("*.log")).read_text()
        assert 'Job moved | Context: {"job_id": "abc", "new_status": "Offer"}' in content

    def test_metrics_tracking(self, tmp_path):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.record_store_call("list")
        logger.record_store_call("update")
        logger.record_store_failure("update", "HTTPError_404")
        logger.record_rollback()

        metrics = logger.get_metrics()

        assert metrics["store_calls"] == 2
        assert metrics["store_failures"] == 1
        assert metrics["rollbacks"] == 1
        assert metrics["errors_by_type"]["HTTPError_404"] == 1
        assert metrics["operations"]["list"]["failure_rate"] == 0.0
        assert metrics["operations"]["update"]["failure_rate"] == 1.0

    def test_failure_rate_calculation(self, tmp_path):
        """Failure rate should be calculated correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        for _ in range(3):
            logger.record_store_call("create")
        logger.record_store_failure("create", "Timeout")

        rate = logger.get_metrics()["operations"]["create"]["failure_rate"]
        assert rate == pytest.approx(0.333, rel=0.01)

    def test_get_metrics_returns_snapshot(self, tmp_path):
        """Reading metrics leaves the live counters untouched."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )
        logger.record_store_call("delete")
        logger.record_store_failure("delete", "HTTPError_404")

        snapshot = logger.get_metrics()
        snapshot["operations"]["delete"]["attempts"] = 99
        snapshot["errors_by_type"]["HTTPError_404"] = 99

        assert logger.metrics["operations"]["delete"] == {"attempts": 1, "failures": 1}
        assert logger.metrics["errors_by_type"] == {"HTTPError_404": 1}

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Test message")

        log_files = list(tmp_path.glob("jobtracker_*.log"))
        assert len(log_files) == 1
        assert "Test message" in log_files[0].read_text()

    def test_console_only(self, tmp_path, monkeypatch):
        """Disabling file output writes no log file."""
        monkeypatch.chdir(tmp_path)
        StructuredLogger(name="test", enable_file=False, enable_console=True).info("hello")
        assert not (tmp_path / "logs").exists()

    def test_metrics_summary(self, tmp_path):
        """The summary logs totals and per-operation lines."""
        logger = StructuredLogger(name="test-summary", log_dir=tmp_path, enable_console=False)
        logger.record_store_call("delete")
        logger.record_store_failure("delete", "Timeout")
        logger.log_metrics_summary()

        content = next(tmp_path.glob("*.log")).read_text()
        assert "Store calls: 1 (1 failed)" in content
        assert "delete: 1/1 failed (100.0%)" in content


class TestGlobalLogger:
    """Test global logger singleton."""

    @pytest.fixture(autouse=True)
    def fresh(self):
        reset_logger()
        yield
        reset_logger()

    def test_get_logger_singleton(self, tmp_path):
        """get_logger should return same instance."""
        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        """reset_logger should create new instance."""
        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_rollback()

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)
        assert logger2 is not logger1
        assert logger2.metrics["rollbacks"] == 0

    def test_file_logging_follows_env(self, tmp_path, monkeypatch):
        """JOBTRACKER_LOG_DIR turns on file output."""
        monkeypatch.setenv("JOBTRACKER_LOG_DIR", str(tmp_path / "logs"))
        get_logger(enable_console=False).info("to file")
        assert list((tmp_path / "logs").glob("*.log"))

    def test_level_follows_env(self, monkeypatch):
        monkeypatch.setenv("JOBTRACKER_LOG_LEVEL", "WARNING")
        monkeypatch.delenv("JOBTRACKER_LOG_DIR", raising=False)
        assert get_logger(enable_console=False).logger.level == 30
