"""Test logging configuration"""

import io
import logging

import pytest

from catalog_sync.core.logger import (
    ColoredConsoleFormatter,
    ErrorOnlyFilter,
    TqdmLoggingHandler,
    get_logger,
    log_fetch_failure,
    setup_logging,
    shutdown_logging,
)


@pytest.fixture
def configured_logging(temp_dir):
    """Set up logging into temp_dir and tear it down afterwards"""
    log_dir = temp_dir / "logs"
    setup_logging(log_dir)
    yield log_dir
    shutdown_logging()


class TestLogger:
    """Test logger setup and report files"""

    def test_setup_creates_log_files(self, configured_logging):
        """Full, error and failure report files are created"""
        names = sorted(p.name.rsplit("_", 2)[0] for p in configured_logging.iterdir())
        assert names == ["log_errors", "log_full", "sync_failures"]

    def test_fetch_failure_goes_to_report(self, configured_logging):
        """log_fetch_failure writes path, URL and reason to the report"""
        logger = get_logger("catalog_sync.test")
        logger.error("plain error without report fields")
        log_fetch_failure(
            logger,
            entry_path="genres.jazz",
            playlist_url="https://www.youtube.com/playlist?list=PL4",
            error_message="yt-dlp timed out after 120s",
        )
        shutdown_logging()

        report = next(configured_logging.glob("sync_failures_*.log")).read_text(encoding="utf-8")
        assert report == (
            "genres.jazz\n"
            "https://www.youtube.com/playlist?list=PL4\n"
            "yt-dlp timed out after 120s\n\n"
        )

    def test_error_log_only_has_errors(self, configured_logging):
        """The error log ignores records below ERROR"""
        logger = get_logger("catalog_sync.test")
        logger.info("just info")
        logger.warning("a warning")
        logger.error("a real error")
        shutdown_logging()

        errors = next(configured_logging.glob("log_errors_*.log")).read_text(encoding="utf-8")
        full = next(configured_logging.glob("log_full_*.log")).read_text(encoding="utf-8")
        assert "a real error" in errors
        assert "a warning" not in errors
        assert "just info" in full

    def test_shutdown_removes_handlers(self, configured_logging):
        """After shutdown the root logger has no handlers left"""
        shutdown_logging()
        assert logging.getLogger().handlers == []


class TestFormatting:
    """Test console formatting helpers"""

    def test_colored_formatter(self):
        """Level names are wrapped in color codes"""
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
        formatted = ColoredConsoleFormatter().format(record)
        assert formatted.startswith("\033[33mWARNING")
        assert formatted.endswith(": careful")

    def test_error_only_filter(self):
        """ErrorOnlyFilter passes ERROR and CRITICAL only"""
        error_filter = ErrorOnlyFilter()
        def make(level):
            return logging.LogRecord("x", level, __file__, 1, "m", None, None)

        assert not error_filter.filter(make(logging.WARNING))
        assert error_filter.filter(make(logging.ERROR))
        assert error_filter.filter(make(logging.CRITICAL))

    def test_tqdm_handler_writes_to_stream(self):
        """TqdmLoggingHandler writes formatted records to its stream"""
        stream = io.StringIO()
        handler = TqdmLoggingHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler.emit(logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None))
        assert stream.getvalue() == "hello\n"
