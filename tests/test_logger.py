"""Unit tests for the logger module."""

import logging
import sys
from datetime import datetime
from unittest.mock import patch

import pytest

from ghread import telemetry
from ghread.logger import (
    SEMANTIC_COLORS,
    ColoredFormatter,
    Colors,
    DateRotatingFileHandler,
    MaskingFilter,
    get_logger,
    is_debug_mode,
    setup_logging,
)


def _record(msg, args=(), level=logging.INFO):
    return logging.LogRecord("test", level, __file__, 1, msg, args, None)


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestMaskingFilter:
    """Tests for MaskingFilter."""

    def test_masks_ghes_host_in_message(self):
        record = _record("GET https://ghe.corp.com/api/v3/users/a")

        MaskingFilter("ghe.corp.com").filter(record)

        assert record.getMessage() == "GET https://<GHES>/api/v3/users/a"

    def test_masks_secrets_in_message_and_args(self):
        record = _record("token %s for %s", ("s3cret", "octocat"))

        MaskingFilter(None, secrets=["s3cret"]).filter(record)

        assert record.getMessage() == "token *** for octocat"

    def test_masks_dict_args(self):
        record = _record("host %(host)s", ())
        record.args = {"host": "ghe.corp.com", "count": 3}

        MaskingFilter("ghe.corp.com").filter(record)

        assert record.args == {"host": "<GHES>", "count": 3}

    def test_github_com_is_not_masked(self):
        record = _record("GET https://github.com/org/repo")

        masking_filter = MaskingFilter("github.com")
        masking_filter.filter(record)

        assert masking_filter.enabled is False
        assert record.getMessage() == "GET https://github.com/org/repo"

    def test_empty_secrets_are_ignored(self):
        masking_filter = MaskingFilter(None, secrets=[None, ""])
        assert masking_filter.enabled is False

    def test_always_passes_record_through(self):
        assert MaskingFilter("ghe.corp.com", ["t"]).filter(_record("x")) is True


@pytest.mark.unit
class TestColoredFormatter:
    """Tests for ColoredFormatter."""

    def test_error_is_red(self):
        output = ColoredFormatter("%(message)s").format(_record("boom", level=logging.ERROR))
        assert output == f"{Colors.RED}boom{Colors.RESET}"

    def test_warning_is_yellow(self):
        output = ColoredFormatter("%(message)s").format(_record("hmm", level=logging.WARNING))
        assert output == f"{Colors.YELLOW}hmm{Colors.RESET}"

    def test_semantic_info_gets_prefix(self):
        output = ColoredFormatter("%(message)s").format(
            _record("OpenTelemetry initialized: endpoint=http://localhost:4318, service=ghread")
        )
        assert output.startswith(f"{Colors.GREEN}>>> ")

    def test_every_semantic_keyword_matches_an_info_message(self, caplog):
        """Test each keyword is reachable from a message ghread logs at INFO."""
        with (
            patch.object(telemetry, "OTLPSpanExporter"),
            patch.object(telemetry, "OTLPMetricExporter"),
            patch.object(telemetry, "PeriodicExportingMetricReader"),
            patch.object(telemetry, "MeterProvider"),
            patch.object(telemetry, "TracerProvider"),
            patch.object(telemetry, "BatchSpanProcessor"),
            patch.object(telemetry.trace, "set_tracer_provider"),
            patch.object(telemetry.metrics, "set_meter_provider"),
            patch.object(telemetry.metrics, "get_meter"),
            caplog.at_level(logging.INFO),
        ):
            telemetry.init_telemetry("http://localhost:4318", "ghread")

        info_messages = [r.getMessage().lower() for r in caplog.records if r.levelno == logging.INFO]
        for keyword in SEMANTIC_COLORS:
            assert any(keyword in m for m in info_messages), keyword

    def test_debug_fetch_message_is_not_colored(self):
        output = ColoredFormatter("%(message)s").format(_record("Fetching https://x", level=logging.DEBUG))
        assert output == "Fetching https://x"

    def test_plain_info_unchanged(self):
        output = ColoredFormatter("%(message)s").format(_record("hello"))
        assert output == "hello"


@pytest.mark.unit
class TestDateRotatingFileHandler:
    """Tests for DateRotatingFileHandler."""

    def test_rotation_filename_inserts_date(self, tmp_path):
        handler = DateRotatingFileHandler(str(tmp_path / "ghread.log"), maxBytes=10, backupCount=1)
        try:
            name = handler.rotation_filename(str(tmp_path / "ghread.log") + ".1")
        finally:
            handler.close()

        date_str = datetime.now().strftime("%Y-%m-%d")
        assert name == str(tmp_path / f"ghread.{date_str}.log.1")


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_handlers_split_by_level(self, restore_root_logger):
        setup_logging()

        streams = [h.stream for h in restore_root_logger.handlers]
        assert streams == [sys.stdout, sys.stderr]
        assert restore_root_logger.handlers[1].level == logging.WARNING

    def test_log_level_from_environment(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        setup_logging()

        assert restore_root_logger.level == logging.DEBUG
        assert is_debug_mode() is True

    def test_file_handler_created(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "ghread.log"

        setup_logging(log_file=str(log_file))
        get_logger("ghread.test").warning("written to file")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert log_file.exists()
        assert "written to file" in log_file.read_text()

    def test_masking_filter_installed_when_configured(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "ghread.log"

        setup_logging(log_file=str(log_file), ghes_host="ghe.corp.com", secrets=["tok123"])
        get_logger("ghread.test").warning("GET https://ghe.corp.com/ with tok123")
        for handler in restore_root_logger.handlers:
            handler.flush()

        content = log_file.read_text()
        assert "ghe.corp.com" not in content
        assert "tok123" not in content
        assert "<GHES>" in content

    def test_masking_can_be_disabled(self, restore_root_logger):
        setup_logging(ghes_host="ghe.corp.com", mask=False)

        for handler in restore_root_logger.handlers:
            assert not any(isinstance(f, MaskingFilter) for f in handler.filters)


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger."""

    def test_returns_named_logger(self):
        assert get_logger("ghread.clients").name == "ghread.clients"
