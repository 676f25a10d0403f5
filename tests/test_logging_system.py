"""
Unit tests for logging system.

Tests logging configuration, formatters, handlers, and audit logging
to ensure proper log management throughout the bot.
"""

import pytest
import logging
import tempfile
import json
import os
import shutil
import sys
from pathlib import Path
from unittest.mock import patch

from logging_config.logger import TicketBotLogger, AuditLogger, setup_logging, get_logger, get_audit_logger
from logging_config.formatters import TicketBotFormatter, AuditFormatter
from logging_config.handlers import RotatingFileHandler, AuditFileHandler


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def make_record(msg="Test message", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.usefixtures("restore_root_logger")
class TestTicketBotLogger:
    """Test the main TicketBotLogger class."""

    def test_logger_initialization(self):
        """Test logger initialization with default settings."""
        with tempfile.TemporaryDirectory() as temp_dir:
            logger = TicketBotLogger(log_dir=temp_dir, log_level="INFO")

            assert logger.log_dir == Path(temp_dir)
            assert logger.log_level == logging.INFO
            assert (Path(temp_dir) / "bot.log").exists()
            assert (Path(temp_dir) / "error.log").exists()

    def test_logger_initialization_custom_level(self):
        """Test logger initialization with custom log level."""
        with tempfile.TemporaryDirectory() as temp_dir:
            logger = TicketBotLogger(log_dir=temp_dir, log_level="DEBUG")

            assert logger.log_level == logging.DEBUG
            assert logging.getLogger('discord').level == logging.INFO

    def test_repeated_setup_does_not_duplicate_handlers(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            TicketBotLogger(log_dir=temp_dir)
            TicketBotLogger(log_dir=temp_dir)

            assert len(logging.getLogger().handlers) == 3

    def test_setup_audit_logging(self):
        """Test audit logging setup."""
        with tempfile.TemporaryDirectory() as temp_dir:
            logger = TicketBotLogger(log_dir=temp_dir)
            audit_logger = logger.setup_audit_logging()

            assert isinstance(audit_logger, AuditLogger)
            assert audit_logger.log_dir == Path(temp_dir)


class TestAuditLogger:
    """Test the AuditLogger class."""

    def setup_method(self):
        """Setup for each test method."""
        self.temp_dir = tempfile.mkdtemp()
        self.audit_logger = AuditLogger(Path(self.temp_dir))

    def teardown_method(self):
        """Cleanup after each test method."""
        for handler in list(self.audit_logger.logger.handlers):
            self.audit_logger.logger.removeHandler(handler)
            handler.close()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def audit_data(self, mock_info):
        mock_info.assert_called_once()
        call_args = mock_info.call_args
        assert call_args[0][0] == "Audit event"
        return call_args[1]['extra']['audit_data']

    def test_audit_logger_initialization(self):
        """Test audit logger initialization."""
        assert self.audit_logger.log_dir == Path(self.temp_dir)
        assert self.audit_logger.logger.name == "audit"
        assert not self.audit_logger.logger.propagate

    def test_log_category_added(self):
        with patch.object(self.audit_logger.logger, 'info') as mock_info:
            self.audit_logger.log_category_added(category_id="billing", user_id=12345, guild_id=67890)

            audit_data = self.audit_data(mock_info)
            assert audit_data['event_type'] == "CATEGORY_ADDED"
            assert audit_data['category_id'] == "billing"
            assert audit_data['user_id'] == 12345
            assert audit_data['guild_id'] == 67890
            assert 'channel_id' not in audit_data

    def test_log_category_removed(self):
        """Test logging a cascaded category removal."""
        with patch.object(self.audit_logger.logger, 'info') as mock_info:
            self.audit_logger.log_category_removed(
                category_id="billing",
                user_id=12345,
                affected_tenants=3
            )

            audit_data = self.audit_data(mock_info)
            assert audit_data['event_type'] == "CATEGORY_REMOVED"
            assert audit_data['affected_tenants'] == 3
            assert 'guild_id' not in audit_data

    def test_log_tenant_category_toggled(self):
        with patch.object(self.audit_logger.logger, 'info') as mock_info:
            self.audit_logger.log_tenant_category_toggled(
                category_id="bug",
                user_id=12345,
                guild_id=67890,
                enabled=False
            )

            audit_data = self.audit_data(mock_info)
            assert audit_data['event_type'] == "TENANT_CATEGORY_TOGGLED"
            assert audit_data['enabled'] is False

    def test_log_command_used(self):
        """Test logging command usage event."""
        with patch.object(self.audit_logger.logger, 'info') as mock_info:
            self.audit_logger.log_command_used(
                command_name="bot-owner stats",
                user_id=12345,
                guild_id=67890,
                additional_info={'shown': 2}
            )

            audit_data = self.audit_data(mock_info)
            assert audit_data['event_type'] == "COMMAND_USED"
            assert audit_data['command_name'] == "bot-owner stats"
            assert audit_data['success'] is True
            assert audit_data['shown'] == 2

    def test_log_permission_denied(self):
        """Test logging permission denied event."""
        with patch.object(self.audit_logger.logger, 'info') as mock_info:
            self.audit_logger.log_permission_denied(
                command_name="bot-owner remove-global-category",
                user_id=12345,
                guild_id=67890,
                required_permission="owner"
            )

            audit_data = self.audit_data(mock_info)
            assert audit_data['event_type'] == "PERMISSION_DENIED"
            assert audit_data['required_permission'] == "owner"

    def test_log_error_occurred(self):
        with patch.object(self.audit_logger.logger, 'info') as mock_info:
            self.audit_logger.log_error_occurred(
                error_type="DatabaseError",
                error_message="disk full",
                user_id=12345
            )

            audit_data = self.audit_data(mock_info)
            assert audit_data['event_type'] == "ERROR_OCCURRED"
            assert audit_data['error_message'] == "disk full"

    def test_events_are_written_as_json_lines(self):
        self.audit_logger.log_category_added(category_id="billing", user_id=1)
        self.audit_logger.log_category_removed(category_id="billing", user_id=1, affected_tenants=0)
        for handler in self.audit_logger.logger.handlers:
            handler.flush()

        lines = (Path(self.temp_dir) / "audit.log").read_text(encoding='utf-8').splitlines()

        assert [json.loads(line)['event_type'] for line in lines] == ["CATEGORY_ADDED", "CATEGORY_REMOVED"]


class TestFormatters:
    """Test custom formatters."""

    def test_ticket_bot_formatter_basic(self):
        """Test basic TicketBotFormatter functionality."""
        formatter = TicketBotFormatter(use_colors=False)

        formatted = formatter.format(make_record())

        assert "Test message" in formatted
        assert "INFO" in formatted
        assert "test.logger" in formatted

    def test_ticket_bot_formatter_with_colors(self):
        """Test TicketBotFormatter with colors enabled."""
        formatter = TicketBotFormatter(use_colors=True)
        record = make_record(level=logging.ERROR)

        formatted = formatter.format(record)

        assert "\033[31m" in formatted
        assert record.levelname == "ERROR"

    def test_ticket_bot_formatter_with_extra(self):
        """Test TicketBotFormatter with extra fields."""
        formatter = TicketBotFormatter(use_colors=False, include_extra=True)

        formatted = formatter.format(make_record(category_id="billing", info={'a': 1}))

        assert "category_id=billing" in formatted
        assert 'info={"a": 1}' in formatted

    def test_audit_formatter(self):
        """Test AuditFormatter JSON output."""
        formatter = AuditFormatter()
        record = make_record(msg="Audit event", audit_data={'event_type': "CATEGORY_ADDED", 'user_id': 1})

        entry = json.loads(formatter.format(record))

        assert entry['message'] == "Audit event"
        assert entry['event_type'] == "CATEGORY_ADDED"
        assert entry['user_id'] == 1
        assert 'extra' not in entry

    def test_audit_formatter_with_exception(self):
        """Test AuditFormatter with exception info."""
        formatter = AuditFormatter()
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        entry = json.loads(formatter.format(record))

        assert "ValueError: boom" in entry['exception']


class TestHandlers:
    """Test custom handlers."""

    def test_rotating_handler_compresses_backups(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "logs" / "bot.log"
            handler = RotatingFileHandler(str(path), max_bytes=200, backup_count=2)
            handler.setFormatter(logging.Formatter("%(message)s"))
            try:
                for _ in range(10):
                    handler.emit(make_record(msg="x" * 80))
            finally:
                handler.close()

            assert (path.parent / "bot.log.1.gz").exists()
            assert not (path.parent / "bot.log.3.gz").exists()

    @pytest.mark.skipif(os.name != 'posix', reason="POSIX file modes only")
    def test_audit_handler_restricts_permissions(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "audit.log"
            handler = AuditFileHandler(str(path))
            try:
                assert (path.stat().st_mode & 0o777) == 0o600
            finally:
                handler.close()


@pytest.mark.usefixtures("restore_root_logger")
class TestGlobalFunctions:
    """Test global logging functions."""

    def test_setup_logging(self):
        """Test global logging setup."""
        with tempfile.TemporaryDirectory() as temp_dir:
            logger_instance = setup_logging(log_dir=temp_dir, log_level="DEBUG")

            assert isinstance(logger_instance, TicketBotLogger)
            assert isinstance(get_audit_logger(), AuditLogger)
            assert get_audit_logger().log_dir == Path(temp_dir)

    def test_get_logger(self):
        """Test getting logger instance."""
        with tempfile.TemporaryDirectory() as temp_dir:
            setup_logging(log_dir=temp_dir)
            logger = get_logger("test.module")

            assert isinstance(logger, logging.Logger)
            assert logger.name == "test.module"
