"""
Main logging configuration and setup for Discord Ticket Bot.

This module provides centralized logging configuration with support for
file rotation, audit logging, and structured log formatting.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from .formatters import TicketBotFormatter, AuditFormatter
from .handlers import RotatingFileHandler, AuditFileHandler


class TicketBotLogger:
    """
    Configures the root logger: console, rotating ``bot.log`` and ``error.log``.
    """

    def __init__(self, log_dir: str = "logs", log_level: str = "INFO"):
        """
        Initialize the logger.

        Args:
            log_dir: Directory to store log files
            log_level: Default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        self.log_dir = Path(log_dir)
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)

        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._setup_root_logger()

    def _setup_root_logger(self):
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)

        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(TicketBotFormatter(use_colors=sys.stdout.isatty()))
        root_logger.addHandler(console_handler)

        file_handler = RotatingFileHandler(
            filename=str(self.log_dir / "bot.log"),
            max_bytes=10 * 1024 * 1024,
            backup_count=5
        )
        file_handler.setLevel(self.log_level)
        file_handler.setFormatter(TicketBotFormatter(use_colors=False, include_extra=True))
        root_logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            filename=str(self.log_dir / "error.log"),
            max_bytes=5 * 1024 * 1024,
            backup_count=3
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(TicketBotFormatter(use_colors=False, include_extra=True))
        root_logger.addHandler(error_handler)

        # discord.py is chatty at DEBUG
        logging.getLogger('discord').setLevel(max(self.log_level, logging.INFO))

    def setup_audit_logging(self) -> 'AuditLogger':
        return AuditLogger(self.log_dir)


class AuditLogger:
    """
    Structured audit trail for owner and administrator actions.

    Writes to ``audit.log`` only; audit events do not propagate to the root logger.
    """

    def __init__(self, log_dir: Path):
        """
        Initialize the audit logger.

        Args:
            log_dir: Directory to store audit log files
        """
        self.log_dir = Path(log_dir)
        self.logger = logging.getLogger("audit")
        self.logger.setLevel(logging.INFO)

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        audit_handler = AuditFileHandler(filename=str(self.log_dir / "audit.log"))
        audit_handler.setLevel(logging.INFO)
        audit_handler.setFormatter(AuditFormatter())
        self.logger.addHandler(audit_handler)

        self.logger.propagate = False

    def log_category_added(self, category_id: str, user_id: int,
                           guild_id: Optional[int] = None,
                           additional_info: Optional[Dict[str, Any]] = None):
        """
        Log a global category being added.

        Args:
            category_id: Normalized ID of the new category
            user_id: ID of the user who added it
            guild_id: Guild the command was used in
            additional_info: Additional information to log
        """
        info = dict(additional_info or {})
        info['category_id'] = category_id

        self._log_audit_event(
            event_type="CATEGORY_ADDED",
            user_id=user_id,
            guild_id=guild_id,
            additional_info=info
        )

    def log_category_removed(self, category_id: str, user_id: int, affected_tenants: int,
                             guild_id: Optional[int] = None,
                             additional_info: Optional[Dict[str, Any]] = None):
        """
        Log a global category being removed and cascaded.

        Args:
            category_id: ID of the removed category
            user_id: ID of the user who removed it
            affected_tenants: Number of servers the category was disabled in
            guild_id: Guild the command was used in
            additional_info: Additional information to log
        """
        info = dict(additional_info or {})
        info['category_id'] = category_id
        info['affected_tenants'] = affected_tenants

        self._log_audit_event(
            event_type="CATEGORY_REMOVED",
            user_id=user_id,
            guild_id=guild_id,
            additional_info=info
        )

    def log_tenant_category_toggled(self, category_id: str, user_id: int, guild_id: int,
                                    enabled: bool):
        self._log_audit_event(
            event_type="TENANT_CATEGORY_TOGGLED",
            user_id=user_id,
            guild_id=guild_id,
            additional_info={'category_id': category_id, 'enabled': enabled}
        )

    def log_command_used(self, command_name: str, user_id: int, guild_id: Optional[int],
                         channel_id: Optional[int] = None, success: bool = True,
                         additional_info: Optional[Dict[str, Any]] = None):
        """
        Log command usage event.

        Args:
            command_name: Name of the command used
            user_id: ID of user who used the command
            guild_id: ID of the guild
            channel_id: ID of the channel where command was used
            success: Whether the command executed successfully
            additional_info: Additional information to log
        """
        info = dict(additional_info or {})
        info['command_name'] = command_name
        info['success'] = success

        self._log_audit_event(
            event_type="COMMAND_USED",
            user_id=user_id,
            guild_id=guild_id,
            channel_id=channel_id,
            additional_info=info
        )

    def log_permission_denied(self, command_name: str, user_id: int, guild_id: Optional[int],
                              required_permission: str, channel_id: Optional[int] = None):
        """
        Log permission denied event.

        Args:
            command_name: Name of the command that was denied
            user_id: ID of user who was denied
            guild_id: ID of the guild
            required_permission: The permission that was required
            channel_id: ID of the channel
        """
        self._log_audit_event(
            event_type="PERMISSION_DENIED",
            user_id=user_id,
            guild_id=guild_id,
            channel_id=channel_id,
            additional_info={
                'command_name': command_name,
                'required_permission': required_permission
            }
        )

    def log_error_occurred(self, error_type: str, error_message: str,
                           user_id: Optional[int] = None, guild_id: Optional[int] = None,
                           additional_info: Optional[Dict[str, Any]] = None):
        info = dict(additional_info or {})
        info['error_type'] = error_type
        info['error_message'] = error_message

        self._log_audit_event(
            event_type="ERROR_OCCURRED",
            user_id=user_id,
            guild_id=guild_id,
            additional_info=info
        )

    def _log_audit_event(self, event_type: str, user_id: Optional[int] = None,
                         guild_id: Optional[int] = None, channel_id: Optional[int] = None,
                         additional_info: Optional[Dict[str, Any]] = None):
        """
        Log a structured audit event.

        Args:
            event_type: Type of event being logged
            user_id: ID of user involved
            guild_id: ID of guild involved
            channel_id: ID of channel involved
            additional_info: Additional information to include
        """
        event_data = {
            'event_type': event_type,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'user_id': user_id,
            'guild_id': guild_id,
            'channel_id': channel_id
        }

        if additional_info:
            event_data.update(additional_info)

        event_data = {k: v for k, v in event_data.items() if v is not None}

        self.logger.info("Audit event", extra={'audit_data': event_data})


_logger_instance: Optional[TicketBotLogger] = None
_audit_logger_instance: Optional[AuditLogger] = None


def setup_logging(log_dir: str = "logs", log_level: str = "INFO") -> TicketBotLogger:
    """
    Setup global logging configuration.

    Args:
        log_dir: Directory to store log files
        log_level: Default log level

    Returns:
        TicketBotLogger: Configured logger instance
    """
    global _logger_instance, _audit_logger_instance

    _logger_instance = TicketBotLogger(log_dir, log_level)
    _audit_logger_instance = _logger_instance.setup_audit_logging()

    return _logger_instance


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module, setting up logging with defaults on first use.
    """
    if _logger_instance is None:
        setup_logging()

    return logging.getLogger(name)


def get_audit_logger() -> AuditLogger:
    """
    Get the global audit logger instance.

    Returns:
        AuditLogger: Configured audit logger instance
    """
    if _audit_logger_instance is None:
        setup_logging()

    return _audit_logger_instance
