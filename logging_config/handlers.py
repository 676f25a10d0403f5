"""
Custom log handlers for Discord Ticket Bot.

Rotating file handlers that gzip rotated files, and the audit handler that
keeps the audit trail readable by the bot's user only.
"""

import gzip
import logging
import logging.handlers
import os
import shutil
from pathlib import Path
from typing import Optional


class RotatingFileHandler(logging.handlers.RotatingFileHandler):
    """
    Rotating file handler that compresses rotated files.

    Rotated files are named ``<log>.N.gz`` through the standard ``namer`` and
    ``rotator`` hooks, so the stdlib keeps handling backup numbering.
    """

    def __init__(self, filename: str, max_bytes: int = 10485760, backup_count: int = 5,
                 encoding: Optional[str] = None, compress_rotated: bool = True):
        """
        Initialize the rotating file handler.

        Args:
            filename: Path to the log file
            max_bytes: Maximum size of log file before rotation (default: 10MB)
            backup_count: Number of backup files to keep
            encoding: File encoding (default: utf-8)
            compress_rotated: Whether to gzip rotated files
        """
        Path(filename).parent.mkdir(parents=True, exist_ok=True)

        super().__init__(
            filename=filename,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding=encoding or 'utf-8'
        )

        self.compress_rotated = compress_rotated
        if compress_rotated:
            self.namer = self._gzip_name
            self.rotator = self._gzip_rotate

    @staticmethod
    def _gzip_name(default_name: str) -> str:
        return default_name + ".gz"

    @staticmethod
    def _gzip_rotate(source: str, dest: str) -> None:
        with open(source, 'rb') as f_in:
            with gzip.open(dest, 'wb') as f_out:
                shutil.copyfileobj(f_in, f_out)
        os.remove(source)


class AuditFileHandler(RotatingFileHandler):
    """
    File handler for the audit trail.

    Keeps the audit file at mode 600 after creation and after every rotation.
    """

    def __init__(self, filename: str, max_bytes: int = 20971520, backup_count: int = 10,
                 encoding: Optional[str] = None):
        """
        Initialize the audit file handler.

        Args:
            filename: Path to the audit log file
            max_bytes: Maximum size before rotation (default: 20MB)
            backup_count: Number of backup files to keep (default: 10)
            encoding: File encoding
        """
        super().__init__(
            filename=filename,
            max_bytes=max_bytes,
            backup_count=backup_count,
            encoding=encoding,
            compress_rotated=True
        )
        self._set_secure_permissions()

    def _set_secure_permissions(self):
        try:
            if os.path.exists(self.baseFilename):
                os.chmod(self.baseFilename, 0o600)
        except OSError as e:
            logging.getLogger(__name__).warning(
                f"Could not set secure permissions on audit log: {e}"
            )

    def doRollover(self):
        """Perform rollover and re-apply restrictive permissions."""
        super().doRollover()
        self._set_secure_permissions()
