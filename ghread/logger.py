"""
Logging module for ghread.

Provides a simple interface to configure and retrieve loggers using Python's
built-in logging module.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable
from datetime import datetime
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(threadName)s %(name)s: %(message)s"


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"


# Keywords in INFO messages mapped to (color, prefix)
SEMANTIC_COLORS = {
    "initialized": ("green", ">>>"),
}


class DateRotatingFileHandler(RotatingFileHandler):
    """RotatingFileHandler that adds date (yyyy-mm-dd) to backup filenames."""

    def rotation_filename(self, default_name: str) -> str:
        """Turn "ghread.log.1" into "ghread.2024-01-15.log.1"."""
        base = self.baseFilename
        dirname = os.path.dirname(base)
        basename = os.path.basename(base)
        suffix = default_name[len(base) :]
        date_str = datetime.now().strftime("%Y-%m-%d")

        if "." in basename:
            name_part, ext = basename.rsplit(".", 1)
            new_name = f"{name_part}.{date_str}.{ext}{suffix}"
        else:
            new_name = f"{basename}.{date_str}{suffix}"

        return os.path.join(dirname, new_name)


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors based on log level and semantic content."""

    COLOR_MAP = {
        "green": Colors.GREEN,
        "yellow": Colors.YELLOW,
        "red": Colors.RED,
    }

    def _get_semantic_color(self, message: str) -> tuple[str, str] | None:
        message_lower = message.lower()
        for keyword, (color, prefix) in SEMANTIC_COLORS.items():
            if keyword in message_lower:
                return (color, prefix)
        return None

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        if record.levelno >= logging.ERROR:
            return f"{Colors.RED}{message}{Colors.RESET}"
        elif record.levelno >= logging.WARNING:
            return f"{Colors.YELLOW}{message}{Colors.RESET}"

        if record.levelno == logging.INFO:
            semantic = self._get_semantic_color(record.getMessage())
            if semantic:
                color_name, prefix = semantic
                color_code = self.COLOR_MAP.get(color_name, "")
                return f"{color_code}{prefix} {message}{Colors.RESET}"

        return message


class MaskingFilter(logging.Filter):
    """Filter that masks the GHES hostname and credentials in log records.

    The enterprise hostname is replaced with <GHES> and every secret with ***,
    so neither infrastructure details nor tokens end up in log output.
    """

    def __init__(self, ghes_host: str | None, secrets: Iterable[str | None] = ()) -> None:
        """Initialize MaskingFilter.

        Args:
            ghes_host: GitHub Enterprise Server hostname to mask (e.g., "ghe.corp.com").
                       None or "github.com" disables hostname masking.
            secrets: Token values to mask. Empty values are ignored.
        """
        super().__init__()
        self.ghes_host = ghes_host if ghes_host and ghes_host != "github.com" else None
        self.secrets = [s for s in secrets if s]

    @property
    def enabled(self) -> bool:
        return bool(self.ghes_host or self.secrets)

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask the record in place. Always lets the record through."""
        if not self.enabled:
            return True

        if record.msg:
            record.msg = self._mask_value(str(record.msg))

        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: self._mask_value(v) if isinstance(v, str) else v
                    for k, v in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self._mask_value(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return True

    def _mask_value(self, value: str) -> str:
        for secret in self.secrets:
            value = value.replace(secret, "***")
        if self.ghes_host:
            value = value.replace(self.ghes_host, "<GHES>")
        return value


def setup_logging(
    log_file: str | None = None,
    log_size: int = 10 * 1024 * 1024,
    log_backups: int = 5,
    ghes_host: str | None = None,
    secrets: Iterable[str | None] = (),
    mask: bool = True,
) -> None:
    """
    Configure the root logger with a standard format and level.

    The log level can be configured via the LOG_LEVEL environment variable.
    Default level is INFO.

    Args:
        log_file: Optional path to a log file. Rotated at log_size bytes.
        log_size: Max size in bytes before rotation. Default: 10MB
        log_backups: Number of backup files to keep. Default: 5
        ghes_host: GitHub Enterprise Server hostname to mask in output.
        secrets: Credential values to mask in output.
        mask: If False, no masking filter is installed.

    Output: stdout for INFO/DEBUG, stderr for WARNING+, and the file if given.
    """
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    masking_filter = None
    if mask:
        candidate = MaskingFilter(ghes_host, secrets)
        if candidate.enabled:
            masking_filter = candidate

    formatter = ColoredFormatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)

    handlers: list[logging.Handler] = [stdout_handler, stderr_handler]

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = DateRotatingFileHandler(
            log_file,
            maxBytes=log_size,
            backupCount=log_backups,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        if masking_filter:
            handler.addFilter(masking_filter)
        root_logger.addHandler(handler)

    # requests/urllib3 log full URLs at DEBUG
    logging.getLogger("urllib3").setLevel(max(log_level, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger with the specified name.

    Args:
        name: The name for the logger, typically __name__ of the calling module

    Returns:
        A configured Logger instance
    """
    return logging.getLogger(name)


def is_debug_mode() -> bool:
    """Check if logging is set to DEBUG level."""
    return logging.getLogger().level <= logging.DEBUG
