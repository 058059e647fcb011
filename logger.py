"""Logging setup, image download tracking and configuration logging."""

import copy
import logging
import logging.handlers
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import colorlog

LOGGER_NAME = 'wolai_markdown_exporter'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}

# Rotating log file: 10MB per file, 5 backups
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_SECRET_KEYS = ('token', 'secret', 'password')


def resolve_level(verbosity: int = 0, level: Optional[str] = None) -> int:
    """
    Map -v flags or an explicit level name to a logging level.

    An explicit level wins; otherwise 0 is WARNING, 1 is INFO, 2+ is DEBUG.

    Raises:
        ValueError: Unknown level name
    """
    if level:
        name = level.upper()
        if name not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Invalid log level '{level}'")
        return getattr(logging, name)

    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    Configure the exporter's logger hierarchy.

    Console output is colored with colorlog; ``log_file`` adds a plain
    rotating file handler at the same level. Calling it again replaces the
    previous handlers, so the CLI can reconfigure once the config is loaded.

    Args:
        verbosity: Count of -v flags
        log_file: Optional path of a log file
        level: Optional explicit level name, overriding ``verbosity``

    Returns:
        The ``wolai_markdown_exporter`` logger
    """
    log_level = resolve_level(verbosity, level)

    # Third-party libraries (requests, urllib3) only report warnings
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(colorlog.ColoredFormatter(
        fmt='%(log_color)s' + LOG_FORMAT,
        datefmt=DATE_FORMAT,
        log_colors=LOG_COLORS
    ))
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding='utf-8'
            )
        except OSError as e:
            logger.warning(f"Cannot write log file {log_file}: {e}")
        else:
            file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
            logger.addHandler(file_handler)
            logger.info(f"Writing log to {log_file}")

    logger.debug(f"Log level set to {logging.getLevelName(log_level)}")
    return logger


def format_elapsed(seconds: float) -> str:
    """Format a duration as ``4.2s``, ``3m 5s`` or ``1h 2m 5s``."""
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"

    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m {secs}s"


class DownloadTracker:
    """
    Counts image downloads over a whole export.

    Totals accumulate across pages; ``page()`` wraps the downloads of one
    page and logs how that page went when it ends.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(f'{LOGGER_NAME}.downloads')
        self.downloaded = 0
        self.failed = 0
        self.skipped = 0
        self.total_bytes = 0

    def record_download(self, size: int) -> None:
        self.downloaded += 1
        self.total_bytes += size

    def record_failure(self) -> None:
        self.failed += 1

    def record_skipped(self, count: int = 1) -> None:
        self.skipped += count

    @contextmanager
    def page(self, page_name: str, image_count: int) -> Iterator['DownloadTracker']:
        """Log a per-page summary of the downloads recorded inside the block."""
        downloaded_before, failed_before = self.downloaded, self.failed
        start_time = time.time()
        self.logger.info(f"Downloading {image_count} image(s) for '{page_name}'")

        yield self

        downloaded = self.downloaded - downloaded_before
        failed = self.failed - failed_before
        if failed and failed == image_count:
            log_method = self.logger.error
        elif failed:
            log_method = self.logger.warning
        else:
            log_method = self.logger.info

        log_method(
            f"'{page_name}': {downloaded}/{image_count} image(s) downloaded, "
            f"{failed} failed in {format_elapsed(time.time() - start_time)}"
        )

    def as_dict(self) -> Dict[str, int]:
        return {
            'downloaded': self.downloaded,
            'failed': self.failed,
            'skipped': self.skipped,
            'total_size_bytes': self.total_bytes,
        }


def log_section(title: str) -> None:
    """Log a banner line around a section title."""
    logger = logging.getLogger(LOGGER_NAME)
    banner = "=" * 60
    logger.info(banner)
    logger.info(f"  {title.upper()}")
    logger.info(banner)


def redact_secrets(config: Any) -> Any:
    """Return a copy of ``config`` with non-empty secret values masked."""
    if isinstance(config, dict):
        return {
            key: "***REDACTED***"
            if isinstance(value, str) and value and any(s in key.lower() for s in _SECRET_KEYS)
            else redact_secrets(value)
            for key, value in config.items()
        }
    if isinstance(config, list):
        return [redact_secrets(item) for item in config]
    return copy.deepcopy(config)


def log_config(config: Dict[str, Any]) -> None:
    """Log the effective configuration at INFO, with the token masked."""
    logger = logging.getLogger(LOGGER_NAME)
    log_section("Configuration")

    for section in ('wolai', 'advanced', 'export', 'logging'):
        values = redact_secrets(config.get(section) or {})
        for key, value in values.items():
            if key == 'max_rate_limit_retries' and value is None:
                value = 'unlimited'
            logger.info(f"{section}.{key}: {value}")


__all__ = [
    'LOGGER_NAME',
    'DownloadTracker',
    'format_elapsed',
    'log_config',
    'log_section',
    'redact_secrets',
    'resolve_level',
    'setup_logging'
]
