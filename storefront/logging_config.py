"""
Logging setup for the storefront.

Console output plus an optional midnight-rotating file under LOG_DIR.
Passwords and secrets are masked before any handler writes a record.
"""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Pattern

from storefront.config import get_settings

LOG_FORMAT = "%(asctime)s | %(name)-25s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class SecretMaskingFilter(logging.Filter):
    """Replaces password and secret values in log records with a placeholder."""

    PATTERNS: list[tuple[Pattern, str]] = [
        (re.compile(r'(password["\']?\s*[:=]\s*["\']?)([^\s"\',}]+)', re.IGNORECASE), r'\1[REDACTED_PASSWORD]'),
        (re.compile(r'(secret["\']?\s*[:=]\s*["\']?)([^\s"\',}]+)', re.IGNORECASE), r'\1[REDACTED_SECRET]'),
        # bcrypt hashes
        (re.compile(r'\$2[abxy]?\$\d{2}\$[./A-Za-z0-9]{53}'), '[REDACTED_HASH]'),
        # credentials embedded in database URLs
        (re.compile(r'(://[^:/@\s]+:)([^@\s]+)(@)'), r'\1[REDACTED]\3'),
    ]

    def _mask(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = self._mask(str(record.msg))
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                self._mask(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True


def setup_logging():
    """
    Configure the root logger once at application startup.

    Handlers already installed on the root logger are replaced, so calling
    this again (e.g. on reload) does not duplicate output.
    """
    settings = get_settings()
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = []

    console_handler = logging.StreamHandler()
    handlers.append(console_handler)

    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=log_dir / "storefront.log",
            when="midnight",
            interval=1,
            backupCount=settings.LOG_RETENTION_DAYS,
            encoding="utf-8",
        )
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        handler.addFilter(SecretMaskingFilter())
        root_logger.addHandler(handler)

    logging.getLogger(__name__).info(
        "Logging initialized: level=%s, file=%s", settings.LOG_LEVEL, settings.LOG_DIR or "disabled"
    )
