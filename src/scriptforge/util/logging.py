"""Logging helpers with secret redaction."""

from __future__ import annotations

import logging
import re
from typing import Iterable

_REDACTIONS = [
    (re.compile(r"Bearer\s+[A-Za-z0-9\-_.]+"), "Bearer [REDACTED]"),
    (re.compile(r"sk-[A-Za-z0-9]{8,}"), "[REDACTED]"),
    (re.compile(r"(?i)(api[_-]?key|token|secret|password)(\"?\s*[:=]\s*\"?)[^\s\",}]+"), r"\1\2[REDACTED]"),
]
_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_level = logging.INFO


def redact(text: str, extra_secrets: Iterable[str] | None = None) -> str:
    """Redact known secret patterns and explicit secrets from text."""
    redacted = text
    for pattern, replacement in _REDACTIONS:
        redacted = pattern.sub(replacement, redacted)
    if extra_secrets:
        for secret in extra_secrets:
            if secret:
                redacted = redacted.replace(secret, "[REDACTED]")
    return redacted


def set_level(level: str | int) -> None:
    """Set the level used by scriptforge loggers, including existing ones."""
    global _level
    _level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(_level, int):
        raise ValueError(f"Unknown log level: {level}")
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("scriptforge"):
            logging.getLogger(name).setLevel(_level)


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(_level)
    return logger
