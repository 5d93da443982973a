"""Structured logging configuration.

Outside dev every record is one ``key=value`` line. Admission decisions
carry ``action``, ``outcome`` and ``appointment_id`` as record attributes so
they can be filtered without parsing the message.
"""

import logging
import sys
from typing import Any

from neobarber.core.config import settings

# Record attributes copied into structured output when present
EXTRA_FIELDS = ("request_id", "action", "outcome", "appointment_id")

NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


class StructuredFormatter(logging.Formatter):
    """Render a record as space-separated ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
        }
        for name in EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                fields[name] = value
        fields["message"] = record.getMessage()

        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)

        return " ".join(f"{key}={value}" for key, value in fields.items())


def _build_formatter() -> logging.Formatter:
    if settings.is_dev:
        return logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    return StructuredFormatter()


def setup_logging() -> None:
    """Configure the root logger once per process."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(_build_formatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class AdmissionLogger:
    """One log line per admission decision (create, update, delete)."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("admission")

    def log(
        self,
        action: str,
        outcome: str,
        appointment_id: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.logger.info(
            f"ADMISSION {action} {outcome}" + (f" {metadata}" if metadata else ""),
            extra={
                "action": action,
                "outcome": outcome,
                "appointment_id": appointment_id,
            },
        )


admission_logger = AdmissionLogger()
