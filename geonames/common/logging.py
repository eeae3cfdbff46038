"""JSON logging with stable schema."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from geonames.common.constants import JSON_LOG_FIELDS
from geonames.common.fs import ensure_dir
from geonames.common.time_utils import utc_timestamp_iso


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": utc_timestamp_iso(),
            "level": record.levelname,
            "client": getattr(record, "client", None),
            "operation": getattr(record, "operation", None),
            "file": getattr(record, "file", None),
            "line": getattr(record, "line", None),
            "event": getattr(record, "event", None),
            "status": getattr(record, "status", None),
            "rows": getattr(record, "rows", None),
            "error_code": getattr(record, "error_code", None),
            "message": record.getMessage(),
        }
        text = getattr(record, "text", None)
        if text is not None:
            payload["text"] = text
        for field in JSON_LOG_FIELDS:
            payload.setdefault(field, None)
        return json.dumps(payload, ensure_ascii=False, default=str)


def build_logger(name: str = "geonames", level: str = "INFO", log_path: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    logger.handlers.clear()

    stream = logging.StreamHandler()
    stream.setFormatter(JsonLineFormatter())
    logger.addHandler(stream)

    if log_path is not None:
        ensure_dir(log_path.parent)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.info(message, extra=event_fields)


def log_warning(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.warning(message, extra=event_fields)
