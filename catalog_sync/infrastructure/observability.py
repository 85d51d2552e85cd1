"""Structured Logging: one log line per catalog or sale event, with the entity it concerns.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Entity identifiers (publication, ISBN, product, order) ride along when the caller
      passed them via extra=, e.g. ErrorContext.as_log_extra()
    - Sale tokens are credentials: only their millisecond prefix reaches the logs
    - Text format prints the same identifiers as key=value pairs

Design Decisions:
    - setup_logging() runs once, from the FastAPI lifespan; repeated calls replace the handler
    - httpx and SQLAlchemy engine chatter is held at WARNING
"""

import json
import logging
from datetime import datetime, timezone

from catalog_sync.core.sale_token import mask_sale_token

ENTITY_FIELDS = ("publication_id", "isbn", "product_id", "order_id")
DIAGNOSTIC_FIELDS = ("sale_token", "error_code", "error_count", "path", "status_code")

_NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")
_HANDLER_NAME = "catalog_sync"


def record_fields(record: logging.LogRecord) -> dict:
    """Identifier and diagnostic extras present on record, tokens masked."""
    fields = {}
    for key in ENTITY_FIELDS + DIAGNOSTIC_FIELDS:
        value = record.__dict__.get(key)
        if value is None:
            continue
        fields[key] = mask_sale_token(value) if key == "sale_token" else value
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_fields(record),
        }
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines for local runs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        fields = record_fields(record)
        if fields:
            text += " [" + " ".join(f"{k}={v}" for k, v in fields.items()) + "]"
        return text


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
