"""JSON logging for the warehouse service.

Each line carries the service name and environment. When a request is being
served it also carries the request id and the signed-in user set by
``RequestIdMiddleware`` and ``deps.auth``. Structured fields go in
``extra={"extra_data": {...}}``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from ..middlewares import principal_ctx_var, request_id_ctx_var

# uvicorn's access log duplicates ``request.completed``.
SILENCED_LOGGERS = ("uvicorn.access",)


class JsonLogFormatter(logging.Formatter):
    def __init__(self, *, service: str = "warehouse", environment: str | None = None) -> None:
        super().__init__()
        self.service = service
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "ts": stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "event": record.getMessage(),
        }
        if self.environment:
            payload["env"] = self.environment
        for key, var in (("request_id", request_id_ctx_var), ("principal", principal_ctx_var)):
            value = var.get()
            if value:
                payload[key] = value
        extra = getattr(record, "extra_data", None)
        if isinstance(extra, Mapping):
            payload.update(extra)
        if record.exc_info:
            payload["error"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), default=str)


def configure_logging(level: str | int = logging.INFO, *, environment: str | None = None) -> None:
    """Send every log record to stderr as JSON."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter(environment=environment))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper() if isinstance(level, str) else level)
    for name in SILENCED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
