"""Logging setup for Deskspace.

Records go to stdout, either as one JSON object per line or as plain text.
Both formats carry the current request id, and secrets are scrubbed before
anything is formatted.
"""

import contextvars
import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Optional

# Written by RequestContextMiddleware for the duration of a request.
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s: %(message)s"

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "LiteLLM", "minio")

REDACTED = "[redacted]"

# Provider keys, storage credentials and vault secrets.
_SECRET_PATTERNS = (
    re.compile(r"\bsk-[A-Za-z0-9_\-]{20,}"),
    re.compile(r"(?i)(bearer\s+)[A-Za-z0-9._\-]{20,}"),
    re.compile(
        r"(?i)((?:api_?key|secret_key|access_key|password|token|authorization)[\"']?\s*[=:]\s*[\"']?)[^\s,'\"]{4,}"
    ),
)


def redact(text: str) -> str:
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(lambda m: (m.group(1) if m.groups() else "") + REDACTED, text)
    return text


class ContextFilter(logging.Filter):
    """Stamps ``request_id`` on the record and scrubs secrets from its text."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("") or "-"
        record.msg = redact(str(record.msg))
        if isinstance(record.args, tuple):
            record.args = tuple(redact(a) if isinstance(a, str) else a for a in record.args)
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = redact(record.exc_text)
        return True


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` keys become top-level fields."""

    _BUILTIN = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"request_id", "message"}

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.request_id != "-":
            entry["request_id"] = record.request_id
        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in self._BUILTIN and key not in entry
        )
        if record.exc_text:
            entry["exception"] = record.exc_text
        return json.dumps(entry, default=str)


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Replace the root handlers with a single stdout handler.

    Args:
        log_level: Standard level name; INFO when omitted.
        log_format: ``"json"`` (default) or ``"text"``.
    """
    level = (log_level or "INFO").upper()
    fmt = (log_format or "json").lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ContextFilter())
    handler.setFormatter(
        JsonLineFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT, "%H:%M:%S")
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging ready", extra={"level": level, "format": fmt})
