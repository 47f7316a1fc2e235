import json
import logging
import re
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

# Context variable used by log filter to inject the polled stream id
stream_id_ctx: ContextVar[str | None] = ContextVar("stream_id", default=None)

EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+", re.I)


def _redact_pii(text: str) -> str:
    """Replace email addresses with ***."""
    return EMAIL_RE.sub("***", text)


class StreamIdFilter(logging.Filter):
    """Attach the stream id from context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        record.stream_id = stream_id_ctx.get(None)
        return True


class JsonFormatter(logging.Formatter):
    """Render logs as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        msg = _redact_pii(record.getMessage())
        data: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "stream_id": getattr(record, "stream_id", None),
            "msg": msg,
        }
        if record.exc_info:
            data["exc"] = _redact_pii(self.formatException(record.exc_info))
        return json.dumps(data)


def configure_logging(level: int | str = logging.INFO, *, json_output: bool = True) -> None:
    """Configure root logger, JSON formatted unless ``json_output`` is false."""

    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    handler.addFilter(StreamIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
