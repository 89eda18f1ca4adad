"""Logging setup for the app factory.

``LOG_FORMAT=json`` emits one JSON object per line; request and item context passed
through ``extra=`` (user_id, item_id, error_code, method, path, status, latency_ms)
is merged into it. Passwords and tokens are never passed as extras.
"""

import json
import logging
from datetime import datetime, timezone

_CONTEXT_KEYS = frozenset({
    "user_id", "item_id", "error_code", "method", "path", "status", "latency_ms",
})


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            key: value for key, value in vars(record).items()
            if key in _CONTEXT_KEYS and value is not None
        }
        entry.update(
            ts=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            msg=record.getMessage(),
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "text"):
    """Install the service handler on the root logger, replacing a previous one."""
    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if h.get_name() != "dotrack"]

    handler = logging.StreamHandler()
    handler.set_name("dotrack")
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
