from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict


_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s | %(message)s"


class StructuredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_data"):
            log_entry.update(getattr(record, "extra_data"))
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def configure_logging(
    *,
    level: str = "INFO",
    fmt: str = "text",
) -> None:
    """
    Idempotent-ish logging config.
    Importing this module does nothing; the CLI calls configure_logging().
    fmt: "text" or "json".
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured by app/test runner; keep hands off.
        return

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(_DEFAULT_FMT))
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), handlers=[handler])


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_kv(logger: logging.Logger, msg: str, *, level: int = logging.INFO, **kv: Any) -> None:
    if not logger.isEnabledFor(level):
        return
    if not kv:
        logger.log(level, msg)
        return
    extra = " ".join([f"{k}={kv[k]!r}" for k in sorted(kv.keys())])
    logger.log(level, "%s | %s", msg, extra, extra={"extra_data": dict(kv)})
