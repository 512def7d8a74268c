"""
modules/backup_restore/logging_utils.py

Purpose
-------
Uniform, append-only JSON-lines logging for backup operations.

Public API
----------
- get_logger(file_path) -> logging.Logger
- log_event(logger, op, phase, message, extra: dict = {})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

__all__ = ["get_logger", "log_event"]

_LOGGER_NAME = "shop_manager.backup"
_DEFAULT_LOG_FILE = Path("logs") / "backup.log"


def get_logger(file_path: Optional[str | Path] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Return the backup logger writing JSON-lines to `file_path`
    (default logs/backup.log). Calling again with the same path reuses the
    handler; a different path replaces it.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    log_file = (Path(file_path) if file_path else _DEFAULT_LOG_FILE).resolve()
    current = False
    for h in list(logger.handlers):
        if isinstance(h, logging.FileHandler):
            if Path(h.baseFilename) == log_file:
                current = True
                continue
            logger.removeHandler(h)
            h.close()

    if not current:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(str(log_file), mode="a", encoding="utf-8", delay=True)
        except OSError:
            # No log file; the stderr handler below still reports warnings.
            fh = None
        if fh is not None:
            fh.setLevel(level)
            fh.setFormatter(_JsonLineFormatter())
            logger.addHandler(fh)

    # Mirror WARNING+ to stderr once
    streams = [h for h in logger.handlers if type(h) is logging.StreamHandler]
    for h in streams:
        if h.stream is not sys.stderr:
            h.setStream(sys.stderr)
    if not streams:
        sh = logging.StreamHandler()
        sh.setLevel(logging.WARNING)
        sh.setFormatter(_JsonLineFormatter())
        logger.addHandler(sh)

    return logger


class _JsonLineFormatter(logging.Formatter):
    """
    Minimal JSON-lines formatter:
      {"ts":"2025-09-16T12:00:01.123Z","level":"INFO","name":"shop_manager.backup","msg":"...","extra":{...}}
    """
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        ts = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        payload = {
            "ts": ts,
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if isinstance(getattr(record, "extra_payload", None), dict):
            payload["extra"] = record.extra_payload
        return json.dumps(payload, ensure_ascii=False)


def log_event(
    logger: logging.Logger,
    op: str,
    phase: str,
    message: str,
    extra: Dict[str, object] | None = None,
    level: int = logging.INFO,
) -> None:
    """
    Log a structured event line.

    Args:
        logger: Obtained from get_logger().
        op: Operation name, e.g. "backup".
        phase: Phase within the operation, e.g. "preflight", "copy", "done".
        message: Human-readable short message.
        extra: Optional additional key/values (paths, sizes, counts).
        level: Logging level (default INFO).
    """
    extra_payload = {"op": op, "phase": phase}
    if extra:
        for k, v in extra.items():
            extra_payload.setdefault(k, v)
    logger.log(level, message, extra={"extra_payload": extra_payload})
