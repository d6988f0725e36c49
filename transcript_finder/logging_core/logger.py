# transcript_finder/logging_core/logger.py
"""
Structured run logging for transcript acquisition.

Every record is one JSON object per line on stderr, carrying:
- timestamp (UTC, ISO 8601, "Z" suffix)
- level, message
- run_id of the acquisition request
- stage_name: strategy or pipeline step, when given
- event_type: start / success / empty / error / skipped / pipeline_*
- metadata: free-form dict, when given

stdout is left to the CLI for transcript payloads.
Loggers are per run: obtain with get_logger(), drop with release_logger().
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID


EXTRA_FIELDS = ("stage_name", "event_type", "metadata")


class JSONFormatter(logging.Formatter):
    """Renders a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": timestamp.strftime("%Y-%m-%dT%H:%M:%S") + "Z",
            "level": record.levelname,
            "run_id": getattr(record, "run_id", None),
            "message": record.getMessage(),
        }
        payload.update({name: getattr(record, name) for name in EXTRA_FIELDS if getattr(record, name, None) is not None})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps({key: value for key, value in payload.items() if value is not None}, ensure_ascii=False, default=str)


class RunIdFilter(logging.Filter):
    """Stamps every record with the run it belongs to."""

    def __init__(self, run_id: str) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id  # type: ignore[attr-defined]
        return True


_run_loggers: Dict[str, logging.Logger] = {}
_level = logging.INFO


def set_level(level: int) -> None:
    """Level for live run loggers and for those created later."""
    global _level  # pylint: disable=global-statement
    _level = level
    for run_logger in _run_loggers.values():
        run_logger.setLevel(level)


def get_logger(run_id: UUID) -> logging.Logger:
    """Per-run JSON logger; repeated calls with the same run_id return the same logger."""
    key = str(run_id)
    existing = _run_loggers.get(key)
    if existing is not None:
        return existing

    run_logger = logging.getLogger(f"transcript_finder.run.{key}")
    run_logger.setLevel(_level)
    run_logger.propagate = False

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(JSONFormatter())
    run_logger.addHandler(stream)
    run_logger.addFilter(RunIdFilter(key))

    _run_loggers[key] = run_logger
    return run_logger


def release_logger(run_id: UUID) -> None:
    """Detach handlers and filters of a finished run; unknown runs are ignored."""
    run_logger = _run_loggers.pop(str(run_id), None)
    if run_logger is None:
        return
    for handler in list(run_logger.handlers):
        run_logger.removeHandler(handler)
        handler.close()
    for run_filter in list(run_logger.filters):
        run_logger.removeFilter(run_filter)


def log_event(
    logger: logging.Logger,
    level: int,
    message: str,
    *,
    stage_name: Optional[str] = None,
    event_type: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    """Emit one structured event. Empty stage_name/metadata are left out of the line."""
    extra: Dict[str, Any] = {"event_type": event_type}
    if stage_name:
        extra["stage_name"] = stage_name
    if metadata:
        extra["metadata"] = metadata
    logger.log(level, message, extra=extra)
