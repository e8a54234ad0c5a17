"""Root logging setup for the panel and the headless sampler.

Plain stdlib logging. Console output is human-readable unless LOG_JSON is set;
the rotating file under the state dir is always plain text.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TextIO

from dynisland.core.paths import get_app_state_dir

LOG_FILE_NAME = "dynisland.log"
_LINE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
# Structured extras the sampler, GPU reader and event bus attach to records.
_EXTRA_KEYS = ("event", "probe", "state", "interval_ms", "handler")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    return getattr(logging, level.strip().upper(), logging.INFO)


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update({k: getattr(record, k) for k in _EXTRA_KEYS if hasattr(record, k)})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _console_handler(stream: TextIO | None, json_logs: bool) -> logging.Handler:
    handler = logging.StreamHandler(stream=stream or sys.stdout)
    if json_logs:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_LINE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(state_dir: Path | None) -> logging.Handler | None:
    try:
        logs_dir = (state_dir or get_app_state_dir()) / "logs"
        logs_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            logs_dir / LOG_FILE_NAME, maxBytes=1024 * 1024, backupCount=3, encoding="utf-8"
        )
    except OSError:
        # Read-only home or sandbox: console logging still works.
        logging.getLogger(__name__).debug("File logging disabled", exc_info=True)
        return None
    handler.setFormatter(logging.Formatter(_LINE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    *,
    level: str | int | None = None,
    json_logs: bool | None = None,
    log_to_file: bool | None = None,
    state_dir: Path | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure root logging. Safe to call again; previous handlers are replaced.

    - level: name or int; defaults to env LOG_LEVEL, then INFO.
    - json_logs: defaults to env LOG_JSON.
    - log_to_file: defaults to env LOG_FILE (on unless "0").
    - stream: console target; headless mode passes stderr so stdout stays a
      clean JSON-lines feed.
    """
    if json_logs is None:
        json_logs = _env_flag("LOG_JSON", "0")
    if log_to_file is None:
        log_to_file = _env_flag("LOG_FILE", "1")

    handlers = [_console_handler(stream, json_logs)]
    if log_to_file:
        fh = _file_handler(state_dir)
        if fh is not None:
            handlers.append(fh)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        if isinstance(old, RotatingFileHandler):
            old.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(_resolve_level(level))

    logging.getLogger("pynvml").setLevel(logging.WARNING)
