"""
Structured logging for Learning Journey: JSONL action logs and separate error logs.
Both files rotate by UTC date; the switch happens on the first action written
after midnight. Fields per record: timestamp, action_type, parameters, result.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

from journey.utils.paths import base_path, logs_dir


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _today() -> str:
    return _utcnow().strftime("%Y-%m-%d")


class ActionLogger:
    """Append-only JSONL action log and separate error log."""

    def __init__(self, base_dir: Optional[str] = None) -> None:
        self.base_dir = base_dir or base_path()
        self._ensure_dirs()
        self._current_date: Optional[str] = _today()
        self._current_action_file: Optional[TextIO] = None
        self._error_handler: Optional[logging.FileHandler] = None
        self._setup_error_logger(self._current_date)

    def _ensure_dirs(self) -> None:
        """Create logs/actions and logs/errors if they do not exist."""
        try:
            self._actions_dir = logs_dir("actions", root=self.base_dir)
            self._errors_dir = logs_dir("errors", root=self.base_dir)
        except OSError as e:
            logging.error("Failed to create log directories: %s", e)
            raise

    def _setup_error_logger(self, day: str) -> None:
        """Configure root logger to also write warnings to logs/errors/YYYY-MM-DD.log."""
        try:
            error_file = os.path.join(self._errors_dir, f"{day}.log")
            self._error_handler = logging.FileHandler(error_file, encoding="utf-8")
            self._error_handler.setLevel(logging.WARNING)
            fmt = logging.Formatter(
                "%(asctime)s %(levelname)s [%(name)s] %(message)s"
            )
            self._error_handler.setFormatter(fmt)
            logging.getLogger().addHandler(self._error_handler)
        except OSError as e:
            logging.error("Failed to set up error log file: %s", e)

    def _remove_error_logger(self) -> None:
        if self._error_handler is not None:
            logging.getLogger().removeHandler(self._error_handler)
            self._error_handler.close()
            self._error_handler = None

    def _action_file(self) -> TextIO:
        """Return open file for today's action log (JSONL). Rotates both logs by date."""
        today = _today()
        if self._current_date != today:
            self._close_action_file()
            self._remove_error_logger()
            self._setup_error_logger(today)
            self._current_date = today
        if self._current_action_file is None:
            path = os.path.join(self._actions_dir, f"{today}.jsonl")
            self._current_action_file = open(path, "a", encoding="utf-8")
        return self._current_action_file

    def _close_action_file(self) -> None:
        if self._current_action_file is not None:
            try:
                self._current_action_file.close()
            except OSError:
                pass
            self._current_action_file = None

    def log_action(
        self,
        *,
        action_type: str,
        parameters: Optional[dict] = None,
        result: str = "success",
        error: Optional[str] = None,
        **extra: Any,
    ) -> None:
        """Append one JSONL record to logs/actions/YYYY-MM-DD.jsonl."""
        entry = {
            "timestamp": _utcnow().strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "action_type": action_type,
            "parameters": parameters if parameters is not None else {},
            "result": result,
            "error": error,
        }
        entry.update(extra)
        entry = {k: v for k, v in entry.items() if v is not None}
        try:
            f = self._action_file()
            f.write(json.dumps(entry, default=str) + "\n")
            f.flush()
        except OSError as e:
            logging.error("Failed to write action log: %s", e)

    def close(self) -> None:
        """Close action log file and remove error file handler."""
        self._close_action_file()
        self._current_date = None
        self._remove_error_logger()
