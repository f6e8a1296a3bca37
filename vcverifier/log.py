"""Logger setup and request logging."""

import dataclasses
import json
import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}


def _level_name(record: logging.LogRecord) -> str:
    return _LEVEL_NAMES.get(record.levelno, record.levelname.lower())


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="seconds")


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "level": _level_name(record),
            "msg": record.getMessage(),
            "time": _timestamp(record),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class _TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = json.dumps(record.getMessage(), ensure_ascii=False)
        line = f'time="{_timestamp(record)}" level={_level_name(record)} msg={message}'
        if record.exc_info:
            line += " error=" + json.dumps(self.formatException(record.exc_info))
        return line


class _StderrHandler(logging.Handler):
    """Writes to whatever sys.stderr currently is."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stream = sys.stderr
            stream.write(self.format(record) + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


@dataclass
class _RequestLogSettings:
    log_requests: bool = False
    skip_paths: list[str] = field(default_factory=list)


_logger = logging.getLogger("vcverifier")
_logger.setLevel(logging.INFO)
_handler = _StderrHandler()
_handler.setFormatter(_TextFormatter())
_logger.addHandler(_handler)
_request_settings = _RequestLogSettings()


def configure(json_logging, log_level, log_requests, skip_paths) -> None:
    """Apply level, output format and request-logging settings to the logger."""
    level = _LEVELS.get(log_level)
    if level is not None:
        _logger.setLevel(level)
    _handler.setFormatter(_JsonFormatter() if json_logging else _TextFormatter())
    _request_settings.log_requests = bool(log_requests)
    _request_settings.skip_paths = list(skip_paths or [])


def get_logger() -> logging.Logger:
    """Return the application logger."""
    return _logger


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not serializable")


def pretty_print_object(obj: Any) -> str:
    """Render an object as compact JSON, or an empty string if it cannot be."""
    try:
        return json.dumps(obj, default=_json_default, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        _logger.debug("Was not able to pretty print the object: %r", obj)
        return ""


class RequestLoggingMiddleware:
    """WSGI middleware that logs method, path, latency and status of each request."""

    def __init__(self, app) -> None:
        self._app = app

    def __call__(self, environ, start_response):
        if not _request_settings.log_requests:
            return self._app(environ, start_response)

        start = time.monotonic()
        path = environ.get("PATH_INFO", "")
        query = environ.get("QUERY_STRING", "")
        if query:
            path = f"{path}?{query}"
        method = environ.get("REQUEST_METHOD", "")
        statuses: list[str] = []

        def recording_start_response(status, headers, exc_info=None):
            statuses.append(status)
            if exc_info is None:
                return start_response(status, headers)
            return start_response(status, headers, exc_info)

        try:
            result = self._app(environ, recording_start_response)
        except Exception as error:
            if path not in _request_settings.skip_paths:
                _logger.warning(
                    "Request [%s]%s took %d ms - Result: %d - %s",
                    method, path, self._elapsed_ms(start), 500, error,
                )
            raise

        if path not in _request_settings.skip_paths:
            _logger.info(
                "Request [%s]%s took %d ms - Result: %d",
                method, path, self._elapsed_ms(start), self._status_code(statuses),
            )
        return result

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.monotonic() - start) * 1000)

    @staticmethod
    def _status_code(statuses: list[str]) -> int:
        if not statuses:
            return 200
        try:
            return int(statuses[-1].split()[0])
        except (ValueError, IndexError):
            return 200