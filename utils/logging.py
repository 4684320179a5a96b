"""
Logging Utilities

Sink loggers for the client's error and trace channels, plus the CLI's
logging setup: human-readable console output and optional JSON files.
"""
import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional, TextIO, Union

# Context of the command being run, attached to JSON records
log_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar('log_context', default={})

JSONValue = Union[str, int, float, bool, None, dict, list]

_RESERVED_KEYS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName', 'taskName',
    'processName', 'process', 'exc_info', 'exc_text', 'stack_info', 'message'
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured file logging."""

    def format(self, record) -> str:
        """Format log record as one JSON line with context information."""
        log_obj: dict[str, JSONValue] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        if record.funcName:
            log_obj['function'] = record.funcName
        if record.lineno:
            log_obj['line'] = record.lineno

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else 'Unknown',
                'message': str(record.exc_info[1]) if record.exc_info[1] else 'No message',
                'traceback': self.formatException(record.exc_info)
            }

        context = log_context.get()
        if context:
            log_obj['context'] = context.copy()

        extra_data = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_KEYS:
                continue
            try:
                json.dumps(value)
                extra_data[key] = value
            except (TypeError, ValueError):
                extra_data[key] = str(value)

        if extra_data:
            log_obj['extra'] = extra_data

        return json.dumps(log_obj, ensure_ascii=False)


def set_command_context(
    command: Optional[str] = None,
    bot_name: Optional[str] = None,
    app_id: Optional[str] = None,
    **additional_context
) -> None:
    """
    Set the context attached to structured log records.

    Args:
        command: CLI command being run (e.g. 'upload')
        bot_name: Bot the command targets
        app_id: Application ID in use
        **additional_context: Any additional context to include
    """
    context = log_context.get().copy()
    if command:
        context['command'] = command
    if bot_name:
        context['bot_name'] = bot_name
    if app_id:
        context['app_id'] = app_id
    context.update(additional_context)
    log_context.set(context)


def clear_context() -> None:
    """Clear the current logging context."""
    log_context.set({})


def build_sink_logger(
    name: str,
    prefix: str = "",
    level: int = logging.DEBUG,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Build a standalone logger writing 'prefix file:line: message' lines.

    Used for the client's error and trace sinks. The logger does not
    propagate, so sink output never shows up twice.

    Args:
        name: Logger name
        prefix: Text put in front of every line (e.g. 'TRACE: ')
        level: Minimum level written
        stream: Target stream, stderr by default
    """
    sink = logging.getLogger(name)
    sink.setLevel(level)
    sink.propagate = False
    for handler in list(sink.handlers):
        sink.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(f'{prefix}%(filename)s:%(lineno)d: %(message)s'))
    sink.addHandler(handler)
    return sink


def setup_logging(log_level: str = "WARNING", json_path: Optional[str] = None) -> logging.Logger:
    """
    Configure console logging and, when json_path is set, a JSON log file.

    Args:
        log_level: Level name for the root logger
        json_path: Path of a rotating JSON log file, disabled when empty

    Returns:
        The root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))

    if root_logger.handlers:  # Avoid duplicate handlers
        return root_logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    root_logger.addHandler(console_handler)

    if json_path:
        json_handler = RotatingFileHandler(
            json_path,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=5
        )
        json_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(json_handler)

    return root_logger
