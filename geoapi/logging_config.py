import logging
import logging.config
import json
from datetime import datetime, timezone
from typing import Optional
import contextvars

from .config import LOG_LEVEL, LOG_FORMAT

# Context variable for trace ID
trace_id_var = contextvars.ContextVar('trace_id', default=None)

# LogRecord attributes that are not "extra" fields
_RESERVED = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'taskName', 'message',
    'exc_info', 'exc_text', 'stack_info', 'method', 'path', 'status',
    'latency_ms', 'client_ip', 'color_message',
}


def get_trace_id() -> Optional[str]:
    """Get the current trace ID from context"""
    return trace_id_var.get()


class JsonFormatter(logging.Formatter):
    """JSON formatter with structured request fields"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "trace_id": get_trace_id(),
            "method": getattr(record, 'method', None),
            "path": getattr(record, 'path', None),
            "status": getattr(record, 'status', None),
            "latency_ms": getattr(record, 'latency_ms', None),
            "client_ip": getattr(record, 'client_ip', None),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def build_logging_config(log_level: str = LOG_LEVEL, log_format: str = LOG_FORMAT) -> dict:
    """dictConfig for the app and uvicorn loggers"""
    if log_format not in ("json", "text"):
        log_format = "text"
    log_level = log_level.upper()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JsonFormatter},
            "text": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": log_format,
                "stream": "ext://sys.stdout"
            }
        },
        "loggers": {
            "geoapi": {"level": log_level, "handlers": ["console"], "propagate": False},
            "uvicorn": {"level": log_level, "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": log_level, "handlers": ["console"], "propagate": False},
            # request lines come from TracingMiddleware
            "uvicorn.access": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
        "root": {
            "level": log_level,
            "handlers": ["console"]
        }
    }


def setup_logging(log_level: str = LOG_LEVEL, log_format: str = LOG_FORMAT) -> dict:
    """Configure logging from LOG_LEVEL / LOG_FORMAT"""
    config = build_logging_config(log_level, log_format)
    logging.config.dictConfig(config)
    return config
