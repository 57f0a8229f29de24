# octogrbl/logging_config.py
import json
import logging
import logging.config
import sys

from .settings import settings


class JsonFormatter(logging.Formatter):
    """One JSON object per record; message and traceback are escaped."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


# Structured JSON lines on stdout
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": JsonFormatter,
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
    },
    "handlers": {
        "default": {
            "level": "DEBUG",
            "formatter": "json",
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
        },
    },
    "loggers": {
        "": {  # root logger
            "handlers": ["default"],
            "level": "INFO",
            "propagate": True,
        },
        "httpx": {
            "level": "WARNING",
        },
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
    },
}

def setup_logging(level: str = None):
    """Applies the logging configuration."""
    config = dict(LOGGING_CONFIG)
    config["loggers"] = dict(LOGGING_CONFIG["loggers"])
    config["loggers"][""] = dict(LOGGING_CONFIG["loggers"][""], level=(level or settings.log_level).upper())
    logging.config.dictConfig(config)
