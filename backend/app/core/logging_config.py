"""
Logging Configuration
Sets up centralized logging for the application.
"""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Optional

APP_LOGGERS = (
    "auth",
    "referral",
    "onboarding",
    "user_lifecycle",
    "email",
    "resume_store",
    "applications",
    "errors",
)


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (default: INFO)
        log_dir: Directory for a rotating ``app.log``; console only when unset.
    """
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "default",
            "level": log_level,
        },
    }
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": os.path.join(log_dir, "app.log"),
            "maxBytes": 10 * 1024 * 1024,  # 10 MB
            "backupCount": 5,
            "formatter": "default",
            "level": log_level,
            "encoding": "utf8",
        }
    handler_names = list(handlers)

    loggers = {
        name: {"handlers": handler_names, "level": log_level, "propagate": False}
        for name in APP_LOGGERS
    }
    loggers["uvicorn"] = {"handlers": handler_names, "level": "INFO", "propagate": False}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": handlers,
            "loggers": loggers,
            "root": {"handlers": handler_names, "level": log_level},
        }
    )
