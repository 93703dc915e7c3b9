import logging
import logging.config
from pathlib import Path
from typing import Any, Optional

from staffhub.core.config import settings


LOGGER_NAME = "staffhub"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def build_logging_config(level: str, log_path: Path) -> dict[str, Any]:
    """dictConfig schema for the ``staffhub`` logger tree: console plus a rotating file."""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"plain": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "plain"},
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "plain",
                "filename": str(log_path),
                "maxBytes": 1_000_000,
                "backupCount": 3,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            LOGGER_NAME: {"level": level, "handlers": ["console", "file"]},
        },
    }


def configure_logging(level: Optional[str] = None, log_path: Optional[Path] = None) -> None:
    if logging.getLogger(LOGGER_NAME).handlers:
        return

    log_path = Path(log_path or Path(settings.data_dir) / settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(level or settings.log_level, log_path))
