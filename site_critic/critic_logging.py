"""Centralized logging configuration for site-critic.

Provides:
- Structured JSON logging support
- Rotating file handler (3 backups by default)
- Per-subsystem category loggers
"""

import json
import logging
import logging.handlers
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

ROOT_LOGGER = "site_critic"


class LogCategory(Enum):
    """Log categories for the assessment and repair subsystems."""

    ASSESSMENT = "assessment"
    CONSENSUS = "consensus"
    FIXERS = "fixers"
    ORCHESTRATOR = "orchestrator"
    CLI = "cli"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Produces one JSON object per record, carrying the session and
    scoring context attached through ``extra=``.
    """

    EXTRA_FIELDS = (
        "duration_ms",
        "session_id",
        "iteration",
        "evaluator_id",
        "issue_kind",
        "weighted_score",
    )

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON string representation of the log entry.
        """
        log_entry: dict = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def get_default_log_file(project_path: Path | None = None) -> Path:
    """Get the default log file path, inside the project when one is given."""
    if project_path:
        log_dir = project_path / "logs"
    else:
        log_dir = Path.home() / ".site-critic" / "logs"

    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "site-critic.log"


def setup_logging(
    level: str = "INFO",
    quiet: bool = False,
    verbose: bool = False,
    log_file: Path | None = None,
    enable_file_logging: bool = False,
    project_path: Path | None = None,
    log_format: str = "text",
    rotation_count: int = 3,
    max_bytes: int = 10485760,
) -> logging.Logger:
    """Setup global logging configuration.

    Args:
        level: Base log level (DEBUG, INFO, WARNING, ERROR).
        quiet: Suppress console output (only ERROR level).
        verbose: Enable debug-level output.
        log_file: Explicit log file path.
        enable_file_logging: Enable file-based logging.
        project_path: Project root for log file location.
        log_format: Output format for the file handler ("text" or "json").
        rotation_count: Number of backup files (default 3).
        max_bytes: Max file size before rotation (default 10MB).

    Returns:
        Configured package logger.
    """
    import logging.config

    if log_file is None and enable_file_logging:
        log_file = get_default_log_file(project_path)

    if quiet:
        effective_level = "ERROR"
    elif verbose:
        effective_level = "DEBUG"
    else:
        effective_level = level

    config: dict = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "simple": {"format": "%(levelname)s | %(message)s"},
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": {},
        "loggers": {
            ROOT_LOGGER: {"handlers": [], "level": "DEBUG", "propagate": False}
        },
    }

    file_formatter = "json" if log_format == "json" else "detailed"

    config["handlers"]["console"] = {
        "class": "logging.StreamHandler",
        "formatter": "simple",
        "level": effective_level,
        "stream": "ext://sys.stderr",
    }
    config["loggers"][ROOT_LOGGER]["handlers"].append("console")

    if log_file:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": file_formatter,
            "level": "DEBUG",
            "filename": str(log_file),
            "maxBytes": max_bytes,
            "backupCount": rotation_count,
        }
        config["loggers"][ROOT_LOGGER]["handlers"].append("file")

    logging.config.dictConfig(config)
    return logging.getLogger(ROOT_LOGGER)


def get_logger() -> logging.Logger:
    """Get the package logger instance."""
    return logging.getLogger(ROOT_LOGGER)


def get_category_logger(category: LogCategory) -> logging.Logger:
    """Get a logger for a specific subsystem.

    Example:
        >>> from site_critic.critic_logging import get_category_logger, LogCategory
        >>> logger = get_category_logger(LogCategory.ORCHESTRATOR)
        >>> logger.info("Session started")
    """
    return logging.getLogger(f"{ROOT_LOGGER}.{category.value}")
