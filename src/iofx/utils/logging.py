"""
iofx Logging Configuration

Structured logging setup for effect triggering and workflow driving.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class StructuredFormatter(logging.Formatter):
    """Structured log formatter for consistent log output."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured data."""
        record.timestamp = datetime.now(timezone.utc).isoformat()

        if hasattr(record, "structured_data"):
            structured = record.structured_data
        else:
            structured = {}

        log_entry = {
            "timestamp": record.timestamp,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if structured:
            log_entry["data"] = structured

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return str(log_entry)


def setup_logging(
    level: str = "INFO", enable_structured: bool = True, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Setup iofx logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_structured: Enable structured logging format
        log_file: Optional log file path

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("iofx")
    logger.setLevel(getattr(logging, level.upper()))

    logger.handlers.clear()

    if enable_structured:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "iofx") -> logging.Logger:
    """Get a logger instance for the specified name."""
    return logging.getLogger(name)


def log_effect_outcome(
    logger: logging.Logger,
    effect_kind: str,
    description: str,
    success: bool,
    additional_data: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log the settlement of a triggered effect with structured data.

    Args:
        logger: Logger instance
        effect_kind: Kind of effect (write, request)
        description: Printable description of the effect
        success: Whether the effect completed without error
        additional_data: Additional structured data
    """
    structured_data = {
        "operation": f"effect_{effect_kind}",
        "description": description,
        "success": success,
    }

    if additional_data:
        structured_data.update(additional_data)

    level = logging.INFO if success else logging.ERROR
    message = f"Effect triggered: {effect_kind} - {'SUCCESS' if success else 'FAILED'}"

    logger.log(level, message, extra={"structured_data": structured_data})


def log_workflow_event(
    logger: logging.Logger,
    workflow: str,
    event: str,
    additional_data: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log a workflow lifecycle event (started, step, finished, failed).

    Args:
        logger: Logger instance
        workflow: Workflow name
        event: Event name
        additional_data: Additional structured data
    """
    structured_data = {
        "operation": f"workflow_{event}",
        "workflow": workflow,
    }

    if additional_data:
        structured_data.update(additional_data)

    level = logging.WARNING if event == "failed" else logging.INFO
    logger.log(
        level,
        f"Workflow {workflow}: {event}",
        extra={"structured_data": structured_data},
    )
