"""Structured logging for brandquiz."""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "brandquiz"

# Attributes every LogRecord carries; anything else was passed as context.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ContextFormatter(logging.Formatter):
    """Plain-text formatter that appends context fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        }
        if not extras:
            return base
        rendered = " ".join(f"{key}={value}" for key, value in extras.items())
        return f"{base} [{rendered}]"


def _build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    return ContextFormatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class StructuredLogger:
    """
    Logger with context tracking and pipeline-specific helpers.

    Every log method accepts an optional ``context`` dict; its keys become
    extra fields on the emitted record (and top-level keys in JSON output).
    """

    def __init__(self, name: str = ROOT_LOGGER_NAME):
        self.name = name
        self.logger = logging.getLogger(name)

    def _log_with_context(
        self,
        level: int,
        message: str,
        context: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> None:
        if context:
            kwargs.update(context)
        # "message" and friends are reserved on LogRecord
        extra = {
            (f"ctx_{key}" if key in _STANDARD_ATTRS else key): value
            for key, value in kwargs.items()
        }
        self.logger.log(level, message, extra=extra or None)

    def debug(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log debug message."""
        self._log_with_context(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log info message."""
        self._log_with_context(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log warning message."""
        self._log_with_context(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log error message."""
        self._log_with_context(logging.ERROR, message, context, **kwargs)

    def log_llm_call(
        self,
        provider: str,
        model: str,
        prompt: str,
        response: str,
        latency_ms: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Log a content-generation call with structured metadata.

        Args:
            provider: Provider name (e.g., "openrouter", "ollama")
            model: Model name
            prompt: Input prompt (truncated in logs)
            response: Response text (truncated in logs)
            latency_ms: Request latency in milliseconds
            **kwargs: Additional metadata
        """
        prompt_preview = prompt[:200] + "..." if len(prompt) > 200 else prompt
        response_preview = response[:200] + "..." if len(response) > 200 else response

        context = {
            "event_type": "llm_call",
            "provider": provider,
            "model": model,
            "prompt_length": len(prompt),
            "response_length": len(response),
            "prompt_preview": prompt_preview,
            "response_preview": response_preview,
        }
        if latency_ms is not None:
            context["latency_ms"] = round(latency_ms, 1)
        context.update(kwargs)

        self.info(f"LLM call: {provider}/{model}", context=context)

    def log_pipeline_stage(
        self,
        stage: str,
        status: str,
        duration_ms: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Log pipeline stage execution.

        Args:
            stage: Stage name (e.g., "brand_summary", "result_mappings")
            status: Status ("started", "completed", "failed")
            duration_ms: Stage duration in milliseconds
            **kwargs: Additional metadata
        """
        context = {
            "event_type": "pipeline_stage",
            "stage": stage,
            "status": status,
        }
        if duration_ms is not None:
            context["duration_ms"] = round(duration_ms, 1)
        context.update(kwargs)

        if status == "failed":
            self.error(f"Pipeline stage {stage} failed", context=context)
        elif status == "completed":
            self.info(f"Pipeline stage {stage} completed", context=context)
        else:
            self.info(f"Pipeline stage {stage} started", context=context)


_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str = ROOT_LOGGER_NAME) -> StructuredLogger:
    """
    Get or create a structured logger.

    Child names ("brandquiz.generator") propagate to the root "brandquiz"
    logger, which is where configure_logging attaches handlers.
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> StructuredLogger:
    """
    Configure handlers on the root brandquiz logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON-formatted logs
        log_file: Optional file path to write logs to

    Returns:
        The root StructuredLogger
    """
    log_level = getattr(logging, LogLevel[level.upper()].value)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(log_level)
    root.propagate = False
    root.handlers.clear()

    formatter = _build_formatter(json_output)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return get_logger(ROOT_LOGGER_NAME)
