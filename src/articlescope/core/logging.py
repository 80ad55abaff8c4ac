"""
Logging infrastructure for ArticleScope.

Provides:
- Structured JSON-lines logging for file output
- Rich console output for terminal
- Contextual logging carrying the extractor domain and source URL
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson

if TYPE_CHECKING:
    from rich.console import Console


LOGGER_NAMESPACE = "articlescope"

# Extra attributes copied from log records into JSON lines
CONTEXT_FIELDS = ("extractor", "url", "field", "selector")


def json_dumps(obj: Any) -> str:
    return orjson.dumps(obj, default=str).decode("utf-8")


# =============================================================================
# JSON Formatter for File Logging
# =============================================================================


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in CONTEXT_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json_dumps(log_data)


# =============================================================================
# Rich Console Handler
# =============================================================================


class RichConsoleHandler(logging.Handler):
    """Handler that outputs to a Rich console with level colouring."""

    LEVEL_STYLES = {
        logging.DEBUG: "dim",
        logging.INFO: "default",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "bold red",
    }

    def __init__(self, console: "Console | None" = None, level: int = logging.INFO):
        super().__init__(level)
        if console is None:
            from rich.console import Console
            console = Console(stderr=True)
        self.console = console

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            style = self.LEVEL_STYLES.get(record.levelno, "default")

            prefix = ""
            if hasattr(record, "extractor"):
                prefix = f"[cyan][{record.extractor}][/cyan] "

            self.console.print(f"{prefix}[{style}]{message}[/{style}]", markup=True, highlight=False)

            if record.exc_info:
                self.console.print_exception()

        except Exception:
            self.handleError(record)


# =============================================================================
# Logger Configuration
# =============================================================================


def setup_logging(
    level: str = "INFO",
    log_file: Path | str | None = None,
    json_format: bool = True,
    rich_console: bool = True,
) -> logging.Logger:
    """Set up logging for ArticleScope.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (optional)
        json_format: Use JSON format for file logs
        rich_console: Use Rich for console output

    Returns:
        Root logger for articlescope
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    if rich_console:
        console_handler: logging.Handler = RichConsoleHandler()
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    console_handler.setLevel(getattr(logging, level.upper()))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)

        if json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )

        logger.addHandler(file_handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (will be prefixed with 'articlescope.')

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
    return logging.getLogger(LOGGER_NAMESPACE)


# =============================================================================
# Contextual Logging Adapter
# =============================================================================


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that tags records with the extractor and source URL."""

    def __init__(
        self,
        logger: logging.Logger,
        extractor: str | None = None,
        url: str | None = None,
    ):
        super().__init__(logger, {})
        self.extractor = extractor
        self.url = url

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})

        if self.extractor:
            extra["extractor"] = self.extractor
        if self.url:
            extra["url"] = self.url

        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(
        self,
        extractor: str | None = None,
        url: str | None = None,
    ) -> "ContextualLogger":
        """Create a new logger with additional context."""
        return ContextualLogger(
            self.logger,
            extractor=extractor or self.extractor,
            url=url or self.url,
        )


def get_contextual_logger(
    name: str | None = None,
    extractor: str | None = None,
    url: str | None = None,
) -> ContextualLogger:
    """Get a contextual logger tagged with extractor domain and URL.

    Args:
        name: Logger name
        extractor: Extractor domain for context
        url: Source URL for context

    Returns:
        ContextualLogger instance
    """
    return ContextualLogger(get_logger(name), extractor=extractor, url=url)
