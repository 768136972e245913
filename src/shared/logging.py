"""Logging setup shared by the inventory and access services.

Standard library handlers carry the output (console plus rotating files);
structlog sits on top and renders JSON in deployed environments and a
rich console view everywhere else.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_DEPLOYED = ("production", "staging")


def current_env() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """Log level for the current environment; ``LOG_LEVEL`` wins when set."""
    return os.getenv("LOG_LEVEL", _LEVEL_BY_ENV.get(current_env(), "INFO"))


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: str | None = None) -> None:
    level = get_log_level()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = []

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    root.addHandler(console)

    # File output is skipped under test
    if current_env() != "test":
        directory = Path(log_dir or os.getenv("LOG_DIR", "logs"))
        directory.mkdir(parents=True, exist_ok=True)
        root.addHandler(_rotating_handler(directory / "storehouse.log", level))
        root.addHandler(_rotating_handler(directory / "storehouse_error.log", logging.ERROR))

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def setup_structlog() -> None:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
    ]

    if current_env() in _DEPLOYED:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=3),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str | None = None) -> None:
    setup_stdlib_logging(log_dir)
    setup_structlog()


def bind_request_context(**kwargs: Any) -> None:
    """Attach key/values (request id, scope) to every log line of the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
