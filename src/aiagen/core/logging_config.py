"""
Logging Setup
stdlib handlers carry the output (text or JSON lines); structlog adds the
per-generation context bound by ``generation_context``.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from pythonjsonlogger import jsonlogger

from .config import Settings, get_settings

# Keys bound for the lifetime of one archive generation
GENERATION_KEYS = ("generation", "project", "user")

HANDLER_NAME = "aiagen"

# Per-request access lines duplicate the service's own request/response events
_QUIET_LOGGERS = ("uvicorn.access", "multipart.multipart")


def _build_handler(json_logs: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    if json_logs:
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                "%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"levelname": "level", "name": "logger"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))
    return handler


def configure_logging(settings: Settings | None = None) -> None:
    """
    Install the service's log handler and structlog pipeline.

    Safe to call more than once: the handler installed by an earlier call
    is replaced, handlers owned by others are left alone.

    Args:
        settings: Source of ``log_level`` and ``json_logs`` (defaults to env settings)
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(_build_handler(settings.json_logs))
    root.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if settings.json_logs else structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def generation_context(generation_id: str, project_name: str, user_id: str) -> Iterator[None]:
    """Tag every log line emitted in scope with the generation, project and user."""
    values = dict(zip(GENERATION_KEYS, (generation_id, project_name, user_id)))
    with structlog.contextvars.bound_contextvars(**values):
        yield
