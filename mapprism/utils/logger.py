"""
Loguru setup shared by the API server, the CLI and Alembic migrations.

Records emitted through the standard ``logging`` module by uvicorn,
SQLAlchemy and Alembic are forwarded to loguru, so every process writes one
format. uvicorn's access log is muted: the request middleware in
:mod:`mapprism.api.app` already logs each request with status and duration.
"""

import logging
import sys
from typing import TYPE_CHECKING

from loguru import logger

from mapprism.settings import Settings, settings

if TYPE_CHECKING:
    from loguru import Record

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
LOG_FILE_NAME = "mapprism.log"

FORWARDED_LOGGERS = ("uvicorn", "uvicorn.error", "sqlalchemy", "alembic")
MUTED_LOGGERS = ("uvicorn.access",)


class LoguruForwarder(logging.Handler):
    """Re-emit a stdlib record through loguru, keeping its origin."""

    def emit(self, record: logging.LogRecord) -> None:
        level: str | int = record.levelno
        if record.levelname in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            level = record.levelname

        def set_origin(entry: "Record") -> None:
            entry.update(name=record.name, function=record.funcName, line=record.lineno)

        logger.patch(set_origin).opt(exception=record.exc_info).log(level, record.getMessage())


def configure_logging(config: Settings) -> None:
    """Install loguru sinks from ``config`` and take over stdlib loggers.

    A console sink is always added. With ``log_to_file`` a rotating, zipped
    file sink is added under :meth:`Settings.get_log_dir`.
    """
    log_format = config.log_format or LOG_FORMAT

    logger.remove()
    logger.add(sys.stderr, level=config.log_level, format=log_format, diagnose=False)

    if config.log_to_file:
        log_dir = config.get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / LOG_FILE_NAME,
            level=config.log_level,
            format=log_format,
            rotation=config.log_rotation,
            retention=config.log_retention,
            compression="zip",
            diagnose=False,
        )

    forwarder = LoguruForwarder()
    logging.basicConfig(handlers=[forwarder], level=0, force=True)
    for name in FORWARDED_LOGGERS:
        forwarded = logging.getLogger(name)
        forwarded.handlers = [forwarder]
        forwarded.propagate = False
    for name in MUTED_LOGGERS:
        logging.getLogger(name).disabled = True


configure_logging(settings)

__all__ = ["LOG_FORMAT", "configure_logging", "logger"]
