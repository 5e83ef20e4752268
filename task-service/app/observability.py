"""Logging setup.

Modules log through ``logging.getLogger(__name__)``; records are bridged
into Pydantic Logfire, which only ships them when ``LOGFIRE_TOKEN`` is set.
"""

import logging

import logfire
from fastapi import FastAPI

from app import __version__
from app.config import LOG_LEVEL, LOGFIRE_TOKEN

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging() -> None:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    logfire.configure(
        token=LOGFIRE_TOKEN,
        service_name="task-service",
        service_version=__version__,
        send_to_logfire="if-token-present",
        console=False,
    )
    logging.getLogger().addHandler(logfire.LogfireLoggingHandler())
    logging.getLogger(__name__).info("Logging configured", extra={"level": LOG_LEVEL})


def instrument_app(app: FastAPI) -> None:
    """Trace every request handled by ``app``."""
    logfire.instrument_fastapi(app)
