# src/taskboard/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the task store and the app, then serves it with uvicorn.
"""

from __future__ import annotations

import logging

import uvicorn

from ..cli.bootstrap import create_application
from ..config import get_settings
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    console_level = getattr(logging, settings.log_level, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    app = create_application(settings=settings)

    logger.info("Listening on %s:%s", settings.http_host, settings.http_port)
    # log_config=None: uvicorn loggers go through the handlers from setup_logging().
    uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_config=None)

    logger.info("Bye.")


if __name__ == "__main__":
    main()
