from __future__ import annotations

import logging


def configure_app_logging(level: str = "INFO") -> None:
    """
    Logging configuration for the calendar API.

    Notes:
    - Plain stdlib logging; uvicorn already installs the handlers.
    - This only sets the level for our `app.*` loggers (`APP_LOG_LEVEL=DEBUG`
      shows every scoping and voter decision).
    """

    normalized = level.upper()
    app_logger = logging.getLogger("app")
    app_logger.setLevel(normalized)
    # Ensure child loggers under app.* inherit this level.
    app_logger.propagate = True
