"""Logging setup for the API process."""

import logging

APP_LOGGER = "calorie_cam"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# Per-request lines from the HTTP client drown out pipeline logs.
QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(debug: bool = False) -> logging.Logger:
    """Attach one stream handler to the app logger and return it.

    Safe to call once per app instance; later calls only adjust levels.
    """
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
