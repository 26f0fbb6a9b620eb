import logging

from rasika.config.settings import settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """Return a module logger with a single stream handler.

    The level defaults to settings.LOG_LEVEL so deployments can turn on
    DEBUG output without touching code.
    """
    if level is None:
        level = settings.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
