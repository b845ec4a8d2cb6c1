import logging
import sys
import typing

LOGGER_NAME = "fixably"
DEFAULT_LEVEL = logging.WARNING


def init_logging(level: int = DEFAULT_LEVEL) -> logging.Logger:
    """
    Attaches a stdout handler to the package logger unless the host application has
    already configured one.
    """
    log = logging.getLogger(LOGGER_NAME)
    if log.level == logging.NOTSET and not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))
        log.addHandler(handler)
        log.setLevel(level)
    return log


def get_logger(name: typing.Optional[str] = None) -> logging.Logger:
    init_logging()
    if name is None or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
