import logging

__all__ = ["log", "set_up_logging", "LOG_FORMAT"]

log = logging.getLogger("tar_streams")  # Provided for ease of access in other modules

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] - %(message)s"


def set_up_logging(quiet: bool = True, level: int = logging.DEBUG) -> None:
    """
    Initialise the package log (the ``tar_streams`` logger, not the root logger)

    Args:
      quiet : Change this flag to True/False to turn off/on console logging
      level : The lowest level of record the log lets through
    """
    log.setLevel(level)
    if quiet or any(isinstance(h, logging.StreamHandler) for h in log.handlers):
        return
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    log.addHandler(console)
