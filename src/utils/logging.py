"""Logging helpers for the road geometry kernel.

All modules obtain their logger through :func:`get_logger` so that the
message format is the same across the kernel, the road model and the
QA checks.  Only construction-time events are logged; the coordinate
queries are called in tight sampling loops and stay silent.
"""

import logging
from typing import Optional

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Return a logger with the kernel's preset format.

    Parameters
    ----------
    name : str
        Logger name, usually ``__name__`` of the calling module.
    level : int, optional
        Logging level.  Only applied when given; a freshly configured
        logger defaults to ``logging.INFO``.

    Returns
    -------
    logging.Logger
        Logger with a single stream handler attached.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    if level is not None:
        logger.setLevel(level)
    return logger
