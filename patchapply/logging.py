import logging
import sys

LOGGER_NAME = "patchapply"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _PatchApplyHandler(logging.StreamHandler):
    pass


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Attach a stderr handler to the package logger.

    Propagation is disabled so records are not emitted twice when the host
    application configures the root logger. A handler installed by an
    earlier call is replaced, so repeated calls never duplicate output.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for existing in [h for h in logger.handlers if isinstance(h, _PatchApplyHandler)]:
        logger.removeHandler(existing)

    handler = _PatchApplyHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
