import logging
import sys

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger("semipoly")
logger.addHandler(logging.NullHandler())

_console_handler = None


def setup_logging(level=logging.INFO, format_string=DEFAULT_FORMAT):
    """Print semipoly log records to stdout at `level`.

    Only the ``semipoly`` logger is configured. Calling this again replaces
    the handler installed by the previous call. Returns the new handler.
    """
    global _console_handler
    if _console_handler is not None:
        logger.removeHandler(_console_handler)
    _console_handler = logging.StreamHandler(sys.stdout)
    _console_handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(_console_handler)
    logger.setLevel(level)
    return _console_handler


def teardown_logging():
    """Remove the handler added by `setup_logging` and reset the level."""
    global _console_handler
    if _console_handler is not None:
        logger.removeHandler(_console_handler)
        _console_handler = None
    logger.setLevel(logging.NOTSET)
