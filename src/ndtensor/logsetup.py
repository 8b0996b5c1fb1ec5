import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure the root logger for applications embedding ndtensor.

    Sets the log level, uses the format "timestamp - logger name - level -
    message" for records, and attaches a StreamHandler that writes to stdout.
    The library itself only installs a NullHandler on its package logger.
    """
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


__all__ = ["LOG_FORMAT", "setup_logging"]
