"""Logging configuration for Cashpath.

The CLI prints its tables through the ``cashpath`` logger, so console output
shows INFO messages bare and prefixes warnings and errors with their level.
The dated log file always records DEBUG detail from the projection services
(cache hits, gather sizes, scenario forks) whatever the console level is.
"""

import logging
from datetime import date
from config import Config


class ConsoleFormatter(logging.Formatter):
    """Plain messages for INFO and below, ``LEVEL - message`` above."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno > logging.INFO:
            return f"{record.levelname} - {message}"
        return message


def setup_logging(config: Config) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration; ``log_level`` sets the console level.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("cashpath")
    logger.setLevel(logging.DEBUG)

    # Replace handlers left by an earlier call
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    log_file_path = config.log_dir / f"cashpath-{date.today().isoformat()}.log"
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.log_level)
    console_handler.setFormatter(ConsoleFormatter("%(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger.

    Returns:
        The cashpath logger instance.
    """
    return logging.getLogger("cashpath")
