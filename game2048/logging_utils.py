import logging
import sys


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Configure the package logger with a single console handler."""
    logger = logging.getLogger("game2048")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
