"""Logging configuration."""
import logging

# Libraries that log more than we want at INFO
NOISY_LOGGERS = [
    "passlib",
    "passlib.registry",
    "multipart",
    "python_multipart",
    "sqlalchemy.engine",
]


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("profilehub").setLevel(level.upper())
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
