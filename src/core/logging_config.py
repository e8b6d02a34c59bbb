"""Logging setup for the API process."""

import logging

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure the root logger once for the whole application.

    Args:
        level: Logging level name, e.g. "INFO" or "DEBUG".
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    # Silence per-request access noise from the HTTP client used by the LLM SDK
    logging.getLogger("httpx").setLevel(logging.WARNING)
