from __future__ import annotations

import logging

LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """Sets up the root logger for command-line use."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
