"""Process-wide logging setup shared by the API and the CLI scripts."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waternet.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def configure_logging(settings: "Settings") -> None:
    """Configure the root logger once; later calls are no-ops (basicConfig semantics)."""
    logging.basicConfig(
        level=settings.log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
