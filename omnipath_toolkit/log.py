"""
Logging setup for the OmniPath toolkit.

Registers a ``SUCCESS`` level between INFO and WARNING, used to report
successfully loaded datasets.
"""

import logging

SUCCESS = 25
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.addLevelName(SUCCESS, "SUCCESS")


def log_success(logger: logging.Logger, message: str, *args) -> None:
    """Emit ``message`` on ``logger`` at SUCCESS level."""
    logger.log(SUCCESS, message, *args)


def setup_logging(verbose: bool = True) -> None:
    """Configure logging."""
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
