import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def get_resource_path(relative_path: str) -> Path:
    """
    Get absolute path to a bundled resource.

    Args:
        relative_path: Relative path from project root (e.g., "clientdesk/resources/templates")

    Returns:
        Absolute Path object
    """
    # This file is in clientdesk/utils.py, so project root is up two levels
    base_path = Path(__file__).parent.parent.absolute()

    return base_path / relative_path


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger for command-line use"""
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT, stream=sys.stderr, force=True)
