import logging
import os
from typing import Optional, Union


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_file: Optional[str] = None, level: Union[int, str] = "INFO"):
    """
    Configures the root logger.

    Args:
        log_file (str): Optional log file path, overwritten on each run. Logs go to stderr when omitted.
        level (int | str): Logging level name or number.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        logging.basicConfig(filename=log_file, filemode="w", level=level, format=LOG_FORMAT, force=True)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT, force=True)

    logging.getLogger(__name__).debug("Logging initialized.")
