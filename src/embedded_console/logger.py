import logging
from pathlib import Path
from typing import Optional, Union

from embedded_console.runtime_config import get_data_dir

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    level: Union[int, str] = logging.INFO, log_file: Optional[Path] = None
) -> Path:
    """Send package logs to a file so they never mix with console output.

    Returns the path of the log file.
    """
    if log_file is None:
        log_dir = get_data_dir() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "embedded_console.log"

    logger = logging.getLogger("embedded_console")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return log_file
