# src/config/logging_config.py

"""Per-run logging for price_watch.

Every price check writes its own log file, ``logs/run_<timestamp>.log``,
so a scheduled job leaves one self-contained trace per run next to the
price history ledger.  All ``price_watch.*`` loggers share it.

The console only shows warnings and above unless ``verbose`` is set,
which keeps stdout free for the run summary table.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "price_watch"


def setup_logging(
    verbose: bool = False,
    logs_dir: Path | None = None,
) -> Path:
    """Attach file and console handlers to the ``price_watch`` logger.

    Args:
        verbose: Lower the console threshold from WARNING to INFO.
        logs_dir: Override for :attr:`Settings.LOGS_DIR`.

    Returns:
        Path of the log file for this run.
    """
    target_dir = logs_dir or Settings.LOGS_DIR

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    console_level = logging.INFO if verbose else logging.WARNING

    # Already configured in this process: keep the run's file
    existing = [
        h for h in root_logger.handlers if isinstance(h, logging.FileHandler)
    ]
    if existing:
        for handler in root_logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(console_level)
        return Path(existing[0].baseFilename)

    target_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = target_dir / f"run_{stamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Price check log started: %s", log_file)
    return log_file
