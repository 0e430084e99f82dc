# crossmatch/config/logging_config.py

"""Run logging for crossmatch.

One file per launch under ``logs/`` collects the ``crossmatch.*``
hierarchy.  How much each component writes there is set per logger in
``Settings.LOG_LEVELS``: the matching tiers log every decision at DEBUG,
while the cache and the providers stay at INFO so per-key hits and raw
request chatter do not drown them out.  Only warnings (degraded tiers,
cache outages) reach the terminal unless ``CROSSMATCH_LOG_LEVEL`` or
``--verbose`` lowers the console threshold.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from crossmatch.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def apply_component_levels(levels: dict[str, str] | None = None) -> None:
    """Set each named ``crossmatch.*`` logger to its configured level.

    Raises:
        ValueError: a level name is not a logging level.
    """
    for name, level in (levels or Settings.LOG_LEVELS).items():
        logging.getLogger(name).setLevel(level.upper())


def _current_log_file(root_logger: logging.Logger) -> Path | None:
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging(
    logs_dir: Path | None = None,
    console_level: str | None = None,
) -> Path:
    """Attach the run log file and console handler to ``crossmatch``.

    Component levels are (re)applied on every call; handlers are added
    once, and later calls return the log file already in use.

    Args:
        logs_dir: Directory for the run log (default ``Settings.LOGS_DIR``).
        console_level: Console threshold (default
            ``Settings.LOG_CONSOLE_LEVEL``).

    Returns:
        Path of this run's log file.
    """
    root_logger = logging.getLogger("crossmatch")
    root_logger.setLevel(logging.DEBUG)
    apply_component_levels()

    existing = _current_log_file(root_logger)
    if existing is not None:
        return existing

    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = (
        target_dir / f"run_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    )

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(
        (console_level or Settings.LOG_CONSOLE_LEVEL).upper()
    )
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info(
        "Run log %s (components: %s)",
        log_file,
        ", ".join(
            f"{name.rsplit('.', 1)[-1]}={level}"
            for name, level in Settings.LOG_LEVELS.items()
        ),
    )
    return log_file
