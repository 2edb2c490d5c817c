"""
Logging setup for the binner command line tool.

Standard output carries the JSON result, so every handler installed here
writes to stderr or to a log file.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

# Pipeline step records, one per histogram stage
action_logger = logging.getLogger("binner.actions")


def log_binning_action(action: str, column: Optional[str] = None, success: bool = True, **fields: Any) -> None:
    """
    Record one histogram step, e.g. ``Action: resolve_edges | column=weight | edges=6 | Status: SUCCESS``.

    Keyword fields (edge, bin and value counts, error kind) are appended in
    call order and also attached to the record as ``record.binning`` so file
    handlers and filters can read them without parsing the message.
    """
    context: Dict[str, Any] = {"action": action, "column": column, **fields}
    parts = [f"Action: {action}"]
    if column is not None:
        parts.append(f"column={column}")
    parts.extend(f"{key}={value}" for key, value in fields.items())
    parts.append("Status: SUCCESS" if success else "Status: FAILED")

    action_logger.log(
        logging.INFO if success else logging.ERROR,
        " | ".join(parts),
        extra={"binning": context},
    )


def setup_logging(
    log_level: str = "INFO",
    console_log_level: str = "WARNING",
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure the root logger for a command line run.

    Args:
        log_level: Logging level for the root logger and the log file
        console_log_level: Logging level for console output
        log_file: Optional path to a size-rotated log file
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove all existing handlers to prevent duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        try:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))
            file_formatter = logging.Formatter(
                "%(asctime)s [%(levelname)8s] %(name)s: %(message)s "
                "[%(filename)s:%(lineno)d in %(funcName)s()]"
            )
            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            print(f"Warning: Could not setup file logging to {log_file}: {e}", file=sys.stderr)

    # Rich handler has its own formatter, no need to set one
    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    console_handler.setLevel(
        getattr(logging, console_log_level.upper(), logging.WARNING)
    )
    root_logger.addHandler(console_handler)

    # === NOISE REDUCTION ===
    logging.getLogger("fsspec").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    root_logger.debug(f"Logging initialized. Level: {log_level}, file: {log_file or 'none'}")
