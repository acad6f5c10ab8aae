# dotboot: Dotfiles Bootstrap Utility
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Run log and crash log for dotboot.

Console output is for the operator; everything the bootstrap decides is
also recorded in <data_root>/dotboot/logs/bootstrap.log. Unhandled
exceptions are appended to crash.log next to it.
"""

from __future__ import annotations

import logging
import traceback
from datetime import datetime
from pathlib import Path

from . import config as cfg_module

LOG_FILENAME = "bootstrap.log"
CRASH_FILENAME = "crash.log"

_CONFIGURED_ATTR = "_dotboot_configured"
_PATH_ATTR = "_dotboot_log_path"


def configure_logging(
    log_path: Path | None = None,
    level: int = logging.INFO,
) -> Path:
    """Attach a file handler to the root logger.

    Calling this more than once is a no-op; the path chosen by the first
    call is returned. If the requested location is not writable, the log
    goes to ./dotboot-bootstrap.log instead.

    Returns the actual file path being used.
    """
    logger = logging.getLogger()

    if getattr(logger, _CONFIGURED_ATTR, False):
        return getattr(logger, _PATH_ATTR)

    if log_path is None:
        log_path = cfg_module.logs_dir(cfg_module.get_data_root()) / LOG_FILENAME

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    chosen = log_path
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        chosen = Path.cwd() / "dotboot-bootstrap.log"
        handler = logging.FileHandler(chosen, encoding="utf-8")

    handler.setFormatter(fmt)
    logger.addHandler(handler)
    logger.setLevel(level)

    setattr(logger, _CONFIGURED_ATTR, True)
    setattr(logger, _PATH_ATTR, chosen)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen
    )
    return chosen


def write_crash_log(error: BaseException, context: str = "") -> Path | None:
    """Append an entry to the crash log.

    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).

    Returns the crash log path, or None if it could not be written.
    """
    try:
        logs = cfg_module.logs_dir(cfg_module.get_data_root())
        logs.mkdir(parents=True, exist_ok=True)
        crash_log_path = logs / CRASH_FILENAME

        lines = [f"{datetime.now().isoformat()}"]
        if context:
            lines.append(f"context={context}")
        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(
            "".join(
                traceback.format_exception(
                    type(error), error, error.__traceback__
                )
            )
        )
        lines.append("----")

        with crash_log_path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        return crash_log_path

    except OSError:
        # Already in an error state; the caller reports the original error.
        return None
