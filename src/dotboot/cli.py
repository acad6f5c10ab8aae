# dotboot: Dotfiles Bootstrap Utility
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
dotboot CLI entry point.

Design:
- CLI owns process startup: config, logging, exit status.
- run_bootstrap is the engine (config + executor + reporter injected).
- Only a failed clone or unusable configuration changes the exit status;
  per-unit failures are reported and the run still exits 0.
"""

from __future__ import annotations

import logging
import sys

from . import config
from .bootstrap import CloneError, run_bootstrap
from .console import Console
from .executor import SubprocessExecutor
from .log import configure_logging, write_crash_log

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CLONE_FAILED = 1
EXIT_CONFIG_ERROR = 2


def main(console: Console | None = None) -> int:
    """Main entry point for dotboot."""
    if console is None:
        console = Console()

    try:
        configure_logging()
    except OSError as e:
        console.warning(f"Logging disabled: {e}")

    try:
        cfg = config.load_bootstrap_config()
    except (OSError, ValueError) as e:
        logger.error("configuration error: %s", e)
        console.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    executor = SubprocessExecutor(timeout=cfg.clone_timeout)

    try:
        report = run_bootstrap(cfg, executor, console)
    except CloneError as e:
        logger.error("aborted: %s", e)
        return EXIT_CLONE_FAILED
    except Exception as e:
        crash_path = write_crash_log(e, context="bootstrap")
        logger.exception("unhandled exception during bootstrap")
        console.error(f"Unhandled exception: {type(e).__name__}: {e}")
        if crash_path is not None:
            console.error(f"Details written to {crash_path}")
        return EXIT_CLONE_FAILED

    console.summary(report)
    return EXIT_OK


def run() -> None:
    """Console-script wrapper."""
    sys.exit(main())
