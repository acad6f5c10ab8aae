# dotboot: Dotfiles Bootstrap Utility
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
One bootstrap run: clone, prepare directories, link units.

Collaborators (config, executor, reporter, clock) are injected so the
whole run can be driven against a temporary directory in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .interfaces import ConfigModel, Executor, Reporter
from .linker import ConfigUnit, Linker, LinkReport, make_backup_root

logger = logging.getLogger(__name__)


class CloneError(RuntimeError):
    """The dotfiles repository could not be cloned; the run cannot proceed."""


@dataclass(frozen=True)
class BootstrapReport:
    cloned: bool
    dotfiles_dir: Path
    config_dir: Path
    backup_root: Path
    link: LinkReport


def ensure_repository(
    cfg: ConfigModel, executor: Executor, reporter: Reporter
) -> bool:
    """Clone the dotfiles repository unless the clone path already exists.

    Returns True if a clone was performed.

    Raises:
        CloneError: if cloning was required and did not succeed
    """
    dest = cfg.dotfiles_dir
    if dest.is_dir():
        reporter.warning(
            f"Dotfiles repository already exists at {dest}. Skipping clone."
        )
        return False

    if not cfg.repo_url:
        reporter.error("No repository URL configured. Aborting.")
        raise CloneError("repository.url is not set")

    reporter.info("Cloning dotfiles repository...")
    result = executor.run_tty(
        ["git", "clone", cfg.repo_url, str(dest)],
        timeout=cfg.clone_timeout,
    )
    if result.exit_code != 0:
        reporter.error("Failed to clone repository. Aborting.")
        raise CloneError(
            f"git clone {cfg.repo_url} exited with {result.exit_code}"
        )

    reporter.success(f"Repository cloned successfully to {dest}")
    return True


def run_bootstrap(
    cfg: ConfigModel,
    executor: Executor,
    reporter: Reporter,
    clock: Callable[[], datetime] = datetime.now,
    linker: Linker | None = None,
) -> BootstrapReport:
    """Run the full bootstrap and return what happened.

    Only a failed clone is fatal. Every unit failure is captured in the
    returned report.
    """
    reporter.info("Starting dotfiles setup...")
    logger.info(
        "bootstrap start: repo=%s dotfiles=%s config=%s units=%s",
        cfg.repo_url, cfg.dotfiles_dir, cfg.config_dir, cfg.units,
    )

    cloned = ensure_repository(cfg, executor, reporter)

    backup_root = make_backup_root(
        cfg.backup_parent,
        prefix=cfg.backup_prefix,
        timestamp_format=cfg.timestamp_format,
        clock=clock,
    )
    reporter.info(f"Creating backup directory at {backup_root}")
    cfg.config_dir.mkdir(parents=True, exist_ok=True)

    if linker is None:
        linker = Linker()
    if linker.on_outcome is None:
        linker.on_outcome = reporter.unit_outcome

    link_report = linker.link(
        [ConfigUnit(name) for name in cfg.units],
        source_root=cfg.dotfiles_dir,
        target_root=cfg.config_dir,
        backup_root=backup_root,
    )

    logger.info(
        "bootstrap done: linked=%d skipped=%d failed=%d backups=%d root=%s",
        len(link_report.linked), len(link_report.skipped),
        len(link_report.failed), len(link_report.backups), backup_root,
    )

    return BootstrapReport(
        cloned=cloned,
        dotfiles_dir=cfg.dotfiles_dir,
        config_dir=cfg.config_dir,
        backup_root=backup_root,
        link=link_report,
    )
