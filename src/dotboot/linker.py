# dotboot: Dotfiles Bootstrap Utility
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Backup-and-relink of configuration units.

For each unit, target_root/<name> is replaced with a symbolic link to
source_root/<name>. Anything already at the target is first moved into the
run's backup root under its original name. Each unit is handled on its own:
OS errors become a FAILED outcome for that unit and processing continues.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class Status(str, Enum):
    LINKED = "linked"
    SKIPPED = "skipped"
    FAILED = "failed"


class Reason(str, Enum):
    SOURCE_MISSING = "source_missing"
    BACKUP_FAILED = "backup_failed"
    LINK_FAILED = "link_failed"


@dataclass(frozen=True)
class ConfigUnit:
    """A named configuration directory."""

    name: str

    def source(self, source_root: Path) -> Path:
        return source_root / self.name

    def target(self, target_root: Path) -> Path:
        return target_root / self.name


@dataclass(frozen=True)
class UnitOutcome:
    unit: str
    status: Status
    source: Path
    target: Path
    reason: Reason | None = None
    backup: Path | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not Status.FAILED


@dataclass
class BackupSet:
    """Entries displaced during one run, in the order they were moved."""

    root: Path
    entries: list[tuple[Path, Path]] = field(default_factory=list)

    def record(self, original: Path, backup: Path) -> None:
        self.entries.append((original, backup))

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class LinkReport:
    outcomes: list[UnitOutcome]
    backups: BackupSet

    def by_status(self, status: Status) -> list[UnitOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def linked(self) -> list[UnitOutcome]:
        return self.by_status(Status.LINKED)

    @property
    def skipped(self) -> list[UnitOutcome]:
        return self.by_status(Status.SKIPPED)

    @property
    def failed(self) -> list[UnitOutcome]:
        return self.by_status(Status.FAILED)


# -----------------------
# Backup root naming
# -----------------------


def make_backup_root(
    parent: Path,
    prefix: str = ".config_backups_",
    timestamp_format: str = "%Y%m%d_%H%M%S",
    clock: Callable[[], datetime] = datetime.now,
) -> Path:
    """Create a fresh backup root named after the current time.

    If a directory for the same timestamp already exists, a numeric
    suffix is appended so that a backup root is never reused.
    """
    stamp = clock().strftime(timestamp_format)
    parent.mkdir(parents=True, exist_ok=True)

    candidate = parent / f"{prefix}{stamp}"
    n = 1
    while True:
        try:
            candidate.mkdir()
            return candidate
        except FileExistsError:
            candidate = parent / f"{prefix}{stamp}-{n}"
            n += 1


# -----------------------
# Linker
# -----------------------


def _move(src: Path, dst: Path) -> None:
    shutil.move(str(src), str(dst))


def _symlink(source: Path, target: Path) -> None:
    os.symlink(source, target, target_is_directory=True)


def _same_device(path: Path, directory: Path) -> bool:
    """True if a rename from path into directory stays on one filesystem."""
    return os.lstat(path).st_dev == os.stat(directory).st_dev


@dataclass
class Linker:
    """Backs up and relinks configuration units.

    mover defaults to shutil.move, symlinker to os.symlink. on_outcome,
    if set, is called once per unit as soon as it has been processed.
    """

    mover: Callable[[Path, Path], None] = _move
    symlinker: Callable[[Path, Path], None] = _symlink
    on_outcome: Callable[[UnitOutcome], None] | None = None

    def link(
        self,
        units: Iterable[ConfigUnit | str],
        source_root: Path,
        target_root: Path,
        backup_root: Path,
    ) -> LinkReport:
        # Links always store absolute source paths
        source_root = Path(source_root).absolute()
        target_root = Path(target_root).absolute()
        backup_root = Path(backup_root).absolute()

        backups = BackupSet(root=backup_root)
        outcomes: list[UnitOutcome] = []

        for unit in units:
            if isinstance(unit, str):
                unit = ConfigUnit(unit)
            outcome = self._link_one(
                unit, source_root, target_root, backups
            )
            outcomes.append(outcome)
            if self.on_outcome is not None:
                self.on_outcome(outcome)

        return LinkReport(outcomes=outcomes, backups=backups)

    def _backup(self, target: Path, backup: Path) -> str | None:
        """Move target to backup; return an error message or None."""
        if os.path.lexists(backup):
            return f"backup destination already exists: {backup}"
        try:
            backup.parent.mkdir(parents=True, exist_ok=True)
            if not _same_device(target, backup.parent):
                logger.warning(
                    "backup of %s crosses filesystems; a failed copy may "
                    "leave it partially removed", target,
                )
            self.mover(target, backup)
        except OSError as e:
            return str(e)
        return None

    def _link_one(
        self,
        unit: ConfigUnit,
        source_root: Path,
        target_root: Path,
        backups: BackupSet,
    ) -> UnitOutcome:
        source = unit.source(source_root)
        target = unit.target(target_root)

        if not source.is_dir():
            logger.info("skip %s: no source directory %s", unit.name, source)
            return UnitOutcome(
                unit=unit.name,
                status=Status.SKIPPED,
                reason=Reason.SOURCE_MISSING,
                source=source,
                target=target,
                detail=f"Source directory '{source}' not found",
            )

        backup: Path | None = None
        # lexists: a dangling symlink still counts as an existing entry
        if os.path.lexists(target):
            backup = backups.root / unit.name
            error = self._backup(target, backup)
            if error is not None:
                logger.error("backup of %s failed: %s", target, error)
                return UnitOutcome(
                    unit=unit.name,
                    status=Status.FAILED,
                    reason=Reason.BACKUP_FAILED,
                    source=source,
                    target=target,
                    detail=error,
                )
            backups.record(target, backup)
            logger.info("backed up %s -> %s", target, backup)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            self.symlinker(source, target)
        except OSError as e:
            logger.error("symlink %s -> %s failed: %s", target, source, e)
            return UnitOutcome(
                unit=unit.name,
                status=Status.FAILED,
                reason=Reason.LINK_FAILED,
                source=source,
                target=target,
                backup=backup,
                detail=str(e),
            )

        logger.info("linked %s -> %s", target, source)
        return UnitOutcome(
            unit=unit.name,
            status=Status.LINKED,
            source=source,
            target=target,
            backup=backup,
        )


def link_units(
    units: Iterable[ConfigUnit | str],
    source_root: Path,
    target_root: Path,
    backup_root: Path,
) -> LinkReport:
    """Link every unit with the default filesystem operations."""
    return Linker().link(units, source_root, target_root, backup_root)
