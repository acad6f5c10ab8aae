# dotboot: Dotfiles Bootstrap Utility
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces keep the bootstrap run independent of the real
subprocess executor, terminal output and configuration source.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .executor import TTYResult  # pragma: no cover
    from .linker import UnitOutcome  # pragma: no cover


class Executor(Protocol):
    """Protocol for external command execution."""

    def run_tty(
        self, argv: list[str], timeout: int | None = None,
        cwd: str | None = None
    ) -> TTYResult:
        """Run a command attached to the terminal (no output capture)."""
        ...


class Reporter(Protocol):
    """Protocol for operator-facing messages."""

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def blank(self) -> None: ...

    def unit_outcome(self, outcome: UnitOutcome) -> None:
        """Report one processed unit."""
        ...


class ConfigModel(Protocol):
    """Protocol for configuration access."""

    @property
    def repo_url(self) -> str:
        """Repository to clone."""
        ...

    @property
    def dotfiles_dir(self) -> Path:
        """Local clone path (source root)."""
        ...

    @property
    def config_dir(self) -> Path:
        """Config root (target root)."""
        ...

    @property
    def backup_parent(self) -> Path:
        """Directory under which run-scoped backup roots are created."""
        ...

    @property
    def backup_prefix(self) -> str:
        ...

    @property
    def timestamp_format(self) -> str:
        ...

    @property
    def clone_timeout(self) -> int:
        ...

    @property
    def units(self) -> list[str]:
        """Ordered unit names."""
        ...
