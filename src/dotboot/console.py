# dotboot: Dotfiles Bootstrap Utility
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

import os
from collections.abc import Callable
from typing import TYPE_CHECKING

from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.shortcuts import print_formatted_text

from .config import ANSI_COLORS, MESSAGE_STYLES
from .linker import Reason, Status, UnitOutcome

if TYPE_CHECKING:
    from .bootstrap import BootstrapReport  # pragma: no cover


SEPARATOR = "------------------------------------------------"


def _default_writer(text: str) -> None:
    # ANSI() lets prompt_toolkit translate escapes for the current terminal
    print_formatted_text(ANSI(text))


def _colors_enabled() -> bool:
    return not os.environ.get("NO_COLOR")


class Console:
    """Colored, marker-prefixed operator messages."""

    def __init__(
        self,
        writer: Callable[[str], None] | None = None,
        color: bool | None = None,
    ) -> None:
        self._writer = writer or _default_writer
        self.color = _colors_enabled() if color is None else color

    def format(self, kind: str, message: str) -> str:
        color_name, marker = MESSAGE_STYLES[kind]
        if not self.color:
            return f"{marker} {message}"
        return (
            f"{ANSI_COLORS[color_name]}{marker} {message}"
            f"{ANSI_COLORS['reset']}"
        )

    def _emit(self, kind: str, message: str) -> None:
        self._writer(self.format(kind, message))

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def info(self, message: str) -> None:
        self._emit("info", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def blank(self) -> None:
        self._writer("")

    # ----------------------------
    # Report rendering
    # ----------------------------

    def unit_outcome(self, outcome: UnitOutcome) -> None:
        """Render the messages for a single processed unit."""
        name = outcome.unit
        self.info(f"Processing '{name}' configuration...")

        if outcome.reason is Reason.SOURCE_MISSING:
            self.warning(
                f"Source directory '{outcome.source}' not found. Skipping."
            )
            self.blank()
            return

        if outcome.reason is Reason.BACKUP_FAILED:
            self.warning(
                f"Existing configuration found at '{outcome.target}'. "
                "Backing it up."
            )
            self.error(f"Failed to back up '{name}': {outcome.detail}. Skipping.")
            self.blank()
            return

        if outcome.backup is not None:
            self.warning(
                f"Existing configuration found at '{outcome.target}'. "
                "Backing it up."
            )
            self.success(
                f"Backup of '{name}' created in {outcome.backup.parent}"
            )

        self.info(f"Creating symbolic link for '{name}'...")
        if outcome.status is Status.LINKED:
            self.success(f"Successfully linked '{name}' to {outcome.target}")
        else:
            self.error(
                f"Failed to create symbolic link for '{name}': {outcome.detail}"
            )
        self.blank()

    def summary(self, report: BootstrapReport) -> None:
        link = report.link
        self.success(SEPARATOR)
        self.success("Dotfiles setup complete!")
        self.info(
            f"Linked: {len(link.linked)}  Skipped: {len(link.skipped)}  "
            f"Failed: {len(link.failed)}"
        )
        for outcome in link.failed:
            reason = outcome.reason.value if outcome.reason else "failed"
            self.error(f"{outcome.unit}: {reason} ({outcome.detail})")
        self.warning(
            "Original configurations (if any) are backed up in: "
            f"{report.backup_root}"
        )
        self.info(
            "You may need to restart your terminal, shell, or log out "
            "for all changes to take effect."
        )
