# dotboot: Dotfiles Bootstrap Utility
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed executor implementation for dotboot.

run_tty() runs commands that talk to the operator (git clone progress,
credential prompts) with the terminal passed straight through.

Commands are always passed as argv lists; nothing goes through a shell.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from dataclasses import dataclass
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TTYResult:
    """Result from TTY/passthrough execution (no output capture)."""

    exit_code: int
    started_at: str
    duration_ms: int


def format_argv(argv: list[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


class SubprocessExecutor:
    """Subprocess implementation of Executor protocol."""

    def __init__(self, timeout: int = 600):
        """Initialize executor with configuration.

        Args:
            timeout: Command timeout in seconds (default: 600)
        """
        self.timeout = timeout

    def run_tty(
        self, argv: list[str], timeout: int | None = None,
        cwd: str | None = None
    ) -> TTYResult:
        """Run a command with full terminal control (no output capture).

        The command inherits stdin/stdout/stderr from the parent process,
        so progress output and credential prompts reach the operator.

        Args:
            argv: command and arguments
            timeout: overrides self.timeout
            cwd: working directory for the command (default: current directory)

        Returns:
            TTYResult (exit_code, started_at, duration_ms)
        """
        logger.info("CMD (tty) %s", format_argv(argv))
        started_at = datetime.now().isoformat()
        start_ts = time.time()

        deadline = start_ts + (
            timeout if timeout is not None else self.timeout
        )

        try:
            proc = subprocess.Popen(argv, cwd=cwd)
        except OSError as e:
            logger.error("Could not start %s: %s", argv[0], e)
            duration_ms = int((time.time() - start_ts) * 1000)
            return TTYResult(
                exit_code=1,
                started_at=started_at,
                duration_ms=duration_ms,
            )

        timed_out = False
        while True:
            rc = proc.poll()
            if rc is not None:
                break
            if time.time() >= deadline:
                timed_out = True
                break
            time.sleep(0.05)

        if timed_out:
            logger.error("Command timed out: %s", format_argv(argv))
            proc.terminate()
            try:
                proc.wait(timeout=1.0)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait()
            exit_code = 1
        else:
            exit_code = proc.returncode if proc.returncode is not None else 1

        duration_ms = int((time.time() - start_ts) * 1000)

        # Normalize exit code 127 (command not found) to 1 for consistency
        if exit_code == 127:
            exit_code = 1

        logger.info("EXIT %s (%d ms)", exit_code, duration_ms)
        return TTYResult(
            exit_code=exit_code,
            started_at=started_at,
            duration_ms=duration_ms,
        )
