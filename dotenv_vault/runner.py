"""Run a program with a prepared environment and report its exit code."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def run_command(
    argv: Sequence[str],
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> int:
    """Run ``argv`` in the foreground, inheriting stdio. Returns its exit code.

    FileNotFoundError / PermissionError from starting the program propagate.
    """
    if not argv:
        raise ValueError("No program given")

    env = dict(os.environ if env is None else env)
    logger.debug("Running %s", argv[0])
    proc = subprocess.run(list(argv), env=env, cwd=str(cwd) if cwd else None)
    if proc.returncode < 0:
        # Killed by a signal: report it the way shells do.
        return 128 - proc.returncode
    return proc.returncode


__all__ = ["run_command"]
