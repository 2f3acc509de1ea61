"""
Environment injection — apply a parsed mapping to a process environment.

The target environment is passed in as an object with ``get``/``set`` and
``in`` support, so tests and embedding applications can hand over a
MemoryEnvironment instead of mutating ``os.environ``.

Not thread-safe: concurrent writers to the same environment must be
serialized by the caller.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, MutableMapping
from typing import Protocol

logger = logging.getLogger(__name__)


class Environment(Protocol):
    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str) -> None: ...

    def __contains__(self, name: object) -> bool: ...


class MemoryEnvironment:
    """Dict-backed environment."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def get(self, name: str) -> str | None:
        return self.values.get(name)

    def set(self, name: str, value: str) -> None:
        self.values[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self.values


class ProcessEnvironment(MemoryEnvironment):
    """The live process environment (``os.environ`` by default)."""

    def __init__(self, environ: MutableMapping[str, str] | None = None) -> None:
        self.values = os.environ if environ is None else environ  # type: ignore[assignment]


def _check_entry(name: str, value: str) -> None:
    if not name or "=" in name or "\x00" in name:
        raise ValueError(f"illegal environment variable name: {name!r}")
    if "\x00" in value:
        raise ValueError(f"{name}: value contains a NUL character")


def inject(
    mapping: Mapping[str, str],
    *,
    override: bool = False,
    environ: Environment | None = None,
) -> None:
    """Set each variable in ``environ``.

    With ``override`` every entry is written; otherwise names already present
    are left alone, which makes repeated calls a no-op. Every entry is
    checked before the first write, so a ValueError leaves ``environ`` as it was.
    """
    for name, value in mapping.items():
        _check_entry(name, value)

    target = environ if environ is not None else ProcessEnvironment()
    applied = skipped = 0
    for name, value in mapping.items():
        if not override and name in target:
            skipped += 1
            logger.debug("%s already set, not overriding", name)
            continue
        target.set(name, value)
        applied += 1
    logger.debug("Injected %d variables (%d already set)", applied, skipped)


__all__ = ["Environment", "MemoryEnvironment", "ProcessEnvironment", "inject"]
