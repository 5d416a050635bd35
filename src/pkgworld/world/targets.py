"""The ``world`` target.

Target lists passed to install-style commands may contain the reserved
``world`` package, meaning "everything in the world file". Callers use
the predicates here instead of comparing names directly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .merge import get_contents
from .models import RequestRecord, dedupe_by_name

WORLD_PKG = "world"


class WorldTargetError(ValueError):
    """Raised when the world target carries a version constraint or flags."""


def world_target() -> RequestRecord:
    return RequestRecord(name=WORLD_PKG)


def is_world_target(record: RequestRecord) -> bool:
    return record.name == WORLD_PKG


def is_good_world_target(record: RequestRecord) -> bool:
    """True for the world target without a version constraint or flags."""
    return is_world_target(record) and record.constraint.is_any and not record.flags


def expand_targets(
    targets: Sequence[RequestRecord], path: Path
) -> list[RequestRecord]:
    """Replace the world target with the contents of the world file.

    Other targets keep their position. The result holds one record per
    package name, the first occurrence winning.

    Raises:
        WorldTargetError: If a world target has a constraint or flags.
        CorruptStoreError: If the world file cannot be parsed.
    """
    expanded: list[RequestRecord] = []
    stored: list[RequestRecord] | None = None
    for target in targets:
        if not is_world_target(target):
            expanded.append(target)
            continue
        if not is_good_world_target(target):
            raise WorldTargetError(
                f"The '{WORLD_PKG}' target does not take a version or flags"
            )
        if stored is None:
            stored = get_contents(path)
            expanded.extend(stored)
    return dedupe_by_name(expanded)
