"""Merge engine for the world file.

``insert`` and ``delete`` fold a batch of requested packages into the
world file with an update rule (:func:`union` or :func:`subtract`).
Packages are matched by name only, so a package appears at most once no
matter how its version constraint or flags change.

Updating the world file is bookkeeping: I/O failures are logged as
warnings and never abort the caller. A corrupt world file is the one
failure that propagates, since its contents can no longer be trusted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from . import store
from .models import RequestRecord, dedupe_by_name, same_identity

logger = logging.getLogger(__name__)

UpdateRule = Callable[[Sequence[RequestRecord], Sequence[RequestRecord]], list[RequestRecord]]


def union(
    batch: Sequence[RequestRecord], existing: Sequence[RequestRecord]
) -> list[RequestRecord]:
    """Batch entries replace same-named existing entries; others are kept."""
    kept = [old for old in existing if not any(same_identity(old, new) for new in batch)]
    return kept + list(batch)


def subtract(
    batch: Sequence[RequestRecord], existing: Sequence[RequestRecord]
) -> list[RequestRecord]:
    """Drop every existing entry whose name appears in the batch."""
    return [old for old in existing if not any(same_identity(old, new) for new in batch)]


def apply(
    rule: UpdateRule, batch: Sequence[RequestRecord], path: Path
) -> bool | None:
    """Apply ``rule`` to the world file at ``path``.

    Returns:
        True if the file was rewritten, False if it was already up to
        date, None if nothing was attempted (empty batch) or the update
        failed with an I/O error.

    Raises:
        CorruptStoreError: If the existing world file cannot be parsed.
    """
    if not batch:
        return None

    try:
        old_records = store.load(path)
        new_records = dedupe_by_name(rule(batch, old_records))
        if store.save_if_changed(path, new_records, old_records):
            logger.info("Updating world file...")
            return True
        logger.info("World file is already up to date.")
        return False
    except OSError as exc:
        logger.warning(f"Error while updating world file: {exc}")
        return None


def insert(path: Path, records: Sequence[RequestRecord]) -> bool | None:
    """Add packages to the world file, creating it if needed.

    Version constraints and flags of packages already present are
    replaced by the new ones.
    """
    return apply(union, records, path)


def delete(path: Path, records: Sequence[RequestRecord]) -> bool | None:
    """Remove packages from the world file.

    No uninstall workflow calls this yet; it is kept as a supported
    operation of the store.
    """
    return apply(subtract, records, path)


def get_contents(path: Path) -> list[RequestRecord]:
    """Return the records currently stored in the world file."""
    return store.load(path)


load_all = get_contents
