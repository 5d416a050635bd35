"""Flat-file store for the world file.

One canonical record per line. A missing file reads as an empty list;
a single unparseable line makes the whole load fail. Writes go to a
temporary file in the same directory and are moved into place with
``os.replace`` so readers never observe a half-written file.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Sequence

from .codec import RecordParseError, format_line, parse_line
from .models import RequestRecord, dedupe_by_name

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for world file store failures."""


class CorruptStoreError(StoreError):
    """Raised when the world file exists but cannot be parsed."""

    def __init__(self, path: Path, line_number: int, reason: str) -> None:
        self.path = path
        self.line_number = line_number
        super().__init__(
            f"Could not parse world file {path} (line {line_number}): {reason}"
        )


def load(path: Path) -> list[RequestRecord]:
    """Read every record from the world file.

    Returns an empty list when the file does not exist. Blank lines are
    skipped. Any other read failure propagates as :class:`OSError`.

    Raises:
        CorruptStoreError: If the file is not UTF-8 or any line fails to parse.
    """
    try:
        raw = Path(path).read_bytes()
    except FileNotFoundError:
        return []

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        line_number = raw[: exc.start].count(b"\n") + 1
        raise CorruptStoreError(Path(path), line_number, str(exc)) from exc

    records: list[RequestRecord] = []
    for line_number, raw_line in enumerate(content.splitlines(), start=1):
        if not raw_line.strip():
            continue
        try:
            records.append(parse_line(raw_line))
        except RecordParseError as exc:
            raise CorruptStoreError(Path(path), line_number, str(exc)) from exc
    return records


def same_contents(
    new_records: Sequence[RequestRecord], old_records: Sequence[RequestRecord]
) -> bool:
    """Return True when both lists hold the same records, ignoring order.

    The new list is reduced to one record per name. An old list holding
    several records for one name never matches, so duplicates already on
    disk get rewritten away. Otherwise equality is mutual inclusion: every
    new record is in the old list and vice versa.
    """
    new_list = dedupe_by_name(new_records)
    old_list = list(old_records)
    if len(dedupe_by_name(old_list)) != len(old_list):
        return False
    return all(r in old_list for r in new_list) and all(r in new_list for r in old_list)


def _write_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        if path.exists():
            os.chmod(tmp_path, stat.S_IMODE(path.stat().st_mode))
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def save_if_changed(
    path: Path,
    new_records: Sequence[RequestRecord],
    old_records: Sequence[RequestRecord],
) -> bool:
    """Rewrite the world file only when its contents would change.

    Returns:
        True if the file was written, False if it was already up to date.
    """
    if same_contents(new_records, old_records):
        return False

    lines = [format_line(record) for record in dedupe_by_name(new_records)]
    _write_atomic(Path(path), "".join(line + "\n" for line in lines))
    logger.debug("Wrote %d record(s) to %s", len(lines), path)
    return True
