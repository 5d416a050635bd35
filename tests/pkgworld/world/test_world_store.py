"""Tests for the world file store (load / save_if_changed)."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from pkgworld.world.models import RequestRecord, VersionConstraint
from pkgworld.world.store import (
    CorruptStoreError,
    StoreError,
    load,
    same_contents,
    save_if_changed,
)


# --- load ---


def test_load_nonexistent_file(tmp_path: Path) -> None:
    assert load(tmp_path / "nonexistent" / "world") == []


def test_load_empty_file(world_file: Path) -> None:
    world_file.write_text("", encoding="utf-8")
    assert load(world_file) == []


def test_load_skips_blank_lines(world_file: Path) -> None:
    world_file.write_text("foo ==1.0\n\n   \nbar -any\n", encoding="utf-8")
    assert [r.name for r in load(world_file)] == ["foo", "bar"]


def test_load_preserves_file_order(world_file: Path) -> None:
    world_file.write_text("zeta -any\nalpha -any\n", encoding="utf-8")
    assert [r.name for r in load(world_file)] == ["zeta", "alpha"]


def test_load_single_corrupt_line_fails_whole_load(world_file: Path) -> None:
    world_file.write_text(
        "foo ==1.0\nbar -any\n!!! not a record\nbaz -any\n", encoding="utf-8"
    )
    with pytest.raises(CorruptStoreError, match="line 3") as exc_info:
        load(world_file)
    assert exc_info.value.line_number == 3
    assert exc_info.value.path == world_file


def test_corrupt_store_error_is_store_error() -> None:
    assert issubclass(CorruptStoreError, StoreError)
    assert not issubclass(CorruptStoreError, OSError)


def test_load_propagates_other_os_errors(tmp_path: Path) -> None:
    # A directory in place of the file cannot be read as text.
    directory = tmp_path / "world"
    directory.mkdir()
    with pytest.raises(OSError):
        load(directory)


# --- same_contents ---


def test_same_contents_ignores_order() -> None:
    a, b = RequestRecord("a"), RequestRecord("b")
    assert same_contents([a, b], [b, a])


def test_same_contents_detects_version_change(foo_v1, foo_v2_debug_off) -> None:
    assert not same_contents([foo_v2_debug_off], [foo_v1])


def test_same_contents_detects_added_record(foo_v1) -> None:
    assert not same_contents([foo_v1, RequestRecord("bar")], [foo_v1])
    assert not same_contents([foo_v1], [foo_v1, RequestRecord("bar")])


def test_same_contents_dedupes_before_comparing(foo_v1, foo_v2_debug_off) -> None:
    assert same_contents([foo_v1, foo_v2_debug_off], [foo_v1])


# --- save_if_changed ---


def test_save_creates_file_and_parent_dirs(tmp_path: Path, foo_v1) -> None:
    path = tmp_path / "deep" / "nested" / "world"
    assert save_if_changed(path, [foo_v1], []) is True
    assert path.read_text(encoding="utf-8") == "foo ==1.0\n"


def test_save_writes_one_line_per_record(world_file: Path) -> None:
    records = [
        RequestRecord("foo", VersionConstraint.exactly("1.0")),
        RequestRecord("bar"),
    ]
    assert save_if_changed(world_file, records, []) is True
    assert world_file.read_text(encoding="utf-8") == "foo ==1.0\nbar -any\n"
    assert load(world_file) == records


def test_save_unchanged_performs_no_io(world_file: Path, foo_v1) -> None:
    with patch("pkgworld.world.store._write_atomic") as mock_write:
        assert save_if_changed(world_file, [foo_v1], [foo_v1]) is False
    mock_write.assert_not_called()
    assert not world_file.exists()


def test_save_unchanged_keeps_mtime(world_file: Path, foo_v1) -> None:
    save_if_changed(world_file, [foo_v1], [])
    os.utime(world_file, (1_000_000, 1_000_000))
    assert save_if_changed(world_file, [foo_v1], load(world_file)) is False
    assert world_file.stat().st_mtime == 1_000_000


def test_save_leaves_no_temp_files(world_file: Path, foo_v1) -> None:
    save_if_changed(world_file, [foo_v1], [])
    assert [p.name for p in world_file.parent.iterdir()] == ["world"]


def test_failed_write_keeps_old_content(world_file: Path, foo_v1, foo_v2_debug_off) -> None:
    save_if_changed(world_file, [foo_v1], [])
    with patch("pkgworld.world.store.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError, match="disk full"):
            save_if_changed(world_file, [foo_v2_debug_off], [foo_v1])
    assert world_file.read_text(encoding="utf-8") == "foo ==1.0\n"
    assert [p.name for p in world_file.parent.iterdir()] == ["world"]


def test_load_non_utf8_file_is_corrupt(world_file: Path) -> None:
    world_file.write_bytes(b"foo ==1.0\n\xff\xfe bad\n")
    with pytest.raises(CorruptStoreError, match="line 2") as exc_info:
        load(world_file)
    assert exc_info.value.line_number == 2


def test_same_contents_rejects_duplicate_names_in_old(foo_v1, foo_v2_debug_off) -> None:
    assert not same_contents([foo_v1], [foo_v1, foo_v2_debug_off])
    assert not same_contents([foo_v1], [foo_v1, foo_v1])


@pytest.mark.skipif(os.name == "nt", reason="POSIX file modes")
def test_rewrite_keeps_existing_file_mode(world_file: Path, foo_v1, foo_v2_debug_off) -> None:
    save_if_changed(world_file, [foo_v1], [])
    os.chmod(world_file, 0o644)
    assert save_if_changed(world_file, [foo_v2_debug_off], [foo_v1]) is True
    assert stat.S_IMODE(world_file.stat().st_mode) == 0o644
