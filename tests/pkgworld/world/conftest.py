"""Shared fixtures for world file tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgworld.world.models import (
    FlagAssignment,
    RequestRecord,
    VersionConstraint,
)


@pytest.fixture
def world_file(tmp_path: Path) -> Path:
    return tmp_path / "world"


@pytest.fixture
def foo_v1() -> RequestRecord:
    return RequestRecord(name="foo", constraint=VersionConstraint.exactly("1.0"))


@pytest.fixture
def foo_v2_debug_off() -> RequestRecord:
    return RequestRecord(
        name="foo",
        constraint=VersionConstraint.exactly("2.0"),
        flags=(FlagAssignment("debug", enabled=False),),
    )
