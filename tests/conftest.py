from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolate_world_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep tests away from the real ~/.pkgworld directory."""
    monkeypatch.setenv("PKGWORLD_HOME", str(tmp_path_factory.mktemp("pkgworld-home")))
    monkeypatch.delenv("PKGWORLD_WORLD_FILE", raising=False)
