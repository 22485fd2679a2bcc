# tests/conftest.py

"""Shared pytest fixtures for all storefront tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Point the store and log directories at a per-test temp dir."""
    data_dir = tmp_path / "data"
    monkeypatch.setattr(Settings, "DATA_DIR", data_dir)
    monkeypatch.setattr(Settings, "STORE_PATH", data_dir / "storefront.db")
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    yield
