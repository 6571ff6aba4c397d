"""Shared pytest configuration and source-tree fixtures."""
from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import ICON_SVG, write_image


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: tests that run whole pipelines")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        parts = set(Path(str(item.fspath)).parts)
        if "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    sources/
      a/logo.png (200x100)
      a/icon.svg
      a/nested/photo.jpg
      b/pic.webp
      b/notes.txt
    """
    root = tmp_path / "sources"
    write_image(root / "a" / "logo.png")
    (root / "a" / "icon.svg").write_bytes(ICON_SVG)
    write_image(root / "a" / "nested" / "photo.jpg", size=(64, 48))
    write_image(root / "b" / "pic.webp", size=(32, 32), fmt="WEBP")
    (root / "b" / "notes.txt").write_text("not an image")
    return root


@pytest.fixture
def raster_tree(tmp_path: Path) -> Path:
    """A source tree holding rasters only."""
    root = tmp_path / "sources"
    write_image(root / "a" / "logo.png")
    write_image(root / "a" / "nested" / "photo.jpg", size=(64, 48))
    write_image(root / "b" / "pic.webp", size=(32, 32), fmt="WEBP")
    return root
