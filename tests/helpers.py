"""Helpers for building image trees in tests."""
from __future__ import annotations

from pathlib import Path

from PIL import Image

ICON_SVG = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24">'
    b'<circle cx="12" cy="12" r="10" fill="#333"/></svg>\n'
)


def write_image(path: Path, size=(200, 100), mode="RGB", fmt=None, color=(200, 30, 30)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if mode == "RGBA" and len(color) == 3:
        color = color + (128,)
    Image.new(mode, size, color).save(path, format=fmt)
    return path


def quiet(target: str, **extra) -> dict:
    """Config overrides for a pipeline without progress output."""
    config = {"conversion": {"target": target}, "reporting": {"progress": False}}
    for key, value in extra.items():
        config.setdefault(key, {}).update(value)
    return config


def snapshot(root: Path) -> dict[str, bytes]:
    return {
        str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()
    }
