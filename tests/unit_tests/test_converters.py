"""Unit tests for converter variants and the registry."""
from __future__ import annotations

import base64
import os
from pathlib import Path

import pytest
from lxml import etree
from PIL import Image

from asset_pipeline.conversion import (
    EmbedConverter,
    PlaceholderConverter,
    WebPConverter,
    available_converters,
    get_converter,
)
from asset_pipeline.errors import UnsupportedSourceError
from asset_pipeline.reporting import Outcome
from tests.helpers import ICON_SVG, write_image

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_HREF = "{http://www.w3.org/1999/xlink}href"


def test_registry_lists_all_variants() -> None:
    assert available_converters() == ["embed", "placeholder", "webp"]
    assert isinstance(get_converter("webp", {}), WebPConverter)


def test_registry_rejects_unknown_target() -> None:
    with pytest.raises(ValueError, match="Unknown target"):
        get_converter("gif", {})


@pytest.mark.parametrize(
    ("cls", "expected"),
    [(PlaceholderConverter, "a/logo.svg"), (EmbedConverter, "a/logo.svg"), (WebPConverter, "a/logo.webp")],
)
def test_target_path_swaps_extension(cls, expected: str) -> None:
    assert cls({}).target_path(Path("a/logo.png")).as_posix() == expected


def test_unsupported_extension_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        PlaceholderConverter({}).convert(tmp_path / "notes.txt", tmp_path / "notes.svg")


# ---------------------------------------------------------------- placeholder


def test_placeholder_ignores_pixels(tmp_path: Path) -> None:
    source = tmp_path / "logo.png"
    source.write_bytes(b"not really a png")
    target = tmp_path / "out" / "logo.svg"
    target.parent.mkdir()

    assert PlaceholderConverter({}).convert(source, target) is Outcome.CONVERTED

    root = etree.fromstring(target.read_bytes())
    assert root.get("width") == "100"
    assert root.get("height") == "100"
    text = root.find(f"{{{SVG_NS}}}text")
    assert text.text == "logo"
    assert text.get("text-anchor") == "middle"
    assert root.find(f"{{{SVG_NS}}}rect").get("fill") == "#f0f0f0"


def test_placeholder_escapes_label(tmp_path: Path) -> None:
    svg = PlaceholderConverter({}).build("a&b<c>")
    assert b"a&amp;b&lt;c&gt;" in svg


def test_placeholder_size_from_config() -> None:
    converter = PlaceholderConverter({"placeholder": {"width": 64, "height": 32}})
    root = etree.fromstring(converter.build("x"))
    assert (root.get("width"), root.get("height")) == ("64", "32")


def test_placeholder_copies_svg_bytes(tmp_path: Path) -> None:
    source = tmp_path / "icon.svg"
    source.write_bytes(ICON_SVG)
    target = tmp_path / "out.svg"

    assert PlaceholderConverter({}).convert(source, target) is Outcome.COPIED
    assert target.read_bytes() == ICON_SVG


# ----------------------------------------------------------------------- webp


def test_webp_reencodes_raster(tmp_path: Path) -> None:
    source = write_image(tmp_path / "logo.png", size=(200, 100))
    target = tmp_path / "logo.webp"

    assert WebPConverter({}).convert(source, target) is Outcome.CONVERTED
    with Image.open(target) as img:
        assert img.format == "WEBP"
        assert img.size == (200, 100)


def test_webp_keeps_alpha_from_palette_transparency(tmp_path: Path) -> None:
    source = tmp_path / "pal.png"
    img = Image.new("P", (8, 8), 0)
    img.putpalette([0, 0, 0, 255, 255, 255] + [0] * 762)
    img.save(source, transparency=0)
    target = tmp_path / "pal.webp"

    WebPConverter({}).convert(source, target)
    with Image.open(target) as out:
        assert out.mode == "RGBA"


def test_webp_converts_grayscale(tmp_path: Path) -> None:
    source = write_image(tmp_path / "gray.jpg", size=(16, 16), mode="L", color=128)
    target = tmp_path / "gray.webp"
    assert WebPConverter({}).convert(source, target) is Outcome.CONVERTED
    with Image.open(target) as out:
        assert out.format == "WEBP"


def test_webp_copies_webp_input(tmp_path: Path) -> None:
    source = write_image(tmp_path / "pic.webp", size=(10, 10), fmt="WEBP")
    target = tmp_path / "out" / "pic.webp"
    target.parent.mkdir()

    assert WebPConverter({}).convert(source, target) is Outcome.COPIED
    assert target.read_bytes() == source.read_bytes()


def test_webp_rejects_svg(tmp_path: Path) -> None:
    source = tmp_path / "icon.svg"
    source.write_bytes(ICON_SVG)
    with pytest.raises(UnsupportedSourceError):
        WebPConverter({}).convert(source, tmp_path / "icon.webp")
    assert not (tmp_path / "icon.webp").exists()


def test_webp_settings_from_config() -> None:
    converter = WebPConverter({"webp": {"quality": 80, "method": 4}})
    assert (converter.quality, converter.method, converter.lossless) == (80, 4, False)
    defaults = WebPConverter({})
    assert (defaults.quality, defaults.method, defaults.lossless) == (95, 6, False)


def test_corrupt_raster_leaves_no_output(tmp_path: Path) -> None:
    source = tmp_path / "broken.png"
    source.write_bytes(b"\x89PNG\r\n\x1a\ngarbage")
    target = tmp_path / "out" / "broken.webp"
    target.parent.mkdir()

    with pytest.raises(OSError):
        WebPConverter({}).convert(source, target)
    assert list(target.parent.iterdir()) == []


# ---------------------------------------------------------------------- embed


def test_embed_wraps_raster_with_native_size(tmp_path: Path) -> None:
    source = write_image(tmp_path / "logo.png", size=(200, 100))
    target = tmp_path / "logo.svg"

    assert EmbedConverter({}).convert(source, target) is Outcome.CONVERTED

    root = etree.fromstring(target.read_bytes())
    assert root.get("width") == "200"
    assert root.get("height") == "100"
    assert root.get("viewBox") == "0 0 200 100"

    image = root.find(f"{{{SVG_NS}}}image")
    prefix = "data:image/png;base64,"
    href = image.get(XLINK_HREF)
    assert href.startswith(prefix)
    assert base64.b64decode(href[len(prefix):]) == source.read_bytes()


def test_embed_uses_decoded_mime_type(tmp_path: Path) -> None:
    source = write_image(tmp_path / "photo.jpg", size=(8, 8))
    svg = EmbedConverter.build(source.read_bytes())
    assert b"data:image/jpeg;base64," in svg


def test_embed_minifies_svg_input(tmp_path: Path) -> None:
    source = tmp_path / "icon.svg"
    source.write_bytes(b"<!-- c -->\n" + ICON_SVG.replace(b'r="10"', b'r="10.00004"'))
    target = tmp_path / "out.svg"

    assert EmbedConverter({}).convert(source, target) is Outcome.CONVERTED
    content = target.read_bytes()
    assert b"<!--" not in content
    assert b'r="10"' in content


# ---------------------------------------------------------------- atomic write


def test_failed_write_removes_temp_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", failing_replace)
    with pytest.raises(OSError, match="disk full"):
        PlaceholderConverter.write_bytes(tmp_path / "x.svg", b"<svg/>")
    assert list(tmp_path.iterdir()) == []


def test_write_overwrites_existing_output(tmp_path: Path) -> None:
    target = tmp_path / "x.svg"
    target.write_bytes(b"old")
    PlaceholderConverter.write_bytes(target, b"new")
    assert target.read_bytes() == b"new"
