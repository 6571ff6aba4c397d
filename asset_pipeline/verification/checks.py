"""Shallow per-format validity checks for output files."""
from pathlib import Path
from typing import Dict

from PIL import Image, UnidentifiedImageError


class FormatCheck:
    """Expected extension plus a structural test for one output format."""

    name = ""
    expected_extension = ""

    def matches_extension(self, path: Path) -> bool:
        return Path(path).suffix.lower() == self.expected_extension

    def validate(self, path: Path) -> bool:
        raise NotImplementedError


class SvgCheck(FormatCheck):
    name = "svg"
    expected_extension = ".svg"

    def validate(self, path: Path) -> bool:
        content = Path(path).read_bytes()
        return b"<svg" in content and b"</svg>" in content


class WebPCheck(FormatCheck):
    name = "webp"
    expected_extension = ".webp"

    def validate(self, path: Path) -> bool:
        # Image.open only parses the header
        try:
            with Image.open(path) as img:
                return img.format == "WEBP"
        except (UnidentifiedImageError, Image.DecompressionBombError):
            return False


CHECKS: Dict[str, FormatCheck] = {check.name: check for check in (SvgCheck(), WebPCheck())}

TARGET_FORMATS = {
    "placeholder": "svg",
    "embed": "svg",
    "webp": "webp",
}


def get_check(name: str) -> FormatCheck:
    try:
        return CHECKS[name]
    except KeyError:
        raise ValueError(
            f"Unknown format '{name}'. Choose one of: {', '.join(sorted(CHECKS))}"
        ) from None


def check_for_target(target: str) -> FormatCheck:
    """Return the check matching a converter's output format."""
    try:
        return get_check(TARGET_FORMATS[target])
    except KeyError:
        raise ValueError(f"Unknown target '{target}'") from None
