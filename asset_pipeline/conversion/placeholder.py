"""Placeholder SVGs labelled with the source file name."""
from pathlib import Path

from lxml import etree

from ..reporting.stats import Outcome
from .base import SVG_NS, Converter


class PlaceholderConverter(Converter):
    """Copy SVGs as-is; replace every raster with a labelled grey box."""

    name = "placeholder"
    target_extension = ".svg"

    def __init__(self, config: dict):
        super().__init__(config)
        ph_cfg = config.get("placeholder", {})
        self.width = ph_cfg.get("width", 100)
        self.height = ph_cfg.get("height", 100)
        self.background = ph_cfg.get("background", "#f0f0f0")
        self.font_family = ph_cfg.get("font_family", "Arial")
        self.font_size = ph_cfg.get("font_size", 14)

    def convert_svg(self, source: Path, target: Path) -> Outcome:
        return self.copy(source, target)

    def convert_raster(self, source: Path, target: Path) -> Outcome:
        # Pixel content is never read, only the name
        self.write_bytes(target, self.build(source.stem))
        return Outcome.CONVERTED

    def build(self, label: str) -> bytes:
        """Return the placeholder SVG document for ``label``."""
        svg = etree.Element(
            f"{{{SVG_NS}}}svg",
            nsmap={None: SVG_NS},
            width=str(self.width),
            height=str(self.height),
        )
        etree.SubElement(
            svg, f"{{{SVG_NS}}}rect", width="100%", height="100%", fill=self.background
        )
        text = etree.SubElement(
            svg,
            f"{{{SVG_NS}}}text",
            {
                "x": "50%",
                "y": "50%",
                "font-family": self.font_family,
                "font-size": str(self.font_size),
                "text-anchor": "middle",
                "dominant-baseline": "middle",
            },
        )
        text.text = label
        return etree.tostring(
            svg, encoding="utf-8", xml_declaration=False, pretty_print=True
        )
