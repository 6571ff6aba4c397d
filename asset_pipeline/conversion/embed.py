"""SVG wrappers around base64-embedded rasters, plus SVG minification."""
import base64
import io
from pathlib import Path

from lxml import etree
from PIL import Image

from ..optimization.svg_optimizer import SVGOptimizer
from ..reporting.stats import Outcome
from .base import SVG_NS, XLINK_NS, Converter


class EmbedConverter(Converter):
    """
    Produce optimized SVGs.

    SVG inputs are minified. Raster inputs are embedded unchanged as a
    ``data:`` URI inside an ``<image>`` sized to the raster's native pixel
    dimensions; the wrapper is minified with its viewBox kept.
    """

    name = "embed"
    target_extension = ".svg"

    def __init__(self, config: dict):
        super().__init__(config)
        self.optimizer = SVGOptimizer(config)

    def convert_svg(self, source: Path, target: Path) -> Outcome:
        optimized = self.optimizer.optimize(source.read_bytes())
        self.write_bytes(target, optimized.encode("utf-8"))
        return Outcome.CONVERTED

    def convert_raster(self, source: Path, target: Path) -> Outcome:
        wrapper = self.build(source.read_bytes())
        optimized = self.optimizer.optimize(wrapper, keep_viewbox=True)
        self.write_bytes(target, optimized.encode("utf-8"))
        return Outcome.CONVERTED

    @staticmethod
    def build(data: bytes) -> bytes:
        """Wrap raster bytes in an SVG ``<image>`` element."""
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            mime = Image.MIME.get(img.format, f"image/{img.format.lower()}")

        href = f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"
        svg = etree.Element(
            f"{{{SVG_NS}}}svg",
            nsmap={None: SVG_NS, "xlink": XLINK_NS},
            width=str(width),
            height=str(height),
            viewBox=f"0 0 {width} {height}",
        )
        etree.SubElement(
            svg,
            f"{{{SVG_NS}}}image",
            {
                "width": str(width),
                "height": str(height),
                f"{{{XLINK_NS}}}href": href,
            },
        )
        return etree.tostring(svg, encoding="utf-8", xml_declaration=False)
