"""Raster re-encoding to WebP."""
import io
from pathlib import Path

from PIL import Image

from ..errors import UnsupportedSourceError
from ..reporting.stats import Outcome
from ..utils.logger import get_logger
from .base import Converter

logger = get_logger(__name__)


class WebPConverter(Converter):
    """
    Copy ``.webp`` inputs verbatim and re-encode other rasters as lossy WebP.

    Lossy WebP always stores chroma at 4:2:0, so subsampling needs no
    separate setting. SVG inputs have no rasterization rule here and raise
    UnsupportedSourceError.
    """

    name = "webp"
    target_extension = ".webp"

    def __init__(self, config: dict):
        super().__init__(config)
        webp_cfg = config.get("webp", {})
        self.quality = webp_cfg.get("quality", 95)
        self.method = webp_cfg.get("method", 6)
        self.lossless = webp_cfg.get("lossless", False)

    def convert_svg(self, source: Path, target: Path) -> Outcome:
        raise UnsupportedSourceError(source, self.name)

    def convert_raster(self, source: Path, target: Path) -> Outcome:
        if source.suffix.lower() == ".webp":
            return self.copy(source, target)
        self.write_bytes(target, self.encode(source))
        return Outcome.CONVERTED

    def encode(self, source: Path) -> bytes:
        with Image.open(source) as img:
            img.load()
            img = self._normalize_mode(img)
            buf = io.BytesIO()
            img.save(
                buf,
                format="WEBP",
                quality=self.quality,
                method=self.method,
                lossless=self.lossless,
            )
        logger.debug(f"Encoded {source} to WebP ({buf.tell()} bytes)")
        return buf.getvalue()

    @staticmethod
    def _normalize_mode(img: Image.Image) -> Image.Image:
        """Convert to RGB/RGBA, keeping alpha when the source has any."""
        if img.mode in ("RGB", "RGBA"):
            return img
        has_alpha = img.mode in ("LA", "PA") or (
            img.mode == "P" and "transparency" in img.info
        )
        return img.convert("RGBA" if has_alpha else "RGB")
