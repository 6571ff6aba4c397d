"""Common converter interface and output helpers."""
import os
import shutil
import tempfile
from pathlib import Path

from ..reporting.stats import Outcome
from ..scanning.enumerator import FileKind, classify

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"


class Converter:
    """
    Turns one eligible source file into one output file of a fixed format.

    Subclasses set ``name`` and ``target_extension`` and implement
    ``convert_svg`` and ``convert_raster``. Each returns the Outcome it
    produced or raises; writes go through ``write_bytes``/``copy`` so a
    failure never leaves a partial output behind.
    """

    name = ""
    target_extension = ""

    def __init__(self, config: dict):
        self.config = config

    def target_path(self, path: Path) -> Path:
        """Mirrored output path: same location, target extension."""
        return Path(path).with_suffix(self.target_extension)

    def convert(self, source: Path, target: Path) -> Outcome:
        kind = classify(source)
        if kind is FileKind.SVG:
            return self.convert_svg(Path(source), Path(target))
        if kind is FileKind.RASTER:
            return self.convert_raster(Path(source), Path(target))
        raise ValueError(f"Not an eligible image file: {source}")

    def convert_svg(self, source: Path, target: Path) -> Outcome:
        raise NotImplementedError

    def convert_raster(self, source: Path, target: Path) -> Outcome:
        raise NotImplementedError

    @staticmethod
    def write_bytes(target: Path, data: bytes) -> None:
        """Write ``data`` to ``target`` via a temp file and atomic rename."""
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, target)
        except BaseException:
            try:
                os.remove(tmp_path)
            except OSError:
                pass
            raise

    @classmethod
    def copy(cls, source: Path, target: Path) -> Outcome:
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        os.close(fd)
        try:
            shutil.copyfile(source, tmp_path)
            os.replace(tmp_path, target)
        except BaseException:
            try:
                os.remove(tmp_path)
            except OSError:
                pass
            raise
        return Outcome.COPIED
