"""Recursive listing and extension classification of source files."""
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Tuple

from ..errors import SymlinkCycleError, TraversalError
from ..utils.logger import get_logger

logger = get_logger(__name__)

SVG_EXTENSIONS = {".svg"}
RASTER_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}
EXTENSIONS = SVG_EXTENSIONS | RASTER_EXTENSIONS


class FileKind(Enum):
    SVG = "svg"
    RASTER = "raster"
    UNSUPPORTED = "unsupported"


@dataclass
class DirectoryListing:
    """Files and subdirectories found directly inside one directory."""

    path: Path
    files: List[Path] = field(default_factory=list)
    subdirs: List[Path] = field(default_factory=list)


def classify(path) -> FileKind:
    """Map a path to its file kind by lowercase extension."""
    ext = os.path.splitext(str(path))[1].lower()
    if ext in SVG_EXTENSIONS:
        return FileKind.SVG
    if ext in RASTER_EXTENSIONS:
        return FileKind.RASTER
    return FileKind.UNSUPPORTED


def is_eligible(path) -> bool:
    return classify(path) is not FileKind.UNSUPPORTED


def _dir_key(path: Path) -> Tuple[int, int]:
    st = os.stat(path)
    return (st.st_dev, st.st_ino)


def walk(root, follow_symlinks: bool = True) -> Iterator[DirectoryListing]:
    """
    Yield a listing for ``root`` and every directory below it, parents first.

    Entries are sorted by name. A directory that cannot be listed raises
    TraversalError. Following a symlink back into the current ancestry
    raises SymlinkCycleError.
    """
    root = Path(root)
    try:
        root_key = _dir_key(root)
    except OSError as e:
        raise TraversalError(f"Cannot read directory {root}: {e}") from e
    yield from _walk(root, [root_key], follow_symlinks)


def _walk(directory: Path, ancestry: List[Tuple[int, int]], follow_symlinks: bool):
    listing = DirectoryListing(path=directory)
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise TraversalError(f"Cannot read directory {directory}: {e}") from e

    for entry in entries:
        entry_path = directory / entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=True)
        except OSError:
            # Dangling symlink or vanished entry
            is_dir = False

        if is_dir:
            if entry.is_symlink() and not follow_symlinks:
                logger.debug(f"Skipping symlinked directory: {entry_path}")
                continue
            listing.subdirs.append(entry_path)
        else:
            listing.files.append(entry_path)

    yield listing

    for subdir in listing.subdirs:
        try:
            key = _dir_key(subdir)
        except OSError as e:
            raise TraversalError(f"Cannot read directory {subdir}: {e}") from e
        if key in ancestry:
            raise SymlinkCycleError(subdir, os.path.realpath(subdir))
        yield from _walk(subdir, ancestry + [key], follow_symlinks)


def iter_eligible(root, follow_symlinks: bool = True) -> Iterator[Path]:
    """Lazily yield every eligible file below ``root``, at any depth."""
    for listing in walk(root, follow_symlinks):
        for path in listing.files:
            if is_eligible(path):
                yield path


def count_eligible(root, follow_symlinks: bool = True) -> int:
    return sum(1 for _ in iter_eligible(root, follow_symlinks))
