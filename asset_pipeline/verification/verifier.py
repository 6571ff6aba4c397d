"""Audit an output tree against a single expected format."""
from dataclasses import dataclass
from pathlib import Path

from ..errors import SourceNotFoundError
from ..scanning.enumerator import walk
from ..utils.logger import get_logger
from .checks import FormatCheck

logger = get_logger(__name__)


@dataclass
class VerificationStats:
    directories: int = 0
    files: int = 0
    matched: int = 0
    mismatched: int = 0
    invalid: int = 0
    unreadable: int = 0
    strict: bool = False

    @property
    def passed(self) -> bool:
        if self.mismatched:
            return False
        if self.strict and (self.invalid or self.unreadable):
            return False
        return True


class Verifier:
    """
    Walk an output tree and check every file's extension and structure.

    Nothing is modified. Wrong extensions count as mismatches and fail the
    run; content that fails the structural check is reported as invalid and
    only fails the run in strict mode.
    """

    def __init__(self, check: FormatCheck, strict: bool = False, follow_symlinks: bool = True):
        self.check = check
        self.strict = strict
        self.follow_symlinks = follow_symlinks

    def verify(self, root) -> VerificationStats:
        root = Path(root)
        if not root.is_dir():
            raise SourceNotFoundError(f"Assets directory not found: {root}")

        stats = VerificationStats(strict=self.strict)
        for listing in walk(root, follow_symlinks=self.follow_symlinks):
            rel_dir = listing.path.relative_to(root)
            if listing.path != root:
                stats.directories += 1
            logger.info(f"Verifying directory: {rel_dir if rel_dir.parts else root.name}")
            for path in listing.files:
                self._verify_file(path, path.relative_to(root), stats)

        logger.info("\n" + format_verification_summary(stats, self.check.name))
        if stats.passed:
            logger.info(f"Verification successful: all files are in {self.check.name.upper()} format")
        else:
            logger.error(f"Verification failed: files not in {self.check.name.upper()} format found")
        return stats

    def _verify_file(self, path: Path, rel_path: Path, stats: VerificationStats) -> None:
        stats.files += 1
        if not self.check.matches_extension(path):
            stats.mismatched += 1
            logger.error(f"Non-{self.check.name.upper()} file found: {rel_path}")
            return

        stats.matched += 1
        try:
            valid = self.check.validate(path)
        except OSError as e:
            stats.unreadable += 1
            logger.error(f"Error reading file {rel_path}: {e}")
            return
        if not valid:
            stats.invalid += 1
            logger.warning(f"{rel_path} might not be a valid {self.check.name.upper()} file")


def format_verification_summary(stats: VerificationStats, fmt: str) -> str:
    return "\n".join(
        [
            "=== Verification Summary ===",
            f"Total directories: {stats.directories}",
            f"Total files: {stats.files}",
            f"{fmt.upper()} files: {stats.matched}",
            f"Non-{fmt.upper()} files: {stats.mismatched}",
            f"Invalid {fmt.upper()} files: {stats.invalid}",
            f"Unreadable files: {stats.unreadable}",
            "============================",
        ]
    )
