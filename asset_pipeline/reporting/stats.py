"""Per-run counters."""
import time
from dataclasses import dataclass, field
from enum import Enum


class Outcome(Enum):
    """What a converter did with one input file."""

    COPIED = "copied"
    CONVERTED = "converted"


@dataclass
class RunStats:
    """
    Counters for one pipeline run.

    ``processed`` always equals ``copied + converted + errored``. Skipped
    files are not processed, so ``processed + skipped`` never exceeds
    ``total``.
    """

    total: int = 0
    processed: int = 0
    copied: int = 0
    converted: int = 0
    errored: int = 0
    skipped: int = 0
    started_at: float = field(default_factory=time.monotonic)

    def record(self, outcome: Outcome) -> None:
        if outcome is Outcome.COPIED:
            self.copied += 1
        elif outcome is Outcome.CONVERTED:
            self.converted += 1
        else:
            raise ValueError(f"Unknown outcome: {outcome!r}")
        self.processed += 1

    def record_error(self) -> None:
        self.errored += 1
        self.processed += 1

    def record_skip(self) -> None:
        self.skipped += 1

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    @property
    def done(self) -> int:
        return self.processed + self.skipped
