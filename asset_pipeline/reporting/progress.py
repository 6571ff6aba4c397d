"""Single-line progress bar and end-of-run summary."""
import sys

from .stats import RunStats


class ProgressBar:
    """Render ``[====>    ] 40% | 4/10 files`` on one overwritten line."""

    def __init__(self, total: int, length: int = 30, stream=None, enabled: bool = True):
        self.total = total
        self.length = length
        self.stream = stream if stream is not None else sys.stdout
        self.enabled = enabled
        self._active = False

    def render(self, done: int) -> str:
        progress = done / self.total if self.total else 1.0
        progress = min(max(progress, 0.0), 1.0)
        filled = int(self.length * progress)
        bar = "=" * filled + ">" + " " * (self.length - filled)
        return f"[{bar}] {int(progress * 100)}% | {done}/{self.total} files"

    def update(self, done: int) -> None:
        if not self.enabled:
            return
        self.stream.write("\r" + self.render(done))
        self.stream.flush()
        self._active = True

    def finish(self) -> None:
        """End the bar line so following output starts on a fresh line."""
        if self._active:
            self.stream.write("\n")
            self.stream.flush()
            self._active = False


def format_summary(stats: RunStats, target: str) -> str:
    return "\n".join(
        [
            "=== Processing Summary ===",
            f"Total files found: {stats.total}",
            f"Total files processed: {stats.processed}",
            f"Files copied: {stats.copied}",
            f"Files converted to {target}: {stats.converted}",
            f"Files skipped: {stats.skipped}",
            f"Files with errors: {stats.errored}",
            f"Time taken: {stats.elapsed:.2f} seconds",
            "==========================",
        ]
    )
