from .progress import ProgressBar, format_summary
from .stats import Outcome, RunStats

__all__ = ["Outcome", "ProgressBar", "RunStats", "format_summary"]
