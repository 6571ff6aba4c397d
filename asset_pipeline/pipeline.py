"""Main orchestrator that mirrors a source tree into a converted asset tree."""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import yaml

from .conversion.registry import get_converter
from .errors import ConfigError, SourceNotFoundError, UnsupportedSourceError
from .reporting.progress import ProgressBar, format_summary
from .reporting.stats import RunStats
from .scanning.enumerator import is_eligible, walk
from .utils.logger import get_logger

logger = get_logger(__name__)

DEFAULTS_PATH = Path(__file__).parent / "config" / "defaults.yaml"


@dataclass
class Job:
    """One eligible source file and where its output goes."""

    source: Path
    target: Path


def load_config(config: dict = None, config_path: str = None, preset: str = None) -> dict:
    """
    Load and merge configuration.

    Order: packaged defaults, named preset, YAML file, then ``config``.
    Later layers win.
    """
    base_config = _read_yaml(DEFAULTS_PATH) if DEFAULTS_PATH.exists() else {}
    presets = base_config.pop("presets", {}) or {}

    if preset:
        if preset not in presets:
            raise ConfigError(
                f"Unknown preset '{preset}'. Available: {', '.join(sorted(presets))}"
            )
        base_config = deep_merge(base_config, presets[preset])

    if config_path:
        base_config = deep_merge(base_config, _read_yaml(Path(config_path)))

    if config:
        base_config = deep_merge(base_config, config)

    return base_config


def _read_yaml(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Override takes precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class AssetPipeline:
    """
    Convert every eligible image under a source root into one target format.

    Pipeline:
      1. List the tree once, creating mirrored destination directories
      2. Convert each eligible file with the configured converter
      3. Update counters and the progress bar after every file
      4. Log a summary
    """

    def __init__(self, config: dict = None, config_path: str = None, preset: str = None):
        self.config = load_config(config, config_path, preset)

        conv_cfg = self.config.get("conversion", {})
        self.converter = get_converter(conv_cfg.get("target", "placeholder"), self.config)
        self.on_unsupported = conv_cfg.get("on_unsupported", "skip")
        if self.on_unsupported not in ("skip", "error"):
            raise ConfigError(
                f"conversion.on_unsupported must be 'skip' or 'error', got {self.on_unsupported!r}"
            )

        self.follow_symlinks = self.config.get("traversal", {}).get("follow_symlinks", True)
        report_cfg = self.config.get("reporting", {})
        self.show_progress = report_cfg.get("progress", True)
        self.bar_length = report_cfg.get("bar_length", 30)

    def run(self, source_root=None, dest_root=None, stream=None) -> RunStats:
        """
        Full conversion pipeline.

        Args:
            source_root: Tree to read. Defaults to ``paths.sources``.
            dest_root: Tree to write. Defaults to ``paths.assets``.
            stream: Where the progress bar is drawn (stdout by default).

        Returns:
            The run's statistics.
        """
        paths_cfg = self.config.get("paths", {})
        source_root = Path(source_root or paths_cfg.get("sources", "sources"))
        dest_root = Path(dest_root or paths_cfg.get("assets", "assets"))

        if not source_root.is_dir():
            raise SourceNotFoundError(f"Source directory not found: {source_root}")

        stats = RunStats()
        logger.info("Scanning source directories...")
        jobs, subdir_count = self.plan(source_root, dest_root)
        stats.total = len(jobs)

        logger.info(
            f"Found {stats.total} image files to process in {subdir_count} directories."
        )
        logger.info(f"Starting conversion to {self.converter.name}...")

        bar = ProgressBar(
            stats.total, length=self.bar_length, stream=stream, enabled=self.show_progress
        )
        for job in jobs:
            self._process(job, stats, bar)
            bar.update(stats.done)
        bar.finish()

        logger.info("\n" + format_summary(stats, self.converter.target_extension.lstrip(".")))
        return stats

    def plan(self, source_root: Path, dest_root: Path):
        """
        List the source tree once.

        Mirrored destination directories are created here. Only files inside
        the root's subdirectories are converted.

        Returns:
            Tuple of (jobs, number of top-level subdirectories).
        """
        jobs: List[Job] = []
        claimed: Dict[Path, Path] = {}
        listings = walk(source_root, follow_symlinks=self.follow_symlinks)
        root_listing = next(listings)

        stray = [p for p in root_listing.files if is_eligible(p)]
        if stray:
            logger.warning(
                f"Ignoring {len(stray)} image files directly in {source_root}; "
                "only subdirectories are converted"
            )

        for listing in listings:
            rel_dir = listing.path.relative_to(source_root)
            target_dir = dest_root / rel_dir
            target_dir.mkdir(parents=True, exist_ok=True)
            for path in listing.files:
                if not is_eligible(path):
                    continue
                target = self.converter.target_path(target_dir / path.name)
                if target in claimed:
                    logger.warning(
                        f"{path} and {claimed[target]} both map to {target}; "
                        "the later file overwrites the earlier output"
                    )
                claimed[target] = path
                jobs.append(Job(source=path, target=target))

        return jobs, len(root_listing.subdirs)

    def _process(self, job: Job, stats: RunStats, bar: ProgressBar) -> None:
        """Convert one file; per-file failures are counted, not raised."""
        try:
            outcome = self.converter.convert(job.source, job.target)
        except UnsupportedSourceError as e:
            bar.finish()
            if self.on_unsupported == "skip":
                logger.warning(f"Skipping {job.source}: {e}")
                stats.record_skip()
            else:
                logger.error(f"Error processing {job.source}: {e}")
                stats.record_error()
            return
        except Exception as e:
            bar.finish()
            logger.error(f"Error processing {job.source}: {e}")
            logger.debug("Conversion traceback", exc_info=True)
            stats.record_error()
            return

        stats.record(outcome)
        logger.debug(f"{outcome.value}: {job.source} -> {job.target}")
