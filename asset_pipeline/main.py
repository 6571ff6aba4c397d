"""CLI entry point."""
import argparse
import sys

from .conversion.registry import available_converters
from .errors import SourceNotFoundError, TraversalError
from .pipeline import AssetPipeline, load_config
from .utils.logger import get_logger, set_verbosity
from .verification.checks import CHECKS, check_for_target, get_check
from .verification.verifier import Verifier

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default=None,
        help="Path to custom YAML config file",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser = argparse.ArgumentParser(
        prog="asset-pipeline",
        description="Asset Pipeline - Convert a source image tree and verify the output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fmt = subparsers.add_parser(
        "format", parents=[common], help="Convert sources/ into assets/"
    )
    fmt.add_argument(
        "--target",
        choices=available_converters(),
        default=None,
        help="Output format variant",
    )
    fmt.add_argument(
        "--preset",
        default=None,
        help="Use a preset configuration",
    )
    fmt.add_argument("--source", default=None, help="Source tree (default: sources)")
    fmt.add_argument("--dest", default=None, help="Output tree (default: assets)")
    fmt.add_argument(
        "--on-unsupported",
        choices=["skip", "error"],
        default=None,
        help="What to do with inputs the target cannot convert",
    )
    fmt.add_argument(
        "--quality",
        type=int,
        default=None,
        help="WebP quality (0-100)",
    )
    fmt.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )

    verify = subparsers.add_parser(
        "verify", parents=[common], help="Check every file in assets/"
    )
    group = verify.add_mutually_exclusive_group()
    group.add_argument(
        "--format",
        choices=sorted(CHECKS),
        default=None,
        help="Expected output format",
    )
    group.add_argument(
        "--target",
        choices=available_converters(),
        default=None,
        help="Expect the format produced by this converter",
    )
    verify.add_argument("--assets", default=None, help="Tree to verify (default: assets)")
    verify.add_argument(
        "--strict",
        action="store_true",
        help="Also fail on files whose content looks invalid",
    )
    return parser


def run_format(args) -> int:
    # Build config overrides from CLI args
    overrides = {}

    if args.target:
        overrides.setdefault("conversion", {})["target"] = args.target
    if args.on_unsupported:
        overrides.setdefault("conversion", {})["on_unsupported"] = args.on_unsupported
    if args.quality is not None:
        overrides.setdefault("webp", {})["quality"] = args.quality
    if args.no_progress:
        overrides.setdefault("reporting", {})["progress"] = False

    pipeline = AssetPipeline(
        config=overrides if overrides else None,
        config_path=args.config,
        preset=args.preset,
    )
    stats = pipeline.run(args.source, args.dest)
    if stats.errored:
        logger.warning(f"{stats.errored} files could not be converted")
    return 0


def run_verify(args) -> int:
    config = load_config(config_path=args.config)
    verify_cfg = config.get("verification", {})

    if args.format:
        check = get_check(args.format)
    elif args.target:
        check = check_for_target(args.target)
    elif verify_cfg.get("format"):
        check = get_check(verify_cfg["format"])
    else:
        check = check_for_target(config.get("conversion", {}).get("target", "placeholder"))

    verifier = Verifier(
        check,
        strict=args.strict or verify_cfg.get("strict", False),
        follow_symlinks=config.get("traversal", {}).get("follow_symlinks", True),
    )
    assets = args.assets or config.get("paths", {}).get("assets", "assets")
    stats = verifier.verify(assets)
    return 0 if stats.passed else 1


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbosity(args.verbose)

    try:
        if args.command == "format":
            return run_format(args)
        return run_verify(args)
    except (FileNotFoundError, SourceNotFoundError) as e:
        logger.error(f"Not found: {e}")
        return 1
    except TraversalError as e:
        logger.error(f"Traversal failed: {e}")
        return 1
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
