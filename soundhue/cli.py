"""
Command line interface.

Usage:
    soundhue analyze path/to/track.mp3
    soundhue analyze a.wav b.flac --output results/
    soundhue analyze track.mp3 --sequential --log-level DEBUG
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .audio import AudioLoader
from .core import TrackAnalysisPipeline
from .errors import SoundhueError, ConfigurationError
from .utils import Config, setup_logger, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="soundhue",
        description="Extract tempo, pitch, loudness, timbre, key and mood from audio files",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Analyze one or more audio files")
    analyze_parser.add_argument("files", nargs="+", help="Audio files to analyze")
    analyze_parser.add_argument("--config", help="Path to a YAML config file")
    analyze_parser.add_argument("--output", "-o", help="Directory for <name>.json results (default: stdout)")
    analyze_parser.add_argument("--sample-rate", type=int, default=None,
                                help="Resample to this rate before analysis (default: native)")
    analyze_parser.add_argument("--sequential", action="store_true",
                                help="Run analyses one after another instead of in parallel")
    analyze_parser.add_argument("--log-level", default=None,
                                help="DEBUG, INFO, WARNING, ERROR (default: from config)")

    return parser


def _write_result(path: Path, document: dict, output_dir: Optional[Path]):
    text = json.dumps(document, indent=2)
    if output_dir is None:
        print(text)
        return

    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / f"{path.stem}.json"
    target.write_text(text, encoding="utf-8")
    logger.info(f"Wrote {target}")


def load_config(args: argparse.Namespace) -> Config:
    """Load the YAML config and apply command line overrides."""
    config = Config(args.config)

    if args.sequential:
        config.set('performance.parallel', False)
    if args.log_level:
        config.set('logging.level', args.log_level)

    return config


def run_analyze(args: argparse.Namespace) -> int:
    """Analyze every file; returns the process exit code."""
    config = load_config(args)

    setup_logger(
        level=config.get('logging.level', 'INFO'),
        log_file=config.get('logging.log_file'),
        max_bytes=int(config.get('logging.max_bytes', 10 * 1024 * 1024)),
        backup_count=int(config.get('logging.backup_count', 3)),
        stream=sys.stderr,
    )

    loader = AudioLoader(sample_rate=args.sample_rate)
    pipeline = TrackAnalysisPipeline(config=config)
    output_dir = Path(args.output) if args.output else None

    failures = 0
    files = [Path(f) for f in args.files]
    progress = tqdm(files, desc="Analyzing", unit="file", file=sys.stderr, disable=len(files) < 2)

    for path in progress:
        progress.set_postfix_str(path.name)
        try:
            signal = loader.load(str(path))
            features = pipeline.run(signal)
        except SoundhueError as e:
            failures += 1
            _write_result(path, {'file': str(path), **e.to_dict()}, output_dir)
            continue

        _write_result(path, {'file': str(path), **features.to_dict()}, output_dir)

    if failures:
        logger.warning(f"{failures}/{len(files)} file(s) failed")
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point."""
    args = build_parser().parse_args(argv)

    if args.command == "analyze":
        try:
            return run_analyze(args)
        except ConfigurationError as e:
            print(f"Configuration error: {e.message}", file=sys.stderr)
            return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())
