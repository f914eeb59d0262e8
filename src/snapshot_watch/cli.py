"""
Snapshot Watcher CLI
Main entry point for running the watcher.

  --validate  Check configuration validity and exit
  --once      Run a single detection cycle and exit
"""

import argparse
import logging
import signal
import sys
from threading import Event

from .classifiers import create_classifier
from .config import Config, ConfigValidationError, load_config, print_validation_summary
from .core import DebounceGate, DiffEngine, FrameStore, HttpSnapshotSource, Sampler
from .errors import SnapshotError
from .loop import LoopController
from .notifiers import create_notifier
from .pipeline import DetectionPipeline

logger = logging.getLogger(__name__)

# Module-level shutdown signal for SIGTERM/SIGINT handling
_shutdown_signal = Event()


def _handle_shutdown_signal(signum, _frame):
    """Handle SIGTERM/SIGINT for graceful shutdown."""
    signal_name = "SIGTERM" if signum == signal.SIGTERM else "SIGINT"
    # Note: print is safer than logger in signal handlers
    print(f"\nReceived {signal_name}, initiating graceful shutdown...")
    _shutdown_signal.set()


def _setup_signal_handlers():
    """Register signal handlers for graceful shutdown."""
    signal.signal(signal.SIGTERM, _handle_shutdown_signal)
    signal.signal(signal.SIGINT, _handle_shutdown_signal)


def setup_logging(quiet: bool = False, verbose: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
        verbose: If True, show debug output (every cycle decision)
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("snapshot_watch.", "sw.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)

    # Third-party clients are chatty at DEBUG
    for noisy in ("urllib3", "botocore", "boto3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Snapshot Watcher - Detect change on a camera and report what it was",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m snapshot_watch                   # Watch until stopped
  python -m snapshot_watch -c watch.yaml -v  # Use a config file, log every cycle
  python -m snapshot_watch --validate        # Check config validity
  python -m snapshot_watch --once            # Run one cycle (after priming)

Environment Variables:
  SNAPSHOT_URL, CAMERA_NAME, RECIPIENT_EMAILS, SENDER_USER, SENDER_PASSWORD,
  THRESHOLD, CONFIDENCE_THRESHOLD, POLL_INTERVAL_MS, COOLDOWN_MS, AWS_REGION
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to config file (default: search for watch.yaml)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose mode - log every cycle decision",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and show derived settings",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single detection cycle and exit",
    )

    return parser.parse_args(argv)


def build_pipeline(config: Config) -> DetectionPipeline:
    """Wire the pipeline's collaborators from a validated config."""
    store = FrameStore()
    source = HttpSnapshotSource(config.camera.snapshot_url, timeout=config.camera.timeout)
    detection = config.detection

    return DetectionPipeline(
        store=store,
        sampler=Sampler(source, store),
        diff_engine=DiffEngine(detection.diff_method, detection.pixel_tolerance),
        gate=DebounceGate(detection.cooldown_ms),
        classifier=create_classifier(config.classifier),
        notifier=create_notifier(config.notifier),
        camera_name=config.camera.name,
        diff_threshold=detection.diff_threshold,
        confidence_threshold=detection.confidence_threshold,
        temp_dir=config.runtime.temp_dir,
    )


def main(argv: list[str] | None = None) -> None:
    """Main orchestrator function."""
    args = parse_args(argv)
    setup_logging(quiet=args.quiet or args.validate, verbose=args.verbose)

    try:
        config = load_config(args.config)
    except ConfigValidationError as e:
        print(e, file=sys.stderr)
        sys.exit(1)

    if args.validate:
        print_validation_summary(config)
        sys.exit(0)

    try:
        pipeline = build_pipeline(config)
    except ConfigValidationError as e:
        print(e, file=sys.stderr)
        sys.exit(1)

    if config.runtime.prime_on_start:
        try:
            pipeline.prime()
        except SnapshotError as e:
            logger.error(f"Could not read image from {config.camera.snapshot_url}: {e}")
            sys.exit(1)

    _setup_signal_handlers()

    controller = LoopController(
        pipeline,
        interval_ms=config.runtime.poll_interval_ms,
        shutdown_event=_shutdown_signal,
        status_interval=config.runtime.status_interval,
    )
    controller.run(max_cycles=1 if args.once else None)


if __name__ == "__main__":
    main()
