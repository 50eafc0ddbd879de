"""
Recorder Service

Main service coordinator for the replay recording system.
This is the entry point that wires all controllers together.

Architecture:
- Timing events (attempt start, decision, session) drive everything
- OBS is controlled over its WebSocket API using hotkeys
- Trimming runs in a background worker, one attempt at a time
- Finished clips are filed per session under the video root

Cycle:
    IDLE → ARMED → TRIMMING → IDLE
            ↑           ↓
     (attempt start) (decision)

Event Sources:
- Control file polled every ~100ms (operators, SSH, bridge scripts)
- Anything else can call service.dispatcher.dispatch(event)
"""

import argparse
import logging
import logging.handlers
import signal
import sys
import time
from pathlib import Path
from typing import Optional

from config.settings import (
    CONTROL_POLL_INTERVAL,
    LOG_DIR,
    LOG_SERVICE_FILE,
    TRIMMED_EXTENSION,
)
from control import ControlError, ControlFactory
from core import ControlFileEventSource, EventDispatcher, StateStore
from recording import RecorderConfig, RecordingOrchestrator, TrimmerFactory
from status import LoggingStatusSink
from storage import FileOrganizer, PlacementPolicy


class RecorderService:
    """
    Main service coordinator.

    Wires together:
    - Control client (OBS WebSocket)
    - Trimmer (FFmpeg, or mock with --no-video)
    - File organizer and status sink
    - Recording orchestrator and event sources

    Usage:
        service = RecorderService(RecorderConfig())
        service.run()  # Blocks until shutdown
    """

    def __init__(self, config: RecorderConfig, no_video: bool = False):
        """
        Initialize all controllers and wire them together.

        Args:
            config: Loaded recorder configuration
            no_video: Log trim commands instead of running FFmpeg
        """
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing Recorder Service...")

        self.config = config
        self.running = False

        # Shared attempt state
        self.state_store = StateStore()

        # Capture tool control
        self.logger.info(f"Initializing control client ({config.obs_url})...")
        self.control = ControlFactory.create_client(url=config.obs_url)

        # Trimming
        self.logger.info("Initializing trimmer...")
        self.trimmer = TrimmerFactory.create_trimmer(
            mode="mock" if no_video else "auto",
            ffmpeg_path=config.ffmpeg_path,
            max_attempts=config.trim_max_attempts,
            retry_delay=config.trim_retry_delay_seconds,
        )

        # Storage
        self.logger.info("Initializing storage...")
        policy = PlacementPolicy.COPY if config.keep_trimmed_copy else PlacementPolicy.MOVE
        self.organizer = FileOrganizer(config.ensure_video_dir(), policy=policy)

        # Orchestration
        self.orchestrator = RecordingOrchestrator(
            control=self.control,
            trimmer=self.trimmer,
            organizer=self.organizer,
            state_store=self.state_store,
            status_sink=LoggingStatusSink(),
            capture_dir=config.capture_dir,
            raw_extension=config.raw_extension,
            trimmed_extension=TRIMMED_EXTENSION,
            hotkeys=config.hotkeys,
            lead_ms=config.lead_ms,
            settle_delay=config.settle_delay_seconds,
        )

        # Event delivery
        self.dispatcher = EventDispatcher(self.state_store, self.orchestrator)
        self.control_source = ControlFileEventSource(
            self.dispatcher,
            config.control_file,
            poll_interval=CONTROL_POLL_INTERVAL,
        )

        # Register signal handlers for graceful shutdown
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        self.logger.info("Recorder Service initialized successfully")

    def run(self):
        """
        Main service loop.

        Runs until shutdown signal received.
        """
        self.running = True
        self.logger.info("Starting Recorder Service main loop...")

        # First connection attempt; failures are retried at the next attempt start
        try:
            self.control.connect()
        except ControlError as e:
            self.logger.error(f"Could not connect to OBS: {e}")

        self.orchestrator.start()
        self.control_source.start()

        try:
            while self.running:
                time.sleep(0.5)
        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self._shutdown()

    def _signal_handler(self, signum, _frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, shutting down...")
        self.running = False

    def _shutdown(self):
        """
        Graceful shutdown.

        Stops event intake, stops any capture in progress, lets the trim
        worker finish and closes the control channel.
        """
        self.logger.info("Shutting down Recorder Service...")

        self.control_source.stop()

        # Stop capture without trimming if an attempt is still open
        self.orchestrator.force_stop()

        self.logger.info("Waiting for trim pipeline to finish...")
        self.orchestrator.shutdown()

        self.control.close()

        self.logger.info("Recorder Service shutdown complete")


def setup_logging(verbose: bool = False, log_dir: Optional[str] = None):
    """
    Setup logging with rotation.

    Logs to both console and file with rotation:
    - Daily rotation
    - Keep 7 days of logs
    """
    level = logging.DEBUG if verbose else logging.INFO

    # Create logger
    logger = logging.getLogger()
    logger.setLevel(level)

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_format = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s | %(name)s",
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler with rotation
    # Define format once for both try and except blocks
    file_format = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s | %(name)s",
    )

    log_file = Path(log_dir or LOG_DIR) / LOG_SERVICE_FILE
    try:
        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(log_file),
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
    except (PermissionError, FileNotFoundError):
        # Fallback to local logs directory if the log dir is not writable
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)

        fallback_log = logs_dir / "replays-service.log"
        logger.warning(
            f"Cannot write to {log_file}, using fallback: {fallback_log}",
        )
        logger.info(
            f"To fix: sudo mkdir -p {log_file.parent} && "
            f"sudo chown $(whoami) {log_file.parent}",
        )

        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(fallback_log),
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )

    file_handler.setLevel(level)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Record, trim and file replay clips of lifting attempts",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to the recorder YAML config (default: config/recorder.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-video",
        action="store_true",
        help="Log trim commands instead of running FFmpeg",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """
    Main entry point for the service.

    Sets up logging and runs the service.
    """
    args = parse_args(argv)

    # Setup logging
    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Replay Recorder Service Starting")
    logger.info("=" * 60)

    # Create and run service
    try:
        config = RecorderConfig(args.config)
        service = RecorderService(config, no_video=args.no_video)
        service.run()
    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
