#!/usr/bin/env python3
"""
Remote Control Script

Feed timing events to the recorder service (via SSH or locally).

Usage:
    python scripts/remote_control.py session "Group A"
    python scripts/remote_control.py start "Jane Doe" SNATCH 1
    python scripts/remote_control.py decision
    python scripts/remote_control.py forcestop
    python scripts/remote_control.py status

Or even simpler:
    ssh pi@replays "echo DECISION > /tmp/replays_control.cmd"

How it works:
- Appends the command line to the control file (control_file in the
  recorder config, /tmp/replays_control.cmd by default)
- Service checks this file every ~100ms
- File is deleted after processing
- Missing timestamps are filled in by the service on receipt
"""

import argparse
import shlex
import sys
from pathlib import Path
from typing import Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.events import EventParseError, parse_command
from recording.config import RecorderConfig


def build_command(args: argparse.Namespace) -> str:
    """Turn parsed arguments into one control-file line."""
    command = args.command.upper()

    if command == "START":
        parts = [command, args.athlete, args.lift, str(args.attempt)]
        if args.start_ms is not None:
            parts.append(str(args.start_ms))
        return shlex.join(parts)

    if command == "DECISION" and args.stop_ms is not None:
        return f"{command} {args.stop_ms}"

    if command == "SESSION":
        return shlex.join([command, *args.name])

    return command


def resolve_control_file(
    control_file: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> Path:
    """
    Pick the control file the service is polling.

    An explicit path wins. Otherwise the service's YAML config decides,
    so a control_file set there is honoured here too.
    """
    if control_file is not None:
        return Path(control_file)
    return RecorderConfig(config_path, create_missing=False).control_file


def send_command(line: str, control_file: Path) -> bool:
    """
    Send a command to the recorder service.

    Args:
        line: Control-file command line
        control_file: File the service polls

    Returns:
        True if command was sent successfully, False otherwise
    """
    # Reject anything the service would ignore
    try:
        parse_command(line)
    except EventParseError as e:
        print(f"❌ Invalid command: {e}")
        return False

    try:
        with open(control_file, "a") as f:
            f.write(line + "\n")
        print(f"✅ Command sent: {line}")
        print("Service will process it within ~1 second")
        return True

    except OSError as e:
        print(f"❌ Failed to send command: {e}")
        return False


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Send timing events to the recorder service",
        epilog="""
Examples:
  %(prog)s session "Group A"          # Set the session directory
  %(prog)s start "Jane Doe" SNATCH 1  # Attempt start (now)
  %(prog)s decision                   # Referee decision (now)
  %(prog)s forcestop                  # Stop capture without trimming
  %(prog)s status                     # Show status in service logs
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--control-file",
        type=Path,
        default=None,
        help="Control file polled by the service (default: control_file from the config)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Recorder YAML config the service runs with (default: config/recorder.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    start = subparsers.add_parser("start", help="Attempt start")
    start.add_argument("athlete")
    start.add_argument("lift", choices=["SNATCH", "CLEANJERK"], type=str.upper)
    start.add_argument("attempt", type=int)
    start.add_argument("--start-ms", type=int, default=None)

    decision = subparsers.add_parser("decision", help="Referee decision")
    decision.add_argument("--stop-ms", type=int, default=None)

    session = subparsers.add_parser("session", help="Set the session name")
    session.add_argument("name", nargs="*")

    subparsers.add_parser("forcestop", help="Stop capture without trimming")
    subparsers.add_parser("status", help="Log the service status")

    args = parser.parse_args(argv)

    control_file = resolve_control_file(args.control_file, args.config)
    success = send_command(build_command(args), control_file)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
