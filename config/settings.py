"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Machine-specific paths and endpoints can be overridden from .env
- Import these settings in modules: from config.settings import LEAD_MS
- Per-installation overrides go in config/recorder.yaml (see RecorderConfig)
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# CAPTURE TOOL (OBS WEBSOCKET) CONFIGURATION
# =============================================================================

OBS_WEBSOCKET_URL = os.getenv("OBS_WEBSOCKET_URL", "ws://localhost:4444")
OBS_RPC_VERSION = 1

# Handshake and request bounds (seconds)
CONTROL_CONNECT_TIMEOUT = 5.0
CONTROL_IDENTIFY_TIMEOUT = 5.0
CONTROL_REQUEST_TIMEOUT = 10.0

# Hotkeys bound in OBS to the replay source actions
HOTKEY_RESET = os.getenv("HOTKEY_RESET", "OBS_KEY_F6")  # reset/arm replay source
HOTKEY_START = os.getenv("HOTKEY_START", "OBS_KEY_F7")  # start recording
HOTKEY_STOP = os.getenv("HOTKEY_STOP", "OBS_KEY_F8")  # stop recording

# =============================================================================
# RECORDING / TRIM CONFIGURATION
# =============================================================================

# Pre-roll kept before the lift when trimming (milliseconds)
LEAD_MS = 5000

# Time given to OBS to flush capture files after stop (seconds)
SETTLE_DELAY_SECONDS = 3.0

# Transcoder retry policy
TRIM_MAX_ATTEMPTS = 5
TRIM_RETRY_DELAY_SECONDS = 1.0
FFMPEG_TIMEOUT_SECONDS = 120

# External transcoder binary (looked up on PATH when not absolute)
FFMPEG_PATH = os.getenv("FFMPEG_PATH", "ffmpeg")

# Where OBS writes raw captures
CAPTURE_DIR = Path(
    os.getenv("CAPTURE_DIR", str(Path.home() / "Videos" / "Captures")),
)
RAW_CAPTURE_EXTENSION = ".flv"
CAMERA_MARKER = "Camera"
TRIMMED_EXTENSION = ".mp4"

# Captures that could not be processed are kept here, out of discovery's reach
FAILED_CAPTURE_SUBDIR = "failed"

# =============================================================================
# STORAGE CONFIGURATION
# =============================================================================

# Root of the organized clip tree (one subdirectory per session)
VIDEO_DIR = Path(os.getenv("VIDEO_DIR", "videos"))

UNSORTED_SESSION_DIR = "unsorted"

# Shared by every camera of one attempt, second granularity
ATTEMPT_TIMESTAMP_FORMAT = "%Y-%m-%d_%Hh%Mm%Ss"

# Keep the trimmed intermediate in CAPTURE_DIR (for a live-stream media
# source) and copy it into the session directory instead of moving it
KEEP_TRIMMED_COPY = os.getenv("KEEP_TRIMMED_COPY", "false").lower() == "true"

# =============================================================================
# SERVICE CONFIGURATION
# =============================================================================

RECORDER_CONFIG_FILE = Path(
    os.getenv("RECORDER_CONFIG_FILE", "config/recorder.yaml"),
)

# Remote Control Configuration
# File-based control for feeding timing events via SSH/scripts
# Commands: START, DECISION, SESSION, FORCESTOP, STATUS
CONTROL_FILE = os.getenv(
    "CONTROL_FILE",
    "/tmp/replays_control.cmd",  # noqa: S108
)
CONTROL_POLL_INTERVAL = 0.1  # seconds

# Logging Configuration
LOG_DIR = os.getenv("LOG_DIR", "/var/log/replays")
LOG_SERVICE_FILE = "service.log"
