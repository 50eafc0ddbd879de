"""
Recorder Configuration Handler

Manages the YAML configuration file of an installation.
Provides defaults from config/settings.py and validation.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from config.settings import (
    CAPTURE_DIR,
    CONTROL_FILE,
    FFMPEG_PATH,
    HOTKEY_RESET,
    HOTKEY_START,
    HOTKEY_STOP,
    KEEP_TRIMMED_COPY,
    LEAD_MS,
    OBS_WEBSOCKET_URL,
    RAW_CAPTURE_EXTENSION,
    RECORDER_CONFIG_FILE,
    SETTLE_DELAY_SECONDS,
    TRIM_MAX_ATTEMPTS,
    TRIM_RETRY_DELAY_SECONDS,
    VIDEO_DIR,
)
from control.constants import ControlAction


class RecorderConfig:
    """
    Recorder configuration with YAML file support.

    Reads from config/recorder.yaml if it exists, otherwise writes a file
    holding the defaults so operators have something to edit.

    Usage:
        config = RecorderConfig()
        video_dir = config.video_dir
        lead = config.lead_ms
    """

    DEFAULT_CONFIG_PATH = RECORDER_CONFIG_FILE

    def __init__(self, config_path: Optional[Path] = None, create_missing: bool = True):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (None = use default)
            create_missing: Write a default file when none exists
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path or self.DEFAULT_CONFIG_PATH)
        self.create_missing = create_missing

        # Load configuration (defaults + file overrides)
        self._config = self._load_config()

        self.logger.info(f"Recorder config loaded from {self.config_path}")

    def _get_defaults(self) -> Dict[str, Any]:
        """Get default configuration values from settings"""
        return {
            # Capture tool
            'obs_url': OBS_WEBSOCKET_URL,
            'hotkeys': {
                'reset': HOTKEY_RESET,
                'start': HOTKEY_START,
                'stop': HOTKEY_STOP,
            },

            # Paths
            'video_dir': str(VIDEO_DIR),
            'capture_dir': str(CAPTURE_DIR),
            'raw_extension': RAW_CAPTURE_EXTENSION,
            'ffmpeg_path': FFMPEG_PATH,
            'control_file': CONTROL_FILE,

            # Trimming
            'lead_ms': LEAD_MS,
            'settle_delay_seconds': SETTLE_DELAY_SECONDS,
            'trim_max_attempts': TRIM_MAX_ATTEMPTS,
            'trim_retry_delay_seconds': TRIM_RETRY_DELAY_SECONDS,

            # Placement
            'keep_trimmed_copy': KEEP_TRIMMED_COPY,
        }

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file or use defaults"""
        # Start with defaults
        config = self._get_defaults()

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}

                if not isinstance(file_config, dict):
                    raise ValueError("top level must be a mapping")

                self._merge(config, file_config)
                self.logger.info(f"Loaded config from {self.config_path}")

            except (OSError, ValueError, yaml.YAMLError) as e:
                self.logger.warning(
                    f"Failed to load config from {self.config_path}: {e}. "
                    f"Using defaults."
                )
        elif self.create_missing:
            self.logger.info(
                f"Config file not found at {self.config_path}. "
                f"Creating default config file..."
            )
            self._save_config(config)

        self._validate_config(config)
        return config

    def _merge(self, config: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """Apply file values over defaults, ignoring unknown keys"""
        for key, value in overrides.items():
            if key not in config:
                self.logger.warning(f"Ignoring unknown config key: {key}")
                continue
            if key == 'hotkeys':
                if not isinstance(value, dict):
                    self.logger.warning("Ignoring 'hotkeys': expected a mapping")
                    continue
                for action, key_id in value.items():
                    if action in config['hotkeys']:
                        config['hotkeys'][action] = str(key_id)
                    else:
                        self.logger.warning(f"Ignoring unknown hotkey: {action}")
                continue
            config[key] = value

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate configuration values"""
        if int(config['lead_ms']) < 0:
            raise ValueError("lead_ms cannot be negative")

        if float(config['settle_delay_seconds']) < 0:
            raise ValueError("settle_delay_seconds cannot be negative")

        if int(config['trim_max_attempts']) < 1:
            raise ValueError("trim_max_attempts must be at least 1")

        if float(config['trim_retry_delay_seconds']) < 0:
            raise ValueError("trim_retry_delay_seconds cannot be negative")

        if not str(config['raw_extension']).startswith('.'):
            config['raw_extension'] = f".{config['raw_extension']}"

    def _save_config(self, config: Dict[str, Any] = None) -> None:
        """Save configuration to YAML file"""
        if config is None:
            config = self._config

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, 'w') as f:
                yaml.safe_dump(
                    config,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    indent=2
                )

            self.logger.info(f"Config saved to {self.config_path}")

        except OSError as e:
            self.logger.error(f"Failed to save config: {e}")

    def _resolve(self, value: str) -> Path:
        """Relative paths are relative to the config file's directory"""
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.config_path.parent.resolve() / path
        return path

    # =========================================================================
    # PROPERTY ACCESSORS
    # =========================================================================

    @property
    def obs_url(self) -> str:
        return self._config['obs_url']

    @property
    def hotkeys(self) -> Dict[ControlAction, str]:
        """Hotkey id per logical action"""
        return {
            ControlAction(action): key_id
            for action, key_id in self._config['hotkeys'].items()
        }

    @property
    def video_dir(self) -> Path:
        """Root of the organized clip tree (absolute)"""
        return self._resolve(self._config['video_dir'])

    @property
    def capture_dir(self) -> Path:
        """Directory where OBS writes raw captures"""
        return self._resolve(self._config['capture_dir'])

    @property
    def raw_extension(self) -> str:
        return self._config['raw_extension']

    @property
    def ffmpeg_path(self) -> str:
        return self._config['ffmpeg_path']

    @property
    def control_file(self) -> Path:
        return Path(self._config['control_file'])

    @property
    def lead_ms(self) -> int:
        """Pre-roll kept before the decision when trimming"""
        return int(self._config['lead_ms'])

    @property
    def settle_delay_seconds(self) -> float:
        """Wait after stop before reading capture files"""
        return float(self._config['settle_delay_seconds'])

    @property
    def trim_max_attempts(self) -> int:
        return int(self._config['trim_max_attempts'])

    @property
    def trim_retry_delay_seconds(self) -> float:
        return float(self._config['trim_retry_delay_seconds'])

    @property
    def keep_trimmed_copy(self) -> bool:
        """Copy clips into the session tree and keep the trimmed intermediate"""
        return bool(self._config['keep_trimmed_copy'])

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def ensure_video_dir(self) -> Path:
        """Create the video root if needed and return it"""
        video_dir = self.video_dir
        video_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Videos will be stored in: {video_dir}")
        return video_dir

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._config, hotkeys=dict(self._config['hotkeys']))

    def __repr__(self) -> str:
        return f"RecorderConfig(path={self.config_path})"
