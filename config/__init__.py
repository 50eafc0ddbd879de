"""
Configuration package.

Defaults live in config.settings; per-installation overrides are read
from config/recorder.yaml by recording.config.RecorderConfig.
"""
