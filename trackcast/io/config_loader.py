"""
Configuration Loader

YAML-based display and extrapolation settings for Trackcast.

File layout:
    map:
      extrapolate_tracks: true
      track_trail_length: 9
    extrapolation:
      refresh_rate_s: 1.0
      mode: stateful        # or stateless
      evict_stale: true
    display:
      frame_rate_hz: 30

Usage:
    config = load_config('config/trackcast.yaml')
    engine = config.create_extrapolator()
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np
import yaml

from trackcast.tracking.extrapolator import ExtrapolationMode, Extrapolator


@dataclass
class TrackcastConfig:
    """
    Display and extrapolation settings.

    Attributes:
        refresh_rate_s: Expected seconds between server updates
        extrapolate_tracks: Forecast positions between reports
        track_trail_length: Reports kept per entity
        mode: Extrapolation strategy
        frame_rate_hz: Host tick rate
        evict_stale: Drop engine memory for entities that disappear
    """

    refresh_rate_s: float = 1.0
    extrapolate_tracks: bool = False
    track_trail_length: int = 9
    mode: ExtrapolationMode = ExtrapolationMode.STATEFUL
    frame_rate_hz: float = 30.0
    evict_stale: bool = True

    def validate(self) -> "TrackcastConfig":
        """
        Check value ranges.

        Raises:
            ValueError: On a non-positive refresh or frame rate, or a trail
                too short to forecast from
        """
        if not np.isfinite(self.refresh_rate_s) or self.refresh_rate_s <= 0:
            raise ValueError(f"refresh_rate_s must be > 0, got {self.refresh_rate_s}")
        if not np.isfinite(self.frame_rate_hz) or self.frame_rate_hz <= 0:
            raise ValueError(f"frame_rate_hz must be > 0, got {self.frame_rate_hz}")
        if self.track_trail_length < 2:
            raise ValueError(f"track_trail_length must be >= 2, got {self.track_trail_length}")
        return self

    def create_extrapolator(self, clock=None) -> Extrapolator:
        """Create an engine configured from these settings."""
        return Extrapolator(
            refresh_rate=self.refresh_rate_s,
            mode=self.mode,
            evict_stale=self.evict_stale,
            clock=clock,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the YAML file layout."""
        return {
            "map": {
                "extrapolate_tracks": self.extrapolate_tracks,
                "track_trail_length": self.track_trail_length,
            },
            "extrapolation": {
                "refresh_rate_s": self.refresh_rate_s,
                "mode": self.mode.value,
                "evict_stale": self.evict_stale,
            },
            "display": {
                "frame_rate_hz": self.frame_rate_hz,
            },
        }


def parse_config(data: Optional[Dict[str, Any]]) -> TrackcastConfig:
    """
    Build a validated config from parsed YAML data.

    Missing sections and keys fall back to the defaults.

    Raises:
        ValueError: On unknown mode or out-of-range values
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

    map_settings = data.get("map", {}) or {}
    extrapolation = data.get("extrapolation", {}) or {}
    display = data.get("display", {}) or {}

    mode_name = str(extrapolation.get("mode", ExtrapolationMode.STATEFUL.value)).lower()
    try:
        mode = ExtrapolationMode(mode_name)
    except ValueError:
        valid = ", ".join(m.value for m in ExtrapolationMode)
        raise ValueError(f"Unknown extrapolation mode '{mode_name}' (expected one of: {valid})")

    config = TrackcastConfig(
        refresh_rate_s=float(extrapolation.get("refresh_rate_s", 1.0)),
        extrapolate_tracks=bool(map_settings.get("extrapolate_tracks", False)),
        track_trail_length=int(map_settings.get("track_trail_length", 9)),
        mode=mode,
        frame_rate_hz=float(display.get("frame_rate_hz", 30.0)),
        evict_stale=bool(extrapolation.get("evict_stale", True)),
    )
    return config.validate()


class ConfigLoader:
    """
    Loads settings from YAML files.

    Usage:
        loader = ConfigLoader('config/trackcast.yaml')
        config = loader.get_config()
    """

    def __init__(self, filepath: Optional[str] = None):
        """
        Args:
            filepath: Path to YAML config file (optional)
        """
        self.filepath = filepath
        self.data: Dict[str, Any] = {}
        self._config: Optional[TrackcastConfig] = None

        if filepath:
            self.load(filepath)

    def load(self, filepath: str) -> TrackcastConfig:
        """
        Load settings from a YAML file.

        Raises:
            FileNotFoundError: If file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            ValueError: If values are out of range
        """
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Config file not found: {filepath}")

        self.filepath = filepath

        with open(filepath, "r", encoding="utf-8") as f:
            self.data = yaml.safe_load(f) or {}

        self._config = parse_config(self.data)
        return self._config

    def get_config(self) -> TrackcastConfig:
        """Parsed settings, or the defaults if nothing was loaded."""
        if self._config is None:
            return TrackcastConfig()
        return self._config


def load_config(filepath: str) -> TrackcastConfig:
    """Convenience function to load a config file."""
    return ConfigLoader(filepath).get_config()
