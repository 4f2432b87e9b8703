"""
Trackcast I/O Package

Settings, recorded scenarios and track export.
"""

from .config_loader import ConfigLoader, TrackcastConfig, load_config, parse_config
from .exporter import export_tracks_to_yaml
from .scenario_loader import PingReport, Scenario, ScenarioLoader, load_scenario, parse_scenario

__all__ = [
    "ConfigLoader",
    "TrackcastConfig",
    "load_config",
    "parse_config",
    "Scenario",
    "PingReport",
    "ScenarioLoader",
    "load_scenario",
    "parse_scenario",
    "export_tracks_to_yaml",
]
