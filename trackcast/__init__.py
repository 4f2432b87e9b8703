"""
Trackcast Source Package

Smooth display positions for periodically reported tracks:
- Constant turn-rate dead reckoning between reports
- Continuity-preserving blending across ticks
- Bounded per-entity report history
- Headless replay of recorded report streams
"""

from trackcast.tracking import (
    Entity,
    ExtrapolationMode,
    ExtrapolationState,
    Extrapolator,
    Ping,
    TrackStore,
    extrapolate,
    extrapolate_stateless,
    interpolate,
    predict,
)
from trackcast.io import TrackcastConfig, load_config, load_scenario
from trackcast.simulation import ReplayConfig, ReplayRunner, TickScheduler

__version__ = "1.0.0"
__author__ = "Trackcast Contributors"

__all__ = [
    # Tracking
    "Ping",
    "Entity",
    "interpolate",
    "predict",
    "extrapolate",
    "extrapolate_stateless",
    "Extrapolator",
    "ExtrapolationMode",
    "ExtrapolationState",
    "TrackStore",
    # I/O
    "TrackcastConfig",
    "load_config",
    "load_scenario",
    # Simulation
    "ReplayConfig",
    "ReplayRunner",
    "TickScheduler",
]
