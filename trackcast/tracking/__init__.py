"""
Tracking Module

Track extrapolation for smoothly rendered entity positions.

Components:
    - Ping / Entity: Report and renderable object containers
    - interpolate: Linear blending between two pings
    - predict: Constant turn-rate forecast with lookahead clamping
    - Extrapolator: Per-view engine applying the forecast once per tick
    - TrackStore: Bounded per-entity report history

Example:
    >>> from trackcast.tracking import Extrapolator, TrackStore
    >>> store = TrackStore(trail_length=9)
    >>> engine = Extrapolator(refresh_rate=1.0)
    >>> entities, tracks = engine.tick(entities, store.snapshot())
"""

from .extrapolator import (
    ExtrapolationMode,
    ExtrapolationState,
    Extrapolator,
    extrapolate,
    extrapolate_stateless,
)
from .interpolation import interpolate, linear_interpolate
from .objects import Entity, Ping, Track
from .predictor import LOOKAHEAD_FACTOR, predict, predict_stateless
from .track_store import TrackStore

__all__ = [
    "Ping",
    "Entity",
    "Track",
    "interpolate",
    "linear_interpolate",
    "predict",
    "predict_stateless",
    "LOOKAHEAD_FACTOR",
    "extrapolate",
    "extrapolate_stateless",
    "Extrapolator",
    "ExtrapolationMode",
    "ExtrapolationState",
    "TrackStore",
]
