"""
Trackcast Simulation Package

Headless replay and host-side tick scheduling.
"""

from .replay_runner import ReplayConfig, ReplayResult, ReplayRunner, run_replay
from .scheduler import TickScheduler

__all__ = [
    "ReplayConfig",
    "ReplayResult",
    "ReplayRunner",
    "run_replay",
    "TickScheduler",
]
