"""
Headless Replay Runner

Replays a recorded report stream through the extrapolation engine without a
display, at the configured frame rate, on a simulated clock.

Features:
    - Deterministic: the engine is ticked with the simulated time
    - Reports delivered to the TrackStore as their time comes due
    - Per-entity rendered positions collected for analysis
    - Smoothness metric (largest frame-to-frame jump)

Usage:
    config = ReplayConfig(settings=load_config('trackcast.yaml'))
    runner = ReplayRunner(config, load_scenario('two_ship_cap.yaml'))
    result = runner.run()
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from trackcast.io.config_loader import TrackcastConfig
from trackcast.io.scenario_loader import Scenario
from trackcast.tracking.objects import Entity, Ping
from trackcast.tracking.predictor import lookahead_window
from trackcast.tracking.track_store import TrackStore

logger = logging.getLogger(__name__)


@dataclass
class ReplayConfig:
    """
    Configuration for a headless replay.

    Attributes:
        settings: Display and extrapolation settings
        start_ms: Replay start time [ms], first report time if None
        duration_ms: Replay length [ms]; defaults to the scenario span plus
            one lookahead window so coasting after the last report is visible
    """

    settings: TrackcastConfig = field(default_factory=TrackcastConfig)
    start_ms: Optional[float] = None
    duration_ms: Optional[float] = None

    @property
    def dt_ms(self) -> float:
        """Frame interval [ms]."""
        return 1000.0 / self.settings.frame_rate_hz


@dataclass
class ReplayResult:
    """
    Results from a headless replay.

    Attributes:
        n_frames: Display ticks executed
        n_reports: Reports accepted by the track store
        n_rejected: Out-of-order reports dropped
        final_entities: Entities as rendered on the last frame
        final_tracks: Tracks as rendered on the last frame
        rendered: entity_id -> rendered position per frame
        max_jump_deg: Largest frame-to-frame move of any entity [deg]
        mean_jump_deg: Mean frame-to-frame move [deg]
        runtime_s: Wall-clock execution time
    """

    n_frames: int = 0
    n_reports: int = 0
    n_rejected: int = 0
    final_entities: Dict[int, Entity] = field(default_factory=dict)
    final_tracks: Dict[int, List[Ping]] = field(default_factory=dict)
    rendered: Dict[int, List[Ping]] = field(default_factory=dict)
    max_jump_deg: float = 0.0
    mean_jump_deg: float = 0.0
    runtime_s: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON/YAML export."""
        return {
            "n_frames": self.n_frames,
            "n_reports": self.n_reports,
            "n_rejected": self.n_rejected,
            "n_entities": len(self.final_entities),
            "max_jump_deg": self.max_jump_deg,
            "mean_jump_deg": self.mean_jump_deg,
            "runtime_s": self.runtime_s,
        }


def frame_jumps(pings: List[Ping]) -> np.ndarray:
    """Distance [deg] between consecutive rendered positions."""
    if len(pings) < 2:
        return np.zeros(0)
    positions = np.array([p.position for p in pings], dtype=np.float64)
    steps = np.diff(positions, axis=0)
    return np.hypot(steps[:, 0], steps[:, 1])


class ReplayRunner:
    """
    Headless replay runner.

    Drives a TrackStore and an Extrapolator the way a display host would,
    one tick per frame.
    """

    def __init__(self, config: ReplayConfig, scenario: Scenario):
        """
        Args:
            config: Replay configuration
            scenario: Report stream to replay
        """
        self.config = config
        self.scenario = scenario
        self.settings = config.settings.validate()

        self.store = TrackStore(trail_length=self.settings.track_trail_length)
        self.engine = self.settings.create_extrapolator()
        self.entities: Dict[int, Entity] = dict(scenario.entities)

        self._rendered: Dict[int, List[Ping]] = {}
        self._next_report = 0

    def _time_span(self):
        start = self.config.start_ms
        if start is None:
            start = self.scenario.start_ms
        duration = self.config.duration_ms
        if duration is None:
            tail = lookahead_window(self.settings.refresh_rate_s)
            duration = max(self.scenario.end_ms - start, 0.0) + tail
        return start, duration

    def _deliver_reports(self, now: float):
        """Hand every report due by now to the store; returns (accepted, rejected)."""
        accepted = rejected = 0
        reports = self.scenario.reports
        while self._next_report < len(reports) and reports[self._next_report].ping.time <= now:
            report = reports[self._next_report]
            self._next_report += 1
            if self.store.record(report.entity_id, report.ping):
                accepted += 1
                entity = self.entities.get(report.entity_id)
                if entity is None:
                    entity = Entity(id=report.entity_id, created_at=report.ping.time)
                self.entities[report.entity_id] = entity.with_report(report.ping)
            else:
                rejected += 1
        return accepted, rejected

    def run(self) -> ReplayResult:
        """
        Execute the replay.

        Returns:
            ReplayResult with rendered positions and smoothness statistics
        """
        start_time = time.perf_counter()

        # Reset state
        self.store.clear()
        self.engine.reset()
        self.entities = dict(self.scenario.entities)
        self._rendered = {}
        self._next_report = 0

        start_ms, duration_ms = self._time_span()
        dt_ms = self.config.dt_ms
        n_steps = int(duration_ms / dt_ms) + 1

        n_reports = n_rejected = 0
        entities, tracks = self.entities, {}

        for step in range(n_steps):
            now = start_ms + step * dt_ms

            accepted, rejected = self._deliver_reports(now)
            n_reports += accepted
            n_rejected += rejected

            raw_tracks = self.store.snapshot()
            if self.settings.extrapolate_tracks:
                entities, tracks = self.engine.tick(self.entities, raw_tracks, now=now)
            else:
                entities, tracks = self.entities, raw_tracks

            for entity_id, pings in tracks.items():
                if pings:
                    self._rendered.setdefault(entity_id, []).append(pings[0])

        runtime = time.perf_counter() - start_time
        logger.info(
            "Replayed '%s': %d frames, %d reports in %.1f ms",
            self.scenario.name,
            n_steps,
            n_reports,
            runtime * 1000,
        )

        return self._build_result(n_steps, n_reports, n_rejected, entities, tracks, runtime)

    def _build_result(self, n_frames, n_reports, n_rejected, entities, tracks, runtime):
        """Build replay result from accumulated data."""
        jumps = [frame_jumps(pings) for pings in self._rendered.values()]
        jumps = np.concatenate(jumps) if jumps else np.zeros(0)

        return ReplayResult(
            n_frames=n_frames,
            n_reports=n_reports,
            n_rejected=n_rejected,
            final_entities=dict(entities),
            final_tracks=dict(tracks),
            rendered=self._rendered,
            max_jump_deg=float(np.max(jumps)) if jumps.size else 0.0,
            mean_jump_deg=float(np.mean(jumps)) if jumps.size else 0.0,
            runtime_s=runtime,
        )


def run_replay(config: ReplayConfig, scenario: Scenario) -> ReplayResult:
    """Convenience wrapper: build a runner and run it once."""
    return ReplayRunner(config, scenario).run()
