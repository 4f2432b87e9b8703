"""
Extrapolation Engine

Applies the constant turn-rate predictor to every tracked entity once per
display tick and moves the entities to the forecast positions.

Per tick:
    1. Read the clock once (one consistent "now" for every entity)
    2. For each track with at least two reports, forecast and blend
    3. Prepend the forecast ping to the returned track
    4. Copy each entity with a non-empty track onto that track's first ping

Two strategies exist and are never mixed:
    - STATEFUL: double blend through ExtrapolationState (smooth across reports)
    - STATELESS: single blend per call, no memory between ticks

Usage:
    engine = Extrapolator(refresh_rate=1.0)
    entities, tracks = engine.tick(entities, store.snapshot())
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .objects import Entity, Ping
from .predictor import check_refresh_rate, predict, predict_stateless

logger = logging.getLogger(__name__)

ExtrapolationData = Tuple[Dict[int, Entity], Dict[int, List[Ping]]]


class ExtrapolationMode(Enum):
    """Extrapolation strategies."""

    STATEFUL = "stateful"  # Double blend with per-entity memory
    STATELESS = "stateless"  # Single blend, nothing kept between ticks


@dataclass
class ExtrapolationState:
    """
    Per-entity memory for the stateful strategy.

    Attributes:
        positions: entity_id -> last rendered (smoothed) position
        predictions: entity_id -> last raw forecast
    """

    positions: Dict[int, Ping] = field(default_factory=dict)
    predictions: Dict[int, Ping] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.positions.keys() | self.predictions.keys())

    def __contains__(self, entity_id: int) -> bool:
        return entity_id in self.positions or entity_id in self.predictions

    def evict(self, live_ids: Iterable[int]) -> int:
        """
        Drop memory for entities that are no longer present.

        Args:
            live_ids: Ids present in the current tick

        Returns:
            Number of entities evicted
        """
        live = set(live_ids)
        stale = [eid for eid in self.positions.keys() | self.predictions.keys() if eid not in live]
        for eid in stale:
            self.positions.pop(eid, None)
            self.predictions.pop(eid, None)
        return len(stale)

    def clear(self) -> None:
        """Forget every entity."""
        self.positions.clear()
        self.predictions.clear()


def _move_entities(
    entities: Mapping[int, Entity], tracks: Mapping[int, List[Ping]]
) -> Dict[int, Entity]:
    """Move every entity with a non-empty track onto the track's first ping."""
    new_entities = {}
    for entity_id, entity in entities.items():
        pings = tracks.get(entity_id)
        if not pings:
            new_entities[entity_id] = entity
            continue
        last_ping = pings[0]
        new_entities[entity_id] = entity.with_position(
            longitude=last_ping.position[1],
            latitude=last_ping.position[0],
            altitude=last_ping.altitude,
        )
    return new_entities


def extrapolate(
    entities: Mapping[int, Entity],
    tracks: Mapping[int, List[Ping]],
    state: ExtrapolationState,
    refresh_rate: float,
    now: Optional[float] = None,
) -> ExtrapolationData:
    """
    Forecast every track and move entities to the forecast positions.

    Inputs are not mutated; state is advanced in place.

    Args:
        entities: entity_id -> Entity
        tracks: entity_id -> pings, newest first
        state: Engine memory, updated for every extrapolated entity
        refresh_rate: Expected seconds between server updates (> 0)
        now: Tick time [ms since epoch], read once from the wall clock if None

    Returns:
        (entities, tracks) with the same keys as the inputs

    Raises:
        ValueError: If refresh_rate is not positive
    """
    check_refresh_rate(refresh_rate)
    if now is None:
        now = time.time() * 1000.0

    new_tracks = {}
    for entity_id, pings in tracks.items():
        if len(pings) < 2:
            new_tracks[entity_id] = pings
            continue

        current_ping, previous_ping = pings[0], pings[1]
        current_position = state.positions.get(entity_id, current_ping)
        last_prediction = state.predictions.get(entity_id, current_ping)

        position, prediction = predict(
            previous_ping, current_ping, current_position, last_prediction, refresh_rate, now=now
        )
        state.positions[entity_id] = position
        state.predictions[entity_id] = prediction
        new_tracks[entity_id] = [position, *pings]

    return _move_entities(entities, new_tracks), new_tracks


def extrapolate_stateless(
    entities: Mapping[int, Entity],
    tracks: Mapping[int, List[Ping]],
    refresh_rate: float,
    now: Optional[float] = None,
) -> ExtrapolationData:
    """
    Single-blend variant of extrapolate() without engine memory.

    Only tracks with more than two reports are forecast; shorter tracks pass
    through unchanged.

    Raises:
        ValueError: If refresh_rate is not positive
    """
    check_refresh_rate(refresh_rate)
    if now is None:
        now = time.time() * 1000.0

    new_tracks = {}
    for entity_id, pings in tracks.items():
        if len(pings) <= 2:
            new_tracks[entity_id] = pings
            continue
        position = predict_stateless(pings[1], pings[0], refresh_rate, now=now)
        new_tracks[entity_id] = [position, *pings]

    return _move_entities(entities, new_tracks), new_tracks


class Extrapolator:
    """
    One extrapolation engine instance, e.g. one per map view.

    Owns its ExtrapolationState and serialises ticks with a lock, so the host
    may drive it from a timer thread.

    Example:
        >>> engine = Extrapolator(refresh_rate=1.0)
        >>> entities, tracks = engine.tick(entities, tracks)
    """

    def __init__(
        self,
        refresh_rate: float,
        mode: ExtrapolationMode = ExtrapolationMode.STATEFUL,
        evict_stale: bool = True,
        clock: Optional[Callable[[], float]] = None,
        state: Optional[ExtrapolationState] = None,
    ) -> None:
        """
        Initialize engine.

        Args:
            refresh_rate: Expected seconds between server updates (> 0)
            mode: Extrapolation strategy
            evict_stale: Forget entities missing from a tick's inputs
            clock: Returns the current time [ms since epoch]
            state: Initial engine memory (fresh if None)

        Raises:
            ValueError: If refresh_rate is not positive
        """
        self.refresh_rate = check_refresh_rate(refresh_rate)
        self.mode = ExtrapolationMode(mode)
        self.evict_stale = evict_stale
        self.clock = clock or (lambda: time.time() * 1000.0)
        self.state = state if state is not None else ExtrapolationState()

        self._lock = threading.Lock()
        self.tick_count = 0

    def tick(
        self,
        entities: Mapping[int, Entity],
        tracks: Mapping[int, List[Ping]],
        now: Optional[float] = None,
    ) -> ExtrapolationData:
        """
        Run one extrapolation tick.

        Args:
            entities: entity_id -> Entity
            tracks: entity_id -> real pings, newest first
            now: Tick time [ms since epoch], taken from the clock if None

        Returns:
            (entities, tracks) for rendering
        """
        with self._lock:
            if now is None:
                now = self.clock()

            if self.mode is ExtrapolationMode.STATELESS:
                result = extrapolate_stateless(entities, tracks, self.refresh_rate, now=now)
            else:
                result = extrapolate(entities, tracks, self.state, self.refresh_rate, now=now)
                if self.evict_stale:
                    evicted = self.state.evict(entities.keys() | tracks.keys())
                    if evicted:
                        logger.info("Evicted extrapolation state for %d entities", evicted)

            self.tick_count += 1
            logger.debug(
                "Tick %d at %.0f ms: %d entities, %d tracks",
                self.tick_count,
                now,
                len(entities),
                len(tracks),
            )
            return result

    def reset(self) -> None:
        """Forget all per-entity memory."""
        with self._lock:
            self.state.clear()
            self.tick_count = 0
