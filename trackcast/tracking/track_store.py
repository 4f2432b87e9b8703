"""
Track Store

Bounded per-entity report history, newest first.

The extrapolation engine is always fed the real history kept here; the
forecast pings it prepends are for rendering and are not written back.
"""

import logging
from collections import deque
from typing import Deque, Dict, List

from .objects import Ping

logger = logging.getLogger(__name__)


class TrackStore:
    """
    Per-entity trail of the most recent reports.

    Example:
        >>> store = TrackStore(trail_length=9)
        >>> store.record(7, ping)
        >>> tracks = store.snapshot()
    """

    def __init__(self, trail_length: int = 9) -> None:
        """
        Args:
            trail_length: Reports kept per entity (>= 2 to allow forecasting)
        """
        if trail_length < 1:
            raise ValueError(f"trail_length must be >= 1, got {trail_length}")
        self.trail_length = int(trail_length)
        self._tracks: Dict[int, Deque[Ping]] = {}

    def record(self, entity_id: int, ping: Ping) -> bool:
        """
        Add a report to an entity's trail.

        Reports older than the newest stored one are rejected so the trail
        stays time-ordered.

        Returns:
            True if stored, False if rejected
        """
        trail = self._tracks.get(entity_id)
        if trail is None:
            trail = deque(maxlen=self.trail_length)
            self._tracks[entity_id] = trail
        elif trail and ping.time < trail[0].time:
            logger.warning(
                "Dropping out-of-order report for entity %d (%.0f ms < %.0f ms)",
                entity_id,
                ping.time,
                trail[0].time,
            )
            return False

        trail.appendleft(ping)
        return True

    def get_track(self, entity_id: int) -> List[Ping]:
        """Get an entity's trail, newest first (empty if unknown)."""
        return list(self._tracks.get(entity_id, ()))

    def snapshot(self) -> Dict[int, List[Ping]]:
        """Copy of every trail, safe to hand to the engine."""
        return {eid: list(trail) for eid, trail in self._tracks.items()}

    def entity_ids(self) -> List[int]:
        return list(self._tracks.keys())

    def remove(self, entity_id: int) -> None:
        """Forget an entity."""
        self._tracks.pop(entity_id, None)

    def clear(self) -> None:
        self._tracks.clear()

    def __len__(self) -> int:
        return len(self._tracks)
