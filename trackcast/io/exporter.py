"""
Track Exporter

Serializes entities and their (extrapolated) tracks to YAML so a replay
result can be inspected or diffed.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping

import yaml

from trackcast.tracking.objects import Entity, Ping

logger = logging.getLogger(__name__)


def build_snapshot(
    entities: Mapping[int, Entity],
    tracks: Mapping[int, List[Ping]],
    name: str = "Track Snapshot",
) -> Dict[str, Any]:
    """Collect entities and tracks into a YAML-ready dictionary."""
    return {
        "snapshot": {
            "name": name,
            "exported": datetime.now().strftime("%Y-%m-%d %H:%M"),
            "version": "1.0",
        },
        "entities": [entities[eid].to_dict() for eid in sorted(entities)],
        "tracks": {
            int(eid): [ping.to_dict() for ping in tracks[eid]] for eid in sorted(tracks)
        },
    }


def export_tracks_to_yaml(
    entities: Mapping[int, Entity],
    tracks: Mapping[int, List[Ping]],
    filepath: str,
    name: str = "Track Snapshot",
) -> bool:
    """
    Write entities and tracks to a YAML file.

    Args:
        entities: entity_id -> Entity
        tracks: entity_id -> pings, newest first
        filepath: Output file path
        name: Snapshot name

    Returns:
        True if export successful, False otherwise
    """
    snapshot = build_snapshot(entities, tracks, name)
    try:
        with open(filepath, "w", encoding="utf-8") as f:
            yaml.safe_dump(snapshot, f, default_flow_style=False, sort_keys=False)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to export tracks to %s: %s", filepath, e)
        return False

    logger.info("Tracks saved to %s", filepath)
    return True
