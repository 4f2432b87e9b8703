"""
Scenario Loader

YAML-based recorded report streams for offline replay.

A scenario lists entity metadata and the timestamped position reports that
the ingestion side would have received for them.

File layout:
    scenario:
      name: Two-ship CAP
      description: ...
    entities:
      - id: 7
        types: [Air, FixedWing]
        properties: {Name: F-16C_50, Coalition: Enemies}
        created_at: 0
    reports:
      - entity_id: 7
        time_ms: 0
        position: [10.0, 19.0]   # lat, lon
        altitude: 1000
        heading: 90

Usage:
    scenario = load_scenario('scenarios/two_ship_cap.yaml')
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from trackcast.tracking.objects import Entity, Ping


@dataclass
class PingReport:
    """One position report addressed to an entity."""

    entity_id: int
    ping: Ping


@dataclass
class Scenario:
    """
    Recorded report stream.

    Attributes:
        name: Scenario name
        description: Free-form description
        entities: entity_id -> initial metadata
        reports: Reports sorted by time
    """

    name: str = "Unnamed Scenario"
    description: str = ""
    entities: Dict[int, Entity] = field(default_factory=dict)
    reports: List[PingReport] = field(default_factory=list)

    @property
    def start_ms(self) -> float:
        return self.reports[0].ping.time if self.reports else 0.0

    @property
    def end_ms(self) -> float:
        return self.reports[-1].ping.time if self.reports else 0.0


class ScenarioLoader:
    """
    Loads report streams from YAML files.

    Usage:
        loader = ScenarioLoader('scenarios/two_ship_cap.yaml')
        scenario = loader.get_scenario()
    """

    def __init__(self, filepath: Optional[str] = None):
        """
        Args:
            filepath: Path to YAML scenario file (optional)
        """
        self.filepath = filepath
        self.data: Dict[str, Any] = {}
        self._scenario: Optional[Scenario] = None

        if filepath:
            self.load(filepath)

    def load(self, filepath: str) -> Scenario:
        """
        Load a scenario from a YAML file.

        Raises:
            FileNotFoundError: If file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            ValueError: If a report or entity is malformed
        """
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Scenario file not found: {filepath}")

        self.filepath = filepath

        with open(filepath, "r", encoding="utf-8") as f:
            self.data = yaml.safe_load(f) or {}

        self._scenario = parse_scenario(self.data)
        return self._scenario

    def get_scenario(self) -> Optional[Scenario]:
        """Parsed scenario or None if not loaded."""
        return self._scenario


def _parse_entity(raw: Dict[str, Any]) -> Entity:
    if "id" not in raw:
        raise ValueError(f"Entity entry is missing 'id': {raw!r}")
    types = raw.get("types") or ()
    if isinstance(types, str):
        types = (types,)
    return Entity(
        id=int(raw["id"]),
        types=tuple(types),
        properties=dict(raw.get("properties", {}) or {}),
        longitude=float(raw.get("longitude", 0.0)),
        latitude=float(raw.get("latitude", 0.0)),
        altitude=float(raw.get("altitude", 0.0)),
        heading=float(raw.get("heading", 0.0)),
        created_at=float(raw.get("created_at", 0.0)),
        updated_at=float(raw.get("updated_at", raw.get("created_at", 0.0))),
    )


def _parse_report(idx: int, raw: Dict[str, Any]) -> PingReport:
    for key in ("entity_id", "time_ms", "position"):
        if key not in raw:
            raise ValueError(f"Report {idx} is missing '{key}'")

    position = raw["position"]
    if len(position) != 2:
        raise ValueError(f"Report {idx} position must be [lat, lon], got {position!r}")

    return PingReport(
        entity_id=int(raw["entity_id"]),
        ping=Ping(
            position=(position[0], position[1]),
            altitude=float(raw.get("altitude", 0.0)),
            heading=float(raw.get("heading", 0.0)),
            time=float(raw["time_ms"]),
        ),
    )


def parse_scenario(data: Dict[str, Any]) -> Scenario:
    """
    Build a Scenario from parsed YAML data.

    Reports are sorted by time (stable for equal times). Entities that only
    appear in reports get default metadata created at their first report.
    """
    meta = data.get("scenario", {}) or {}

    entities = {}
    for raw in data.get("entities", []) or []:
        entity = _parse_entity(raw)
        entities[entity.id] = entity

    reports = [_parse_report(idx, raw) for idx, raw in enumerate(data.get("reports", []) or [])]
    reports.sort(key=lambda r: r.ping.time)

    for report in reports:
        if report.entity_id not in entities:
            entities[report.entity_id] = Entity(
                id=report.entity_id,
                created_at=report.ping.time,
                updated_at=report.ping.time,
            )

    return Scenario(
        name=meta.get("name", "Unnamed Scenario"),
        description=meta.get("description", ""),
        entities=entities,
        reports=reports,
    )


def load_scenario(filepath: str) -> Scenario:
    """Convenience function to load a scenario file."""
    return ScenarioLoader(filepath).get_scenario()
