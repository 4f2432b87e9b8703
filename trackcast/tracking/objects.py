"""
Tracking Objects

Core data containers for extrapolated tracking: Ping and Entity.

A Ping is one timestamped kinematic report for a tracked entity. Tracks are
plain lists of pings ordered newest-first. An Entity is the renderable object
that mirrors the position of the newest ping in its track.

Coordinate conventions:
    - position: (latitude, longitude) [deg]
    - altitude: [ft or m, whatever the source reports]
    - heading: [deg], compass heading, not normalised
    - time: [ms] since the Unix epoch
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class Ping:
    """
    Single timestamped kinematic sample.

    Attributes:
        position: (latitude, longitude) [deg]
        altitude: Altitude as reported by the source
        heading: Heading [deg]
        time: Sample time [ms since epoch]
    """

    position: Tuple[float, float]
    altitude: float
    heading: float
    time: float

    def __post_init__(self):
        """Normalise position to a tuple of floats."""
        lat, lon = self.position
        object.__setattr__(self, "position", (float(lat), float(lon)))

    @property
    def latitude(self) -> float:
        return self.position[0]

    @property
    def longitude(self) -> float:
        return self.position[1]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for export."""
        return {
            "position": [self.position[0], self.position[1]],
            "altitude": float(self.altitude),
            "heading": float(self.heading),
            "time": float(self.time),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ping":
        """Create from a dictionary as produced by to_dict()."""
        position = data.get("position")
        if position is None or len(position) != 2:
            raise ValueError(f"Ping position must be a [lat, lon] pair, got {position!r}")
        return cls(
            position=(position[0], position[1]),
            altitude=float(data.get("altitude", 0.0)),
            heading=float(data.get("heading", 0.0)),
            time=float(data["time"]),
        )


Track = List[Ping]


@dataclass(frozen=True)
class Entity:
    """
    Renderable tracked object.

    Longitude, latitude and altitude mirror the newest ping of the entity's
    track. created_at/updated_at are provenance timestamps owned by the
    ingestion side and must never be altered by extrapolation.

    Attributes:
        id: Unique entity identifier
        types: Classification tags (e.g. "Air", "FixedWing")
        properties: Free-form metadata (Name, Coalition, Pilot, Group...)
        longitude: Rendered longitude [deg]
        latitude: Rendered latitude [deg]
        altitude: Rendered altitude
        heading: Last reported heading [deg]
        created_at: Creation timestamp [ms since epoch]
        updated_at: Last update timestamp [ms since epoch]
    """

    id: int
    types: Tuple[str, ...] = ()
    properties: Dict[str, Any] = field(default_factory=dict)
    longitude: float = 0.0
    latitude: float = 0.0
    altitude: float = 0.0
    heading: float = 0.0
    created_at: float = 0.0
    updated_at: float = 0.0

    @property
    def coalition(self) -> str:
        return self.properties.get("Coalition", "")

    @property
    def name(self) -> str:
        return self.properties.get("Name", "")

    @property
    def pilot(self) -> str:
        return self.properties.get("Pilot", "")

    @property
    def group(self) -> str:
        return self.properties.get("Group", "")

    def with_position(self, longitude: float, latitude: float, altitude: float) -> "Entity":
        """
        Copy this entity, overriding only its rendered position.

        Every other field is copied unchanged; the provenance timestamps are
        passed through explicitly so a copy can never drift from its source.

        Args:
            longitude: New longitude [deg]
            latitude: New latitude [deg]
            altitude: New altitude

        Returns:
            New Entity instance
        """
        return replace(
            self,
            longitude=longitude,
            latitude=latitude,
            altitude=altitude,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def with_report(self, ping: Ping) -> "Entity":
        """Copy this entity with position, heading and updated_at taken from a real report."""
        return replace(
            self,
            longitude=ping.position[1],
            latitude=ping.position[0],
            altitude=ping.altitude,
            heading=ping.heading,
            updated_at=ping.time,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for export."""
        return {
            "id": int(self.id),
            "types": list(self.types),
            "properties": dict(self.properties),
            "longitude": float(self.longitude),
            "latitude": float(self.latitude),
            "altitude": float(self.altitude),
            "heading": float(self.heading),
            "created_at": float(self.created_at),
            "updated_at": float(self.updated_at),
        }
