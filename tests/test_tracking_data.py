"""
Trackcast Tracking Data Test Suite

Tests for the Ping/Entity containers and the bounded track store.

Test ID | Description                    | Reference              | Tolerance
--------|--------------------------------|------------------------|------------
1       | Ping immutability              | frozen dataclass       | Exact
2       | Entity with-fields builder     | overrides lon/lat/alt  | Exact
3       | Track store bounds and order   | newest first, maxlen   | Exact
4       | Out-of-order reports           | rejected with warning  | Exact
"""

import dataclasses
import logging
import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from trackcast.tracking.objects import Entity, Ping
from trackcast.tracking.track_store import TrackStore


def ping_at(t, lon=0.0):
    return Ping(position=(45.0, lon), altitude=500.0, heading=10.0, time=t)


# =============================================================================
# TEST 1-2: Containers
# =============================================================================


class TestPing:
    def test_immutable(self):
        ping = ping_at(0.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            ping.altitude = 1.0

    def test_position_normalised_to_float_tuple(self):
        ping = Ping(position=[1, 2], altitude=0, heading=0, time=0)
        assert ping.position == (1.0, 2.0)
        assert ping.latitude == 1.0
        assert ping.longitude == 2.0

    def test_dict_round_trip(self):
        ping = ping_at(1234.0, lon=7.5)
        assert Ping.from_dict(ping.to_dict()) == ping

    def test_from_dict_rejects_bad_position(self):
        with pytest.raises(ValueError):
            Ping.from_dict({"position": [1.0], "time": 0.0})


class TestEntity:
    @pytest.fixture
    def entity(self):
        return Entity(
            id=3,
            types=("Sea",),
            properties={"Name": "CVN_73", "Coalition": "Enemies", "Group": "CSG-5"},
            longitude=1.0,
            latitude=2.0,
            altitude=0.0,
            heading=270.0,
            created_at=100.0,
            updated_at=200.0,
        )

    def test_with_position_overrides_only_position(self, entity):
        moved = entity.with_position(longitude=5.0, latitude=6.0, altitude=7.0)

        assert (moved.longitude, moved.latitude, moved.altitude) == (5.0, 6.0, 7.0)
        assert moved.id == entity.id
        assert moved.types == entity.types
        assert moved.properties == entity.properties
        assert moved.heading == entity.heading
        assert moved.created_at == 100.0
        assert moved.updated_at == 200.0
        assert entity.longitude == 1.0

    def test_with_report_updates_timestamp(self, entity):
        updated = entity.with_report(Ping(position=(8.0, 9.0), altitude=10.0, heading=5.0, time=300.0))

        assert updated.latitude == 8.0
        assert updated.longitude == 9.0
        assert updated.heading == 5.0
        assert updated.updated_at == 300.0
        assert updated.created_at == 100.0

    def test_metadata_properties(self, entity):
        assert entity.name == "CVN_73"
        assert entity.coalition == "Enemies"
        assert entity.group == "CSG-5"
        assert entity.pilot == ""


# =============================================================================
# TEST 3-4: Track store
# =============================================================================


class TestTrackStore:
    def test_newest_first(self):
        store = TrackStore(trail_length=5)
        for t in (0.0, 1000.0, 2000.0):
            store.record(1, ping_at(t))

        assert [p.time for p in store.get_track(1)] == [2000.0, 1000.0, 0.0]

    def test_bounded(self):
        store = TrackStore(trail_length=3)
        for t in range(10):
            store.record(1, ping_at(float(t)))

        track = store.get_track(1)
        assert len(track) == 3
        assert track[0].time == 9.0

    def test_out_of_order_rejected(self, caplog):
        store = TrackStore()
        store.record(1, ping_at(2000.0))

        with caplog.at_level(logging.WARNING, logger="trackcast.tracking.track_store"):
            accepted = store.record(1, ping_at(1000.0))

        assert not accepted
        assert len(store.get_track(1)) == 1
        assert "out-of-order" in caplog.text

    def test_equal_time_accepted(self):
        store = TrackStore()
        store.record(1, ping_at(1000.0))
        assert store.record(1, ping_at(1000.0, lon=1.0))

    def test_snapshot_is_a_copy(self):
        store = TrackStore()
        store.record(1, ping_at(0.0))
        snapshot = store.snapshot()
        snapshot[1].insert(0, ping_at(5.0))

        assert len(store.get_track(1)) == 1

    def test_unknown_entity(self):
        assert TrackStore().get_track(42) == []

    def test_remove_and_clear(self):
        store = TrackStore()
        store.record(1, ping_at(0.0))
        store.record(2, ping_at(0.0))

        store.remove(1)
        assert store.entity_ids() == [2]

        store.clear()
        assert len(store) == 0

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            TrackStore(trail_length=0)
