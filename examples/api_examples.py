"""
Trackcast API Examples

Usage examples demonstrating the track extrapolation API.
"""

import os
import sys
import time

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def example_single_forecast():
    """
    Example 1: One Forecast

    Forecast a turning aircraft from its two newest reports.
    """
    from trackcast.tracking import Ping, predict

    previous = Ping(position=(42.000, 41.000), altitude=20000, heading=90, time=0)
    current = Ping(position=(42.000, 41.004), altitude=20000, heading=95, time=1000)

    print("=== Single Forecast ===")
    for now in (1000, 1500, 2000, 2500, 10000):
        # First call: no rendered position or previous forecast yet
        position, prediction = predict(previous, current, current, current, 1.0, now=now)
        print(
            f"  t={now:>5} ms: lat={position.latitude:.5f} lon={position.longitude:.5f} "
            f"(forecast lon={prediction.longitude:.5f})"
        )


def example_engine_ticks():
    """
    Example 2: Engine Ticks

    Feed reports into a TrackStore and tick an Extrapolator at 10 Hz.
    """
    from trackcast.tracking import Entity, Extrapolator, Ping, TrackStore

    store = TrackStore(trail_length=9)
    engine = Extrapolator(refresh_rate=1.0)
    entities = {7: Entity(id=7, types=("Air",), properties={"Name": "F-16C_50"})}

    store.record(7, Ping(position=(10.0, 19.0), altitude=1000, heading=90, time=0))
    store.record(7, Ping(position=(10.0, 20.0), altitude=1000, heading=90, time=1000))

    print("\n=== Engine Ticks (10 Hz) ===")
    for frame in range(16):
        now = 1000 + frame * 100
        rendered, tracks = engine.tick(entities, store.snapshot(), now=now)
        entity = rendered[7]
        print(f"  t={now:>5} ms: lon={entity.longitude:.4f} alt={entity.altitude:.0f}")


def example_replay():
    """
    Example 3: Headless Replay

    Replay the shipped scenario with both strategies.
    """
    from trackcast.io import TrackcastConfig, load_scenario
    from trackcast.simulation import ReplayConfig, ReplayRunner
    from trackcast.tracking import ExtrapolationMode

    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    scenario = load_scenario(os.path.join(root, "scenarios", "two_ship_cap.yaml"))

    print("\n=== Replay: Stateful vs Stateless ===")
    for mode in ExtrapolationMode:
        settings = TrackcastConfig(extrapolate_tracks=True, mode=mode)
        result = ReplayRunner(ReplayConfig(settings=settings), scenario).run()
        print(
            f"  {mode.value:>9}: max jump {result.max_jump_deg:.6f} deg, "
            f"mean jump {result.mean_jump_deg:.6f} deg"
        )


def example_scheduler():
    """
    Example 4: Live Tick Loop

    Drive an engine from a background scheduler for half a second.
    """
    from trackcast.simulation import TickScheduler
    from trackcast.tracking import Extrapolator, Ping, TrackStore

    now_ms = time.time() * 1000.0
    store = TrackStore()
    store.record(1, Ping(position=(0.0, 0.0), altitude=0, heading=0, time=now_ms - 1000))
    store.record(1, Ping(position=(0.0, 0.001), altitude=0, heading=0, time=now_ms))

    engine = Extrapolator(refresh_rate=1.0)
    latest = {}

    def on_tick(now):
        _, tracks = engine.tick({}, store.snapshot(), now=now)
        latest["lon"] = tracks[1][0].longitude

    scheduler = TickScheduler(on_tick, rate_hz=30.0)
    scheduler.start()
    time.sleep(0.5)
    scheduler.stop()

    print("\n=== Live Tick Loop ===")
    print(f"  {scheduler.tick_count} ticks, rendered lon={latest.get('lon', 0.0):.6f}")


if __name__ == "__main__":
    example_single_forecast()
    example_engine_ticks()
    example_replay()
    example_scheduler()
