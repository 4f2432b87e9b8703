#!/usr/bin/env python3
"""
Headless Replay CLI

Replay a recorded report stream through the extrapolation engine without a
display.

Usage:
    python headless.py --scenario scenarios/two_ship_cap.yaml
    python headless.py --scenario s.yaml --config config/trackcast.yaml
    python headless.py --scenario s.yaml --mode stateless --frame-rate 60

Examples:
    # Compare smoothing strategies
    python headless.py --scenario scenarios/two_ship_cap.yaml --mode stateful --quiet
    python headless.py --scenario scenarios/two_ship_cap.yaml --mode stateless --quiet

    # Save the last rendered frame
    python headless.py --scenario scenarios/two_ship_cap.yaml --output last_frame.yaml
"""

import argparse
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from trackcast.io.config_loader import TrackcastConfig, load_config
from trackcast.io.exporter import export_tracks_to_yaml
from trackcast.io.scenario_loader import load_scenario
from trackcast.simulation.replay_runner import ReplayConfig, ReplayRunner
from trackcast.tracking.extrapolator import ExtrapolationMode


def build_settings(args) -> TrackcastConfig:
    """Settings from --config, overridden by explicit flags."""
    settings = load_config(args.config) if args.config else TrackcastConfig(extrapolate_tracks=True)

    if args.refresh_rate is not None:
        settings.refresh_rate_s = args.refresh_rate
    if args.mode is not None:
        settings.mode = ExtrapolationMode(args.mode)
    if args.frame_rate is not None:
        settings.frame_rate_hz = args.frame_rate
    if args.trail_length is not None:
        settings.track_trail_length = args.trail_length
    if args.no_extrapolate:
        settings.extrapolate_tracks = False

    return settings.validate()


def main():
    parser = argparse.ArgumentParser(description="Replay recorded tracks through the extrapolator")

    # Inputs
    parser.add_argument("--scenario", type=str, required=True, help="YAML scenario file")
    parser.add_argument("--config", type=str, default=None, help="YAML settings file")

    # Extrapolation parameters
    parser.add_argument(
        "--refresh-rate", type=float, default=None, help="Seconds between server updates"
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ExtrapolationMode],
        default=None,
        help="Extrapolation strategy (default: stateful)",
    )
    parser.add_argument(
        "--frame-rate", type=float, default=None, help="Display ticks per second (default: 30)"
    )
    parser.add_argument(
        "--trail-length", type=int, default=None, help="Reports kept per entity (default: 9)"
    )
    parser.add_argument(
        "--no-extrapolate", action="store_true", help="Render raw reports only"
    )

    # Options
    parser.add_argument("--output", type=str, default=None, help="Write last frame to YAML")
    parser.add_argument("--quiet", action="store_true", help="Suppress output")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    for path in (args.scenario, args.config):
        if path and not os.path.exists(path):
            print(f"Error: File not found: {path}")
            return 1

    try:
        settings = build_settings(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    scenario = load_scenario(args.scenario)

    if not args.quiet:
        print("=" * 60)
        print("Trackcast Headless Replay")
        print("=" * 60)
        print(f"Scenario: {scenario.name}")
        print(f"Entities: {len(scenario.entities)}")
        print(f"Reports: {len(scenario.reports)}")
        print(f"Refresh Rate: {settings.refresh_rate_s:.2f} s")
        print(f"Frame Rate: {settings.frame_rate_hz:.0f} Hz")
        print(f"Mode: {settings.mode.value}")
        print(f"Extrapolation: {'on' if settings.extrapolate_tracks else 'off'}")
        print("=" * 60)

    # Run replay
    runner = ReplayRunner(ReplayConfig(settings=settings), scenario)
    result = runner.run()

    if args.output and not export_tracks_to_yaml(
        result.final_entities, result.final_tracks, args.output, scenario.name
    ):
        print(f"Error: Failed to write {args.output}")
        return 1

    if not args.quiet:
        print("\n--- RESULTS ---")
        print(f"Frames rendered: {result.n_frames:,}")
        print(f"Reports accepted: {result.n_reports:,} (rejected {result.n_rejected})")
        print(f"Max frame jump: {result.max_jump_deg:.6f} deg")
        print(f"Mean frame jump: {result.mean_jump_deg:.6f} deg")
        print(f"Runtime: {result.runtime_s * 1000:.1f} ms")
        for entity in result.final_entities.values():
            print(
                f"  [{entity.id}] {entity.name or 'unnamed'}: "
                f"lat={entity.latitude:.5f} lon={entity.longitude:.5f} alt={entity.altitude:.0f}"
            )
        print("=" * 60)
    else:
        # Machine-readable output
        print(f"{result.max_jump_deg:.6f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
