"""
Trackcast Predictor Validation Test Suite

Tests for ping blending and the constant turn-rate forecast.

Test ID | Description                    | Reference              | Tolerance
--------|--------------------------------|------------------------|------------
1       | Blend boundaries               | a at 0, b at 1         | Exact
2       | Blend midpoint                 | (a + b) / 2            | 1e-12
3       | Rotation matrix                | R(0) = I, R(90)(1,0)   | 1e-12
4       | Lookahead clamping             | elapsed in [0, max]    | Exact
5       | Zero-motion idempotence        | predict(p, p) = (p, p) | Exact
6       | Straight-line forecast         | x + 1.5 * dx           | 1e-12
7       | Double blend                   | alpha = 0, 0.5, 1      | 1e-12
8       | Refresh rate precondition      | > 0                    | ValueError
"""

import os
import sys

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from trackcast.tracking.interpolation import interpolate, linear_interpolate
from trackcast.tracking.objects import Ping
from trackcast.tracking.predictor import (
    LOOKAHEAD_FACTOR,
    blend_factor,
    clamp_elapsed,
    forecast,
    lookahead_window,
    ping_delta,
    predict,
    predict_stateless,
    rotate_delta,
)


@pytest.fixture
def ping_a():
    return Ping(position=(10.0, 20.0), altitude=1000.0, heading=90.0, time=1000.0)


@pytest.fixture
def ping_b():
    return Ping(position=(12.0, 17.0), altitude=3000.0, heading=350.0, time=3000.0)


# =============================================================================
# TEST 1-2: Blending
# =============================================================================


class TestInterpolate:
    """Linear blend of every ping field."""

    def test_alpha_zero_returns_first(self, ping_a, ping_b):
        assert interpolate(ping_a, ping_b, 0.0) == ping_a

    def test_alpha_one_returns_second(self, ping_a, ping_b):
        assert interpolate(ping_a, ping_b, 1.0) == ping_b

    def test_midpoint(self, ping_a, ping_b):
        mid = interpolate(ping_a, ping_b, 0.5)

        assert mid.altitude == pytest.approx((ping_a.altitude + ping_b.altitude) / 2)
        assert mid.time == pytest.approx((ping_a.time + ping_b.time) / 2)
        assert mid.position[0] == pytest.approx(11.0)
        assert mid.position[1] == pytest.approx(18.5)

    def test_heading_is_not_circular(self, ping_a, ping_b):
        """90 -> 350 blends through 220, not the short way through 0"""
        mid = interpolate(ping_a, ping_b, 0.5)
        assert mid.heading == pytest.approx(220.0)

    def test_alpha_is_not_clamped(self, ping_a, ping_b):
        beyond = interpolate(ping_a, ping_b, 2.0)
        assert beyond.altitude == pytest.approx(5000.0)
        assert beyond.time == pytest.approx(5000.0)

    def test_scalar_blend(self):
        assert linear_interpolate(2.0, 6.0, 0.25) == pytest.approx(3.0)


# =============================================================================
# TEST 3: Rotation
# =============================================================================


class TestRotation:
    """Standard 2D rotation of the position delta."""

    def test_zero_heading_is_identity(self):
        assert rotate_delta(0.3, -0.7, 0.0) == (0.3, -0.7)

    def test_quarter_turn(self):
        rx, ry = rotate_delta(1.0, 0.0, 90.0)
        assert rx == pytest.approx(0.0, abs=1e-12)
        assert ry == pytest.approx(1.0, abs=1e-12)

    def test_half_turn_reverses(self):
        rx, ry = rotate_delta(1.0, 2.0, 180.0)
        assert rx == pytest.approx(-1.0, abs=1e-12)
        assert ry == pytest.approx(-2.0, abs=1e-12)

    def test_preserves_length(self):
        rx, ry = rotate_delta(3.0, 4.0, 37.0)
        assert np.hypot(rx, ry) == pytest.approx(5.0)

    def test_accepts_integers(self):
        rx, ry = rotate_delta(1, 0, 90)
        assert ry == pytest.approx(1.0)


# =============================================================================
# TEST 4: Lookahead clamping
# =============================================================================


class TestLookaheadClamp:
    """elapsed stays in [0, max_lookahead] and alpha in [0, 1]."""

    def test_window(self):
        assert lookahead_window(1.0) == pytest.approx(1500.0)
        assert lookahead_window(0.5) == pytest.approx(750.0)
        assert LOOKAHEAD_FACTOR == 1.5

    @pytest.mark.parametrize("now", [-1e12, -5000.0, 0.0, 999.0, 1000.0, 1750.0, 2500.0, 1e12])
    def test_sweep(self, now):
        max_lookahead = lookahead_window(1.0)
        elapsed = clamp_elapsed(now, 1000.0, max_lookahead)
        alpha = blend_factor(elapsed, max_lookahead)

        assert 0.0 <= elapsed <= max_lookahead
        assert 0.0 <= alpha <= 1.0

    def test_far_past_clamps_to_zero(self):
        assert clamp_elapsed(0.0, 1000.0, 1500.0) == 0.0

    def test_far_future_clamps_to_window(self):
        assert clamp_elapsed(1e9, 1000.0, 1500.0) == 1500.0


# =============================================================================
# TEST 5-7: Forecast
# =============================================================================


class TestForecast:
    """Constant turn-rate dead reckoning."""

    def test_delta_is_fieldwise(self, ping_a, ping_b):
        delta = ping_delta(ping_a, ping_b)
        assert delta.position == (2.0, -3.0)
        assert delta.altitude == 2000.0
        assert delta.heading == 260.0
        assert delta.time == 2000.0

    def test_straight_line(self):
        previous = Ping(position=(0.0, 0.0), altitude=100.0, heading=45.0, time=0.0)
        current = Ping(position=(1.0, 0.0), altitude=200.0, heading=45.0, time=1000.0)

        prediction = forecast(previous, current)

        assert prediction.position[0] == pytest.approx(2.5)
        assert prediction.position[1] == pytest.approx(0.0)
        assert prediction.altitude == pytest.approx(350.0)
        assert prediction.heading == pytest.approx(45.0)
        assert prediction.time == pytest.approx(2500.0)

    def test_turning_rotates_delta(self):
        """A 90 deg heading change turns the (1, 0) step into (0, 1)"""
        previous = Ping(position=(0.0, 0.0), altitude=0.0, heading=0.0, time=0.0)
        current = Ping(position=(1.0, 0.0), altitude=0.0, heading=90.0, time=1000.0)

        prediction = forecast(previous, current)

        assert prediction.position[0] == pytest.approx(1.0, abs=1e-12)
        assert prediction.position[1] == pytest.approx(1.5, abs=1e-12)
        assert prediction.heading == pytest.approx(225.0)

    @pytest.mark.parametrize("now", [-1e9, 0.0, 1000.0, 1600.0, 1e12])
    def test_zero_motion_is_idempotent(self, ping_a, now):
        position, prediction = predict(ping_a, ping_a, ping_a, ping_a, 1.0, now=now)

        assert position == ping_a
        assert prediction == ping_a


class TestDoubleBlend:
    """Blend from last prediction and last rendered position."""

    @pytest.fixture
    def pings(self):
        previous = Ping(position=(0.0, 0.0), altitude=0.0, heading=0.0, time=0.0)
        current = Ping(position=(1.0, 0.0), altitude=0.0, heading=0.0, time=1000.0)
        return previous, current

    def test_alpha_zero_keeps_position(self, pings):
        previous, current = pings
        position, prediction = predict(previous, current, current, current, 1.0, now=1000.0)

        assert position == current
        assert prediction.position[0] == pytest.approx(2.5)

    def test_alpha_half(self, pings):
        previous, current = pings
        position, _ = predict(previous, current, current, current, 1.0, now=1750.0)

        # interp_prediction = 1.75, new = 1 + (1.75 - 1) * 0.5
        assert position.position[0] == pytest.approx(1.375)
        assert position.time == pytest.approx(1375.0)

    def test_alpha_one_reaches_prediction(self, pings):
        previous, current = pings
        position, prediction = predict(previous, current, current, current, 1.0, now=2500.0)

        assert position.position[0] == pytest.approx(prediction.position[0])
        assert position.time == pytest.approx(prediction.time)

    def test_gap_is_clamped(self, pings):
        """A connection gap extrapolates no further than one window"""
        previous, current = pings
        clamped, _ = predict(previous, current, current, current, 1.0, now=2500.0)
        far, _ = predict(previous, current, current, current, 1.0, now=1e12)

        assert far == clamped

    def test_chained_from_last_state(self, pings):
        previous, current = pings
        position, prediction = predict(previous, current, current, current, 1.0, now=1750.0)
        position, _ = predict(previous, current, position, prediction, 1.0, now=1750.0)

        # elapsed = 1750 - 1375, alpha = 0.25
        assert position.position[0] == pytest.approx(1.65625)

    def test_stateless_single_blend(self, pings):
        previous, current = pings
        position = predict_stateless(previous, current, 1.0, now=1750.0)

        assert position.position[0] == pytest.approx(1.75)


# =============================================================================
# TEST 8: Preconditions
# =============================================================================


class TestRefreshRatePrecondition:
    """A non-positive refresh rate is rejected instead of producing NaN."""

    @pytest.mark.parametrize("refresh_rate", [0.0, -1.0, float("nan"), float("inf")])
    def test_rejected(self, ping_a, refresh_rate):
        with pytest.raises(ValueError):
            predict(ping_a, ping_a, ping_a, ping_a, refresh_rate, now=0.0)

    def test_stateless_rejected(self, ping_a):
        with pytest.raises(ValueError):
            predict_stateless(ping_a, ping_a, 0.0, now=0.0)
