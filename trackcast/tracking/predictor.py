"""
Constant Turn-Rate Predictor

Dead-reckoning forecast of an entity's near-future state from its two
newest reports, damped by how much real time has passed since the last
rendered position.

Model:
    delta      = current - previous                  (per field)
    rotated    = R(delta.heading) * delta.position   (constant-rate turn)
    prediction = current + delta * k                 (k = LOOKAHEAD_FACTOR)

The raw prediction is then blended twice, first from the previous tick's
prediction and then from the previously rendered position, with

    alpha = clamp(now - current_position.time, 0, max_lookahead) / max_lookahead

so the rendered trajectory stays continuous when a new report moves the
forecast basis.

Reference:
    - Blackman, S. "Design and Analysis of Modern Tracking Systems", 1999, Ch. 4
"""

import time
from typing import Optional, Tuple

import numba
import numpy as np

from .interpolation import interpolate
from .objects import Ping

# Forecast 1.5 update intervals ahead
LOOKAHEAD_FACTOR = 1.5


@numba.jit(nopython=True, cache=True)
def _rotate_delta(dx: float, dy: float, heading_deg: float) -> Tuple[float, float]:
    """
    JIT-compiled 2D rotation of a position delta.

    | cos  -sin | | dx |
    | sin   cos | | dy |

    Args:
        dx: First position component delta
        dy: Second position component delta
        heading_deg: Rotation angle [deg]

    Returns:
        Rotated (dx, dy)
    """
    angle = heading_deg * np.pi / 180.0
    c = np.cos(angle)
    s = np.sin(angle)
    return dx * c - dy * s, dx * s + dy * c


def rotate_delta(dx: float, dy: float, heading_deg: float) -> Tuple[float, float]:
    """Rotate a position delta by heading_deg degrees."""
    rx, ry = _rotate_delta(float(dx), float(dy), float(heading_deg))
    return float(rx), float(ry)


def check_refresh_rate(refresh_rate: float) -> float:
    """
    Validate the server refresh interval.

    A non-positive interval gives a zero lookahead window and a division by
    zero in the blend factor, which would poison every later position.

    Raises:
        ValueError: If refresh_rate is not a finite number > 0
    """
    if not np.isfinite(refresh_rate) or refresh_rate <= 0:
        raise ValueError(f"refresh_rate must be a positive number of seconds, got {refresh_rate!r}")
    return float(refresh_rate)


def lookahead_window(refresh_rate: float) -> float:
    """Longest elapsed time [ms] a forecast may represent."""
    return refresh_rate * 1000 * LOOKAHEAD_FACTOR


def clamp_elapsed(now: float, reference_time: float, max_lookahead: float) -> float:
    """Elapsed time [ms] since reference_time, clamped into [0, max_lookahead]."""
    return min(max(now - reference_time, 0.0), max_lookahead)


def blend_factor(elapsed: float, max_lookahead: float) -> float:
    """Fraction of the lookahead window already covered by real time."""
    return elapsed / max_lookahead


def ping_delta(previous_ping: Ping, current_ping: Ping) -> Ping:
    """Field-wise difference current - previous."""
    return Ping(
        position=(
            current_ping.position[0] - previous_ping.position[0],
            current_ping.position[1] - previous_ping.position[1],
        ),
        altitude=current_ping.altitude - previous_ping.altitude,
        heading=current_ping.heading - previous_ping.heading,
        time=current_ping.time - previous_ping.time,
    )


def forecast(previous_ping: Ping, current_ping: Ping) -> Ping:
    """
    Raw constant turn-rate forecast LOOKAHEAD_FACTOR intervals ahead.

    Args:
        previous_ping: Older of the two newest reports
        current_ping: Newest report

    Returns:
        Forecast Ping (no blending applied)
    """
    delta = ping_delta(previous_ping, current_ping)

    # Predict constant-rate turns by rotating the delta vector
    rx, ry = rotate_delta(delta.position[0], delta.position[1], delta.heading)

    return Ping(
        position=(
            current_ping.position[0] + rx * LOOKAHEAD_FACTOR,
            current_ping.position[1] + ry * LOOKAHEAD_FACTOR,
        ),
        altitude=current_ping.altitude + delta.altitude * LOOKAHEAD_FACTOR,
        heading=current_ping.heading + delta.heading * LOOKAHEAD_FACTOR,
        time=current_ping.time + delta.time * LOOKAHEAD_FACTOR,
    )


def predict(
    previous_ping: Ping,
    current_ping: Ping,
    current_position: Ping,
    last_prediction: Ping,
    refresh_rate: float,
    now: Optional[float] = None,
) -> Tuple[Ping, Ping]:
    """
    Forecast and smooth the rendered position of one entity.

    Args:
        previous_ping: Second newest real report
        current_ping: Newest real report
        current_position: Last rendered position (current_ping on first call)
        last_prediction: Last raw forecast (current_ping on first call)
        refresh_rate: Expected seconds between server updates (> 0)
        now: Current time [ms since epoch], read from the wall clock if None

    Returns:
        (new_position, prediction): position to render this tick and the raw
        forecast to feed back as next tick's last_prediction

    Raises:
        ValueError: If refresh_rate is not positive
    """
    check_refresh_rate(refresh_rate)
    if now is None:
        now = time.time() * 1000.0

    # Clamp the lookahead so a connection gap cannot extrapolate without bound
    max_lookahead = lookahead_window(refresh_rate)
    elapsed = clamp_elapsed(now, current_position.time, max_lookahead)

    prediction = forecast(previous_ping, current_ping)

    alpha = blend_factor(elapsed, max_lookahead)
    interp_prediction = interpolate(last_prediction, prediction, alpha)
    new_position = interpolate(current_position, interp_prediction, alpha)

    return new_position, prediction


def predict_stateless(
    previous_ping: Ping, current_ping: Ping, refresh_rate: float, now: Optional[float] = None
) -> Ping:
    """
    Single-blend forecast using only the two reports passed in.

    elapsed is measured from current_ping.time and the rendered position is
    interpolate(current_ping, prediction, alpha). Nothing carries over between
    calls, so the output can jump when a new report arrives.

    Raises:
        ValueError: If refresh_rate is not positive
    """
    check_refresh_rate(refresh_rate)
    if now is None:
        now = time.time() * 1000.0

    max_lookahead = lookahead_window(refresh_rate)
    elapsed = clamp_elapsed(now, current_ping.time, max_lookahead)
    prediction = forecast(previous_ping, current_ping)
    return interpolate(current_ping, prediction, blend_factor(elapsed, max_lookahead))
