"""
Ping interpolation.

Linear blending between two pings. Every scalar field and both position
components are blended independently:

    result = a + (b - a) * alpha

alpha is not clamped; values outside [0, 1] extrapolate along the segment.

Heading is blended as a plain number, not as an angle: 350 -> 10 goes the
long way round through 180. Downstream consumers rely on these exact values,
so the wraparound is left as is.
"""

from .objects import Ping


def linear_interpolate(a: float, b: float, alpha: float) -> float:
    """Blend two scalars: (b - a) * alpha + a."""
    return (b - a) * alpha + a


def interpolate(a: Ping, b: Ping, alpha: float) -> Ping:
    """
    Blend two pings field by field.

    Args:
        a: Ping at alpha = 0
        b: Ping at alpha = 1
        alpha: Blend parameter (not clamped)

    Returns:
        Blended Ping
    """
    return Ping(
        position=(
            linear_interpolate(a.position[0], b.position[0], alpha),
            linear_interpolate(a.position[1], b.position[1], alpha),
        ),
        altitude=linear_interpolate(a.altitude, b.altitude, alpha),
        heading=linear_interpolate(a.heading, b.heading, alpha),
        time=linear_interpolate(a.time, b.time, alpha),
    )
