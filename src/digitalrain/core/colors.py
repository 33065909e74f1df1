"""
Scalar and RGB interpolation helpers.

Colors are plain (r, g, b) tuples with float or int channels in 0-255.
"""

from digitalrain.config import Color


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def map_range(
    value: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
    clamp_output: bool = False,
) -> float:
    """
    Linearly re-map value from [in_min, in_max] onto [out_min, out_max].

    A degenerate input range maps everything to out_max.
    """
    if in_max == in_min:
        return out_max
    result = out_min + (value - in_min) / (in_max - in_min) * (out_max - out_min)
    if clamp_output:
        result = clamp(result, min(out_min, out_max), max(out_min, out_max))
    return result


def lerp_color(start: Color, end: Color, t: float) -> tuple[float, float, float]:
    """Blend two colors. t is clamped to [0, 1] so the endpoints are exact."""
    t = clamp(t, 0.0, 1.0)
    if t == 0.0:
        return tuple(float(c) for c in start)
    if t == 1.0:
        return tuple(float(c) for c in end)
    return tuple(lerp(s, e, t) for s, e in zip(start, end))


def brighten(color, amount: float) -> tuple[float, float, float]:
    """Add amount to every channel, capped at 255."""
    return tuple(min(255.0, c + amount) for c in color)


def to_rgba(color, alpha: float) -> tuple[int, int, int, int]:
    """Quantize a float color plus alpha to drawable 8-bit channels."""
    r, g, b = (int(clamp(round(c), 0, 255)) for c in color)
    return (r, g, b, int(clamp(round(alpha), 0, 255)))
