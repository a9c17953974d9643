"""Unit and color-space conversions between capabilities and the bridge."""

from __future__ import annotations

import colorsys
import math

from .const import (
    COLOR_CHANNEL_MAX,
    COLOR_CHANNEL_SCALE,
    MAX_TEMP_KELVIN,
    MIN_TEMP_KELVIN,
    MIREK_SCALE,
)

Matrix = tuple[tuple[float, float, float], ...]

# Wide gamut D65 RGB to XYZ matrix published for Hue lights.
_RGB_TO_XYZ: Matrix = (
    (0.649926, 0.103455, 0.197109),
    (0.234327, 0.743075, 0.022598),
    (0.000000, 0.053077, 1.035763),
)


def _invert(matrix: Matrix) -> Matrix:
    """Invert a 3x3 matrix via its adjugate."""

    (a, b, c), (d, e, f), (g, h, i) = matrix
    det = a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)
    return (
        ((e * i - f * h) / det, (c * h - b * i) / det, (b * f - c * e) / det),
        ((f * g - d * i) / det, (a * i - c * g) / det, (c * d - a * f) / det),
        ((d * h - e * g) / det, (b * g - a * h) / det, (a * e - b * d) / det),
    )


_XYZ_TO_RGB = _invert(_RGB_TO_XYZ)


def kelvin_to_mirek(kelvin: float) -> float:
    """Convert a color temperature in Kelvin to Mirek."""

    return MIREK_SCALE / kelvin


def mirek_to_kelvin(mirek: float) -> float:
    """Convert a color temperature in Mirek to Kelvin."""

    return MIREK_SCALE / mirek


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Constrain ``value`` to the closed range ``[minimum, maximum]``."""

    return max(minimum, min(maximum, value))


def kelvin_to_bridge_mirek(
    kelvin: float,
    min_kelvin: float = MIN_TEMP_KELVIN,
    max_kelvin: float = MAX_TEMP_KELVIN,
) -> int:
    """Clamp ``kelvin`` to the bridge range and return integral Mirek."""

    clamped = clamp(kelvin, min_kelvin, max_kelvin)
    return math.floor(kelvin_to_mirek(clamped))


def mirek_to_bridge_kelvin(mirek: float) -> int:
    """Return the Kelvin value for ``mirek`` within the bridge range."""

    return round(clamp(mirek_to_kelvin(mirek), MIN_TEMP_KELVIN, MAX_TEMP_KELVIN))


def _linearize(channel: float) -> float:
    if channel > 0.04045:
        return ((channel + 0.055) / 1.055) ** 2.4
    return channel / 12.92


def _gamma_encode(channel: float) -> float:
    if channel <= 0.0031308:
        return 12.92 * channel
    return 1.055 * channel ** (1 / 2.4) - 0.055


def _to_channel(value: float) -> int:
    return min(round(value * COLOR_CHANNEL_SCALE), COLOR_CHANNEL_MAX)


def hsv_to_xy(hue: float, saturation: float) -> tuple[int, int, int]:
    """Convert 16-bit hue/saturation at full value to 16-bit x, y, Y.

    ``Y`` is the relative luminance of the fully bright color; callers
    addressing the bridge color API only need ``x`` and ``y``.
    """

    hue = clamp(hue, 0, COLOR_CHANNEL_MAX) / COLOR_CHANNEL_MAX
    saturation = clamp(saturation, 0, COLOR_CHANNEL_MAX) / COLOR_CHANNEL_MAX
    rgb = [_linearize(c) for c in colorsys.hsv_to_rgb(hue, saturation, 1.0)]
    x_val, y_val, z_val = (
        sum(k * c for k, c in zip(row, rgb)) for row in _RGB_TO_XYZ
    )
    total = x_val + y_val + z_val
    if total <= 0:
        return 0, 0, 0
    return (
        _to_channel(x_val / total),
        _to_channel(y_val / total),
        _to_channel(clamp(y_val, 0.0, 1.0)),
    )


def hsv_to_xy_chromaticity(hue: float, saturation: float) -> tuple[float, float]:
    """Return normalized xy chromaticity in ``[0, 1)`` for a 16-bit hue/sat."""

    x_val, y_val, _ = hsv_to_xy(hue, saturation)
    return x_val / COLOR_CHANNEL_SCALE, y_val / COLOR_CHANNEL_SCALE


def xy_to_hsv_chromaticity(x_val: float, y_val: float) -> tuple[int, int]:
    """Convert normalized xy chromaticity back to 16-bit hue and saturation."""

    if y_val <= 0:
        return 0, 0
    xyz = (x_val / y_val, 1.0, (1.0 - x_val - y_val) / y_val)
    rgb = [max(0.0, sum(k * c for k, c in zip(row, xyz))) for row in _XYZ_TO_RGB]
    peak = max(rgb)
    if peak <= 0:
        return 0, 0
    red, green, blue = (_gamma_encode(c / peak) for c in rgb)
    hue, saturation, _ = colorsys.rgb_to_hsv(
        clamp(red, 0.0, 1.0), clamp(green, 0.0, 1.0), clamp(blue, 0.0, 1.0)
    )
    return round(hue * COLOR_CHANNEL_MAX), round(saturation * COLOR_CHANNEL_MAX)
