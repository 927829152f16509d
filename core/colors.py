from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from core.state import MAX_COLOR_DISTANCE, MAX_TOLERANCE, RGBAColor


def tolerance_threshold(tolerance: float) -> float:
    # tolerance is per-mille of the max RGB distance
    return (float(tolerance) / MAX_TOLERANCE) * MAX_COLOR_DISTANCE


def color_distance(a: RGBAColor, b: RGBAColor) -> float:
    dr = float(a.r) - float(b.r)
    dg = float(a.g) - float(b.g)
    db = float(a.b) - float(b.b)
    return math.sqrt(dr * dr + dg * dg + db * db)


def colors_match(pixel: RGBAColor, ref: RGBAColor, tolerance: float) -> bool:
    return color_distance(pixel, ref) <= tolerance_threshold(tolerance)


def distance_map(rgb: np.ndarray, ref: RGBAColor) -> np.ndarray:
    """Per-pixel Euclidean RGB distance of an HxWx3 array to ``ref``."""
    arr = rgb.astype(np.float64)
    dr = arr[..., 0] - float(ref.r)
    dg = arr[..., 1] - float(ref.g)
    db = arr[..., 2] - float(ref.b)
    return np.sqrt(dr * dr + dg * dg + db * db)


def match_mask(rgb: np.ndarray, ref: RGBAColor, tolerance: float) -> np.ndarray:
    return distance_map(rgb, ref) <= tolerance_threshold(tolerance)


def rotate_hue(h: float, degrees: float) -> float:
    return ((h * 360.0 + float(degrees) + 360.0) % 360.0) / 360.0


# ---- Scalar HSL ----

def rgb_to_hsl(r: float, g: float, b: float) -> Tuple[float, float, float]:
    rn = float(r) / 255.0
    gn = float(g) / 255.0
    bn = float(b) / 255.0

    cmax = max(rn, gn, bn)
    cmin = min(rn, gn, bn)
    light = (cmax + cmin) / 2.0

    if cmax == cmin:
        return 0.0, 0.0, light

    delta = cmax - cmin
    sat = delta / (2.0 - cmax - cmin) if light > 0.5 else delta / (cmax + cmin)
    if cmax == rn:
        hue = (gn - bn) / delta + (6.0 if gn < bn else 0.0)
    elif cmax == gn:
        hue = (bn - rn) / delta + 2.0
    else:
        hue = (rn - gn) / delta + 4.0
    return hue / 6.0, sat, light


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0.0:
        t += 1.0
    if t > 1.0:
        t -= 1.0
    if t < 1.0 / 6.0:
        return p + (q - p) * 6.0 * t
    if t < 1.0 / 2.0:
        return q
    if t < 2.0 / 3.0:
        return p + (q - p) * (2.0 / 3.0 - t) * 6.0
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    if s == 0:
        r = g = b = l
    else:
        q = l * (1.0 + s) if l < 0.5 else l + s - l * s
        p = 2.0 * l - q
        r = _hue_to_channel(p, q, h + 1.0 / 3.0)
        g = _hue_to_channel(p, q, h)
        b = _hue_to_channel(p, q, h - 1.0 / 3.0)
    return int(round(r * 255.0)), int(round(g * 255.0)), int(round(b * 255.0))


# ---- Vectorized HSL (float arrays in 0..255) ----

def rgb_to_hsl_array(rgb: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    norm = rgb.astype(np.float64) / 255.0
    r = norm[..., 0]
    g = norm[..., 1]
    b = norm[..., 2]

    cmax = np.maximum(np.maximum(r, g), b)
    cmin = np.minimum(np.minimum(r, g), b)
    delta = cmax - cmin
    light = (cmax + cmin) / 2.0

    h = np.zeros_like(cmax)
    s = np.zeros_like(cmax)
    nz = delta > 0
    if not np.any(nz):
        return h, s, light

    safe_delta = np.where(nz, delta, 1.0)
    denom = np.where(light > 0.5, 2.0 - cmax - cmin, cmax + cmin)
    s[nz] = delta[nz] / denom[nz]

    m_r = nz & (cmax == r)
    m_g = nz & (cmax == g) & ~m_r
    m_b = nz & ~m_r & ~m_g
    h = np.where(m_r, (g - b) / safe_delta + np.where(g < b, 6.0, 0.0), h)
    h = np.where(m_g, (b - r) / safe_delta + 2.0, h)
    h = np.where(m_b, (r - g) / safe_delta + 4.0, h)
    return h / 6.0, s, light


def _hue_to_channel_array(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = np.where(t < 0.0, t + 1.0, t)
    t = np.where(t > 1.0, t - 1.0, t)
    return np.select(
        [t < 1.0 / 6.0, t < 1.0 / 2.0, t < 2.0 / 3.0],
        [p + (q - p) * 6.0 * t, q, p + (q - p) * (2.0 / 3.0 - t) * 6.0],
        default=p,
    )


def hsl_to_rgb_array(h: np.ndarray, s: np.ndarray, l: np.ndarray) -> np.ndarray:
    q = np.where(l < 0.5, l * (1.0 + s), l + s - l * s)
    p = 2.0 * l - q
    r = _hue_to_channel_array(p, q, h + 1.0 / 3.0)
    g = _hue_to_channel_array(p, q, h)
    b = _hue_to_channel_array(p, q, h - 1.0 / 3.0)

    gray = s == 0
    r = np.where(gray, l, r)
    g = np.where(gray, l, g)
    b = np.where(gray, l, b)
    return np.rint(np.stack([r, g, b], axis=-1) * 255.0)
