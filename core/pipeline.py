from __future__ import annotations

import concurrent.futures
import logging
from typing import List

import numpy as np

from core.colors import hsl_to_rgb_array, match_mask, rgb_to_hsl_array, rotate_hue
from core.state import ColorChangeState, ProcessingParams, TransparencyState

logger = logging.getLogger(__name__)


def _check_rgba(rgba: np.ndarray) -> None:
    if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("rgba must be HxWx4 uint8")


def contrast_factor(contrast: float) -> float:
    c = float(contrast)
    return (259.0 * (c + 255.0)) / (255.0 * (259.0 - c))


def apply_color_change(rgb: np.ndarray, op: ColorChangeState) -> np.ndarray:
    """
    rgb: Nx3 float array (0..255), the running color of the matched pixels.
    Returns the transformed colors, HSL shift first then contrast.
    """
    h, s, l = rgb_to_hsl_array(rgb)
    h = rotate_hue(h, op.hue)
    s = np.clip(s + float(op.saturation) / 100.0, 0.0, 1.0)
    l = np.clip(l + float(op.brightness) / 100.0, 0.0, 1.0)
    out = hsl_to_rgb_array(h, s, l)

    factor = contrast_factor(op.contrast)
    return np.clip(factor * (out - 128.0) + 128.0, 0.0, 255.0)


def build_transparency_mask(rgb: np.ndarray, ops: List[TransparencyState]) -> np.ndarray:
    # Every matching operator sets alpha to 0, so first-match-wins reduces to "any match".
    mask = np.zeros(rgb.shape[:2], dtype=bool)
    for op in ops:
        if op.color is None:
            continue
        mask |= match_mask(rgb, op.color, op.tolerance)
    return mask


def _process_band(band: np.ndarray, params: ProcessingParams) -> np.ndarray:
    out = band.copy()
    original_rgb = band[..., :3]

    unaffected = params.unaffected_color
    if unaffected.active:
        protected = match_mask(original_rgb, unaffected.color, unaffected.tolerance)
    else:
        protected = np.zeros(band.shape[:2], dtype=bool)

    transparent = build_transparency_mask(original_rgb, params.transparency_ops()) & ~protected
    out[..., 3][transparent] = 0

    editable = ~protected & ~transparent
    running = original_rgb.astype(np.float64)
    touched = np.zeros(band.shape[:2], dtype=bool)
    for op in params.color_change_ops():
        if op.target is None:
            continue
        # Match against the original color, transform the accumulated one.
        m = editable & match_mask(original_rgb, op.target, op.tolerance)
        if not np.any(m):
            continue
        running[m] = apply_color_change(running[m], op)
        touched |= m

    if np.any(touched):
        out[..., :3][touched] = np.clip(np.rint(running[touched]), 0, 255).astype(np.uint8)
    return out


def process_image(
    original: np.ndarray,
    params: ProcessingParams,
    workers: int = 1,
    min_rows_per_band: int = 64,
) -> np.ndarray:
    """
    Run the color pipeline over an HxWx4 uint8 buffer and return a new buffer.

    Pixels are independent, so ``workers > 1`` splits the image into row bands
    and processes them on a thread pool; the result is identical to the serial
    run.
    """
    _check_rgba(original)
    h = original.shape[0]
    n_bands = max(1, min(int(workers), h // max(1, int(min_rows_per_band))))
    if n_bands <= 1:
        return _process_band(original, params)

    bands = np.array_split(original, n_bands, axis=0)
    logger.debug("Processing %d rows in %d bands", h, n_bands)
    with concurrent.futures.ThreadPoolExecutor(max_workers=n_bands) as executor:
        results = list(executor.map(lambda b: _process_band(b, params), bands))
    return np.concatenate(results, axis=0)


def process_pixel(
    pixel: tuple[int, int, int, int],
    params: ProcessingParams,
) -> tuple[int, int, int, int]:
    arr = np.array([[pixel]], dtype=np.uint8)
    r, g, b, a = (int(v) for v in process_image(arr, params)[0, 0])
    return (r, g, b, a)
