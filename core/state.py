from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np


# Tolerance sliders run 0..1000 (per-mille of the max RGB distance)
DEFAULT_TOLERANCE = 50
MAX_TOLERANCE = 1000
# max RGB distance sqrt(3 * 255^2) ~= 441.67, truncated
MAX_COLOR_DISTANCE = 441.6

HUE_RANGE = (-180, 180)
SATURATION_RANGE = (-100, 100)
BRIGHTNESS_RANGE = (-100, 100)
CONTRAST_RANGE = (-100, 100)
SHARPNESS_RANGE = (0, 100)

VIEW_FIT_TO_WINDOW = "Fit Images to Window"
VIEW_FIT_TO_IMAGE = "Fit Window to Image"
VIEW_CUSTOM_ZOOM = "Custom Zoom"
VIEW_MODES = (VIEW_FIT_TO_WINDOW, VIEW_FIT_TO_IMAGE, VIEW_CUSTOM_ZOOM)
ZOOM_LEVELS = (0.1, 0.33, 0.5, 0.66, 0.75, 1.0, 1.5, 2.0, 3.0, 5.0)


@dataclass(frozen=True)
class RGBAColor:
    r: int
    g: int
    b: int
    # normalized 0..1, unlike the 0..255 alpha stored in pixel buffers
    a: float = 1.0

    @classmethod
    def from_pixel(cls, px) -> "RGBAColor":
        r, g, b, a = (int(v) for v in px[:4])
        return cls(r=r, g=g, b=b, a=a / 255.0)

    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


@dataclass(frozen=True)
class TransparencyState:
    color: Optional[RGBAColor] = None
    tolerance: int = DEFAULT_TOLERANCE


@dataclass(frozen=True)
class ColorChangeState:
    target: Optional[RGBAColor] = None
    tolerance: int = DEFAULT_TOLERANCE
    hue: int = 0
    saturation: int = 0
    brightness: int = 0
    contrast: int = 0
    # Persisted with the rest of the state; the pipeline does not sharpen.
    sharpness: int = 0


@dataclass(frozen=True)
class UnaffectedColorState:
    enabled: bool = False
    color: Optional[RGBAColor] = None
    tolerance: int = DEFAULT_TOLERANCE

    @property
    def active(self) -> bool:
        return bool(self.enabled and self.color is not None)


IDENTITY_TRANSPARENCY = TransparencyState()
IDENTITY_COLOR_CHANGE = ColorChangeState()
INITIAL_UNAFFECTED_COLOR = UnaffectedColorState()


@dataclass(frozen=True)
class ProcessingParams:
    """
    Resolved pipeline input: active history prefix for each operator kind,
    the staged (not yet applied) state, and the unaffected-color exclusion.
    """
    transparency_history: Tuple[TransparencyState, ...] = (IDENTITY_TRANSPARENCY,)
    transparency_staging: TransparencyState = IDENTITY_TRANSPARENCY
    color_change_history: Tuple[ColorChangeState, ...] = (IDENTITY_COLOR_CHANGE,)
    color_change_staging: ColorChangeState = IDENTITY_COLOR_CHANGE
    unaffected_color: UnaffectedColorState = INITIAL_UNAFFECTED_COLOR

    def transparency_ops(self) -> List[TransparencyState]:
        return [*self.transparency_history, self.transparency_staging]

    def color_change_ops(self) -> List[ColorChangeState]:
        return [*self.color_change_history, self.color_change_staging]


@dataclass
class FrameImage:
    name: str
    rgba: np.ndarray

    @property
    def size(self) -> Tuple[int, int]:
        h, w = self.rgba.shape[:2]
        return (w, h)


@dataclass
class StagingValues:
    transparency: TransparencyState = IDENTITY_TRANSPARENCY
    color_change: ColorChangeState = IDENTITY_COLOR_CHANGE

    def reset_transparency(self) -> None:
        self.transparency = IDENTITY_TRANSPARENCY

    def reset_color_change(self) -> None:
        self.color_change = IDENTITY_COLOR_CHANGE
