from __future__ import annotations

import concurrent.futures
import io
import logging
from pathlib import Path
from typing import List, Sequence

import numpy as np
from PIL import Image, UnidentifiedImageError

from core.state import FrameImage

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".webp", ".gif", ".tif", ".tiff"}


class ImageDecodeError(OSError):
    """Raised when a file cannot be decoded into an RGBA pixel buffer."""


def pil_to_np_rgba(img: Image.Image) -> np.ndarray:
    arr = np.array(img.convert("RGBA"), dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError("Expected RGBA image")
    return arr


def np_rgba_to_pil(arr: np.ndarray) -> Image.Image:
    if arr.dtype != np.uint8 or arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError("rgba must be HxWx4 uint8")
    return Image.fromarray(arr)


def is_image_path(path: str) -> bool:
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS


def load_image_rgba(path: str) -> np.ndarray:
    try:
        with Image.open(path) as img:
            # Convert to RGBA for consistent alpha work
            return pil_to_np_rgba(img)
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Could not decode {Path(path).name}: {e}") from e


def _load_one(path: str) -> FrameImage:
    return FrameImage(name=Path(path).stem, rgba=load_image_rgba(path))


def load_images(paths: Sequence[str], max_workers: int | None = None) -> List[FrameImage]:
    """
    Decode several files concurrently. The result keeps the order of ``paths``;
    the first decode failure is raised after all decodes have finished.
    """
    paths = [p for p in paths if is_image_path(p)]
    if not paths:
        return []
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_load_one, p) for p in paths]
        concurrent.futures.wait(futures)
    loaded = [f.result() for f in futures]
    logger.info("Loaded %d image(s)", len(loaded))
    return loaded


def encode_png(rgba: np.ndarray) -> bytes:
    buf = io.BytesIO()
    np_rgba_to_pil(rgba).save(buf, format="PNG")
    return buf.getvalue()


def save_image(path: str, rgba: np.ndarray) -> None:
    # Saving as PNG preserves alpha
    np_rgba_to_pil(rgba).save(path)
