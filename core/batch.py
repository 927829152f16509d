from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import numpy as np

from core.io import encode_png
from core.pipeline import process_image
from core.state import FrameImage, ProcessingParams

logger = logging.getLogger(__name__)


class BatchCancelledError(Exception):
    """Raised when a batch is cancelled between two images."""


@dataclass
class ExportResult:
    path: Optional[Path]
    written: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def single_export_name(name: str, on: Optional[date] = None) -> str:
    return f"{name}_{(on or date.today()).isoformat()}.png"


def archive_member_name(name: str) -> str:
    return f"{name}_processed.png"


def archive_name(on: Optional[date] = None) -> str:
    return f"processed_images_{(on or date.today()).isoformat()}.zip"


def process_batch(
    frames: Sequence[FrameImage],
    params: ProcessingParams,
    is_cancelled: Optional[Callable[[], bool]] = None,
    on_progress: Optional[Callable[[int, int], None]] = None,
    workers: int = 1,
) -> List[np.ndarray]:
    """
    Run the pipeline once per frame. Cancellation is checked between frames;
    a cancelled batch raises and returns nothing.
    """
    total = len(frames)
    out: List[np.ndarray] = []
    for idx, frame in enumerate(frames):
        if is_cancelled is not None and is_cancelled():
            logger.info("Batch cancelled after %d/%d images", idx, total)
            raise BatchCancelledError(f"cancelled after {idx} of {total} images")
        out.append(process_image(frame.rgba, params, workers=workers))
        if on_progress is not None:
            on_progress(idx + 1, total)
    return out


def export_frames(
    frames: Sequence[FrameImage],
    current_index: int,
    params: ProcessingParams,
    out_dir: str,
    on: Optional[date] = None,
    is_cancelled: Optional[Callable[[], bool]] = None,
    on_progress: Optional[Callable[[int, int], None]] = None,
) -> ExportResult:
    """
    One frame: write ``{name}_{date}.png``. Several frames: write a zip with
    one ``{name}_processed.png`` per frame. Frames that fail to encode are
    skipped and reported.
    """
    root = Path(out_dir)
    root.mkdir(parents=True, exist_ok=True)
    if not frames:
        return ExportResult(path=None)

    if len(frames) == 1:
        frame = frames[max(0, min(current_index, len(frames) - 1))]
        target = root / single_export_name(frame.name, on)
        try:
            data = encode_png(process_image(frame.rgba, params))
        except (OSError, ValueError) as e:
            logger.warning("Export of %s failed: %s", frame.name, e)
            return ExportResult(path=None, skipped=[frame.name])
        target.write_bytes(data)
        logger.info("Exported %s", target)
        return ExportResult(path=target, written=[frame.name])

    target = root / archive_name(on)
    result = ExportResult(path=target)
    total = len(frames)
    try:
        with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for idx, frame in enumerate(frames):
                if is_cancelled is not None and is_cancelled():
                    raise BatchCancelledError(f"cancelled after {idx} of {total} images")
                try:
                    # Encode fully before touching the archive
                    data = encode_png(process_image(frame.rgba, params))
                except (OSError, ValueError) as e:
                    logger.warning("Skipping %s in archive: %s", frame.name, e)
                    result.skipped.append(frame.name)
                    continue
                zf.writestr(archive_member_name(frame.name), data)
                result.written.append(frame.name)
                if on_progress is not None:
                    on_progress(idx + 1, total)
    except BatchCancelledError:
        target.unlink(missing_ok=True)
        logger.info("Export cancelled, removed %s", target)
        raise
    except Exception:
        target.unlink(missing_ok=True)
        logger.warning("Export failed, removed partial archive %s", target)
        raise
    logger.info("Exported %d/%d images to %s", len(result.written), total, target)
    return result
