"""Workers that run whole-image batches on a background thread."""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import List, Optional, Sequence

from PySide6.QtCore import QObject, QRunnable, Signal

from core.batch import BatchCancelledError, export_frames, process_batch
from core.state import FrameImage, ProcessingParams

logger = logging.getLogger(__name__)


class BatchSignals(QObject):
    """Signals emitted by :class:`ApplyToAllWorker` and :class:`ExportWorker`."""

    progress = Signal(int, int)
    finished = Signal(object)
    failed = Signal(str)
    cancelled = Signal()


class _BatchWorker(QRunnable):
    def __init__(self) -> None:
        super().__init__()
        self.signals = BatchSignals()
        self._cancel = threading.Event()

    def cancel(self) -> None:
        """Stop before the next image; the image in flight is discarded."""

        self._cancel.set()

    def is_cancelled(self) -> bool:
        return self._cancel.is_set()

    def _emit_progress(self, done: int, total: int) -> None:
        self.signals.progress.emit(done, total)

    def _work(self):
        raise NotImplementedError

    def run(self) -> None:  # type: ignore[override]
        try:
            result = self._work()
        except BatchCancelledError:
            self.signals.cancelled.emit()
            return
        except Exception as e:  # noqa: BLE001 - reported through the failed signal
            logger.exception("Batch job failed")
            self.signals.failed.emit(str(e) or type(e).__name__)
            return
        self.signals.finished.emit(result)


class ApplyToAllWorker(_BatchWorker):
    """Process every frame with a fixed params snapshot; emits the new buffers."""

    def __init__(self, frames: Sequence[FrameImage], params: ProcessingParams, workers: int = 1) -> None:
        super().__init__()
        self._frames = list(frames)
        self._params = params
        self._workers = workers

    def _work(self) -> List:
        return process_batch(
            self._frames,
            self._params,
            is_cancelled=self.is_cancelled,
            on_progress=self._emit_progress,
            workers=self._workers,
        )


class ExportWorker(_BatchWorker):
    """Write the processed PNG (one frame) or zip archive (several frames)."""

    def __init__(
        self,
        frames: Sequence[FrameImage],
        current_index: int,
        params: ProcessingParams,
        out_dir: str,
        on: Optional[date] = None,
    ) -> None:
        super().__init__()
        self._frames = list(frames)
        self._current_index = current_index
        self._params = params
        self._out_dir = out_dir
        self._on = on

    def _work(self):
        return export_frames(
            self._frames,
            self._current_index,
            self._params,
            self._out_dir,
            on=self._on,
            is_cancelled=self.is_cancelled,
            on_progress=self._emit_progress,
        )


__all__ = ["BatchSignals", "ApplyToAllWorker", "ExportWorker"]
