from __future__ import annotations

import dataclasses
import logging
from typing import Callable, List, Optional, Sequence

import numpy as np

from core.action_script import (
    ACTION_COLOR_CHANGE,
    ACTION_TRANSPARENCY,
    Action,
    load_action_script,
    replay_actions,
    save_action_script,
)
from core.batch import process_batch
from core.history import OperationHistory
from core.pipeline import process_image
from core.state import (
    IDENTITY_COLOR_CHANGE,
    IDENTITY_TRANSPARENCY,
    INITIAL_UNAFFECTED_COLOR,
    ColorChangeState,
    FrameImage,
    ProcessingParams,
    StagingValues,
    TransparencyState,
)

logger = logging.getLogger(__name__)


class EditSession:
    """
    Owns everything the editor mutates: the loaded frames, the staging values,
    one history per operator kind, the unaffected-color exclusion and the
    recorded/loaded action scripts.

    Listeners registered with :meth:`add_listener` are called after every
    mutation so the view can rebuild :class:`ProcessingParams` and re-render.
    """

    def __init__(self) -> None:
        self.frames: List[FrameImage] = []
        self.current_index = 0
        self.staging = StagingValues()
        self.unaffected = INITIAL_UNAFFECTED_COLOR
        self.transparency_history: OperationHistory[TransparencyState] = OperationHistory(
            IDENTITY_TRANSPARENCY, label="transparency"
        )
        self.color_change_history: OperationHistory[ColorChangeState] = OperationHistory(
            IDENTITY_COLOR_CHANGE, label="colorChange"
        )
        self.recorded_session: List[Action] = []
        self.loaded_script: Optional[List[Action]] = None
        self._listeners: List[Callable[[], None]] = []

    # ---- Change notification ----
    def add_listener(self, fn: Callable[[], None]) -> None:
        self._listeners.append(fn)

    def remove_listener(self, fn: Callable[[], None]) -> None:
        if fn in self._listeners:
            self._listeners.remove(fn)

    def _changed(self) -> None:
        for fn in list(self._listeners):
            fn()

    # ---- Frames ----
    def current_frame(self) -> Optional[FrameImage]:
        if not self.frames:
            return None
        return self.frames[self.current_index]

    @property
    def is_multi_frame(self) -> bool:
        return len(self.frames) > 1

    def load_images(self, images: Sequence[FrameImage]) -> None:
        if not images:
            return
        self.frames = list(images)
        self.current_index = 0
        self.recorded_session = []
        self.loaded_script = None
        self._reset_all()
        logger.info("Session loaded %d frame(s)", len(self.frames))
        self._changed()

    def set_frame(self, index: int) -> bool:
        if index < 0 or index >= len(self.frames):
            return False
        self.current_index = index
        # Edits are per frame
        self._reset_all()
        self._changed()
        return True

    # ---- Staging ----
    def set_transparency_staging(self, **changes) -> None:
        self.staging.transparency = dataclasses.replace(self.staging.transparency, **changes)
        self._changed()

    def set_color_change_staging(self, **changes) -> None:
        self.staging.color_change = dataclasses.replace(self.staging.color_change, **changes)
        self._changed()

    def set_unaffected_color(self, **changes) -> None:
        self.unaffected = dataclasses.replace(self.unaffected, **changes)
        self._changed()

    def reset_transparency_staging(self) -> None:
        self.staging.reset_transparency()
        self._changed()

    def reset_color_change_staging(self) -> None:
        self.staging.reset_color_change()
        self._changed()

    # ---- Transparency history ----
    def apply_transparency(self) -> None:
        state = self.staging.transparency
        self.recorded_session.append(Action(type=ACTION_TRANSPARENCY, params=state))
        self.transparency_history.apply(state)
        self.staging.reset_transparency()
        self._changed()

    def undo_transparency(self) -> bool:
        moved = self.transparency_history.undo()
        if moved:
            self.staging.reset_transparency()
            self._changed()
        return moved

    def redo_transparency(self) -> bool:
        moved = self.transparency_history.redo()
        if moved:
            self.staging.reset_transparency()
            self._changed()
        return moved

    # ---- Color change history ----
    def apply_color_change(self) -> None:
        state = self.staging.color_change
        self.recorded_session.append(Action(type=ACTION_COLOR_CHANGE, params=state))
        self.color_change_history.apply(state)
        self.staging.reset_color_change()
        self._changed()

    def undo_color_change(self) -> bool:
        moved = self.color_change_history.undo()
        if moved:
            self.staging.reset_color_change()
            self._changed()
        return moved

    def redo_color_change(self) -> bool:
        moved = self.color_change_history.redo()
        if moved:
            self.staging.reset_color_change()
            self._changed()
        return moved

    # ---- Hard reset ----
    def _reset_all(self) -> None:
        self.transparency_history.reset()
        self.color_change_history.reset()
        self.staging = StagingValues()
        self.unaffected = INITIAL_UNAFFECTED_COLOR

    def reset_all_histories(self) -> None:
        self._reset_all()
        self._changed()

    # ---- Pipeline input ----
    def processing_params(self) -> ProcessingParams:
        return ProcessingParams(
            transparency_history=tuple(self.transparency_history.active_entries()),
            transparency_staging=self.staging.transparency,
            color_change_history=tuple(self.color_change_history.active_entries()),
            color_change_staging=self.staging.color_change,
            unaffected_color=self.unaffected,
        )

    def render_current(self, workers: int = 1) -> Optional[np.ndarray]:
        frame = self.current_frame()
        if frame is None:
            return None
        return process_image(frame.rgba, self.processing_params(), workers=workers)

    # ---- Action scripts ----
    def save_script(self, path: str) -> None:
        save_action_script(path, self.recorded_session)

    def load_script(self, path: str) -> List[Action]:
        # Parsing raises before the current script is touched
        actions = load_action_script(path)
        self.set_loaded_script(actions)
        return actions

    def set_loaded_script(self, actions: List[Action]) -> None:
        self.loaded_script = list(actions)
        self._changed()

    def run_loaded_script(self) -> bool:
        if self.loaded_script is None:
            return False
        self._reset_all()
        transparency, color_change = replay_actions(self.loaded_script)
        self.transparency_history.replace(transparency)
        self.color_change_history.replace(color_change)
        logger.debug(
            "Replayed script: %d transparency, %d color change entries",
            len(transparency),
            len(color_change),
        )
        self._changed()
        return True

    def refresh_session(self) -> None:
        self.recorded_session = []
        self.loaded_script = None
        self._reset_all()
        self._changed()

    # ---- Apply to all ----
    def apply_to_all(
        self,
        is_cancelled: Optional[Callable[[], bool]] = None,
        on_progress: Optional[Callable[[int, int], None]] = None,
        workers: int = 1,
    ) -> None:
        """Bake the current params into every frame, then hard reset."""
        processed = process_batch(
            self.frames,
            self.processing_params(),
            is_cancelled=is_cancelled,
            on_progress=on_progress,
            workers=workers,
        )
        self.replace_frame_pixels(processed)

    def replace_frame_pixels(self, processed: Sequence[np.ndarray]) -> None:
        if len(processed) != len(self.frames):
            raise ValueError("processed buffers must match the number of frames")
        self.frames = [FrameImage(name=f.name, rgba=px) for f, px in zip(self.frames, processed)]
        self._reset_all()
        logger.info("Applied current edits to %d frame(s)", len(self.frames))
        self._changed()
