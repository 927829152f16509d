from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from core.state import (
    DEFAULT_TOLERANCE,
    ColorChangeState,
    RGBAColor,
    TransparencyState,
)

logger = logging.getLogger(__name__)

ACTION_TRANSPARENCY = "transparency"
ACTION_COLOR_CHANGE = "colorChange"


class ActionScriptError(ValueError):
    """Raised when an action script payload cannot be parsed."""


@dataclass(frozen=True)
class Action:
    type: str
    # Unknown action types keep their raw params so a save/load cycle preserves them.
    params: Union[TransparencyState, ColorChangeState, dict]


def action_script_filename(on: Optional[date] = None) -> str:
    return f"actions_{(on or date.today()).isoformat()}.json"


def _color_to_raw(color: Optional[RGBAColor]) -> Optional[dict]:
    if color is None:
        return None
    return {"r": color.r, "g": color.g, "b": color.b, "a": color.a}


def _color_from_raw(raw: Any) -> Optional[RGBAColor]:
    if not isinstance(raw, dict):
        return None
    return RGBAColor(
        r=int(raw.get("r", 0)),
        g=int(raw.get("g", 0)),
        b=int(raw.get("b", 0)),
        a=float(raw.get("a", 1.0)),
    )


def _transparency_to_raw(state: TransparencyState) -> dict:
    return {
        "color": _color_to_raw(state.color),
        "tolerance": state.tolerance,
    }


def _transparency_from_raw(raw: dict) -> TransparencyState:
    return TransparencyState(
        color=_color_from_raw(raw.get("color")),
        tolerance=int(raw.get("tolerance", DEFAULT_TOLERANCE)),
    )


def _color_change_to_raw(state: ColorChangeState) -> dict:
    return {
        "target": _color_to_raw(state.target),
        "tolerance": state.tolerance,
        "hue": state.hue,
        "saturation": state.saturation,
        "brightness": state.brightness,
        "contrast": state.contrast,
        "sharpness": state.sharpness,
    }


def _color_change_from_raw(raw: dict) -> ColorChangeState:
    return ColorChangeState(
        target=_color_from_raw(raw.get("target")),
        tolerance=int(raw.get("tolerance", DEFAULT_TOLERANCE)),
        hue=int(raw.get("hue", 0)),
        saturation=int(raw.get("saturation", 0)),
        brightness=int(raw.get("brightness", 0)),
        contrast=int(raw.get("contrast", 0)),
        sharpness=int(raw.get("sharpness", 0)),
    )


def action_to_raw(action: Action) -> dict:
    if isinstance(action.params, TransparencyState):
        params = _transparency_to_raw(action.params)
    elif isinstance(action.params, ColorChangeState):
        params = _color_change_to_raw(action.params)
    else:
        params = dict(action.params)
    return {"type": action.type, "params": params}


def action_from_raw(raw: dict) -> Action:
    kind = str(raw.get("type", ""))
    params = raw.get("params")
    if not isinstance(params, dict):
        params = {}
    if kind == ACTION_TRANSPARENCY:
        return Action(type=kind, params=_transparency_from_raw(params))
    if kind == ACTION_COLOR_CHANGE:
        return Action(type=kind, params=_color_change_from_raw(params))
    return Action(type=kind, params=params)


def dumps_action_script(actions: List[Action]) -> str:
    return json.dumps([action_to_raw(a) for a in actions], indent=2)


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-finite number {name} is not allowed")


def loads_action_script(text: str) -> List[Action]:
    try:
        raw = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, TypeError, RecursionError) as e:
        raise ActionScriptError(f"Invalid action script: {e}") from e
    if not isinstance(raw, list):
        raise ActionScriptError("Invalid action script: expected a JSON array of actions")

    try:
        actions = [action_from_raw(item) for item in raw if isinstance(item, dict)]
    except (TypeError, ValueError, OverflowError) as e:
        raise ActionScriptError(f"Invalid action script: {e}") from e
    skipped = len(raw) - len(actions)
    if skipped:
        logger.warning("Ignored %d non-object entries in action script", skipped)
    return actions


def save_action_script(path: str, actions: List[Action]) -> None:
    Path(path).write_text(dumps_action_script(actions), encoding="utf-8")
    logger.info("Saved %d actions to %s", len(actions), path)


def load_action_script(path: str) -> List[Action]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ActionScriptError(f"Invalid action script: {e}") from e
    actions = loads_action_script(text)
    logger.info("Loaded %d actions from %s", len(actions), path)
    return actions


def replay_actions(actions: List[Action]) -> Tuple[List[TransparencyState], List[ColorChangeState]]:
    """
    Split a script into per-kind history entries, each in script order.
    Cross-kind interleaving is not reconstructed. Unknown types are skipped.
    """
    transparency: List[TransparencyState] = []
    color_change: List[ColorChangeState] = []
    for action in actions:
        if action.type == ACTION_TRANSPARENCY and isinstance(action.params, TransparencyState):
            transparency.append(action.params)
        elif action.type == ACTION_COLOR_CHANGE and isinstance(action.params, ColorChangeState):
            color_change.append(action.params)
        else:
            logger.debug("Skipping unrecognized action type %r", action.type)
    return transparency, color_change
