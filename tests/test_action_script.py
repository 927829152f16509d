from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from tempfile import TemporaryDirectory
import unittest

import numpy as np

from core.action_script import (
    ACTION_COLOR_CHANGE,
    ACTION_TRANSPARENCY,
    Action,
    ActionScriptError,
    action_script_filename,
    dumps_action_script,
    load_action_script,
    loads_action_script,
    replay_actions,
    save_action_script,
)
from core.pipeline import process_image
from core.state import ColorChangeState, ProcessingParams, RGBAColor, TransparencyState


class ActionScriptTests(unittest.TestCase):
    def test_filename_uses_iso_date(self) -> None:
        self.assertEqual(action_script_filename(date(2024, 3, 9)), "actions_2024-03-09.json")

    def test_wire_format(self) -> None:
        actions = [
            Action(ACTION_TRANSPARENCY, TransparencyState(color=RGBAColor(1, 2, 3, 0.5), tolerance=70)),
            Action(ACTION_COLOR_CHANGE, ColorChangeState(target=None, hue=-30, sharpness=40)),
        ]
        raw = json.loads(dumps_action_script(actions))
        self.assertEqual(raw[0], {
            "type": "transparency",
            "params": {"color": {"r": 1, "g": 2, "b": 3, "a": 0.5}, "tolerance": 70},
        })
        self.assertEqual(raw[1]["type"], "colorChange")
        self.assertIsNone(raw[1]["params"]["target"])
        self.assertEqual(raw[1]["params"]["hue"], -30)
        self.assertEqual(raw[1]["params"]["sharpness"], 40)

    def test_save_load_preserves_order_and_values(self) -> None:
        actions = [
            Action(ACTION_COLOR_CHANGE, ColorChangeState(target=RGBAColor(9, 8, 7), tolerance=120, saturation=15)),
            Action(ACTION_TRANSPARENCY, TransparencyState(color=RGBAColor(255, 255, 255), tolerance=10)),
            Action(ACTION_COLOR_CHANGE, ColorChangeState(target=RGBAColor(1, 1, 1), contrast=-40)),
        ]
        with TemporaryDirectory() as td:
            path = Path(td) / "actions.json"
            save_action_script(str(path), actions)
            loaded = load_action_script(str(path))
        self.assertEqual(loaded, actions)

    def test_malformed_json_raises(self) -> None:
        for text in ("{not json", '{"type": "transparency"}', "42", ""):
            with self.assertRaises(ActionScriptError):
                loads_action_script(text)

    def test_non_finite_and_overflowing_numbers_raise(self) -> None:
        for value in ("Infinity", "-Infinity", "NaN", "1e400"):
            text = '[{"type": "transparency", "params": {"tolerance": %s}}]' % value
            with self.assertRaises(ActionScriptError, msg=value):
                loads_action_script(text)
        with self.assertRaises(ActionScriptError):
            loads_action_script(
                '[{"type": "colorChange", "params": {"target": {"r": 1e400, "g": 0, "b": 0}}}]'
            )

    def test_deeply_nested_payload_raises(self) -> None:
        with self.assertRaises(ActionScriptError):
            loads_action_script("[" * 100000 + "]" * 100000)

    def test_action_script_error_is_value_error(self) -> None:
        self.assertTrue(issubclass(ActionScriptError, ValueError))

    def test_non_object_items_are_ignored(self) -> None:
        loaded = loads_action_script('[1, "x", {"type": "transparency", "params": {"color": null}}]')
        self.assertEqual(len(loaded), 1)
        self.assertEqual(loaded[0].params, TransparencyState(color=None, tolerance=50))

    def test_unknown_types_survive_load_and_are_skipped_on_replay(self) -> None:
        text = json.dumps([
            {"type": "blur", "params": {"radius": 3}},
            {"type": "transparency", "params": {"color": {"r": 0, "g": 0, "b": 0, "a": 1}, "tolerance": 5}},
        ])
        loaded = loads_action_script(text)
        self.assertEqual(loaded[0].type, "blur")
        self.assertEqual(json.loads(dumps_action_script(loaded))[0], {"type": "blur", "params": {"radius": 3}})

        transparency, color_change = replay_actions(loaded)
        self.assertEqual(transparency, [TransparencyState(color=RGBAColor(0, 0, 0), tolerance=5)])
        self.assertEqual(color_change, [])

    def test_replay_keeps_per_kind_order(self) -> None:
        t1 = TransparencyState(color=RGBAColor(1, 0, 0))
        t2 = TransparencyState(color=RGBAColor(2, 0, 0))
        c1 = ColorChangeState(target=RGBAColor(3, 0, 0))
        transparency, color_change = replay_actions([
            Action(ACTION_TRANSPARENCY, t1),
            Action(ACTION_COLOR_CHANGE, c1),
            Action(ACTION_TRANSPARENCY, t2),
        ])
        self.assertEqual(transparency, [t1, t2])
        self.assertEqual(color_change, [c1])

    def test_transparency_only_round_trip_is_behaviorally_equivalent(self) -> None:
        history = (
            TransparencyState(),
            TransparencyState(color=RGBAColor(200, 100, 50), tolerance=80),
            TransparencyState(color=RGBAColor(0, 0, 255), tolerance=200),
        )
        actions = [Action(ACTION_TRANSPARENCY, s) for s in history[1:]]
        transparency, _ = replay_actions(loads_action_script(dumps_action_script(actions)))

        rng = np.random.default_rng(11)
        src = rng.integers(0, 256, size=(32, 32, 4), dtype=np.uint8)
        before = process_image(src, ProcessingParams(transparency_history=history))
        after = process_image(src, ProcessingParams(transparency_history=(TransparencyState(), *transparency)))
        np.testing.assert_array_equal(after, before)


if __name__ == "__main__":
    unittest.main()
