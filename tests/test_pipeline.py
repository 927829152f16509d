from __future__ import annotations

import unittest

import numpy as np

from core.pipeline import apply_color_change, contrast_factor, process_image, process_pixel
from core.state import (
    ColorChangeState,
    ProcessingParams,
    RGBAColor,
    TransparencyState,
    UnaffectedColorState,
)


def _random_rgba(h: int, w: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(h, w, 4), dtype=np.uint8)
    arr[..., 3] = 255
    return arr


ORANGE = RGBAColor(200, 100, 50)


class TransparencyPipelineTests(unittest.TestCase):
    def test_identity_params_leave_buffer_unchanged(self) -> None:
        src = _random_rgba(16, 12)
        out = process_image(src, ProcessingParams())
        np.testing.assert_array_equal(out, src)
        self.assertIsNot(out, src)

    def test_absent_color_is_noop_even_at_full_tolerance(self) -> None:
        src = _random_rgba(8, 8)
        params = ProcessingParams(transparency_staging=TransparencyState(color=None, tolerance=1000))
        np.testing.assert_array_equal(process_image(src, params), src)

    def test_match_zeroes_alpha_only(self) -> None:
        src = np.array([[[200, 100, 50, 255], [0, 0, 255, 255]]], dtype=np.uint8)
        params = ProcessingParams(transparency_staging=TransparencyState(color=ORANGE, tolerance=0))
        out = process_image(src, params)
        self.assertEqual(out[0, 0].tolist(), [200, 100, 50, 0])
        self.assertEqual(out[0, 1].tolist(), [0, 0, 255, 255])

    def test_pixel_matching_two_operators_is_cleared_once(self) -> None:
        params = ProcessingParams(
            transparency_history=(TransparencyState(), TransparencyState(color=ORANGE, tolerance=10)),
            transparency_staging=TransparencyState(color=RGBAColor(201, 100, 50), tolerance=10),
        )
        self.assertEqual(process_pixel((200, 100, 50, 255), params), (200, 100, 50, 0))

    def test_transparent_pixel_skips_color_change(self) -> None:
        params = ProcessingParams(
            transparency_staging=TransparencyState(color=ORANGE, tolerance=0),
            color_change_staging=ColorChangeState(target=ORANGE, tolerance=0, hue=90),
        )
        self.assertEqual(process_pixel((200, 100, 50, 255), params), (200, 100, 50, 0))


class ColorChangePipelineTests(unittest.TestCase):
    def test_hue_rotation(self) -> None:
        params = ProcessingParams(
            color_change_staging=ColorChangeState(target=ORANGE, tolerance=0, hue=90),
        )
        self.assertEqual(process_pixel((200, 100, 50, 255), params), (75, 200, 50, 255))

    def test_stacked_operators_match_original_and_transform_running_color(self) -> None:
        params = ProcessingParams(
            color_change_history=(
                ColorChangeState(),
                ColorChangeState(target=ORANGE, tolerance=1000, hue=90),
            ),
            color_change_staging=ColorChangeState(target=ORANGE, tolerance=1000, saturation=50),
        )
        r, g, b, a = process_pixel((200, 100, 50, 255), params)
        self.assertEqual(a, 255)
        for got, want in zip((r, g, b), (42, 250, 0)):
            self.assertLessEqual(abs(got - want), 1)

        # Saturation applied to the original alone gives a different color.
        alone = process_pixel(
            (200, 100, 50, 255),
            ProcessingParams(
                color_change_staging=ColorChangeState(target=ORANGE, tolerance=1000, saturation=50)
            ),
        )
        self.assertNotEqual(alone[:3], (r, g, b))

    def test_second_operator_matches_against_original_color(self) -> None:
        # After op1 the pixel is (75, 200, 50); op2 targets that color but must not fire.
        params = ProcessingParams(
            color_change_history=(
                ColorChangeState(),
                ColorChangeState(target=ORANGE, tolerance=0, hue=90),
            ),
            color_change_staging=ColorChangeState(target=RGBAColor(75, 200, 50), tolerance=0, hue=90),
        )
        self.assertEqual(process_pixel((200, 100, 50, 255), params), (75, 200, 50, 255))

    def test_contrast_after_hsl(self) -> None:
        self.assertAlmostEqual(contrast_factor(0), 1.0)
        self.assertGreater(contrast_factor(50), 1.0)
        self.assertLess(contrast_factor(-50), 1.0)

        rgb = np.array([[200.0, 100.0, 50.0]])
        out = apply_color_change(rgb, ColorChangeState(target=ORANGE, contrast=100))
        self.assertTrue(np.all(out >= 0.0) and np.all(out <= 255.0))
        self.assertEqual(out[0, 0], 255.0)

    def test_brightness_clamps_to_white(self) -> None:
        params = ProcessingParams(
            color_change_staging=ColorChangeState(target=ORANGE, tolerance=0, brightness=100),
        )
        self.assertEqual(process_pixel((200, 100, 50, 128), params), (255, 255, 255, 128))

    def test_sharpness_has_no_pixel_effect(self) -> None:
        src = _random_rgba(10, 10, seed=3)
        base = ColorChangeState(target=RGBAColor(128, 128, 128), tolerance=400, hue=30)
        sharp = ColorChangeState(target=RGBAColor(128, 128, 128), tolerance=400, hue=30, sharpness=100)
        np.testing.assert_array_equal(
            process_image(src, ProcessingParams(color_change_staging=sharp)),
            process_image(src, ProcessingParams(color_change_staging=base)),
        )


class UnaffectedColorTests(unittest.TestCase):
    def test_protected_pixel_is_byte_identical(self) -> None:
        params = ProcessingParams(
            transparency_staging=TransparencyState(color=ORANGE, tolerance=1000),
            color_change_history=(ColorChangeState(), ColorChangeState(target=ORANGE, tolerance=1000, hue=45)),
            color_change_staging=ColorChangeState(target=ORANGE, tolerance=1000, contrast=80),
            unaffected_color=UnaffectedColorState(enabled=True, color=ORANGE, tolerance=0),
        )
        self.assertEqual(process_pixel((200, 100, 50, 77), params), (200, 100, 50, 77))
        self.assertEqual(process_pixel((10, 10, 10, 255), params)[3], 0)

    def test_disabled_or_colorless_exclusion_is_inactive(self) -> None:
        tr = TransparencyState(color=ORANGE, tolerance=0)
        for unaffected in (
            UnaffectedColorState(enabled=False, color=ORANGE, tolerance=1000),
            UnaffectedColorState(enabled=True, color=None, tolerance=1000),
        ):
            params = ProcessingParams(transparency_staging=tr, unaffected_color=unaffected)
            self.assertEqual(process_pixel((200, 100, 50, 255), params)[3], 0)


class ChunkedPipelineTests(unittest.TestCase):
    def test_threaded_bands_equal_serial(self) -> None:
        src = _random_rgba(203, 37, seed=7)
        params = ProcessingParams(
            transparency_staging=TransparencyState(color=RGBAColor(20, 200, 90), tolerance=300),
            color_change_history=(
                ColorChangeState(),
                ColorChangeState(target=RGBAColor(200, 60, 60), tolerance=400, hue=-120, saturation=20),
            ),
            color_change_staging=ColorChangeState(target=RGBAColor(60, 60, 200), tolerance=350, brightness=-30, contrast=40),
            unaffected_color=UnaffectedColorState(enabled=True, color=RGBAColor(250, 250, 250), tolerance=100),
        )
        serial = process_image(src, params)
        chunked = process_image(src, params, workers=4, min_rows_per_band=16)
        np.testing.assert_array_equal(chunked, serial)

    def test_rejects_non_rgba_buffers(self) -> None:
        with self.assertRaises(ValueError):
            process_image(np.zeros((4, 4, 3), dtype=np.uint8), ProcessingParams())
        with self.assertRaises(ValueError):
            process_image(np.zeros((4, 4, 4), dtype=np.float32), ProcessingParams())


if __name__ == "__main__":
    unittest.main()
