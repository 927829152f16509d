from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory
import unittest

import numpy as np
from PIL import Image

from core.io import (
    ImageDecodeError,
    encode_png,
    is_image_path,
    load_image_rgba,
    load_images,
    save_image,
)


class ImageIOTests(unittest.TestCase):
    def test_rgb_file_is_loaded_as_opaque_rgba(self) -> None:
        with TemporaryDirectory() as td:
            path = Path(td) / "rgb.png"
            Image.new("RGB", (4, 2), (10, 20, 30)).save(path)
            arr = load_image_rgba(str(path))
        self.assertEqual(arr.shape, (2, 4, 4))
        self.assertEqual(arr.dtype, np.uint8)
        self.assertTrue(np.all(arr[..., 3] == 255))

    def test_load_images_preserves_order_and_uses_stems(self) -> None:
        with TemporaryDirectory() as td:
            paths = []
            for i, name in enumerate(["zeta", "alpha", "mid", "beta"]):
                path = Path(td) / f"{name}.png"
                # Larger images first so later decodes tend to finish earlier
                size = 200 - i * 40
                Image.new("RGBA", (size, size), (i, 0, 0, 255)).save(path)
                paths.append(str(path))
            paths.append(str(Path(td) / "notes.txt"))

            loaded = load_images(paths, max_workers=4)
        self.assertEqual([img.name for img in loaded], ["zeta", "alpha", "mid", "beta"])
        self.assertEqual([int(img.rgba[0, 0, 0]) for img in loaded], [0, 1, 2, 3])

    def test_undecodable_file_raises(self) -> None:
        with TemporaryDirectory() as td:
            good = Path(td) / "good.png"
            bad = Path(td) / "bad.png"
            Image.new("RGBA", (2, 2)).save(good)
            bad.write_bytes(b"not an image")
            with self.assertRaises(ImageDecodeError) as ctx:
                load_images([str(good), str(bad)])
        self.assertIn("bad.png", str(ctx.exception))

    def test_png_round_trip_keeps_alpha(self) -> None:
        arr = np.zeros((3, 3, 4), dtype=np.uint8)
        arr[1, 1] = (1, 2, 3, 4)
        self.assertTrue(encode_png(arr).startswith(b"\x89PNG"))
        with TemporaryDirectory() as td:
            path = Path(td) / "out.png"
            save_image(str(path), arr)
            back = load_image_rgba(str(path))
        np.testing.assert_array_equal(back, arr)

    def test_is_image_path(self) -> None:
        self.assertTrue(is_image_path("a/b/C.PNG"))
        self.assertFalse(is_image_path("a/b/c.json"))


if __name__ == "__main__":
    unittest.main()
