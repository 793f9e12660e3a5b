import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import numpy as np
from PIL import Image

from strip_splitter.utils.image_files import (
    ImageDecodeError,
    ImageEncodeError,
    list_images,
    load_image,
    save_image,
)
from tests.support import uniform_image, write_image


class TestListImages(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.folder = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_filters_by_extension_ignoring_case(self):
        for name in ("b.png", "A.JPG", "c.WebP", "d.bmp", "e.jpeg", "notes.txt", "noext"):
            (self.folder / name).write_bytes(b"x")

        names = [p.name for p in list_images(self.folder)]
        self.assertEqual(names, ["A.JPG", "b.png", "c.WebP", "d.bmp", "e.jpeg"])

    def test_sorted_by_file_name(self):
        for name in ("page_10.png", "page_02.png", "page_1.png"):
            (self.folder / name).write_bytes(b"x")

        names = [p.name for p in list_images(self.folder)]
        self.assertEqual(names, ["page_02.png", "page_1.png", "page_10.png"])

    def test_skips_directories_and_nested_files(self):
        nested = self.folder / "chapter.png"
        nested.mkdir()
        (nested / "inner.png").write_bytes(b"x")
        (self.folder / "top.png").write_bytes(b"x")

        self.assertEqual([p.name for p in list_images(self.folder)], ["top.png"])

    def test_missing_folder_is_empty(self):
        self.assertEqual(list_images(self.folder / "missing"), [])

    def test_custom_extensions(self):
        (self.folder / "a.png").write_bytes(b"x")
        (self.folder / "b.gif").write_bytes(b"x")

        self.assertEqual([p.name for p in list_images(self.folder, ["gif"])], ["b.gif"])


class TestLoadSave(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.folder = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_grayscale_is_loaded_as_rgb(self):
        path = self.folder / "gray.png"
        Image.new("L", (8, 5), 77).save(path)

        buffer = load_image(path)
        self.assertEqual(buffer.shape, (5, 8, 3))
        self.assertTrue(np.all(buffer == 77))

    def test_alpha_is_kept(self):
        path = self.folder / "alpha.png"
        Image.new("RGBA", (4, 4), (1, 2, 3, 4)).save(path)

        self.assertEqual(load_image(path).shape, (4, 4, 4))

    def test_palette_transparency_is_kept(self):
        path = self.folder / "palette.png"
        image = Image.new("P", (10, 20), 0)
        image.putpalette([0, 0, 0, 255, 255, 255] + [0] * 762)
        image.paste(1, (5, 0, 10, 20))
        image.save(path, transparency=0)

        buffer = load_image(path)
        self.assertEqual(buffer.shape, (20, 10, 4))
        self.assertTrue(np.all(buffer[:, :5, 3] == 0))
        self.assertTrue(np.all(buffer[:, 5:, 3] == 255))

    def test_oversized_image_raises(self):
        path = write_image(self.folder / "tall.png", uniform_image(2000, width=50))

        with patch.object(Image, "MAX_IMAGE_PIXELS", 10000):
            with self.assertRaises(ImageDecodeError):
                load_image(path)

    def test_corrupt_file_raises(self):
        path = self.folder / "broken.png"
        path.write_bytes(b"not an image")

        with self.assertRaises(ImageDecodeError):
            load_image(path)

    def test_missing_file_raises(self):
        with self.assertRaises(ImageDecodeError):
            load_image(self.folder / "missing.png")

    def test_save_and_reload(self):
        path = save_image(uniform_image(6, width=3), self.folder / "out.png")
        np.testing.assert_array_equal(load_image(path), uniform_image(6, width=3))

    def test_unknown_format_raises(self):
        with self.assertRaises(ImageEncodeError):
            save_image(uniform_image(2), self.folder / "out.unknownformat")

    def test_write_helper_roundtrip_for_bmp(self):
        path = write_image(self.folder / "x.bmp", uniform_image(3, width=3, value=9))
        self.assertEqual(load_image(path).shape, (3, 3, 3))


if __name__ == "__main__":
    unittest.main()
