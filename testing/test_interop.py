import io
import unittest

import numpy as np
from numpy.testing import assert_array_equal
from PIL import Image as PILImage

from ppm import FormatError, Image, InvalidDimensions, Rgb


class TestArrays(unittest.TestCase):
    def test_to_array(self):
        image = Image.with_values(2, 1, 255, [Rgb.from_bytes(255, 0, 0), Rgb.from_bytes(0, 255, 7)])
        array = image.to_array()
        self.assertEqual(array.shape, (1, 2, 3))
        self.assertEqual(array.dtype, np.uint8)
        assert_array_equal(array, [[[255, 0, 0], [0, 255, 7]]])

    def test_wide_maxval_uses_uint16(self):
        image = Image(1, 1, maxval=1000)
        image.set(0, 0, Rgb.white())
        array = image.to_array()
        self.assertEqual(array.dtype, np.uint16)
        assert_array_equal(array, [[[1000, 1000, 1000]]])

    def test_from_integer_array(self):
        array = np.arange(18, dtype=np.uint8).reshape(2, 3, 3)
        image = Image.from_array(array)
        self.assertEqual(image.dimensions(), (3, 2))
        self.assertEqual(image.get(2, 1).as_bytes(), (15, 16, 17))
        assert_array_equal(image.to_array(), array)

    def test_from_float_array_clamps(self):
        array = np.array([[[0.0, 0.5, 1.5], [-1.0, 1.0, 0.25]]])
        image = Image.from_array(array)
        self.assertEqual(image.get(0, 0), Rgb(0.0, 0.5, 1.0))
        self.assertEqual(image.get(1, 0), Rgb(0.0, 1.0, 0.25))

    def test_from_float_array_with_nan_encodes(self):
        image = Image.from_array(np.array([[[np.nan, 0.0, 1.0]]]))
        self.assertEqual(image.get(0, 0), Rgb(0.0, 0.0, 1.0))
        buffer = io.BytesIO()
        image.write(buffer)
        self.assertEqual(buffer.getvalue(), b"P3\n1 1\n255\n0 0 255\n")

    def test_from_array_checks_values(self):
        with self.assertRaises(FormatError):
            Image.from_array(np.full((1, 1, 3), 300, dtype=np.int32))
        with self.assertRaises(FormatError):
            Image.from_array(np.full((1, 1, 3), -1, dtype=np.int32))

    def test_from_array_checks_shape(self):
        with self.assertRaises(FormatError):
            Image.from_array(np.zeros((2, 2), dtype=np.uint8))
        with self.assertRaises(FormatError):
            Image.from_array(np.zeros((2, 2, 4), dtype=np.uint8))
        with self.assertRaises(InvalidDimensions):
            Image.from_array(np.zeros((0, 2, 3), dtype=np.uint8))


class TestPillow(unittest.TestCase):
    def test_to_pil(self):
        image = Image(3, 2)
        image.set(2, 1, Rgb.from_bytes(10, 20, 30))
        pil_image = image.to_pil()
        self.assertEqual(pil_image.mode, "RGB")
        self.assertEqual(pil_image.size, (3, 2))
        self.assertEqual(pil_image.getpixel((2, 1)), (10, 20, 30))

    def test_to_pil_rescales_maxval(self):
        image = Image(1, 1, maxval=1000)
        image.set(0, 0, Rgb.from_bytes(1000, 0, 500, maxval=1000))
        self.assertEqual(image.to_pil().getpixel((0, 0)), (255, 0, 128))

    def test_from_pil(self):
        image = Image.from_pil(PILImage.new("RGB", (3, 2), (10, 20, 30)))
        self.assertEqual(image.dimensions(), (3, 2))
        self.assertEqual(image.maxval, 255)
        self.assertEqual(image.get(2, 1).as_bytes(), (10, 20, 30))

    def test_from_pil_converts_mode(self):
        image = Image.from_pil(PILImage.new("L", (1, 1), 200))
        self.assertEqual(image.get(0, 0).as_bytes(), (200, 200, 200))


if __name__ == '__main__':
    unittest.main()
