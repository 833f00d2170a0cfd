import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "imaging"))

from dropper_imaging.color import rgb_to_hex
from dropper_imaging.models import PixelBuffer, PixelRegion
from dropper_imaging.sampler import SENTINEL_COLOR, center_color, center_index, sample_neighborhood


def coordinate_buffer(width, height):
    """Pixel (x, y) has color (x, y, 7)."""
    data = bytearray()
    for y in range(height):
        for x in range(width):
            data += bytes([x, y, 7, 255])
    return PixelBuffer(width=width, height=height, data=bytes(data))


def crop(buffer, x, y, w, h):
    x0, y0 = max(0, x), max(0, y)
    x1 = max(x0, min(buffer.width, x + w))
    y1 = max(y0, min(buffer.height, y + h))
    data = bytearray()
    for row in range(y0, y1):
        start = (row * buffer.width + x0) * 4
        data += buffer.data[start : start + (x1 - x0) * 4]
    return PixelRegion(x=x0, y=y0, width=x1 - x0, height=y1 - y0, data=bytes(data))


class SampleNeighborhoodTests(unittest.TestCase):
    def test_window_fully_inside(self):
        buf = coordinate_buffer(40, 40)
        region = crop(buf, 12, 12, 17, 17)
        matrix = sample_neighborhood(region, 12, 12, 17, 17, 40, 40)

        self.assertEqual(len(matrix), 17)
        self.assertTrue(all(len(row) == 17 for row in matrix))
        self.assertNotIn(SENTINEL_COLOR, {c for row in matrix for c in row})
        self.assertEqual(matrix[0][0], rgb_to_hex(12, 12, 7))
        self.assertEqual(matrix[3][5], rgb_to_hex(17, 15, 7))
        self.assertEqual(center_color(matrix), rgb_to_hex(20, 20, 7))

    def test_window_centered_on_origin_corner(self):
        buf = coordinate_buffer(40, 40)
        region = crop(buf, -8, -8, 17, 17)
        self.assertEqual((region.x, region.y, region.width, region.height), (0, 0, 9, 9))

        matrix = sample_neighborhood(region, -8, -8, 17, 17, 40, 40)
        self.assertEqual(len(matrix), 17)
        for i, row in enumerate(matrix):
            self.assertEqual(len(row), 17)
            for j, color in enumerate(row):
                x, y = j - 8, i - 8
                if x < 0 or y < 0:
                    self.assertEqual(color, SENTINEL_COLOR)
                else:
                    self.assertEqual(color, rgb_to_hex(x, y, 7))
        self.assertEqual(center_color(matrix), rgb_to_hex(0, 0, 7))

    def test_window_past_far_edge(self):
        buf = coordinate_buffer(40, 30)
        region = crop(buf, 31, 21, 17, 17)
        matrix = sample_neighborhood(region, 31, 21, 17, 17, 40, 30)
        sentinels = sum(1 for row in matrix for c in row if c == SENTINEL_COLOR)
        self.assertEqual(sentinels, 17 * 17 - 9 * 9)
        self.assertEqual(matrix[8][8], rgb_to_hex(39, 29, 7))
        self.assertEqual(matrix[8][9], SENTINEL_COLOR)

    def test_single_pixel_window(self):
        red, green, blue, white = (255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255), (255, 255, 255, 255)
        buf = PixelBuffer(width=2, height=2, data=bytes(red + green + blue + white))
        matrix = sample_neighborhood(crop(buf, 0, 0, 1, 1), 0, 0, 1, 1, 2, 2)
        self.assertEqual(matrix, (("#ff0000",),))
        self.assertEqual(center_color(matrix), "#ff0000")

        matrix = sample_neighborhood(crop(buf, 1, 1, 1, 1), 1, 1, 1, 1, 2, 2)
        self.assertEqual(matrix, (("#ffffff",),))

    def test_window_with_nothing_fetched(self):
        buf = coordinate_buffer(4, 4)
        region = crop(buf, 10, 10, 3, 3)
        self.assertEqual((region.width, region.height), (0, 0))
        matrix = sample_neighborhood(region, 10, 10, 3, 3, 4, 4)
        self.assertEqual(matrix, ((SENTINEL_COLOR,) * 3,) * 3)

    def test_region_missing_in_bounds_pixels(self):
        buf = coordinate_buffer(4, 4)
        with self.assertRaises(ValueError):
            sample_neighborhood(crop(buf, 0, 0, 1, 1), 0, 0, 3, 3, 4, 4)

    def test_empty_window_rejected(self):
        buf = coordinate_buffer(4, 4)
        with self.assertRaises(ValueError):
            sample_neighborhood(crop(buf, 0, 0, 1, 1), 0, 0, 0, 1, 4, 4)


class CenterIndexTests(unittest.TestCase):
    def test_fixed_center(self):
        self.assertEqual(center_index(17), 8)
        self.assertEqual(center_index(1), 0)
        self.assertEqual(center_index(3), 1)

    def test_invalid_size(self):
        with self.assertRaises(ValueError):
            center_index(0)


if __name__ == "__main__":
    unittest.main()
