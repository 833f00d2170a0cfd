import sys
import unittest
from io import BytesIO
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "imaging"))

from dropper_imaging.decode import decode_image, image_to_buffer, is_image_media_type, require_image_media_type
from dropper_imaging.errors import DecodeFailureError, InvalidInputError, SurfaceUnavailableError
from dropper_imaging.patterns import PATTERN_NAMES, build_test_pattern
from dropper_imaging.surface import ImageSurface


def png_bytes(image):
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


class DecodeTests(unittest.TestCase):
    def test_decode_png_to_rgba(self):
        data = png_bytes(build_test_pattern("quadrants", 4, 4))
        buffer = decode_image(data)
        self.assertEqual((buffer.width, buffer.height), (4, 4))
        self.assertEqual(len(buffer.data), 4 * 4 * 4)
        self.assertEqual(buffer.data[0:4], bytes([255, 0, 0, 255]))
        self.assertEqual(buffer.data[-4:], bytes([255, 255, 255, 255]))

    def test_decode_palette_image(self):
        image = Image.new("P", (3, 2), 0)
        image.putpalette([0, 128, 255] * 256)
        buffer = decode_image(png_bytes(image))
        self.assertEqual(buffer.data[0:4], bytes([0, 128, 255, 255]))

    def test_decode_garbage(self):
        with self.assertRaises(DecodeFailureError):
            decode_image(b"definitely not an image")

    def test_decode_truncated_header(self):
        data = b"\x89PNG\r\n\x1a\n" + (5).to_bytes(4, "big") + b"IHDR" + b"\x00" * 9
        with self.assertRaises(DecodeFailureError):
            decode_image(data)

    def test_decode_truncated_pixel_data(self):
        data = png_bytes(build_test_pattern("h-gradient", 32, 32))
        with self.assertRaises(DecodeFailureError):
            decode_image(data[: len(data) // 2])

    def test_media_type_check(self):
        self.assertTrue(is_image_media_type("image/png"))
        self.assertTrue(is_image_media_type("IMAGE/JPEG"))
        self.assertFalse(is_image_media_type("text/plain"))
        self.assertFalse(is_image_media_type(""))
        self.assertFalse(is_image_media_type(None))
        with self.assertRaises(InvalidInputError):
            require_image_media_type("application/pdf")


class ImageSurfaceTests(unittest.TestCase):
    def setUp(self):
        self.buffer = image_to_buffer(build_test_pattern("quadrants", 4, 4))

    def test_empty_surface(self):
        surface = ImageSurface()
        self.assertFalse(surface.has_frame)
        self.assertEqual((surface.width, surface.height), (0, 0))
        with self.assertRaises(SurfaceUnavailableError):
            surface.read_region(0, 0, 1, 1)

    def test_draw_natural_size(self):
        surface = ImageSurface()
        self.assertEqual(surface.draw(self.buffer, 4, 4), (4, 4))
        region = surface.read_region(3, 0, 1, 1)
        self.assertEqual(region.data, bytes([0, 255, 0, 255]))

    def test_read_region_is_clamped(self):
        surface = ImageSurface()
        surface.draw(self.buffer, 4, 4)
        region = surface.read_region(-2, -1, 4, 3)
        self.assertEqual((region.x, region.y, region.width, region.height), (0, 0, 2, 2))
        self.assertEqual(len(region.data), 2 * 2 * 4)

        region = surface.read_region(3, 3, 5, 5)
        self.assertEqual((region.x, region.y, region.width, region.height), (3, 3, 1, 1))
        self.assertEqual(region.data, bytes([255, 255, 255, 255]))

    def test_fractional_size_is_truncated(self):
        surface = ImageSurface()
        self.assertEqual(surface.draw(self.buffer, 8.9, 6.2), (8, 6))
        self.assertEqual((surface.width, surface.height), (8, 6))
        self.assertEqual(surface.to_image().size, (8, 6))

    def test_zero_size_clears_frame(self):
        surface = ImageSurface()
        surface.draw(self.buffer, 4, 4)
        surface.draw(self.buffer, 0.5, 10)
        self.assertFalse(surface.has_frame)


class PatternTests(unittest.TestCase):
    def test_quadrants(self):
        img = build_test_pattern("quadrants", 8, 6)
        self.assertEqual(img.size, (8, 6))
        self.assertEqual(img.getpixel((0, 0)), (255, 0, 0))
        self.assertEqual(img.getpixel((7, 0)), (0, 255, 0))
        self.assertEqual(img.getpixel((0, 5)), (0, 0, 255))
        self.assertEqual(img.getpixel((7, 5)), (255, 255, 255))

    def test_gradient_endpoints(self):
        img = build_test_pattern("h-gradient", 16, 2)
        self.assertEqual(img.getpixel((0, 0)), (0, 0, 0))
        self.assertEqual(img.getpixel((15, 1)), (255, 255, 255))

    def test_all_names_render(self):
        for name in PATTERN_NAMES:
            self.assertEqual(build_test_pattern(name, 5, 3).size, (5, 3))

    def test_unknown_pattern(self):
        with self.assertRaises(ValueError):
            build_test_pattern("plaid", 4, 4)


if __name__ == "__main__":
    unittest.main()
