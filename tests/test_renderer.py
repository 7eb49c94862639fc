import sys
import unittest
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from mandelbrot.renderer import (
    DEFAULT_PARAMETERS,
    RenderParameters,
    compute_iterations,
    escape_time,
    pixel_to_complex,
    render_frame,
    render_reference,
)

SMALL = RenderParameters(width=24, height=20, max_iterations=60)


class EscapeTimeTests(unittest.TestCase):
    def test_origin_never_escapes(self):
        self.assertEqual(escape_time(0.0, 0.0, 1000), 1000)

    def test_point_right_of_set_escapes_after_one_step(self):
        self.assertEqual(escape_time(2.0, 0.0, 1000), 1)

    def test_far_point_escapes_after_one_step(self):
        self.assertEqual(escape_time(-2.0, -1.5, 1000), 1)

    def test_main_cardioid_is_inside(self):
        self.assertEqual(escape_time(-0.5, 0.0, 1000), 1000)

    def test_result_within_bounds(self):
        for real in np.linspace(-2.0, 1.0, 13):
            for imag in np.linspace(-1.5, 1.5, 13):
                count = escape_time(float(real), float(imag), 50)
                self.assertGreaterEqual(count, 0)
                self.assertLessEqual(count, 50)

    def test_rejects_non_positive_cap(self):
        with self.assertRaises(ValueError):
            escape_time(0.0, 0.0, 0)


class PixelMappingTests(unittest.TestCase):
    def test_top_left_pixel(self):
        self.assertEqual(pixel_to_complex(DEFAULT_PARAMETERS, 0, 0), (-2.0, -1.5))

    def test_center_pixel(self):
        self.assertEqual(pixel_to_complex(DEFAULT_PARAMETERS, 400, 400), (-0.5, 0.0))

    def test_last_pixel_stays_below_upper_bound(self):
        real, imag = pixel_to_complex(DEFAULT_PARAMETERS, 799, 799)
        self.assertLess(real, 1.0)
        self.assertLess(imag, 1.5)


class RenderTests(unittest.TestCase):
    def test_default_parameters(self):
        params = DEFAULT_PARAMETERS
        self.assertEqual((params.width, params.height, params.max_iterations), (800, 800, 1000))
        self.assertEqual((params.min_real, params.max_real), (-2.0, 1.0))
        self.assertEqual((params.min_imag, params.max_imag), (-1.5, 1.5))
        self.assertEqual(params.row_stride, 2400)
        self.assertEqual(params.buffer_size, 1920000)

    def test_iterations_match_scalar_evaluator(self):
        iterations = compute_iterations(SMALL)
        self.assertEqual(iterations.shape, (SMALL.height, SMALL.width))
        for y in range(SMALL.height):
            for x in range(SMALL.width):
                real, imag = pixel_to_complex(SMALL, x, y)
                self.assertEqual(int(iterations[y, x]), escape_time(real, imag, SMALL.max_iterations))

    def test_frame_matches_reference_driver(self):
        result = render_frame(SMALL)
        self.assertEqual(result.buffer.tobytes(), bytes(render_reference(SMALL)))

    def test_buffer_layout(self):
        result = render_frame(SMALL)
        self.assertEqual(result.pixels.shape, (SMALL.height, SMALL.width, 3))
        self.assertEqual(result.pixels.dtype, np.uint8)
        self.assertEqual(result.buffer.size, SMALL.buffer_size)
        self.assertEqual(result.row_stride, SMALL.width * 3)
        x, y = 5, 7
        index = (y * SMALL.width + x) * 3
        self.assertEqual(list(result.buffer[index:index + 3]), list(result.pixels[y, x]))

    def test_render_is_deterministic(self):
        first = render_frame(SMALL)
        second = render_frame(SMALL)
        self.assertEqual(first.buffer.tobytes(), second.buffer.tobytes())

    def test_reference_buffer_size(self):
        self.assertEqual(len(render_reference(SMALL)), SMALL.width * SMALL.height * 3)


if __name__ == "__main__":
    unittest.main()
