"""
Tests for the escape-time kernels and the render backends
"""
import unittest
from random import random, randint, seed

import numpy as np

from mandelkernel.backend.model.be_cpu import CpuBackend
from mandelkernel.backend.model.be_numpy import NumpyBackend
from mandelkernel.backend.model.be_threaded import ThreadedBackend
from mandelkernel.coloring import BLACK, color_for
from mandelkernel.fractals import (BufferTooSmall, InvalidViewport,
                                   MandelbrotFractal, NullOutput,
                                   RenderSettings, Viewport)
from mandelkernel.kernel_sources.cpu.mandelbrot.iter import escape_count
from mandelkernel.kernel_sources.numpy.mandelbrot import escape_counts
from mandelkernel.utils.coords import pixel_to_world

FRACTAL = MandelbrotFractal()
SETTINGS = RenderSettings(max_iter=200)


def make(cls, **kwargs):
    be = cls(**kwargs)
    be.compile(FRACTAL, SETTINGS)
    return be


class EscapeCountTests(unittest.TestCase):

    def test_origin_never_escapes(self):
        for n in 1, 10, 1000:
            self.assertEqual(escape_count(0.0, 0.0, n), n)

    def test_zero_cap(self):
        self.assertEqual(escape_count(0.0, 0.0, 0), 0)
        self.assertEqual(escape_count(3.0, 3.0, 0), 0)

    def test_known_counts(self):
        # first step lands at c itself, already outside
        self.assertEqual(escape_count(2.0, 2.0, 100), 0)
        # 1 -> 2 (|z|^2 == 4 is not an escape) -> 5
        self.assertEqual(escape_count(1.0, 0.0, 100), 2)
        # period-2 cycle 0, -1, 0, -1, ...
        self.assertEqual(escape_count(-1.0, 0.0, 50), 50)

    def test_bounds(self):
        seed(1234)
        for _ in range(500):
            x, y = 4 * random() - 2.5, 4 * random() - 2
            n = randint(0, 300)
            i = escape_count(x, y, n)
            self.assertTrue(0 <= i <= n, (x, y, n, i))

    def test_numpy_agrees(self):
        seed(99)
        xs = np.array([4 * random() - 2.5 for _ in range(300)])
        ys = np.array([4 * random() - 2 for _ in range(300)])
        got = escape_counts(xs, ys, 150)
        for x, y, n in zip(xs, ys, got):
            self.assertEqual(int(n), escape_count(x, y, 150))


class ScenarioTests(unittest.TestCase):

    def setUp(self):
        self.be = make(ThreadedBackend, workers=2)

    def tearDown(self):
        self.be.close()

    def test_single_pixel(self):
        # the lone pixel sits at world (-0.5, 0.5), inside the main cardioid
        vp = Viewport(0.0, 0.0, 1, 1, 1)
        self.assertEqual(pixel_to_world(0, 0, 0.0, 0.0, 1, 1, 1), (-0.5, 0.5))
        self.assertEqual(escape_count(-0.5, 0.5, 10), 10)
        img = self.be.render(FRACTAL, vp, RenderSettings(10))
        self.assertEqual(img.shape, (1, 1))
        self.assertEqual(int(img[0, 0]), BLACK)

    def test_origin_pixel_black(self):
        vp = Viewport(0.0, 0.0, 1, 2, 2)
        for n in 1, 2, 50:
            img = self.be.render(FRACTAL, vp, RenderSettings(n))
            self.assertEqual(int(img[1, 1]), BLACK)

    def test_cardioid_center_and_corner(self):
        vp = Viewport(-0.5, 0.0, 2, 4, 4)
        img = self.be.render(FRACTAL, vp, RenderSettings(50))
        self.assertEqual(int(img[2, 2]), BLACK)
        # top-left is world (-1.5, 1): escapes after one step
        self.assertEqual(int(img[0, 0]), 0xFF000005)

    def test_matches_scalar_path(self):
        vp = Viewport(-0.75, 0.1, 30, 13, 9)
        n = 80
        img = self.be.render(FRACTAL, vp, RenderSettings(n))
        for py in range(vp.height):
            for px in range(vp.width):
                x, y = pixel_to_world(px, py, vp.center_x, vp.center_y,
                                      vp.zoom, vp.width, vp.height)
                want = color_for(escape_count(x, y, n), n)
                self.assertEqual(int(img[py, px]), want, (px, py))

    def test_y_axis_points_up(self):
        # rows span world y from 1.5 (top) down to -0.25 (bottom)
        vp = Viewport(-0.5, 0.5, 4, 6, 8)
        self.assertEqual(pixel_to_world(3, 0, -0.5, 0.5, 4, 6, 8), (-0.5, 1.5))
        self.assertEqual(pixel_to_world(3, 7, -0.5, 0.5, 4, 6, 8), (-0.5, -0.25))
        img = self.be.render(FRACTAL, vp, RenderSettings(50))
        # the whole top row escapes on the second step; (-0.5, -0.25) is in the set
        for px in range(6):
            x, y = pixel_to_world(px, 0, -0.5, 0.5, 4, 6, 8)
            self.assertEqual(escape_count(x, y, 50), 1)
        self.assertFalse(np.any(img[0] == BLACK))
        self.assertEqual(int(img[7, 3]), BLACK)

    def test_mirror_symmetry(self):
        # about the real axis the set is symmetric: row py mirrors row h-py
        vp = Viewport(-0.5, 0.0, 40, 16, 16)
        img = self.be.render(FRACTAL, vp, RenderSettings(100))
        np.testing.assert_array_equal(img[1:8], img[15:8:-1])

    def test_negative_max_iter(self):
        vp = Viewport(-0.5, 0.0, 50, 12, 10)
        a = self.be.render(FRACTAL, vp, RenderSettings(-60))
        b = self.be.render(FRACTAL, vp, RenderSettings(60))
        np.testing.assert_array_equal(a, b)


class ParallelismTests(unittest.TestCase):

    VIEWS = [
        Viewport(-0.75, 0.1, 20, 64, 48),
        Viewport(-0.7436, 0.1318, 4000, 37, 23),
        Viewport(0.0, 0.0, 1, 5, 3),
        Viewport(-1.0, 0.3, 200, 1, 17),
    ]

    @classmethod
    def setUpClass(cls):
        ref = make(NumpyBackend)
        cls.expected = [ref.render(FRACTAL, vp, SETTINGS) for vp in cls.VIEWS]
        ref.close()

    def check(self, be):
        for vp, want in zip(self.VIEWS, self.expected):
            got = be.render(FRACTAL, vp, SETTINGS)
            self.assertEqual(got.dtype, np.uint32)
            np.testing.assert_array_equal(got, want)

    def test_threaded_worker_counts(self):
        for workers in 1, 2, 3, 8:
            for rows in 0, 1, 5:
                with make(ThreadedBackend, workers=workers, rows_per_task=rows) as be:
                    self.check(be)

    def test_cpu_parallel_loop(self):
        for workers in None, 1, 2:
            with make(CpuBackend, workers=workers) as be:
                self.check(be)

    def test_repeatable(self):
        with make(ThreadedBackend, workers=4) as be:
            first = be.render(FRACTAL, self.VIEWS[0], SETTINGS)
            for _ in range(3):
                np.testing.assert_array_equal(be.render(FRACTAL, self.VIEWS[0], SETTINGS), first)


class BufferTests(unittest.TestCase):

    def setUp(self):
        self.be = make(ThreadedBackend, workers=3)

    def tearDown(self):
        self.be.close()

    def test_writes_prefix_only(self):
        vp = Viewport(-0.5, 0.0, 30, 7, 5)
        out = np.full(vp.pixel_count + 10, 0xDEADBEEF, dtype=np.uint32)
        self.be.render_into(FRACTAL, vp, SETTINGS, out)
        want = self.be.render(FRACTAL, vp, SETTINGS).ravel()
        np.testing.assert_array_equal(out[:vp.pixel_count], want)
        self.assertTrue(np.all(out[vp.pixel_count:] == 0xDEADBEEF))

    def test_rejects(self):
        out = np.zeros(100, dtype=np.uint32)
        self.assertRaises(InvalidViewport, self.be.render_into,
                          FRACTAL, Viewport(0, 0, 1, 0, 5), SETTINGS, out)
        self.assertRaises(InvalidViewport, self.be.render_into,
                          FRACTAL, Viewport(0, 0, 0, 5, 5), SETTINGS, out)
        self.assertRaises(BufferTooSmall, self.be.render_into,
                          FRACTAL, Viewport(0, 0, 1, 11, 10), SETTINGS, out)
        self.assertRaises(NullOutput, self.be.render_into,
                          FRACTAL, Viewport(0, 0, 1, 5, 5), SETTINGS, None)
        self.assertTrue(np.all(out == 0))

    def test_bad_arrays(self):
        vp = Viewport(0, 0, 1, 2, 2)
        self.assertRaises(TypeError, self.be.render_into,
                          FRACTAL, vp, SETTINGS, np.zeros(4, dtype=np.int64))
        self.assertRaises(ValueError, self.be.render_into,
                          FRACTAL, vp, SETTINGS, np.zeros((4, 4), dtype=np.uint32)[:, ::2])
        ro = np.zeros(4, dtype=np.uint32)
        ro.setflags(write=False)
        self.assertRaises(ValueError, self.be.render_into, FRACTAL, vp, SETTINGS, ro)

    def test_not_compiled(self):
        be = ThreadedBackend(workers=2)
        self.assertRaises(RuntimeError, be.render, FRACTAL, Viewport(0, 0, 1, 2, 2), SETTINGS)
        be.close()

    def test_row_groups(self):
        groups = self.be.row_groups(10)
        self.assertEqual(groups[0][0], 0)
        self.assertEqual(groups[-1][1], 10)
        for (a, b), (c, d) in zip(groups, groups[1:]):
            self.assertEqual(b, c)


if __name__ == '__main__':
    unittest.main()
