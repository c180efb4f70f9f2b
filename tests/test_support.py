"""
Tests for row partitioning, configuration, the kernel registry and
frame statistics
"""
import os
import tempfile
import unittest

import numpy as np

from mandelkernel import benchmark
from mandelkernel.coloring import BLACK
from mandelkernel.fractals import MandelbrotFractal, RenderSettings, Viewport
from mandelkernel.kernel_sources import load_kernel
from mandelkernel.rendering.core import Renderer
from mandelkernel.rendering.executor import RenderExecutor
from mandelkernel.rendering.partition import partition_rows, row_group_count
from mandelkernel.rendering.stats import FrameTimeAverager
from mandelkernel.utils.config import (TASKS_PER_WORKER, RenderConfig,
                                       available_cpus)


class PartitionTests(unittest.TestCase):

    def check_cover(self, height, groups):
        parts = partition_rows(height, groups)
        rows = [r for a, b in parts for r in range(a, b)]
        self.assertEqual(rows, list(range(height)))
        for a, b in parts:
            self.assertLess(a, b)
        sizes = [b - a for a, b in parts]
        if sizes:
            self.assertLessEqual(max(sizes) - min(sizes), 1)
        return parts

    def test_cover(self):
        for height in 1, 2, 7, 100, 1081:
            for groups in 1, 2, 3, 8, 64, 5000:
                parts = self.check_cover(height, groups)
                self.assertEqual(len(parts), min(height, groups))

    def test_explicit(self):
        self.assertEqual(partition_rows(10, 3), [(0, 4), (4, 7), (7, 10)])
        self.assertEqual(partition_rows(0, 4), [])
        self.assertEqual(partition_rows(5, 0), [])

    def test_group_count(self):
        self.assertEqual(row_group_count(0, 4), 0)
        self.assertEqual(row_group_count(1000, 2), 2 * TASKS_PER_WORKER)
        self.assertEqual(row_group_count(3, 8), 3)
        self.assertEqual(row_group_count(10, 8, rows_per_task=3), 4)
        self.assertEqual(row_group_count(9, 8, rows_per_task=3), 3)


class ConfigTests(unittest.TestCase):

    def test_defaults(self):
        cfg = RenderConfig.from_env({})
        self.assertEqual(cfg.workers, available_cpus())
        self.assertEqual(cfg.backend, "THREADED")
        self.assertEqual(cfg.rows_per_task, 0)

    def test_values(self):
        cfg = RenderConfig.from_env({
            "MANDELKERNEL_WORKERS": "3",
            "MANDELKERNEL_BACKEND": "cpu",
            "MANDELKERNEL_ROWS_PER_TASK": "16",
        })
        self.assertEqual(cfg, RenderConfig(workers=3, backend="CPU", rows_per_task=16))

    def test_invalid(self):
        for env in ({"MANDELKERNEL_WORKERS": "0"},
                    {"MANDELKERNEL_WORKERS": "many"},
                    {"MANDELKERNEL_BACKEND": "gpu"},
                    {"MANDELKERNEL_ROWS_PER_TASK": "-1"}):
            self.assertRaises(ValueError, RenderConfig.from_env, env)

    def test_palette(self):
        self.assertEqual(RenderConfig.from_env({}).palette, "Classic")
        cfg = RenderConfig.from_env({"MANDELKERNEL_PALETTE": "ocean"})
        self.assertEqual(cfg.palette, "Ocean")
        self.assertRaises(ValueError, RenderConfig.from_env, {"MANDELKERNEL_PALETTE": "neon"})

    def test_process_env(self):
        old = os.environ.get("MANDELKERNEL_WORKERS")
        os.environ["MANDELKERNEL_WORKERS"] = "5"
        try:
            self.assertEqual(RenderConfig.from_env().workers, 5)
        finally:
            if old is None:
                del os.environ["MANDELKERNEL_WORKERS"]
            else:
                os.environ["MANDELKERNEL_WORKERS"] = old


class RegistryTests(unittest.TestCase):

    def test_load(self):
        meta = load_kernel("cpu", "mandelbrot", "rows")
        self.assertTrue(callable(meta["func"]))
        self.assertEqual(meta["arg_order"][-2:], ["gradient", "out"])
        self.assertEqual(meta["produces"], ["out"])
        meta = load_kernel("NUMPY", "mandelbrot", "frame")
        self.assertTrue(callable(meta["func"]))

    def test_missing(self):
        self.assertRaises(KeyError, load_kernel, "GPU", "mandelbrot", "frame")
        self.assertRaises(KeyError, load_kernel, "CPU", "mandelbrot", "smooth")
        self.assertRaises(KeyError, load_kernel, "CPU", "mandelbrot", "rows", "f32")


class StatsTests(unittest.TestCase):

    def test_window(self):
        avg = FrameTimeAverager(3)
        self.assertEqual(avg.average_ms, 0.0)
        avg.push(10)
        avg.push(20)
        self.assertEqual(avg.average_ms, 15.0)
        avg.push(30)
        avg.push(40)
        self.assertEqual(avg.average_ms, 30.0)

    def test_bad_window(self):
        self.assertRaises(ValueError, FrameTimeAverager, 0)
        self.assertRaises(ValueError, FrameTimeAverager, -2)

    def test_renderer(self):
        messages = []
        executor = RenderExecutor(config=RenderConfig(workers=2), telemetry=messages.append)
        with Renderer(MandelbrotFractal(), RenderSettings(64), executor=executor) as r:
            vp = Viewport(-0.5, 0.0, 20, 12, 8)
            img = r.render(vp)
            out = np.zeros(vp.pixel_count, dtype=np.uint32)
            r.render_into(vp, out)
            np.testing.assert_array_equal(out, img.ravel())
            s = r.stats()
        self.assertEqual(s.frames_total, 2)
        self.assertEqual((s.width, s.height), (12, 8))
        self.assertGreaterEqual(s.avg_compute_ms, 0.0)
        self.assertTrue(any("RenderExecutor" in m for m in messages))

    def test_renderer_palette(self):
        executor = RenderExecutor(config=RenderConfig(workers=2))
        vp = Viewport(-0.5, 0.0, 4, 12, 8)
        with Renderer(MandelbrotFractal(), RenderSettings(64), executor=executor) as r:
            classic = r.render(vp)
            r.set_palette("fire")
            self.assertEqual(r.settings.palette, "Fire")
            fire = r.render(vp)
            r.set_palette(None)
            np.testing.assert_array_equal(r.render(vp), classic)
        self.assertFalse(np.array_equal(classic, fire))
        # in-set pixels stay black whatever the palette
        np.testing.assert_array_equal(fire[classic == BLACK], BLACK)


class BenchmarkTests(unittest.TestCase):

    def test_parse(self):
        self.assertEqual(benchmark.parse_resolution_list("8x6, 10X4"), [(8, 6), (10, 4)])
        self.assertEqual(benchmark.parse_backend_list("cpu, threaded"), ["CPU", "THREADED"])
        self.assertRaises(ValueError, benchmark.parse_backend_list, "cuda")

    def test_main(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "bench.csv")
            rc = benchmark.main(["--backends", "numpy,threaded", "--res", "16x12",
                                 "--max-iter", "20", "--runs", "1", "--workers", "2",
                                 "--csv", path])
            self.assertEqual(rc, 0)
            with open(path) as f:
                text = f.read()
        self.assertIn("16x12", text)
        self.assertIn("THREADED FPS", text)

    def test_unknown_palette(self):
        with self.assertRaises(SystemExit):
            benchmark.main(["--backends", "numpy", "--res", "4x4", "--palette", "neon"])


if __name__ == '__main__':
    unittest.main()
