"""
Benchmark the render backends (NUMPY / CPU / THREADED).

Usage examples:
  mandelkernel-bench --backends cpu,threaded --res 800x600,1280x720 \
      --max-iter 1000 --runs 5 --workers 8

  mandelkernel-bench --backends numpy,threaded --res 320x240 --csv bench.csv
"""

import csv
import time
import logging
import argparse
import platform
from typing import List, Tuple, Optional

from mandelkernel.coloring.colormap import palette_name
from mandelkernel.fractals.base import Viewport, RenderSettings
from mandelkernel.fractals.mandelbrot import MandelbrotFractal
from mandelkernel.rendering.core import Renderer
from mandelkernel.rendering.executor import RenderExecutor
from mandelkernel.utils.config import RenderConfig, available_cpus
from mandelkernel.utils.enums import BackendType

# --- Helpers -----------------------------------------------------------------

def parse_resolution_list(res_str: str) -> List[Tuple[int, int]]:
    """
    Parse resolutions like "800x600,1280x720".
    """
    if not res_str:
        return [(800, 600), (1280, 720), (1920, 1080)]
    out: List[Tuple[int, int]] = []
    for token in res_str.split(','):
        token = token.strip().lower()
        if not token:
            continue
        w, h = token.split('x')
        out.append((int(w), int(h)))
    return out

def parse_backend_list(backends: str) -> List[str]:
    tags = [t.strip().upper() for t in backends.split(",") if t.strip()]
    for tag in tags:
        if tag not in BackendType.__members__:
            raise ValueError(f"Unknown backend tag: {tag.lower()}")
    return tags

# --- Benchmark core ----------------------------------------------------------

def canonical_viewport(width: int, height: int) -> Viewport:
    """
    The whole set: [-2, 1] across the image width.
    """
    return Viewport(-0.5, 0.0, max(1, round(width / 3.0)), width, height)

def benchmark_combo(renderer: Renderer,
                    width: int,
                    height: int,
                    runs: int,
                    warmup: int = 1) -> Tuple[float, float]:
    """
    Runs warmups (not timed), then 'runs' timed renders.
    Returns (avg_time_seconds, fps).
    """
    vp = canonical_viewport(width, height)

    # Warm-ups
    for _ in range(max(0, warmup)):
        _ = renderer.render(vp)

    # Timed runs
    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        _ = renderer.render(vp)
        t1 = time.perf_counter()
        times.append(t1 - t0)

    avg = sum(times) / len(times)
    fps = 1.0 / avg if avg > 0 else 0.0
    return avg, fps

# --- CSV writer --------------------------------------------------------------

def write_csv_row(writer,
                  resolution: Tuple[int, int],
                  rows_by_backend: List[Tuple[str, Optional[Tuple[float, float]]]]):
    """
    rows_by_backend: list of (backend_label, (avg, fps)) where the tuple is None if the backend failed
    """
    base = [f"{resolution[0]}x{resolution[1]}"]
    for _, result in rows_by_backend:
        if result is None:
            base.extend(["n/a", "n/a"])
        else:
            avg, fps = result
            base.extend([f"{avg:.4f}", f"{fps:.2f}"])
    writer.writerow(base)

# --- CLI ---------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Benchmark the Mandelbrot render backends.")
    p.add_argument("--backends", type=str, default="cpu,threaded",
                   help="Comma separated list: numpy,cpu,threaded")
    p.add_argument("--res", type=str, default="800x600,1280x720,1920x1080",
                   help="Comma separated WxH list")
    p.add_argument("--max-iter", type=int, default=500)
    p.add_argument("--runs", type=int, default=3)
    p.add_argument("--warmup", type=int, default=1)
    p.add_argument("--workers", type=int, default=None,
                   help="Worker threads (default: available CPUs)")
    p.add_argument("--rows-per-task", type=int, default=0)
    p.add_argument("--palette", type=str, default="Classic",
                   help="Palette name: Classic, Fire, Ocean, Grayscale")
    p.add_argument("--csv", type=str, default=None,
                   help="Optional CSV file for the timings")
    p.add_argument("-v", "--verbose", action="store_true")
    return p

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    backend_tags = parse_backend_list(args.backends)
    try:
        palette = palette_name(args.palette)
    except KeyError as e:
        parser.error(e.args[0])
    resolutions = parse_resolution_list(args.res)
    workers = args.workers or available_cpus()
    config = RenderConfig(workers=workers, backend=backend_tags[0],
                          rows_per_task=args.rows_per_task, palette=palette)

    print("=== Hardware Summary ===")
    print("CPU:", platform.processor() or platform.machine())
    print("Workers:", workers)
    print()

    executor = RenderExecutor(config=config)
    fractal = MandelbrotFractal()
    settings = RenderSettings(max_iter=args.max_iter)
    renderers = [(tag, Renderer(fractal, settings, executor=executor, default_backend=tag))
                 for tag in backend_tags]

    results: List[Tuple[Tuple[int, int], List[Tuple[str, Optional[Tuple[float, float]]]]]] = []
    try:
        for (w, h) in resolutions:
            print(f"=== {w}x{h} ===")
            row_results: List[Tuple[str, Optional[Tuple[float, float]]]] = []
            for name, renderer in renderers:
                try:
                    avg, fps = benchmark_combo(renderer, w, h, args.runs, args.warmup)
                    print(f"{name:>12}  avg={avg:.4f}s  fps={fps:.2f}")
                    row_results.append((name, (avg, fps)))
                except Exception as e:
                    print(f"{name:>12}  FAIL: {e}")
                    row_results.append((name, None))
            results.append(((w, h), row_results))
            print()
    finally:
        executor.close()

    if args.csv:
        with open(args.csv, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["CPU", platform.processor() or platform.machine()])
            writer.writerow(["Workers", workers])
            writer.writerow([])
            header = ["Resolution"]
            for name in backend_tags:
                header.extend([f"{name} Time (s)", f"{name} FPS"])
            writer.writerow(header)
            for res, row_results in results:
                write_csv_row(writer, res, row_results)
        print(f"Benchmark results saved to {args.csv}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
