# Importing the op modules registers "iter", "rows" and "frame" for CPU.
from mandelkernel.kernel_sources.cpu.mandelbrot import iter, frame  # noqa: F401
