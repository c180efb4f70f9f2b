from __future__ import annotations
from typing import Dict, Any

# Nested dict: [fractal][op_name][backend][precision] -> meta
_REGISTRY: Dict[str, Dict[str, Dict[str, Dict[str, Dict[str, Any]]]]] = {}


def register_kernel(fractal: str, op_name: str, backend: str, precision: str, **meta: Any) -> None:
    """
    Register kernel metadata for a fractal operation on one backend and precision.
    Example:
        register_kernel("mandelbrot", "rows", "CPU", "f64", func=render_rows, arg_order=[...])
    """
    _REGISTRY.setdefault(fractal, {}).setdefault(op_name, {}).setdefault(backend.upper(), {})[precision] = meta


def load_kernel(backend: str, fractal: str, op_name: str, precision: str) -> Dict[str, Any]:
    """
    Registered metadata for the kernel. Raises KeyError if nothing matches.
    """
    be = backend.upper()
    try:
        return _REGISTRY[fractal][op_name][be][precision]
    except KeyError as e:
        raise KeyError(f"Kernel not found for fractal='{fractal}', op='{op_name}', "
                       f"backend='{be}', precision='{precision}'") from e
