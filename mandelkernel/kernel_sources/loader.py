from __future__ import annotations
import importlib
from typing import Dict, Any

from mandelkernel.kernel_sources.registry import load_kernel as load_registered


KERNEL_ROOT = "mandelkernel.kernel_sources"

def _module_name(backend: str, fractal: str) -> str:
    return f"{KERNEL_ROOT}.{backend.lower()}.{fractal.lower()}"

def load_kernel(backend: str, fractal: str, operation: str, precision: str = "f64") -> Dict[str, Any]:
    """
    Import the backend's kernel package by convention (which registers its
    kernels) and return the registered metadata.
    """
    module = _module_name(backend, fractal)
    try:
        importlib.import_module(module)
    except ModuleNotFoundError as e:
        if e.name is None or not module.startswith(e.name):
            raise
        raise KeyError(f"No kernel package '{module}' for backend '{backend}'") from e
    meta = load_registered(backend, fractal, operation, precision)
    _validate_meta(meta, f"registry[{fractal}.{operation}:{backend.upper()}/{precision}]")
    return meta

def _validate_meta(meta: Dict[str, Any], where: str) -> None:
    if "arg_order" not in meta or not isinstance(meta["arg_order"], (list, tuple)):
        raise KeyError(f"{where} must provide an 'arg_order' list")
    if "func" not in meta or not callable(meta["func"]):
        raise KeyError(f"{where} must provide a callable 'func'")

    for key in ("scalars", "produces", "consumes"):
        if key not in meta or not isinstance(meta[key], (list, tuple)):
            meta.setdefault(key, [])
