"""
Resolve pattern references.

A reference names a module attribute, ``package.module:NAME``, or a file,
``path/to/patterns.py:NAME``. File paths are taken relative to ``base_dir``.
"""
from __future__ import annotations
import importlib
import importlib.util
from pathlib import Path
from typing import Any, Optional

from .errors import LoaderError
from .logging import log

def split_ref(ref: str):
    target, sep, name = ref.rpartition(":")
    if not sep or not target or not name:
        raise LoaderError(f"pattern reference must look like 'module:NAME' or 'file.py:NAME', got {ref!r}")
    return target, name

def load_pattern(ref: str, base_dir: Optional[Path] = None) -> Any:
    target, name = split_ref(ref)
    if target.endswith(".py"):
        path = Path(target)
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        mod = _load_module(path)
    else:
        try:
            mod = importlib.import_module(target)
        except Exception as e:
            raise LoaderError(f"cannot import {target!r}: {e}") from e
    if not hasattr(mod, name):
        raise LoaderError(f"{target!r} has no attribute {name!r}")
    log().debug(f"loaded pattern {name} from {target}")
    return getattr(mod, name)

def _load_module(path: Path):
    """Load a Python module from a file path"""
    if not path.exists():
        raise LoaderError(f"pattern file not found: {path}")
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if not spec or not spec.loader:
        raise LoaderError(f"could not load module from {path}")
    mod = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(mod)
    except Exception as e:
        raise LoaderError(f"error loading {path}: {e}") from e
    return mod
