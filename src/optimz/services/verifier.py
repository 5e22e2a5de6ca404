from __future__ import annotations

import os
from pathlib import Path

import lief


def sanity_check(binary_path: Path | str) -> lief.ELF.Binary:
    """Make sure the optimized binary still parses as an executable ELF image."""
    binary_path = Path(binary_path)
    if not binary_path.exists():
        raise FileNotFoundError(f"Optimized binary not found at {binary_path}")
    try:
        binary = lief.parse(str(binary_path))
    except Exception as exc:  # lief raises a variety of binding-level errors
        raise RuntimeError(f"Unable to parse optimized binary via LIEF: {exc}") from exc
    if binary is None:
        raise RuntimeError(f"LIEF could not parse optimized binary: {binary_path}")
    if not isinstance(binary, lief.ELF.Binary):
        raise RuntimeError(f"Optimized binary is no longer an ELF image: {binary_path}")
    if not os.access(binary_path, os.X_OK):
        raise PermissionError(f"Optimized binary is not executable: {binary_path}")
    return binary
