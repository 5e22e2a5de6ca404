"""Go/no-go checks applied to a target before any shrinking happens."""

from __future__ import annotations

import os
import stat
from pathlib import Path

ELF_MAGIC = b"\x7fELF"


def _read_prefix(path: Path, size: int) -> bytes:
    with path.open("rb") as handle:
        return handle.read(size)


def _is_executable_file(path: Path) -> bool:
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return False
    return stat.S_ISREG(mode) and os.access(path, os.X_OK)


def has_elf_magic(path: Path | str) -> bool:
    try:
        prefix = _read_prefix(Path(path), len(ELF_MAGIC))
    except OSError:
        return False
    return prefix == ELF_MAGIC


def is_candidate(path: Path | str) -> bool:
    """Return True when ``path`` is an existing, executable, ELF regular file."""
    target = Path(path)
    if not target.exists():
        return False
    if not _is_executable_file(target):
        return False
    return has_elf_magic(target)


def ensure_candidate(path: Path | str) -> Path:
    target = Path(path)
    if not target.exists():
        raise FileNotFoundError(f"Target not found: {target}")
    if not _is_executable_file(target):
        raise PermissionError(
            f"Target is not an executable file (or lacks execute permission): {target}"
        )
    if not has_elf_magic(target):
        raise ValueError(f"Target is not an ELF binary: {target}")
    return target
