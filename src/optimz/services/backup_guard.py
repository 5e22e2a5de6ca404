from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable

DEFAULT_BACKUP_SUFFIX = ".bak"


def backup_path_for(target: Path | str, suffix: str = DEFAULT_BACKUP_SUFFIX) -> Path:
    target = Path(target)
    return target.with_name(target.name + (suffix or DEFAULT_BACKUP_SUFFIX))


def ensure_backup(
    target: Path | str,
    *,
    suffix: str = DEFAULT_BACKUP_SUFFIX,
    on_output: Callable[[str], None] | None = None,
) -> bool:
    """Copy ``target`` next to itself once; an existing backup is never replaced."""
    backup = backup_path_for(target, suffix)
    if backup.exists():
        return True
    try:
        shutil.copy2(target, backup)
    except OSError as exc:
        if on_output:
            on_output(f"Failed to create backup: {exc}")
        return False
    if on_output:
        on_output(f"Backup written to {backup}")
    return True
