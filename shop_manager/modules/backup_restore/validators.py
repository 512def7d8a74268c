"""
modules/backup_restore/validators.py

Purpose
-------
Preflight checks for a backup, with clear, user-facing messages.

Public API
---------
- validate_backup_sources(paths) -> int
- validate_backup_destination(dest_root, needed_bytes, free_space) -> None
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

from ...database import fsops
from ...errors import StorageError, ValidationError


def _human_size(num: int) -> str:
    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(max(0, int(num)))
    for u in units:
        if size < 1024.0 or u == units[-1]:
            return f"{size:.1f} {u}"
        size /= 1024.0


def validate_backup_sources(paths: Sequence[Path]) -> int:
    """
    Every source must be a readable regular file. Returns their total size.

    Raises:
      ValidationError if there is nothing to back up.
      StorageError if a file is unreadable.
    """
    if not paths:
        raise ValidationError("No data files found to back up.")
    total = 0
    for p in paths:
        if not p.is_file() or not os.access(str(p), os.R_OK):
            raise StorageError(f"Data file is not readable: {p}")
        total += p.stat().st_size
    return total


def validate_backup_destination(dest_root: Path, needed_bytes: int, free_space: int) -> None:
    """
    The backup root must be a writable folder (or not exist yet) and its filesystem
    must hold at least 1.5x the data size.
    """
    if dest_root.exists():
        try:
            fsops.ensure_writable_dir(dest_root)
        except RuntimeError as exc:
            raise StorageError(f"Backup location unusable. {exc}") from exc

    required = int(max(0, needed_bytes) * 1.5)
    if free_space < required:
        raise StorageError(
            "Not enough free space for the backup. "
            f"Required (approx): {_human_size(required)}, "
            f"available: {_human_size(free_space)}."
        )
