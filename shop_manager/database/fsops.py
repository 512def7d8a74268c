"""
shop_manager/database/fsops.py

Purpose
-------
File-system utilities with attention to atomicity, used by the record store's
rewrite step and by the backup facility.

Public interface
----------------
- ensure_writable_dir(path) -> None
- get_free_space_bytes(path) -> int
- make_temp_file(target, *, prefix=".") -> Path
- atomic_replace(src, dest, *, verbose=False, logger=None) -> None
- discard(path) -> None
- copy_files(paths, dest_dir, *, verbose=False, logger=None) -> list[Path]

Notes
-----
- Temp files are always created next to their target so os.replace() stays on
  one volume and is atomic.
- The `verbose`/`logger` flags emit one key=value line per step.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

__all__ = [
    "ensure_writable_dir",
    "get_free_space_bytes",
    "make_temp_file",
    "atomic_replace",
    "discard",
    "copy_files",
]

# ----------------------------
# Helpers (private)
# ----------------------------

def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _log(logger: Optional[logging.Logger], verbose: bool, message: str, **fields) -> None:
    """Emit a single line of key=value fields if verbose logging is enabled."""
    if not (verbose and logger):
        return
    parts = [message]
    for k, v in fields.items():
        parts.append(f"{k}={v}")
    logger.info(" ".join(parts))


def _fsync_dir(path: Path) -> None:
    """Best-effort fsync for a directory (after rename/replace)."""
    try:
        fd = os.open(str(path), os.O_RDONLY)
    except OSError:
        # Windows cannot open directories; nothing to sync there.
        return
    try:
        os.fsync(fd)
    except OSError:
        pass
    finally:
        os.close(fd)


def _copy_file_fsync(src: Path, dst: Path) -> None:
    """Copy file bytes+metadata and fsync the destination."""
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(str(src), str(dst))
    with open(dst, "rb+") as fh:
        os.fsync(fh.fileno())


# ----------------------------
# Public API
# ----------------------------

def ensure_writable_dir(path: str | Path) -> None:
    """
    Validate that `path` exists, is a directory, and is writable.
    Raise RuntimeError with a helpful message if not.
    """
    p = Path(path)
    if not p.exists():
        raise RuntimeError(f"Folder does not exist: {p}")
    if not p.is_dir():
        raise RuntimeError(f"Path is not a folder: {p}")
    if not os.access(str(p), os.W_OK | os.X_OK):
        raise RuntimeError(f"Folder is not writable: {p}")


def get_free_space_bytes(path: str | Path) -> int:
    """Return available free space in bytes for the filesystem that contains `path`."""
    probe = Path(path)
    if not probe.exists():
        probe = probe.parent if probe.parent.exists() else Path.home()
    return int(shutil.disk_usage(str(probe)).free)


def make_temp_file(target: str | Path, *, prefix: str = ".") -> Path:
    """
    Create an empty temp file in the same directory as `target` and return its
    path. The file persists after this call; the caller moves or discards it.
    Raises OSError if the directory is not writable.
    """
    t = Path(target)
    t.parent.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix=f"{prefix}{t.stem}_", suffix=".tmp", dir=str(t.parent))
    os.close(fd)
    if t.exists():
        # keep the target's permission bits once the temp file replaces it
        shutil.copymode(str(t), name)
    return Path(name)


def atomic_replace(
    src: str | Path,
    dest: str | Path,
    *,
    verbose: bool = False,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Promote `src` over `dest` with a single os.replace() and fsync the parent
    directory. `src` must already be fully written and closed.
    """
    src_p = Path(src)
    dest_p = Path(dest)
    _log(logger, verbose, "atomic_replace.start", ts=_now_iso(), src=str(src_p), dest=str(dest_p),
         src_size=src_p.stat().st_size)
    os.replace(str(src_p), str(dest_p))
    _fsync_dir(dest_p.parent)
    _log(logger, verbose, "atomic_replace.done", ts=_now_iso(), final=str(dest_p),
         final_size=dest_p.stat().st_size)


def discard(path: str | Path) -> None:
    """Remove a temp file if it is still there."""
    Path(path).unlink(missing_ok=True)


def copy_files(
    paths: Iterable[str | Path],
    dest_dir: str | Path,
    *,
    verbose: bool = False,
    logger: Optional[logging.Logger] = None,
) -> List[Path]:
    """
    Copy each file into `dest_dir` (created if needed), fsync every copy and
    the folder, and return the destination paths in input order.
    """
    out_dir = Path(dest_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for p in paths:
        src = Path(p)
        dst = out_dir / src.name
        _copy_file_fsync(src, dst)
        _log(logger, verbose, "copy_files.file", ts=_now_iso(), src=str(src), dst=str(dst),
             size=dst.stat().st_size)
        written.append(dst)
    _fsync_dir(out_dir)
    return written
