"""
modules/backup_restore/service.py

Purpose
-------
Snapshot every data file into a timestamped folder under the backup root.

Public interface
----------------
- BackupJob(data_dir, backup_root=None, *, verbose=False).run() -> Path
- create_backup(data_dir, backup_root=None, *, verbose=False) -> Path

Layout
------
<backup_root>/backup_YYYYMMDD_HHMMSS/<name>.csv

If two backups land in the same second the later folder gets a numeric
suffix (backup_YYYYMMDD_HHMMSS_2).
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from . import validators as v
from .logging_utils import get_logger, log_event
from ...config import backup_root as default_backup_root
from ...config import log_dir
from ...constants import BACKUP_PREFIX, BACKUP_STAMP_FORMAT
from ...database import fsops
from ...errors import DomainError, StorageError

_log = logging.getLogger(__name__)


def _fmt_err(msg: str, exc: BaseException) -> str:
    return f"{msg}: {exc.__class__.__name__}: {exc}"


class BackupJob:
    """
    One backup run. The data files are copied as they are; the folder is
    only reported once every copy has been fsynced.
    """

    def __init__(self, data_dir: str | Path, backup_root: Optional[str | Path] = None, *, verbose: bool = False):
        self.data_dir = Path(data_dir)
        self.backup_root = Path(backup_root) if backup_root else default_backup_root(self.data_dir)
        self.verbose = verbose
        self.events = get_logger(log_dir(self.data_dir) / "backup.log")

    def _sources(self) -> List[Path]:
        return sorted(p for p in self.data_dir.glob("*.csv") if p.is_file())

    def _target_dir(self) -> Path:
        stamp = datetime.now().strftime(BACKUP_STAMP_FORMAT)
        target = self.backup_root / f"{BACKUP_PREFIX}{stamp}"
        n = 2
        while target.exists():
            target = self.backup_root / f"{BACKUP_PREFIX}{stamp}_{n}"
            n += 1
        return target

    def run(self) -> Path:
        t0 = time.monotonic()
        sources = self._sources()
        log_event(self.events, "backup", "preflight", "checking sources",
                  {"data_dir": str(self.data_dir), "files": len(sources)})
        try:
            size = v.validate_backup_sources(sources)
            v.validate_backup_destination(
                self.backup_root, size, fsops.get_free_space_bytes(self.backup_root)
            )
        except DomainError as exc:
            log_event(self.events, "backup", "preflight", str(exc), level=logging.ERROR)
            raise

        target = self._target_dir()
        try:
            written = fsops.copy_files(sources, target, verbose=self.verbose, logger=_log)
        except OSError as exc:
            log_event(self.events, "backup", "copy", _fmt_err("copy failed", exc),
                      {"target": str(target)}, level=logging.ERROR)
            raise StorageError(_fmt_err("Backup creation failed", exc)) from exc

        log_event(self.events, "backup", "done", "backup created", {
            "target": str(target),
            "files": [p.name for p in written],
            "bytes": size,
            "duration_s": round(time.monotonic() - t0, 3),
        })
        _log.info("Backup created: %s (%d files)", target, len(written))
        return target


def create_backup(data_dir: str | Path, backup_root: Optional[str | Path] = None, *, verbose: bool = False) -> Path:
    """Copy every *.csv in `data_dir` into a new timestamped backup folder."""
    return BackupJob(data_dir, backup_root, verbose=verbose).run()
