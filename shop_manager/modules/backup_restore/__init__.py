"""
Backup package.

- create_backup(): copy every data file into backups/backup_YYYYMMDD_HHMMSS/.
- BackupJob: the same, as an object carrying its own paths and event log.
"""

from __future__ import annotations

from .service import BackupJob, create_backup

__all__ = ["BackupJob", "create_backup"]
