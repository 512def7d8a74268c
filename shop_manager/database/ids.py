# shop_manager/database/ids.py
from __future__ import annotations

from .record_store import RecordStore


def next_id(store: RecordStore) -> int:
    """
    Return max(existing ids) + 1, or 1 for an absent/empty file.

    Always a full scan, never cached: call it right before append() so the id
    reflects whatever is on disk at that moment. Ids are never reused, so a
    deleted record's id stays retired as long as a higher one exists.
    """
    return max(store.scan_ids(), default=0) + 1


__all__ = ["next_id"]
