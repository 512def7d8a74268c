"""
shop_manager/database/record_store.py

Purpose
-------
All file-level access for one entity type: append, scan, find-by-id and the
scan-rewrite protocol used to change records in place.

Public interface
----------------
- Record (Protocol): what a storable entity must provide
- RecordStore (ABC): storage contract the repositories depend on
- FlatFileStore(path, record_type): one newline-delimited CSV file per entity

Notes
-----
- Lookups are linear scans. Files are small and every operation is
  interactive, so no index is kept. Another RecordStore implementation can add
  one without changing repository code.
- mutate_all() never edits the live file. It writes every record to a temp
  file beside it, fsyncs, and promotes the temp file with one os.replace().
  If nothing matched, the temp file is discarded and the original keeps its
  exact bytes.
- Only matched records are re-encoded. Every other line, including lines that
  fail to decode, is copied through unchanged; blank lines are dropped.
- Any OSError surfaces as StorageError with the original file untouched.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from contextlib import closing
from pathlib import Path
from typing import Callable, Generic, Iterator, List, Optional, Protocol, Sequence, Type, TypeVar

from . import fsops
from .codec import encode_line, split_line
from ..errors import StorageError

__all__ = ["Record", "RecordStore", "FlatFileStore"]

_log = logging.getLogger(__name__)


class Record(Protocol):
    """Minimal contract for an entity stored as one line."""
    id: int

    def to_fields(self) -> List[str]: ...

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Record": ...


R = TypeVar("R", bound=Record)

Predicate = Callable[[R], bool]
Transform = Callable[[R], Optional[R]]


class RecordStore(ABC, Generic[R]):
    """Storage contract for one entity type."""

    name: str

    @abstractmethod
    def append(self, record: R) -> None:
        """Persist a new record after all existing ones."""

    @abstractmethod
    def scan(self) -> Iterator[R]:
        """Yield every decodable record in storage order. Restartable."""

    @abstractmethod
    def scan_ids(self) -> Iterator[int]:
        """Yield the id of every record that has a well-formed id, even if the rest is malformed."""

    @abstractmethod
    def mutate_all(self, predicate: Predicate, transform: Transform) -> int:
        """
        Apply `transform` to every record satisfying `predicate` and persist the
        result atomically. A transform returning None removes the record.
        Returns the number of matched records; 0 means nothing was written.
        """

    # ---- derived operations ------------------------------------------------

    def find_first(self, predicate: Predicate) -> Optional[R]:
        with closing(self.scan()) as records:
            for record in records:
                if predicate(record):
                    return record
        return None

    def find_by_id(self, record_id: int) -> Optional[R]:
        return self.find_first(lambda r: r.id == record_id)

    def remove_where(self, predicate: Predicate) -> int:
        return self.mutate_all(predicate, lambda _r: None)


class FlatFileStore(RecordStore[R]):
    """
    A RecordStore over one flat file.

    `record_type` is the entity dataclass; it converts decoded fields with
    from_fields() and back with to_fields().
    """

    def __init__(self, path: str | Path, record_type: Type[R], *, verbose: bool = False) -> None:
        self.path = Path(path)
        self.record_type = record_type
        self.name = self.path.stem
        self._verbose = verbose

    def __repr__(self) -> str:
        return f"FlatFileStore({str(self.path)!r}, {self.record_type.__name__})"

    # ---- internals ----------------------------------------------------------

    def _iter_lines(self) -> Iterator[tuple[int, bytes]]:
        """Yield (line_number, raw_bytes); an absent file yields nothing."""
        try:
            fh = open(self.path, "rb")
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StorageError(f"Unable to read {self.path.name}: {exc}") from exc
        with fh:
            try:
                for lineno, raw in enumerate(fh, start=1):
                    if raw.strip():
                        yield lineno, raw
            except OSError as exc:
                raise StorageError(f"Unable to read {self.path.name}: {exc}") from exc

    def _text(self, lineno: int, raw: bytes) -> Optional[str]:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            _log.warning("%s:%d: skipping undecodable line (%s)", self.path.name, lineno, exc)
            return None

    def _decode(self, lineno: int, raw: bytes) -> Optional[R]:
        line = self._text(lineno, raw)
        if line is None:
            return None
        try:
            fields = split_line(line)
            int(fields[0])
            return self.record_type.from_fields(fields)
        except (ValueError, IndexError) as exc:
            _log.warning("%s:%d: skipping malformed record (%s)", self.path.name, lineno, exc)
            return None

    # ---- RecordStore API -----------------------------------------------------

    def append(self, record: R) -> None:
        data = (encode_line(record.to_fields()) + "\n").encode("utf-8")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a+b") as fh:
                fh.seek(0, os.SEEK_END)
                if fh.tell() > 0:
                    # a hand-edited file may lack its final newline
                    fh.seek(-1, os.SEEK_END)
                    if fh.read(1) != b"\n":
                        data = b"\n" + data
                fh.write(data)
        except OSError as exc:
            raise StorageError(f"Unable to write {self.path.name}: {exc}") from exc
        _log.debug("%s: appended id=%s", self.name, record.id)

    def scan(self) -> Iterator[R]:
        for lineno, raw in self._iter_lines():
            record = self._decode(lineno, raw)
            if record is not None:
                yield record

    def scan_ids(self) -> Iterator[int]:
        for lineno, raw in self._iter_lines():
            # the id column is ASCII, so a bad byte elsewhere must not hide it
            line = raw.decode("utf-8", errors="replace")
            try:
                yield int(split_line(line)[0])
            except ValueError:
                _log.warning("%s:%d: no usable id", self.path.name, lineno)

    def mutate_all(self, predicate: Predicate, transform: Transform) -> int:
        if not self.path.exists():
            return 0

        try:
            tmp = fsops.make_temp_file(self.path)
        except OSError as exc:
            raise StorageError(f"Unable to create a temporary file for {self.path.name}: {exc}") from exc

        matched = written = 0
        try:
            with open(tmp, "wb") as out:
                for lineno, raw in self._iter_lines():
                    record = self._decode(lineno, raw)
                    if record is None or not predicate(record):
                        # untouched lines keep their exact bytes
                        out.write(raw if raw.endswith(b"\n") else raw + b"\n")
                        written += 1
                        continue
                    matched += 1
                    record = transform(record)
                    if record is None:
                        continue
                    out.write((encode_line(record.to_fields()) + "\n").encode("utf-8"))
                    written += 1
                out.flush()
                os.fsync(out.fileno())
        except OSError as exc:
            fsops.discard(tmp)
            raise StorageError(f"Unable to rewrite {self.path.name}: {exc}") from exc
        except BaseException:
            fsops.discard(tmp)
            raise

        if matched == 0:
            fsops.discard(tmp)
            _log.debug("%s: rewrite matched nothing; original left untouched", self.name)
            return 0

        try:
            fsops.atomic_replace(tmp, self.path, verbose=self._verbose, logger=_log)
        except OSError as exc:
            fsops.discard(tmp)
            raise StorageError(f"Unable to replace {self.path.name}: {exc}") from exc

        _log.debug("%s: rewrite committed matched=%d written=%d", self.name, matched, written)
        return matched
