"""
Student Store (Data Model)
==========================
This module defines the central data structure for the running application.

Why is this file needed?
------------------------
1. State Management: It owns the ordered list of students. Collaborators get
   copies or single records, never the list itself.
2. Persistence: It is what gets written to / read from the data file.
3. Decoupling: Views read from this object; the controller writes to it.

Records are located by the ``record_id`` handle the store assigns on
insertion, so two rows with identical contents are never confused.

Classes:
    StudentStore: The main container class.
"""
from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from studentmanager import config
from studentmanager.model.errors import PersistenceDecodeError
from studentmanager.model.io import IOManager
from studentmanager.model.student import StudentField, StudentRecord

logger = logging.getLogger(__name__)


class StudentStore:
    def __init__(self, records: Optional[Iterable[StudentRecord]] = None, filepath: Optional[str] = None) -> None:
        self._records: List[StudentRecord] = []
        self._ids = itertools.count(1)
        self.filepath: str = filepath or config.get_data_path()

        # Set when the data file existed but could not be decoded
        self.load_error: Optional[PersistenceDecodeError] = None

        for record in records or []:
            self.add(record)

    @classmethod
    def from_file(cls, filepath: Optional[str] = None, strict: bool = False) -> StudentStore:
        """
        Build a store from the persisted file.

        Missing file -> empty store. Corrupt file -> empty store with
        ``load_error`` set (or the error re-raised when ``strict``).
        """
        store = cls(filepath=filepath)
        try:
            store.load()
        except PersistenceDecodeError as e:
            if strict:
                raise
            logger.warning(f"Starting with an empty list: {e}")
            store.load_error = e
        return store

    # --- READ ACCESS ---

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StudentRecord]:
        return iter(list(self._records))

    def __getitem__(self, index: int) -> StudentRecord:
        return self._records[index]

    def records(self) -> List[StudentRecord]:
        """Snapshot of the current order."""
        return list(self._records)

    def get(self, record_id: int) -> Optional[StudentRecord]:
        for record in self._records:
            if record.record_id == record_id:
                return record
        return None

    def index_of(self, record: StudentRecord) -> int:
        """Position of ``record`` (matched by handle), or -1."""
        if record is None or record.record_id is None:
            return -1
        for i, r in enumerate(self._records):
            if r.record_id == record.record_id:
                return i
        return -1

    def __contains__(self, record: object) -> bool:
        return isinstance(record, StudentRecord) and self.index_of(record) >= 0

    # --- MUTATIONS ---

    def _adopt(self, record: StudentRecord) -> StudentRecord:
        if record is None:
            raise TypeError("record must not be None")
        # A record that already belongs here (or anywhere else) gets a fresh handle copy
        if record.record_id is not None:
            record = record.copy()
        record.record_id = next(self._ids)
        return record

    def add(self, record: StudentRecord) -> StudentRecord:
        """Append ``record`` and return it with its handle set."""
        record = self._adopt(record)
        self._records.append(record)
        logger.debug(f"Added student #{record.record_id}: {record}")
        return record

    def remove(self, record: StudentRecord) -> bool:
        index = self.index_of(record)
        if index < 0:
            return False
        removed = self._records.pop(index)
        logger.debug(f"Removed student #{removed.record_id}: {removed}")
        return True

    def update(self, old_record: StudentRecord, new_record: StudentRecord) -> bool:
        """Replace ``old_record`` with ``new_record`` at the same position. No-op if absent."""
        index = self.index_of(old_record)
        if index < 0:
            return False
        return self.update_at(index, new_record)

    def update_at(self, index: int, record: StudentRecord) -> bool:
        if not 0 <= index < len(self._records):
            return False
        record = self._adopt(record)
        self._records[index] = record
        logger.debug(f"Updated student at {index} -> #{record.record_id}: {record}")
        return True

    def replace_all(self, records: Iterable[StudentRecord]) -> None:
        """Swap in a whole new list. Nothing changes if adopting any record fails."""
        new_records = [self._adopt(r) for r in records]
        self._records = new_records
        logger.debug(f"Replaced list with {len(new_records)} students")

    def clear(self) -> None:
        self._records = []

    # --- QUERIES ---

    def search_by_last_name(self, substring: str) -> List[StudentRecord]:
        needle = substring.casefold()
        return [r for r in self._records if needle in r.last_name.casefold()]

    def filter_by_course_and_group(
        self,
        course: Optional[int] = None,
        group: Optional[str] = None
    ) -> List[StudentRecord]:
        group_key = group.casefold() if group else None
        return [
            r for r in self._records
            if (course is None or r.course == course)
            and (group_key is None or r.group.casefold() == group_key)
        ]

    # --- SORTING ---

    def _sort(self, key: Callable[[StudentRecord], object]) -> None:
        # list.sort is stable: equal keys keep their current relative order
        self._records.sort(key=key)

    def sort_by_last_name(self) -> None:
        self._sort(lambda r: r.last_name)

    def sort_by_group(self) -> None:
        self._sort(lambda r: r.group)

    def sort_by_course(self) -> None:
        self._sort(lambda r: r.course)

    def sort_by(self, student_field: StudentField) -> None:
        try:
            SORTERS[student_field](self)
        except KeyError:
            raise ValueError(f"Sorting by '{student_field}' is not supported") from None

    # --- PERSISTENCE ---

    def save(self, filepath: Optional[str] = None) -> None:
        target = filepath or self.filepath
        if self.load_error is not None and target == self.load_error.path:
            # Keep the unreadable original before overwriting it
            IOManager.backup_file(target)
            self.load_error = None
        IOManager.save_students(self._records, target)
        self.filepath = target

    def load(self, filepath: Optional[str] = None) -> None:
        """Replace the contents with the persisted list. Leaves the store untouched on error."""
        source = filepath or self.filepath
        records = IOManager.load_students(source)
        self.replace_all(records)
        self.filepath = source
        self.load_error = None

    def import_csv(self, filepath: str) -> int:
        """Replace the contents with a delimited file. All or nothing."""
        records = IOManager.import_csv(filepath)
        self.replace_all(records)
        return len(records)

    def export_csv(self, filepath: str) -> int:
        return IOManager.export_csv(self._records, filepath)


SORTERS: Dict[StudentField, Callable[[StudentStore], None]] = {
    StudentField.LAST_NAME: StudentStore.sort_by_last_name,
    StudentField.GROUP: StudentStore.sort_by_group,
    StudentField.COURSE: StudentStore.sort_by_course,
}
