"""
Student Controller
==================
Sits between the main window and the StudentStore.

It owns everything the window needs besides widgets: input validation, the
list currently on screen (after search/filter/sort), the selected row, and the
"unsaved changes" flag. Keeping it free of Qt lets it run under pytest
without a display.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Union

from studentmanager.model import validation
from studentmanager.model.store import StudentStore
from studentmanager.model.student import FIELD_LABELS, StudentField, StudentRecord

logger = logging.getLogger(__name__)

SORTABLE_FIELDS: List[StudentField] = [StudentField.LAST_NAME, StudentField.GROUP, StudentField.COURSE]


@dataclass
class StudentForm:
    """Raw values as typed into the editor widgets."""
    last_name: str = ""
    first_name: str = ""
    middle_name: str = ""
    course: int = 1
    group: str = ""
    birth_date: date = field(default_factory=date.today)
    email: str = ""

    def to_record(self) -> StudentRecord:
        return StudentRecord(
            last_name=self.last_name.strip(),
            first_name=self.first_name.strip(),
            middle_name=self.middle_name.strip(),
            course=self.course,
            group=self.group.strip(),
            birth_date=self.birth_date,
            email=self.email.strip(),
        )

    @staticmethod
    def from_record(record: StudentRecord) -> StudentForm:
        return StudentForm(
            last_name=record.last_name,
            first_name=record.first_name,
            middle_name=record.middle_name,
            course=record.course,
            group=record.group,
            birth_date=record.birth_date,
            email=record.email,
        )


def parse_course_filter(text: Optional[str]) -> Optional[int]:
    """Blank or non-numeric text means 'any course'."""
    if not text or not text.strip():
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


class StudentController:
    def __init__(self, store: StudentStore, today: Optional[Callable[[], date]] = None) -> None:
        self.store = store
        self._today = today or date.today
        self.is_modified: bool = False
        self.visible: List[StudentRecord] = store.records()
        self.selected: Optional[StudentRecord] = None

    # --- VIEW STATE ---

    @property
    def count_text(self) -> str:
        return f"Total students: {len(self.visible)}"

    def show_all(self) -> List[StudentRecord]:
        self.visible = self.store.records()
        return self.visible

    def select(self, row: Optional[int]) -> Optional[StudentRecord]:
        """Select a row of the visible list; None or out of range clears the selection."""
        if row is None or not 0 <= row < len(self.visible):
            self.selected = None
        else:
            self.selected = self.visible[row]
        return self.selected

    def row_of(self, record: Optional[StudentRecord]) -> int:
        if record is None:
            return -1
        for i, r in enumerate(self.visible):
            if r.record_id == record.record_id:
                return i
        return -1

    def set_modified(self, modified: bool) -> None:
        self.is_modified = modified

    # --- EDITING ---

    def build_record(self, form: StudentForm) -> StudentRecord:
        """Trim and validate form values. Raises ValidationError."""
        record = form.to_record()
        validation.validate(record, today=self._today())
        return record

    def add_student(self, form: StudentForm) -> StudentRecord:
        record = self.store.add(self.build_record(form))
        self.set_modified(True)
        self.selected = None
        self.show_all()
        logger.info(f"Student added: {record}")
        return record

    def edit_selected(self, form: StudentForm) -> Optional[StudentRecord]:
        """Replace the selected student. Returns the new record, or None if nothing was selected."""
        if self.selected is None:
            return None
        record = self.build_record(form)
        index = self.store.index_of(self.selected)
        if not self.store.update_at(index, record):
            logger.warning(f"Selected student is no longer in the list: {self.selected}")
            self.selected = None
            return None
        self.set_modified(True)
        self.selected = None
        self.show_all()
        logger.info(f"Student updated: {record}")
        return record

    def delete_selected(self) -> bool:
        if self.selected is None:
            return False
        removed = self.store.remove(self.selected)
        if removed:
            self.set_modified(True)
            logger.info(f"Student deleted: {self.selected}")
        self.selected = None
        self.show_all()
        return removed

    # --- QUERIES ---

    def search(self, text: Optional[str]) -> List[StudentRecord]:
        if not text or not text.strip():
            return self.show_all()
        self.visible = self.store.search_by_last_name(text)
        return self.visible

    def apply_filter(self, course_text: Optional[str], group: Optional[str]) -> List[StudentRecord]:
        course = parse_course_filter(course_text)
        self.visible = self.store.filter_by_course_and_group(course, group)
        return self.visible

    def clear_filters(self) -> List[StudentRecord]:
        return self.show_all()

    def sort(self, key: Union[StudentField, str]) -> List[StudentRecord]:
        """Sort the store by a field or its label, then show the whole list."""
        student_field = self._resolve_sort_key(key)
        self.store.sort_by(student_field)
        self.set_modified(True)
        return self.show_all()

    @staticmethod
    def sort_labels() -> List[str]:
        return [FIELD_LABELS[f] for f in SORTABLE_FIELDS]

    @staticmethod
    def _resolve_sort_key(key: Union[StudentField, str]) -> StudentField:
        if isinstance(key, StudentField):
            return key
        for student_field in SORTABLE_FIELDS:
            if key in (FIELD_LABELS[student_field], student_field.value):
                return student_field
        raise ValueError(f"Unknown sort key: {key!r}")

    # --- FILES ---

    def save(self, filepath: Optional[str] = None) -> None:
        self.store.save(filepath)
        self.set_modified(False)

    def new_list(self) -> None:
        self.store.clear()
        self.selected = None
        self.set_modified(False)
        self.show_all()

    def import_csv(self, filepath: str) -> int:
        """Replace the list with a CSV file. On error the list and the flag are unchanged."""
        count = self.store.import_csv(filepath)
        self.set_modified(True)
        self.selected = None
        self.show_all()
        return count

    def export_csv(self, filepath: str) -> int:
        return self.store.export_csv(filepath)
