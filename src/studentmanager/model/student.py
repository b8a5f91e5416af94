"""
Student Record
==============
Defines the single entity of the application.

Records compare by their seven data fields. The ``record_id`` is a handle
assigned by the StudentStore when the record is inserted; it is not persisted
and does not take part in equality, so two identical rows stay distinguishable
inside the store.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import StrEnum
from typing import Any, Dict, Optional


class StudentField(StrEnum):
    """Column keys, in interchange order. Values are the persisted key names."""
    LAST_NAME = "LastName"
    FIRST_NAME = "FirstName"
    MIDDLE_NAME = "MiddleName"
    COURSE = "Course"
    GROUP = "Group"
    BIRTH_DATE = "BirthDate"
    EMAIL = "Email"

    @property
    def attribute(self) -> str:
        return FIELD_ATTRIBUTES[self]


FIELD_ATTRIBUTES: Dict[StudentField, str] = {
    StudentField.LAST_NAME: "last_name",
    StudentField.FIRST_NAME: "first_name",
    StudentField.MIDDLE_NAME: "middle_name",
    StudentField.COURSE: "course",
    StudentField.GROUP: "group",
    StudentField.BIRTH_DATE: "birth_date",
    StudentField.EMAIL: "email",
}

# Labels shown in the table header and the sort combo box
FIELD_LABELS: Dict[StudentField, str] = {
    StudentField.LAST_NAME: "Last name",
    StudentField.FIRST_NAME: "First name",
    StudentField.MIDDLE_NAME: "Middle name",
    StudentField.COURSE: "Course",
    StudentField.GROUP: "Group",
    StudentField.BIRTH_DATE: "Birth date",
    StudentField.EMAIL: "Email",
}


@dataclass
class StudentRecord:
    last_name: str
    first_name: str
    middle_name: str = ""
    course: int = 1
    group: str = ""
    birth_date: date = field(default_factory=date.today)
    email: str = ""

    record_id: Optional[int] = field(default=None, compare=False, repr=False)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.last_name, self.first_name, self.middle_name) if p)

    def value_of(self, student_field: StudentField) -> Any:
        return getattr(self, student_field.attribute)

    def copy(self) -> StudentRecord:
        """Field copy without the store handle."""
        return replace(self, record_id=None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            StudentField.LAST_NAME.value: self.last_name,
            StudentField.FIRST_NAME.value: self.first_name,
            StudentField.MIDDLE_NAME.value: self.middle_name,
            StudentField.COURSE.value: self.course,
            StudentField.GROUP.value: self.group,
            StudentField.BIRTH_DATE.value: self.birth_date.isoformat(),
            StudentField.EMAIL.value: self.email,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> StudentRecord:
        """
        Build a record from its persisted form.

        Raises KeyError/TypeError/ValueError on malformed input; IOManager
        turns those into a PersistenceDecodeError.
        """
        last_name = _require_str(data, StudentField.LAST_NAME)
        first_name = _require_str(data, StudentField.FIRST_NAME)
        group = _require_str(data, StudentField.GROUP)
        email = _require_str(data, StudentField.EMAIL)
        # The only optional field: absent or null reads as empty
        middle_name = data.get(StudentField.MIDDLE_NAME.value)
        if middle_name is None:
            middle_name = ""
        elif not isinstance(middle_name, str):
            raise TypeError(f"MiddleName must be a string, got {middle_name!r}")

        course = data[StudentField.COURSE.value]
        # bool is an int subclass; reject it along with floats and strings
        if isinstance(course, bool) or not isinstance(course, int):
            raise TypeError(f"Course must be an integer, got {course!r}")

        return StudentRecord(
            last_name=last_name,
            first_name=first_name,
            middle_name=middle_name,
            course=course,
            group=group,
            birth_date=parse_iso_date(data[StudentField.BIRTH_DATE.value]),
            email=email,
        )

    def __str__(self) -> str:
        return f"{self.full_name}, course {self.course}, group {self.group}"


def parse_iso_date(value: str) -> date:
    """
    Parse 'YYYY-MM-DD'. Files written by older versions carry a time part
    ('YYYY-MM-DDT00:00:00'); only the calendar date is kept.
    """
    if not isinstance(value, str):
        raise TypeError(f"Date must be a string, got {value!r}")
    if "T" in value:
        return datetime.fromisoformat(value).date()
    return date.fromisoformat(value)


def _require_str(data: Dict[str, Any], student_field: StudentField) -> str:
    value = data[student_field.value]
    if not isinstance(value, str):
        raise TypeError(f"{student_field.value} must be a string, got {value!r}")
    return value
