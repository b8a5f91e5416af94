"""
Record Validation
=================
Checks form input against the record invariants before it reaches the store.
The store itself never validates; this is the caller's job.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from studentmanager import config
from studentmanager.model.errors import FieldError, ValidationError
from studentmanager.model.student import StudentField, StudentRecord


def is_valid_email(email: Optional[str]) -> bool:
    if not email or not email.strip():
        return False
    return config.EMAIL_PATTERN.fullmatch(email) is not None


def collect_errors(record: StudentRecord, today: Optional[date] = None) -> List[FieldError]:
    """
    Return every violated rule, in the order the form reports them.
    An empty list means the record is valid.
    """
    today = today or date.today()
    errors: List[FieldError] = []

    if not record.last_name or not record.last_name.strip():
        errors.append(FieldError(StudentField.LAST_NAME, "Enter a last name"))

    if not record.first_name or not record.first_name.strip():
        errors.append(FieldError(StudentField.FIRST_NAME, "Enter a first name"))

    if not record.group or not record.group.strip():
        errors.append(FieldError(StudentField.GROUP, "Enter a group"))

    if not config.COURSE_MIN <= record.course <= config.COURSE_MAX:
        errors.append(FieldError(
            StudentField.COURSE,
            f"Course must be between {config.COURSE_MIN} and {config.COURSE_MAX}"
        ))

    if not is_valid_email(record.email):
        domains = ", ".join(config.ALLOWED_EMAIL_DOMAINS)
        errors.append(FieldError(StudentField.EMAIL, f"Enter a valid email (domains: {domains})"))

    if record.birth_date > today:
        errors.append(FieldError(StudentField.BIRTH_DATE, "Birth date cannot be in the future"))
    elif record.birth_date < config.MIN_BIRTH_DATE:
        limit = config.MIN_BIRTH_DATE.strftime(config.CSV_DATE_FORMAT)
        errors.append(FieldError(StudentField.BIRTH_DATE, f"Birth date cannot be earlier than {limit}"))

    return errors


def validate(record: StudentRecord, today: Optional[date] = None) -> None:
    """Raise ValidationError listing all failures."""
    errors = collect_errors(record, today)
    if errors:
        raise ValidationError(errors)
