"""
Error Types
===========
Exceptions raised by the model layer. The view catches these and decides
what to show the user; the model itself never talks to the GUI.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from studentmanager.model.student import StudentField


class StudentManagerError(Exception):
    """Base class for all application errors."""


@dataclass(frozen=True)
class FieldError:
    field: StudentField
    message: str

    def __str__(self) -> str:
        return self.message


class ValidationError(StudentManagerError):
    """Form values violate the record invariants."""

    def __init__(self, errors: List[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors) or "Invalid record")

    @property
    def first(self) -> FieldError:
        return self.errors[0]


class CsvImportError(StudentManagerError):
    """A delimited import was aborted. The store has not been modified."""

    def __init__(self, line_number: int, message: str) -> None:
        self.line_number = line_number
        super().__init__(f"Line {line_number}: {message}")


class PersistenceDecodeError(StudentManagerError):
    """The persisted data file exists but could not be decoded."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Cannot read '{path}': {message}")
