"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded file names and formats (e.g.
   "students.json", "dd.MM.yyyy") scattered throughout the code.
2. Deployment: The data file location can be moved with an environment
   variable without touching the code.

Exports:
    DEFAULT_DATA_PATH (str): Path of the persisted student list.
    CSV_HEADER (str): Header line of the delimited interchange format.
    ALLOWED_EMAIL_DOMAINS (tuple): Domains accepted by email validation.
"""
import os
import re
from datetime import date
from typing import Optional


# --- Persistence ---
DATA_FILENAME: str = "students.json"
DATA_PATH_ENV: str = "STUDENTMANAGER_DATA"

# Relative to the working directory, not to the package
DEFAULT_DATA_PATH: str = DATA_FILENAME
BACKUP_SUFFIX: str = ".bak"


def get_data_path(override: Optional[str] = None) -> str:
    """Resolve the data file: explicit override, then environment, then default."""
    if override:
        return override
    return os.environ.get(DATA_PATH_ENV) or DEFAULT_DATA_PATH


# --- Delimited interchange ---
CSV_DELIMITER: str = ";"
CSV_COLUMNS: tuple[str, ...] = (
    "LastName", "FirstName", "MiddleName", "Course", "Group", "BirthDate", "Email"
)
CSV_HEADER: str = CSV_DELIMITER.join(CSV_COLUMNS)
CSV_DATE_FORMAT: str = "%d.%m.%Y"
CSV_ENCODING: str = "utf-8"
DEFAULT_EXPORT_FILENAME: str = "students_export.csv"

# --- Validation rules ---
COURSE_MIN: int = 1
COURSE_MAX: int = 6
MIN_BIRTH_DATE: date = date(1992, 1, 1)
ALLOWED_EMAIL_DOMAINS: tuple[str, ...] = ("yandex.ru", "gmail.com", "icloud.com")
EMAIL_LOCAL_MIN_LENGTH: int = 3
EMAIL_PATTERN: re.Pattern = re.compile(
    r"^[a-zA-Z0-9._%+-]{" + str(EMAIL_LOCAL_MIN_LENGTH) + r",}@("
    + "|".join(re.escape(d) for d in ALLOWED_EMAIL_DOMAINS)
    + r")$",
    re.IGNORECASE,
)

# --- Presentation ---
VISIBLE_APP_NAME: str = "Student Manager"
DISPLAY_DATE_FORMAT: str = "dd.MM.yyyy"  # Qt notation
