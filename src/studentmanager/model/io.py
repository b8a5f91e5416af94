"""
Input/Output Manager
Handles saving and loading the student list (JSON) and the delimited
interchange format (semicolon CSV) used for bulk import/export.
"""
import json
import logging
import os
import re
import shutil
import tempfile
from datetime import datetime
from typing import Iterable, List, Optional

from studentmanager import config
from studentmanager.model.errors import CsvImportError, PersistenceDecodeError
from studentmanager.model.student import StudentRecord

# Get module logger
logger = logging.getLogger(__name__)

CSV_DATE_SHAPE = re.compile(r"\d{2}\.\d{2}\.\d{4}", re.ASCII)
# Optional sign and ASCII digits, padded by whitespace; no "1_0", no non-Latin digits
CSV_COURSE_SHAPE = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)


class IOManager:

    # ---- JSON PERSISTENCE ----

    @staticmethod
    def save_students(records: Iterable[StudentRecord], filepath: str) -> None:
        """
        Overwrites ``filepath`` with the full list.

        The data goes to a temp file in the same directory first and is moved
        into place, so a failed write leaves the previous file intact.
        """
        data = [record.to_dict() for record in records]
        logger.info(f"Saving {len(data)} students to: {filepath}")

        directory = os.path.dirname(os.path.abspath(filepath))
        os.makedirs(directory, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(prefix=".students-", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(temp_path, filepath)
        except Exception as e:
            logger.exception(f"Failed to save students: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

        logger.info(f"Students saved to: {filepath}")

    @staticmethod
    def load_students(filepath: str) -> List[StudentRecord]:
        """
        Reads the persisted list.

        A missing file is not an error and yields an empty list. A file that
        cannot be decoded raises PersistenceDecodeError.
        """
        if not os.path.exists(filepath):
            logger.info(f"No data file at '{filepath}', starting with an empty list.")
            return []

        logger.info(f"Loading students from: {filepath}")
        try:
            with open(filepath, "r", encoding="utf-8-sig") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Data file '{filepath}' is not valid JSON: {e}")
            raise PersistenceDecodeError(filepath, str(e)) from e

        if data is None:
            return []
        if not isinstance(data, list):
            msg = f"expected a list of students, got {type(data).__name__}"
            logger.error(f"Data file '{filepath}': {msg}")
            raise PersistenceDecodeError(filepath, msg)

        records: List[StudentRecord] = []
        for position, item in enumerate(data):
            if not isinstance(item, dict):
                raise PersistenceDecodeError(filepath, f"entry {position} is not an object")
            try:
                records.append(StudentRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"Data file '{filepath}': bad entry {position}: {e!r}")
                raise PersistenceDecodeError(filepath, f"entry {position}: {e!r}") from e

        logger.debug(f"Loaded {len(records)} students.")
        return records

    @staticmethod
    def backup_file(filepath: str) -> Optional[str]:
        """Copies ``filepath`` next to itself with the backup suffix. Returns the copy's path."""
        if not os.path.exists(filepath):
            return None
        backup_path = filepath + config.BACKUP_SUFFIX
        shutil.copy2(filepath, backup_path)
        logger.warning(f"Backed up '{filepath}' to '{backup_path}'")
        return backup_path

    # ---- DELIMITED INTERCHANGE ----

    @staticmethod
    def format_csv_row(record: StudentRecord) -> str:
        # No quoting: a field containing the delimiter breaks the row on re-import
        return config.CSV_DELIMITER.join([
            record.last_name,
            record.first_name,
            record.middle_name or "",
            str(record.course),
            record.group,
            record.birth_date.strftime(config.CSV_DATE_FORMAT),
            record.email,
        ])

    @staticmethod
    def export_csv(records: Iterable[StudentRecord], filepath: str) -> int:
        """Writes the header and one line per record. Returns the number of records written."""
        logger.info(f"Exporting students to: {filepath}")
        count = 0
        try:
            with open(filepath, "w", encoding=config.CSV_ENCODING, newline="") as f:
                f.write(config.CSV_HEADER + "\n")
                for record in records:
                    f.write(IOManager.format_csv_row(record) + "\n")
                    count += 1
        except OSError as e:
            logger.exception(f"Failed to export students: {e}")
            raise

        logger.info(f"Exported {count} students to: {filepath}")
        return count

    @staticmethod
    def parse_csv_row(fields: List[str], line_number: int) -> StudentRecord:
        last_name, first_name, middle_name, course, group, birth_date, email = fields
        if not CSV_COURSE_SHAPE.fullmatch(course):
            raise CsvImportError(line_number, f"course {course!r} is not an integer")
        course_value = int(course)
        # strptime alone would also take '1.2.2000'
        if not CSV_DATE_SHAPE.fullmatch(birth_date):
            raise CsvImportError(line_number, f"birth date {birth_date!r} does not match dd.MM.yyyy")
        try:
            birth = datetime.strptime(birth_date, config.CSV_DATE_FORMAT).date()
        except ValueError:
            raise CsvImportError(line_number, f"birth date {birth_date!r} is not a calendar date") from None

        return StudentRecord(
            last_name=last_name,
            first_name=first_name,
            middle_name=middle_name,
            course=course_value,
            group=group,
            birth_date=birth,
            email=email,
        )

    @staticmethod
    def import_csv(filepath: str) -> List[StudentRecord]:
        """
        Reads a delimited file into a NEW list.

        The first line is the header and is skipped. Lines that do not split
        into exactly seven fields are ignored. A bad course or date aborts the
        whole import with CsvImportError; nothing parsed so far is returned.
        """
        logger.info(f"Importing students from: {filepath}")
        records: List[StudentRecord] = []
        skipped = 0
        expected = len(config.CSV_COLUMNS)

        with open(filepath, "r", encoding="utf-8-sig", newline=None) as f:
            f.readline()  # header
            for line_number, line in enumerate(f, start=2):
                fields = line.rstrip("\r\n").split(config.CSV_DELIMITER)
                if len(fields) != expected:
                    skipped += 1
                    logger.debug(f"Skipping line {line_number}: {len(fields)} fields")
                    continue
                try:
                    records.append(IOManager.parse_csv_row(fields, line_number))
                except CsvImportError as e:
                    logger.error(f"CSV import aborted: {e}")
                    raise

        if skipped:
            logger.warning(f"Skipped {skipped} malformed lines in '{filepath}'")
        logger.info(f"Parsed {len(records)} students from: {filepath}")
        return records
