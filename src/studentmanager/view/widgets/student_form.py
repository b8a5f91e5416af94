"""
Student Editor Form
"""
from datetime import date
from typing import Dict

from PySide6.QtWidgets import (
    QGroupBox, QFormLayout, QLineEdit, QSpinBox, QDateEdit, QWidget
)
from PySide6.QtCore import QDate

from studentmanager import config
from studentmanager.controller.student_controller import StudentForm
from studentmanager.model.student import FIELD_LABELS, StudentField


def to_qdate(value: date) -> QDate:
    return QDate(value.year, value.month, value.day)


def from_qdate(value: QDate) -> date:
    return date(value.year(), value.month(), value.day())


class StudentFormWidget(QGroupBox):
    def __init__(self, parent=None) -> None:
        super().__init__("Student", parent)

        form = QFormLayout(self)

        self.txt_last_name = QLineEdit()
        self.txt_first_name = QLineEdit()
        self.txt_middle_name = QLineEdit()

        self.spin_course = QSpinBox()
        self.spin_course.setRange(config.COURSE_MIN, config.COURSE_MAX)

        self.txt_group = QLineEdit()

        self.date_birth = QDateEdit()
        self.date_birth.setCalendarPopup(True)
        self.date_birth.setDisplayFormat(config.DISPLAY_DATE_FORMAT)
        self.date_birth.setMinimumDate(to_qdate(config.MIN_BIRTH_DATE))

        self.txt_email = QLineEdit()
        self.txt_email.setPlaceholderText("name@" + config.ALLOWED_EMAIL_DOMAINS[0])

        self._widgets: Dict[StudentField, QWidget] = {
            StudentField.LAST_NAME: self.txt_last_name,
            StudentField.FIRST_NAME: self.txt_first_name,
            StudentField.MIDDLE_NAME: self.txt_middle_name,
            StudentField.COURSE: self.spin_course,
            StudentField.GROUP: self.txt_group,
            StudentField.BIRTH_DATE: self.date_birth,
            StudentField.EMAIL: self.txt_email,
        }
        for student_field, widget in self._widgets.items():
            form.addRow(FIELD_LABELS[student_field] + ":", widget)

        self.clear()

    def get_form(self) -> StudentForm:
        return StudentForm(
            last_name=self.txt_last_name.text(),
            first_name=self.txt_first_name.text(),
            middle_name=self.txt_middle_name.text(),
            course=self.spin_course.value(),
            group=self.txt_group.text(),
            birth_date=from_qdate(self.date_birth.date()),
            email=self.txt_email.text(),
        )

    def set_form(self, values: StudentForm) -> None:
        self.txt_last_name.setText(values.last_name)
        self.txt_first_name.setText(values.first_name)
        self.txt_middle_name.setText(values.middle_name)
        self.spin_course.setValue(values.course)
        self.txt_group.setText(values.group)
        self.date_birth.setDate(to_qdate(values.birth_date))
        self.txt_email.setText(values.email)

    def clear(self) -> None:
        self.set_form(StudentForm())

    def focus_field(self, student_field: StudentField) -> None:
        self._widgets[student_field].setFocus()
