"""
Main Application Window
=======================
The primary GUI container: student table, editor form, search/filter/sort
controls and the File menu.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects buttons and menu actions to the StudentController and
   turns raised errors into message boxes.
"""
import os
from typing import List, Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QSplitter, QGroupBox,
    QTableWidget, QTableWidgetItem, QAbstractItemView, QHeaderView,
    QPushButton, QLineEdit, QComboBox, QLabel, QFileDialog, QMessageBox
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction

from studentmanager import config
from studentmanager.controller.student_controller import StudentController, StudentForm
from studentmanager.model.errors import StudentManagerError, ValidationError
from studentmanager.model.student import FIELD_LABELS, StudentField, StudentRecord
from studentmanager.view.widgets.student_form import StudentFormWidget

CSV_FILTER = "CSV Files (*.csv)"


class MainWindow(QMainWindow):
    def __init__(self, controller: StudentController) -> None:
        super().__init__()
        self.controller: StudentController = controller

        self.resize(1200, 700)

        # --- MAIN CONTAINER ---
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QVBoxLayout(main_widget)

        # --- 1. QUERY BAR (search / filter / sort) ---
        main_layout.addWidget(self._create_query_bar())

        splitter = QSplitter(Qt.Horizontal)
        main_layout.addWidget(splitter)

        # --- 2. LEFT SIDE: Table ---
        left = QWidget()
        left_layout = QVBoxLayout(left)
        left_layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget(0, len(StudentField))
        self.table.setHorizontalHeaderLabels([FIELD_LABELS[f] for f in StudentField])
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table.itemSelectionChanged.connect(self.on_selection_changed)
        left_layout.addWidget(self.table)

        self.lbl_count = QLabel()
        left_layout.addWidget(self.lbl_count)

        splitter.addWidget(left)

        # --- 3. RIGHT SIDE: Editor ---
        right = QWidget()
        right_layout = QVBoxLayout(right)
        right_layout.setContentsMargins(0, 0, 0, 0)

        self.form = StudentFormWidget()
        right_layout.addWidget(self.form)

        buttons = QHBoxLayout()
        self.btn_add = QPushButton("Add")
        self.btn_add.clicked.connect(self.on_add_clicked)
        self.btn_edit = QPushButton("Save changes")
        self.btn_edit.clicked.connect(self.on_edit_clicked)
        self.btn_delete = QPushButton("Delete")
        self.btn_delete.clicked.connect(self.on_delete_clicked)
        for btn in (self.btn_add, self.btn_edit, self.btn_delete):
            buttons.addWidget(btn)
        right_layout.addLayout(buttons)
        right_layout.addStretch()

        splitter.addWidget(right)
        splitter.setSizes([850, 350])

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        self.refresh_table()

    def _create_query_bar(self) -> QWidget:
        bar = QGroupBox("Search and filter")
        layout = QHBoxLayout(bar)

        self.txt_search = QLineEdit()
        self.txt_search.setPlaceholderText("Last name")
        self.txt_search.returnPressed.connect(self.on_search_clicked)
        btn_search = QPushButton("Search")
        btn_search.clicked.connect(self.on_search_clicked)

        self.txt_filter_course = QLineEdit()
        self.txt_filter_course.setPlaceholderText("Course")
        self.txt_filter_course.setMaximumWidth(70)
        self.txt_filter_group = QLineEdit()
        self.txt_filter_group.setPlaceholderText("Group")
        btn_filter = QPushButton("Filter")
        btn_filter.clicked.connect(self.on_filter_clicked)

        btn_clear = QPushButton("Clear")
        btn_clear.clicked.connect(self.on_clear_filters_clicked)

        self.cmb_sort = QComboBox()
        self.cmb_sort.addItems(self.controller.sort_labels())
        btn_sort = QPushButton("Sort")
        btn_sort.clicked.connect(self.on_sort_clicked)

        for w in (self.txt_search, btn_search, self.txt_filter_course, self.txt_filter_group,
                  btn_filter, btn_clear, self.cmb_sort, btn_sort):
            layout.addWidget(w)
        return bar

    def _create_actions(self) -> None:
        self.act_new = QAction("New list", self)
        self.act_new.triggered.connect(self.on_file_new)

        self.act_save = QAction("Save", self)
        self.act_save.setShortcut("Ctrl+S")
        self.act_save.triggered.connect(self.on_file_save)

        self.act_import = QAction("Import CSV...", self)
        self.act_import.setShortcut("Ctrl+I")
        self.act_import.triggered.connect(self.on_import_clicked)

        self.act_export = QAction("Export CSV...", self)
        self.act_export.setShortcut("Ctrl+E")
        self.act_export.triggered.connect(self.on_export_clicked)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        file_menu.addAction(self.act_new)
        file_menu.addAction(self.act_save)
        file_menu.addSeparator()
        file_menu.addAction(self.act_import)
        file_menu.addAction(self.act_export)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

    # --- HELPER METHODS ---

    def update_window_title(self) -> None:
        """Updates the window title based on filename and dirty state."""
        title = f"{config.VISIBLE_APP_NAME} - [{os.path.basename(self.controller.store.filepath)}"
        if self.controller.is_modified:
            title += "*"
        title += "]"
        self.setWindowTitle(title)

    def refresh_table(self, records: Optional[List[StudentRecord]] = None) -> None:
        rows = records if records is not None else self.controller.visible
        self.table.blockSignals(True)
        try:
            self.table.clearSelection()
            self.table.setRowCount(len(rows))
            for row, record in enumerate(rows):
                for col, student_field in enumerate(StudentField):
                    value = record.value_of(student_field)
                    if student_field == StudentField.BIRTH_DATE:
                        text = value.strftime(config.CSV_DATE_FORMAT)
                    else:
                        text = str(value)
                    self.table.setItem(row, col, QTableWidgetItem(text))
        finally:
            self.table.blockSignals(False)
        # Rows were rebuilt, so any previous selection is gone
        self._reset_editor()
        self.lbl_count.setText(self.controller.count_text)
        self.update_window_title()

    def _set_editing(self, editing: bool) -> None:
        self.btn_add.setEnabled(not editing)
        self.btn_edit.setEnabled(editing)
        self.btn_delete.setEnabled(editing)

    def _reset_editor(self) -> None:
        self.controller.select(None)
        self.form.clear()
        self._set_editing(False)

    def _show_validation_error(self, error: ValidationError) -> None:
        QMessageBox.warning(self, "Error", error.first.message)
        self.form.focus_field(error.first.field)

    # --- SLOTS ---

    def on_selection_changed(self) -> None:
        rows = self.table.selectionModel().selectedRows()
        record = self.controller.select(rows[0].row() if rows else None)
        if record is None:
            self._reset_editor()
            return
        self.form.set_form(StudentForm.from_record(record))
        self._set_editing(True)

    def on_add_clicked(self) -> None:
        try:
            self.controller.add_student(self.form.get_form())
        except ValidationError as e:
            self._show_validation_error(e)
            return
        self.refresh_table()

    def on_edit_clicked(self) -> None:
        if self.controller.selected is None:
            QMessageBox.warning(self, "Error", "Select a student to edit")
            return
        try:
            record = self.controller.edit_selected(self.form.get_form())
        except ValidationError as e:
            self._show_validation_error(e)
            return
        self.refresh_table()
        row = self.controller.row_of(record)
        if row >= 0:
            self.table.selectRow(row)

    def on_delete_clicked(self) -> None:
        selected = self.controller.selected
        if selected is None:
            QMessageBox.warning(self, "Error", "Select a student to delete")
            return

        reply = QMessageBox.question(
            self,
            "Confirm deletion",
            f"Delete student {selected.last_name} {selected.first_name}?",
            QMessageBox.Yes | QMessageBox.No
        )
        if reply == QMessageBox.Yes:
            self.controller.delete_selected()
            self.refresh_table()

    def on_search_clicked(self) -> None:
        self.refresh_table(self.controller.search(self.txt_search.text()))

    def on_filter_clicked(self) -> None:
        self.refresh_table(self.controller.apply_filter(
            self.txt_filter_course.text(), self.txt_filter_group.text()
        ))

    def on_clear_filters_clicked(self) -> None:
        self.txt_filter_course.clear()
        self.txt_filter_group.clear()
        self.txt_search.clear()
        self.refresh_table(self.controller.clear_filters())

    def on_sort_clicked(self) -> None:
        self.refresh_table(self.controller.sort(self.cmb_sort.currentText()))

    # --- FILE SLOTS ---

    def on_file_new(self) -> None:
        if not self._confirm_discard():
            return
        self.controller.new_list()
        self.refresh_table()

    def on_file_save(self) -> bool:
        try:
            self.controller.save()
        except OSError as e:
            QMessageBox.critical(self, "Error", f"Could not save the file:\n{e}")
            return False
        self.update_window_title()
        self.statusBar().showMessage("Data saved", 3000)
        return True

    def on_import_clicked(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(self, "Import data", "", CSV_FILTER)
        if not fname:
            return
        try:
            count = self.controller.import_csv(fname)
        except (StudentManagerError, OSError, UnicodeDecodeError) as e:
            QMessageBox.critical(self, "Error", f"Import failed:\n{e}")
            return
        self.refresh_table()
        QMessageBox.information(self, "Import", f"Imported {count} students")

    def on_export_clicked(self) -> None:
        fname, _ = QFileDialog.getSaveFileName(
            self, "Export data", config.DEFAULT_EXPORT_FILENAME, CSV_FILTER
        )
        if not fname:
            return
        try:
            count = self.controller.export_csv(fname)
        except OSError as e:
            QMessageBox.critical(self, "Error", f"Export failed:\n{e}")
            return
        QMessageBox.information(self, "Export", f"Exported {count} students")

    def show_load_warning(self) -> None:
        """Tell the user the data file could not be read at startup."""
        error = self.controller.store.load_error
        if error is None:
            return
        QMessageBox.warning(
            self,
            "Data file unreadable",
            f"{error}\n\nStarting with an empty list. The original file will be "
            f"kept as '{error.path}{config.BACKUP_SUFFIX}' on the next save."
        )

    def _confirm_discard(self) -> bool:
        """Ask to save unsaved changes. Returns False if the user cancelled."""
        if not self.controller.is_modified:
            return True

        reply = QMessageBox.question(
            self,
            "Unsaved changes",
            "There are unsaved changes. Save before continuing?",
            QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel
        )
        if reply == QMessageBox.Save:
            return self.on_file_save()
        return reply == QMessageBox.Discard

    def closeEvent(self, event, /) -> None:
        """Handle window close event to prompt for saving if modified."""
        if self._confirm_discard():
            event.accept()
        else:
            event.ignore()
