"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Loads the StudentStore (Model) from the data file.
2. Wraps it in the StudentController.
3. Instantiates the Main Window (View) with the controller.
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QTranslator, QLibraryInfo, QLocale

from studentmanager import config
from studentmanager.logging_config import setup_logging
from studentmanager.controller.student_controller import StudentController
from studentmanager.model.errors import PersistenceDecodeError
from studentmanager.model.store import StudentStore
from studentmanager.view.main_window import MainWindow

logger = logging.getLogger(__name__)


LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="studentmanager", description=config.VISIBLE_APP_NAME)
    parser.add_argument(
        "--data",
        help=f"Path of the data file (default: ${config.DATA_PATH_ENV} or {config.DEFAULT_DATA_PATH})",
    )
    parser.add_argument("--log-level", default="info", type=str.lower, choices=LOG_LEVELS)
    parser.add_argument("--log-file", help="Append logs to this file")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Refuse to start if the data file cannot be read",
    )
    return parser


def load_store(data_path: str, strict: bool = False) -> StudentStore:
    """Load the data file, exiting with status 2 if it cannot be used."""
    try:
        store = StudentStore.from_file(data_path, strict=strict)
    except PersistenceDecodeError as e:
        logger.error(f"Refusing to start: {e}")
        sys.exit(2)
    except OSError as e:
        logger.error(f"Cannot read data file '{data_path}': {e}")
        sys.exit(2)
    logger.info(f"Loaded {len(store)} students from '{store.filepath}'")
    return store


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=args.log_level, log_file=args.log_file)

    # 2. Initialize the Data Model (before any window exists)
    store = load_store(config.get_data_path(args.data), strict=args.strict)

    # 3. Create the Qt Application (Qt parses its own options from sys.argv)
    app = QApplication(sys.argv[:1])
    app.setApplicationName(config.VISIBLE_APP_NAME)

    # 4. Translations for Qt standard widgets (OK, Cancel, etc.)
    translator = QTranslator()
    translations_path = QLibraryInfo.path(QLibraryInfo.TranslationsPath)
    if translator.load(QLocale.system(), "qtbase", "_", translations_path):
        app.installTranslator(translator)

    # 5. Initialize the Main Window, passing the controller
    window = MainWindow(StudentController(store))
    window.show()
    window.show_load_warning()

    # 6. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
