"""
Controllers
===========
Glue between the PySide6 windows and the model layer.

Note: This package should be pure Python and should NOT import PySide6.
"""
