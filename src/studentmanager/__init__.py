"""Desktop manager for student profiles."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("studentmanager")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
