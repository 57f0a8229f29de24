"""GRBL laser driver that delivers jobs through an OctoPrint upload."""

from .driver import OctoPrintGrblDriver
from .uploader import OctoPrintUploader

__all__ = ["OctoPrintGrblDriver", "OctoPrintUploader"]
__version__ = "1.0.0"
