"""
app/readers package marker.
"""

from app.readers.row_sources import SUPPORTED_EXTENSIONS, extension_of, read_raw

__all__ = ["SUPPORTED_EXTENSIONS", "extension_of", "read_raw"]
