"""
KML/KMZ export functionality for kmlkit.

This module serializes the typed document tree back to KML text, files and
KMZ archives.
"""

from kmlkit.core.export.kml_writer import (
    KmlWriter,
    format_value,
    write_kml_bytes,
    write_kml_file,
    write_kml_string,
)
from kmlkit.core.export.kmz_writer import write_kmz_file

__all__ = [
    "KmlWriter",
    "format_value",
    "write_kml_bytes",
    "write_kml_file",
    "write_kml_string",
    "write_kmz_file",
]
