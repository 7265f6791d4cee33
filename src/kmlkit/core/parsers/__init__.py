"""
KML/KMZ reading module for kmlkit.

This module turns KML text, files and KMZ archives into the typed document
tree defined in kmlkit.models.
"""

from .events import EndElement, EventSource, StartElement, Text, XmlEvent, iter_events
from .kml_reader import KmlReader, parse_bool, parse_kml_file, parse_kml_string
from .kmz_reader import KMZReader, parse_kmz_file

__all__ = [
    # Events
    "EventSource",
    "StartElement",
    "Text",
    "EndElement",
    "XmlEvent",
    "iter_events",
    # KML
    "KmlReader",
    "parse_bool",
    "parse_kml_file",
    "parse_kml_string",
    # KMZ
    "KMZReader",
    "parse_kmz_file",
]
