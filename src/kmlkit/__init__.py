"""
kmlkit - typed KML reading, writing and geometry conversion.

This package parses KML and KMZ into a typed document tree, writes the tree
back out, and converts its geometries to and from Shapely.
"""

__version__ = "0.1.0"
