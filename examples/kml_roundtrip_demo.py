#!/usr/bin/env python3
"""
Demo script showing how to use the kmlkit reader, writer and converter.

This example demonstrates:
1. Parsing KML text into the typed document tree
2. Writing the tree back out as KML
3. Converting geometries to Shapely and back
4. Packaging a document as KMZ
"""

import tempfile
from pathlib import Path

from kmlkit.core.config import KmlConfig
from kmlkit.core.conversion import kml_to_shapely, quick_collection, shapely_to_kml
from kmlkit.core.export import write_kml_string, write_kmz_file
from kmlkit.core.logging_config import setup_logging
from kmlkit.core.parsers import parse_kml_string, parse_kmz_file
from kmlkit.models import Coord, Document, KmlDocument, Placemark, Point

SAMPLE_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <name>Site survey</name>
    <Placemark>
      <name>Parcel</name>
      <Polygon>
        <outerBoundaryIs>
          <LinearRing>
            <coordinates>
              -122.08,37.42,0 -122.07,37.42,0 -122.07,37.43,0 -122.08,37.43,0 -122.08,37.42,0
            </coordinates>
          </LinearRing>
        </outerBoundaryIs>
      </Polygon>
    </Placemark>
    <Placemark>
      <name>Gate</name>
      <Point><coordinates>-122.075,37.42</coordinates></Point>
    </Placemark>
  </Document>
</kml>
"""


def main():
    """Run kmlkit demo."""
    setup_logging(log_level="INFO", colored=False)

    print("=" * 70)
    print("kmlkit Demo")
    print("=" * 70)

    # Example 1: Parse KML text
    print("\n1. Parsing KML text...")
    print("-" * 70)

    root = parse_kml_string(SAMPLE_KML)
    document = root.elements[0]
    print(f"  Version: {root.version.value}")
    print(f"  Document: {document.name}")
    for feature in document.elements:
        print(f"    - {feature.name}: {type(feature.geometry).__name__}")

    # Example 2: Write it back out
    print("\n2. Writing KML...")
    print("-" * 70)

    print(write_kml_string(root, KmlConfig(indent=2)))

    # Example 3: Geometry conversion
    print("\n3. Converting geometries...")
    print("-" * 70)

    parcel = kml_to_shapely(document.elements[0].geometry)
    print(f"  Parcel area (deg^2): {parcel.area:.6f}")
    print(f"  Parcel centroid: {parcel.centroid.wkt}")

    collection = quick_collection(root)
    print(f"  Collected {len(collection.geoms)} geometries")

    centroid = shapely_to_kml(parcel.centroid)
    print(f"  Centroid as KML: {write_kml_string(centroid, KmlConfig(xml_declaration=False))}")

    # Example 4: KMZ packaging
    print("\n4. Writing and reading KMZ...")
    print("-" * 70)

    marker = KmlDocument(
        elements=[
            Document(
                name="Markers",
                elements=[Placemark(name="Origin", geometry=Point(coord=Coord(0.0, 0.0)))],
            )
        ]
    )

    with tempfile.TemporaryDirectory() as tmp_dir:
        kmz_path = Path(tmp_dir) / "markers.kmz"
        write_kmz_file(marker, kmz_path)
        restored = parse_kmz_file(kmz_path)
        print(f"  Round trip equal: {restored == marker}")

    print("\n" + "=" * 70)
    print("Demo complete! See the test files for more examples.")
    print("=" * 70)


if __name__ == "__main__":
    main()
