"""
KMZ writing module.

Packs a KML tree as ``doc.kml`` into a ZIP archive together with any resource
files (icons, overlays) referenced by relative paths.
"""

import logging
import zipfile
from pathlib import Path
from typing import Mapping, Optional, Union

from kmlkit.core.config import KmlConfig, default_config
from kmlkit.core.errors import KmzDisabledError
from kmlkit.models.kml import Kml

from .kml_writer import write_kml_bytes

logger = logging.getLogger(__name__)

PRIMARY_ENTRY = "doc.kml"


def write_kmz_file(
    node: Kml,
    file_path: Union[str, Path],
    resources: Optional[Mapping[str, bytes]] = None,
    config: Optional[KmlConfig] = None,
) -> None:
    """
    Write a node to a KMZ archive.

    The KML document is always the first entry, named doc.kml, so readers that
    pick the first .kml entry find it too.

    Args:
        node: Root node to write
        file_path: Path to output KMZ file
        resources: Extra entries by archive name (e.g. ``{"files/icon.png": data}``)
        config: Settings to use

    Raises:
        KmzDisabledError: If KMZ support is disabled
        ValueError: If a resource would replace doc.kml
        OSError: If the archive cannot be written
    """
    config = config or default_config
    file_path = Path(file_path)
    if not config.kmz_enabled:
        raise KmzDisabledError(str(file_path))

    resources = resources or {}
    if PRIMARY_ENTRY in resources:
        raise ValueError(f"Resource name '{PRIMARY_ENTRY}' is reserved for the KML document")

    logger.info(f"Exporting to KMZ: {file_path}")

    with zipfile.ZipFile(file_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(PRIMARY_ENTRY, write_kml_bytes(node, config))
        for name, data in resources.items():
            zf.writestr(name, data)

    logger.info(f"KMZ export completed: {file_path} ({len(resources)} resource(s))")
