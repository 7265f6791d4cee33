"""
KMZ reading module.

A KMZ file is a ZIP archive holding one primary KML document (``doc.kml`` by
convention) plus resources such as icons. Archive I/O errors
(``OSError``, ``zipfile.BadZipFile``) propagate unchanged.
"""

import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from kmlkit.core.config import KmlConfig, default_config
from kmlkit.core.errors import KmzDisabledError, KmzEntryNotFoundError
from kmlkit.models.kml import Kml

from .kml_reader import KmlReader

logger = logging.getLogger(__name__)

PRIMARY_ENTRY = "doc.kml"
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp"}


class KMZReader:
    """
    Access the entries of a KMZ archive.

    Handles:
    - Entry listing
    - Primary KML entry selection (doc.kml or first .kml)
    - Reading named entries as raw bytes
    """

    def __init__(self, kmz_path: Union[str, Path], config: Optional[KmlConfig] = None) -> None:
        """
        Initialize KMZ reader.

        Args:
            kmz_path: Path to KMZ file
            config: Settings to use

        Raises:
            KmzDisabledError: If KMZ support is disabled
        """
        self.config = config or default_config
        self.kmz_path = Path(kmz_path)
        if not self.config.kmz_enabled:
            raise KmzDisabledError(str(self.kmz_path))

    def entries(self) -> List[str]:
        """
        List entry names in archive order, directories excluded.

        Raises:
            OSError: If the archive cannot be opened
            zipfile.BadZipFile: If the file is not a ZIP archive
        """
        with zipfile.ZipFile(self.kmz_path, "r") as zf:
            return [info.filename for info in zf.infolist() if not info.is_dir()]

    def primary_entry(self) -> str:
        """
        Name of the primary KML entry.

        Priority:
        1. doc.kml (KML convention), at any depth
        2. First .kml file found

        Raises:
            KmzEntryNotFoundError: If the archive holds no KML entry
        """
        kml_files = [name for name in self.entries() if name.lower().endswith(".kml")]
        if not kml_files:
            logger.error(f"No KML files found in KMZ archive: {self.kmz_path}")
            raise KmzEntryNotFoundError("*.kml", archive=str(self.kmz_path))

        for name in kml_files:
            if Path(name).name.lower() == PRIMARY_ENTRY:
                return name

        logger.info(f"No doc.kml found, using first KML file: {kml_files[0]}")
        return kml_files[0]

    def read_entry(self, name: Optional[str] = None) -> bytes:
        """
        Read one entry's bytes.

        Args:
            name: Entry name; the primary KML entry when omitted

        Raises:
            KmzEntryNotFoundError: If no entry has that name
        """
        if name is None:
            name = self.primary_entry()

        with zipfile.ZipFile(self.kmz_path, "r") as zf:
            try:
                data = zf.read(name)
            except KeyError as e:
                raise KmzEntryNotFoundError(name, archive=str(self.kmz_path)) from e

        logger.info(f"Extracted KMZ entry {name} ({len(data)} bytes)")
        return data

    def list_contents(self) -> Dict[str, Any]:
        """
        Summarize the archive without extracting it.

        Returns:
            Dictionary with KML, image and other entries plus totals
        """
        contents: Dict[str, Any] = {
            "kml_files": [],
            "image_files": [],
            "other_files": [],
            "total_files": 0,
            "total_size": 0,
        }

        with zipfile.ZipFile(self.kmz_path, "r") as zf:
            for file_info in zf.infolist():
                if file_info.is_dir():
                    continue

                entry = {"name": file_info.filename, "size": file_info.file_size}
                extension = Path(file_info.filename).suffix.lower()

                contents["total_files"] += 1
                contents["total_size"] += file_info.file_size

                if extension == ".kml":
                    contents["kml_files"].append(entry)
                elif extension in IMAGE_EXTENSIONS:
                    contents["image_files"].append(entry)
                else:
                    contents["other_files"].append(entry)

        return contents

    def read(self, entry: Optional[str] = None) -> Kml:
        """
        Parse a KML entry of the archive.

        Args:
            entry: Entry name; the primary KML entry when omitted

        Returns:
            The parsed node (see KmlReader.read)
        """
        return KmlReader(self.read_entry(entry), self.config).read()


def parse_kmz_file(
    file_path: Union[str, Path],
    entry: Optional[str] = None,
    config: Optional[KmlConfig] = None,
) -> Kml:
    """
    Convenience function to parse a KMZ file.

    Args:
        file_path: Path to KMZ file
        entry: Entry to parse; the primary KML entry when omitted
        config: Settings to use

    Returns:
        The parsed node (see KmlReader.read)
    """
    return KMZReader(file_path, config=config).read(entry)
