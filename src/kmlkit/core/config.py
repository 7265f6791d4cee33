"""
Configuration settings for kmlkit.

Configuration is an explicit object handed to readers, writers and the
converter; nothing is read from the environment.
"""

from typing import Any, Callable, Literal, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class KmlConfig(BaseModel):
    """
    Library settings.

    Attributes:
        coord_precision: Scalar backing coordinates ("double" or "single")
        kmz_enabled: Whether KMZ (zipped KML) archives may be read and written
        indent: Spaces per nesting level for pretty output, or None for compact
        xml_declaration: Whether the writer emits an XML declaration
        close_rings: Let the geometry model close unclosed rings instead of
            raising a conversion error
        log_level: Default level used by setup_logging
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    coord_precision: Literal["double", "single"] = "double"
    kmz_enabled: bool = True
    indent: Optional[int] = Field(default=None, ge=0)
    xml_declaration: bool = True
    close_rings: bool = False
    log_level: str = "INFO"

    @property
    def scalar(self) -> Callable[..., Any]:
        """Get the scalar type for the configured precision."""
        return np.float32 if self.coord_precision == "single" else float


# Global default configuration
default_config = KmlConfig()
