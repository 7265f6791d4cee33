"""
Tests for configuration module.
"""

import numpy as np
import pytest
from pydantic import ValidationError

from kmlkit.core.config import KmlConfig, default_config


class TestKmlConfig:
    """Tests for KmlConfig class."""

    def test_default_values(self) -> None:
        """Test that default values are set correctly."""
        config = KmlConfig()
        assert config.coord_precision == "double"
        assert config.kmz_enabled is True
        assert config.indent is None
        assert config.xml_declaration is True
        assert config.close_rings is False
        assert config.log_level == "INFO"

    def test_scalar_double(self) -> None:
        """Test the scalar for double precision."""
        assert KmlConfig().scalar is float

    def test_scalar_single(self) -> None:
        """Test the scalar for single precision."""
        assert KmlConfig(coord_precision="single").scalar is np.float32

    def test_invalid_precision(self) -> None:
        """Test that unknown precisions are rejected."""
        with pytest.raises(ValidationError):
            KmlConfig(coord_precision="quad")

    def test_negative_indent(self) -> None:
        """Test that a negative indent is rejected."""
        with pytest.raises(ValidationError):
            KmlConfig(indent=-1)

    def test_unknown_setting(self) -> None:
        """Test that unknown settings are rejected."""
        with pytest.raises(ValidationError):
            KmlConfig(pretty=True)

    def test_frozen(self) -> None:
        """Test that settings cannot be changed after creation."""
        config = KmlConfig()
        with pytest.raises(ValidationError):
            config.indent = 2

    def test_copy_with_changes(self) -> None:
        """Test deriving a modified configuration."""
        config = default_config.model_copy(update={"indent": 2})
        assert config.indent == 2
        assert default_config.indent is None
