"""
Tests for custom exception hierarchy.
"""

import pytest

from kmlkit.core.errors import (
    ConversionError,
    ConversionErrorKind,
    InvalidValueError,
    KmlDecodingError,
    KmlKitException,
    KmlSchemaError,
    KmlSyntaxError,
    KmlWriteError,
    KmzDisabledError,
    KmzEntryNotFoundError,
    MismatchedTagError,
    MissingElementError,
    UnexpectedEndOfDocumentError,
)


class TestKmlKitException:
    """Tests for base KmlKitException class."""

    def test_basic_exception(self):
        """Test basic exception creation."""
        exc = KmlKitException(message="Test error", error_code="TEST_ERROR")

        assert str(exc) == "TEST_ERROR: Test error"
        assert exc.message == "Test error"
        assert exc.error_code == "TEST_ERROR"
        assert exc.details == {}
        assert exc.suggestions == []

    def test_to_dict(self):
        """Test conversion to dictionary."""
        exc = KmlKitException(
            message="Test error",
            error_code="TEST_ERROR",
            details={"key": "value"},
            suggestions=["suggestion"],
        )

        result = exc.to_dict()

        assert result == {
            "error_code": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
            "suggestions": ["suggestion"],
        }

    def test_repr(self):
        """Test string representation."""
        repr_str = repr(KmlKitException(message="Test error", error_code="TEST_ERROR"))

        assert "KmlKitException" in repr_str
        assert "TEST_ERROR" in repr_str


class TestParseErrors:
    """Tests for decoding, syntax and schema errors."""

    def test_decoding_error(self):
        """Test KmlDecodingError details."""
        exc = KmlDecodingError("bad bytes", encoding="utf-8", position=12)

        assert exc.error_code == "DECODING_ERROR"
        assert exc.details == {"encoding": "utf-8", "position": 12}
        assert len(exc.suggestions) > 0

    def test_syntax_error_position(self):
        """Test that KmlSyntaxError carries line and column."""
        exc = KmlSyntaxError("broken", line_number=3, column=7)

        assert exc.line_number == 3
        assert exc.column == 7
        assert exc.details == {"line_number": 3, "column": 7}

    def test_mismatched_tag(self):
        """Test MismatchedTagError fields and message."""
        exc = MismatchedTagError(expected="name", found="Folder", path=["Folder", "name"])

        assert isinstance(exc, KmlSyntaxError)
        assert exc.error_code == "MISMATCHED_TAG"
        assert exc.message == "Expected </name> but found </Folder>"
        assert exc.details["path"] == ["Folder", "name"]

    def test_unexpected_eof(self):
        """Test UnexpectedEndOfDocumentError names the innermost element."""
        exc = UnexpectedEndOfDocumentError(["kml", "Document"])

        assert isinstance(exc, KmlSyntaxError)
        assert "<Document>" in exc.message
        assert exc.open_elements == ["kml", "Document"]

    def test_missing_element(self):
        """Test MissingElementError."""
        exc = MissingElementError("Polygon needs a boundary", field="outerBoundaryIs", parent="Polygon")

        assert isinstance(exc, KmlSchemaError)
        assert exc.field == "outerBoundaryIs"
        assert exc.details == {"parent": "Polygon", "field": "outerBoundaryIs"}

    def test_invalid_value(self):
        """Test InvalidValueError message."""
        exc = InvalidValueError("width", "wide", expected="a number")

        assert isinstance(exc, KmlSchemaError)
        assert exc.error_code == "INVALID_VALUE"
        assert exc.value == "wide"
        assert "'wide'" in exc.message
        assert "a number" in exc.message

    def test_catch_all_parse_errors(self):
        """Test that every parse error is a KmlKitException."""
        for exc in (
            KmlDecodingError("x"),
            KmlSyntaxError("x"),
            UnexpectedEndOfDocumentError([]),
            InvalidValueError("f", "v"),
        ):
            with pytest.raises(KmlKitException):
                raise exc


class TestConversionError:
    """Tests for ConversionError."""

    def test_kind_and_node_type(self):
        """Test ConversionError attributes."""
        exc = ConversionError(
            "Folder is not a geometry",
            kind=ConversionErrorKind.UNSUPPORTED_NODE,
            node_type="Folder",
        )

        assert exc.kind == ConversionErrorKind.UNSUPPORTED_NODE
        assert exc.error_code == "CONVERSION_ERROR"
        assert exc.details == {"kind": "unsupported_node", "node_type": "Folder"}
        assert len(exc.suggestions) > 0

    def test_no_default_suggestions(self):
        """Test kinds without suggestions."""
        exc = ConversionError("empty", kind=ConversionErrorKind.EMPTY_GEOMETRY)
        assert exc.suggestions == []


class TestOtherErrors:
    """Tests for writer and archive errors."""

    def test_write_error(self):
        """Test KmlWriteError."""
        exc = KmlWriteError("cannot write", node_type="dict")

        assert exc.error_code == "WRITE_ERROR"
        assert exc.details == {"node_type": "dict"}

    def test_kmz_entry_not_found(self):
        """Test that a missing entry is a FileNotFoundError."""
        exc = KmzEntryNotFoundError("doc.kml", archive="site.kmz")

        assert isinstance(exc, FileNotFoundError)
        assert not isinstance(exc, KmlKitException)
        assert "site.kmz" in str(exc)
        assert exc.entry == "doc.kml"

    def test_kmz_disabled(self):
        """Test KmzDisabledError."""
        exc = KmzDisabledError("site.kmz")

        assert exc.error_code == "KMZ_DISABLED"
        assert exc.details == {"path": "site.kmz"}
