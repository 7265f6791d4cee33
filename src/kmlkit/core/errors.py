"""
Custom exception hierarchy for kmlkit.

This module defines the exception hierarchy shared by the reader, writer and
geometry converter, so callers can catch a single base class or a precise
failure category.

I/O failures (``OSError``, ``zipfile.BadZipFile``) are deliberately not part of
this hierarchy: they are raised by the underlying byte source and passed
through unchanged.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class KmlKitException(Exception):
    """
    Base exception for all kmlkit-specific errors.

    Attributes:
        error_code: String identifier for the error type
        message: Human-readable error message
        details: Technical details for logging/debugging
        suggestions: Optional list of resolution suggestions
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize KmlKitException.

        Args:
            message: Human-readable error message
            error_code: String identifier for the error type
            details: Technical details for logging
            suggestions: List of suggestions for resolution
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.suggestions = suggestions or []

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary.

        Returns:
            Dictionary representation of the error
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "suggestions": self.suggestions,
        }

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        """Detailed string representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"error_code='{self.error_code}', "
            f"message='{self.message}')"
        )


class KmlDecodingError(KmlKitException):
    """
    Raised when input bytes are not valid text in the expected encoding.

    Never replaced by lossy decoding.
    """

    def __init__(
        self,
        message: str,
        encoding: Optional[str] = None,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize KmlDecodingError.

        Args:
            message: Human-readable error message
            encoding: Encoding that was attempted
            position: Byte offset of the first undecodable byte
            details: Technical details about the failure
        """
        error_details = details or {}
        if encoding:
            error_details["encoding"] = encoding
        if position is not None:
            error_details["position"] = position

        super().__init__(
            message=message,
            error_code="DECODING_ERROR",
            details=error_details,
            suggestions=[
                "Save the document as UTF-8",
                "Check the encoding declared in the XML declaration",
            ],
        )


class KmlSyntaxError(KmlKitException):
    """
    Raised when the tag structure of a document is malformed.

    Carries the line and column reported by the tokenizer when available.
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        column: Optional[int] = None,
        error_code: str = "SYNTAX_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize KmlSyntaxError.

        Args:
            message: Human-readable error message
            line_number: Line number where parsing failed (if known)
            column: Column where parsing failed (if known)
            error_code: Specific syntax error code
            details: Technical details about the failure
        """
        error_details = details or {}
        if line_number is not None:
            error_details["line_number"] = line_number
        if column is not None:
            error_details["column"] = column

        self.line_number = line_number
        self.column = column

        super().__init__(
            message=message,
            error_code=error_code,
            details=error_details,
            suggestions=[
                "Check for unclosed or mismatched tags",
                "Try opening the file in Google Earth to validate it",
            ],
        )


class MismatchedTagError(KmlSyntaxError):
    """Raised when an end-tag does not close the innermost open element."""

    def __init__(
        self,
        expected: str,
        found: str,
        path: Optional[List[str]] = None,
        line_number: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(
            message=f"Expected </{expected}> but found </{found}>",
            line_number=line_number,
            column=column,
            error_code="MISMATCHED_TAG",
            details={"expected": expected, "found": found, "path": path or []},
        )


class UnexpectedEndOfDocumentError(KmlSyntaxError):
    """Raised when input ends while elements are still open."""

    def __init__(self, open_elements: List[str]):
        self.open_elements = open_elements
        super().__init__(
            message=f"Unexpected end of document inside <{open_elements[-1]}>"
            if open_elements
            else "Unexpected end of document",
            error_code="UNEXPECTED_EOF",
            details={"open_elements": open_elements},
        )


class KmlSchemaError(KmlKitException):
    """
    Raised when a document is well-formed but violates the KML structure
    this library relies on: a required sub-element is missing, or a value
    cannot be interpreted.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: str = "SCHEMA_ERROR",
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize KmlSchemaError.

        Args:
            message: Human-readable error message
            field: Name of the element or attribute at fault
            error_code: Specific schema error code
            details: Technical details about the failure
            suggestions: List of suggestions for fixing the document
        """
        error_details = details or {}
        if field:
            error_details["field"] = field
        self.field = field

        super().__init__(
            message=message,
            error_code=error_code,
            details=error_details,
            suggestions=suggestions or ["Check the element against the KML 2.2 schema"],
        )


class MissingElementError(KmlSchemaError):
    """Raised when a mandatory child element is absent."""

    def __init__(self, message: str, field: str, parent: Optional[str] = None):
        super().__init__(
            message=message,
            field=field,
            error_code="MISSING_ELEMENT",
            details={"parent": parent} if parent else None,
        )


class InvalidValueError(KmlSchemaError):
    """Raised when element or attribute text cannot be parsed."""

    def __init__(self, field: str, value: str, expected: Optional[str] = None):
        self.value = value
        message = f"Invalid value for '{field}': {value!r}"
        if expected:
            message = f"{message} (expected {expected})"
        super().__init__(
            message=message,
            field=field,
            error_code="INVALID_VALUE",
            details={"value": value},
        )


class ConversionErrorKind(str, Enum):
    """Reasons a geometry cannot be converted."""

    UNSUPPORTED_NODE = "unsupported_node"
    MIXED_DIMENSIONALITY = "mixed_dimensionality"
    UNCLOSED_RING = "unclosed_ring"
    INVALID_GEOMETRY = "invalid_geometry"
    EMPTY_GEOMETRY = "empty_geometry"


class ConversionError(KmlKitException):
    """
    Raised when the geometry converter receives something it cannot represent
    in the target model.

    Distinct from parse errors: the input tree itself is valid.
    """

    def __init__(
        self,
        message: str,
        kind: ConversionErrorKind,
        node_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize ConversionError.

        Args:
            message: Human-readable error message
            kind: Category of conversion failure
            node_type: Type name of the offending node or geometry
            details: Technical details about the failure
        """
        error_details = details or {}
        error_details["kind"] = kind.value
        if node_type:
            error_details["node_type"] = node_type
        self.kind = kind
        self.node_type = node_type

        default_suggestions = {
            ConversionErrorKind.UNSUPPORTED_NODE: [
                "Walk Features yourself and convert each embedded Geometry",
                "Use quick_collection() to gather every geometry in a document",
            ],
            ConversionErrorKind.UNCLOSED_RING: [
                "Repeat the first coordinate at the end of the ring",
                "Pass close_rings=True to let the geometry model close rings",
            ],
        }

        super().__init__(
            message=message,
            error_code="CONVERSION_ERROR",
            details=error_details,
            suggestions=default_suggestions.get(kind),
        )


class KmlWriteError(KmlKitException):
    """Raised when the writer is handed an object it cannot serialize."""

    def __init__(self, message: str, node_type: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="WRITE_ERROR",
            details={"node_type": node_type} if node_type else None,
        )


class KmzEntryNotFoundError(FileNotFoundError):
    """Raised when a KMZ archive has no entry with the requested name."""

    def __init__(self, entry: str, archive: Optional[str] = None):
        self.entry = entry
        self.archive = archive
        where = f" in {archive}" if archive else ""
        super().__init__(f"KMZ entry not found{where}: {entry}")


class KmzDisabledError(KmlKitException):
    """Raised when a KMZ archive is read or written with KMZ support disabled."""

    def __init__(self, path: Optional[str] = None):
        super().__init__(
            message="KMZ support is disabled in the active configuration",
            error_code="KMZ_DISABLED",
            details={"path": path} if path else None,
            suggestions=["Set kmz_enabled=True on KmlConfig"],
        )
