"""
Coordinate model and the KML coordinate text grammar.

KML coordinates are ``lon,lat[,alt]`` tuples separated by any whitespace.
Every numeric value is held in a configurable scalar type (``float`` by
default, ``numpy.float32`` for single precision); the scalar is any callable
that parses text and whose no-argument call returns zero.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from kmlkit.core.errors import InvalidValueError

#: A scalar type: parses text, ``CoordType()`` is its zero value.
CoordType = Callable[..., Any]

_WHITESPACE = re.compile(r"\s+")

# xsd:double lexical forms; the scalar itself decides the value.
_XSD_DOUBLE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|[+-]?INF|NaN", re.ASCII)


@dataclass(frozen=True)
class Coord:
    """
    A single KML coordinate.

    Attributes:
        x: Longitude
        y: Latitude
        z: Altitude, or None when the tuple has no altitude (distinct from 0)
    """

    x: Any
    y: Any
    z: Optional[Any] = None

    @property
    def has_z(self) -> bool:
        return self.z is not None

    def to_tuple(self) -> Tuple[Any, ...]:
        """Return ``(x, y)`` or ``(x, y, z)``."""
        if self.z is None:
            return (self.x, self.y)
        return (self.x, self.y, self.z)

    @classmethod
    def from_sequence(
        cls, values: Sequence[Any], scalar: CoordType = float
    ) -> "Coord":
        """Build a Coord from a 2- or 3-item sequence, coercing to ``scalar``."""
        if len(values) not in (2, 3):
            raise ValueError(f"Coordinate needs 2 or 3 values, got {len(values)}")
        z = scalar(values[2]) if len(values) == 3 else None
        return cls(scalar(values[0]), scalar(values[1]), z)

    def __str__(self) -> str:
        return ",".join(format_scalar(v) for v in self.to_tuple())


def parse_scalar(text: str, scalar: CoordType = float, field: str = "value") -> Any:
    """
    Parse a single numeric value.

    Only xsd:double forms are accepted (``1``, ``-0.5``, ``1e-07``, ``INF``,
    ``NaN``); spellings Python alone understands, such as ``1_0`` or
    ``infinity``, are rejected.

    Raises:
        InvalidValueError: If the text is not a number for ``scalar``
    """
    stripped = text.strip()
    if not _XSD_DOUBLE.fullmatch(stripped):
        raise InvalidValueError(field, text, expected="a number")
    try:
        return scalar(stripped)
    except (TypeError, ValueError) as e:
        raise InvalidValueError(field, text, expected="a number") from e


def parse_coord(text: str, scalar: CoordType = float) -> Coord:
    """
    Parse one ``x,y[,z]`` tuple.

    Raises:
        InvalidValueError: If the tuple has the wrong arity or a bad number
    """
    parts = text.strip().split(",")
    if len(parts) not in (2, 3):
        raise InvalidValueError("coordinates", text, expected="x,y[,z]")

    values = [parse_scalar(part, scalar, field="coordinates") for part in parts]
    return Coord(values[0], values[1], values[2] if len(values) == 3 else None)


def coords_from_str(text: str, scalar: CoordType = float) -> List[Coord]:
    """
    Parse KML coordinate text into an ordered list of Coords.

    Tuples may be separated by any amount of whitespace, including newlines,
    and leading/trailing whitespace is ignored.

    Examples:
        >>> coords_from_str("1,1")
        [Coord(x=1.0, y=1.0, z=None)]

        >>> len(coords_from_str("-1,2,0\\n-1.5,3,0  -1,2,0"))
        3
    """
    return [parse_coord(token, scalar) for token in _WHITESPACE.split(text.strip()) if token]


def format_scalar(value: Any) -> str:
    """
    Format a scalar with the shortest text that parses back to the same value.

    Infinities and NaN use their xsd:double spellings.
    """
    if isinstance(value, (float, np.floating)) and not np.isfinite(value):
        if np.isnan(value):
            return "NaN"
        return "INF" if value > 0 else "-INF"
    if isinstance(value, np.floating):
        return np.format_float_positional(value, unique=True, trim="-")
    if isinstance(value, float):
        return repr(value)
    return str(value)


def coords_to_str(coords: Union[Sequence[Coord], Coord], separator: str = "\n") -> str:
    """Format one or more Coords as KML coordinate text."""
    if isinstance(coords, Coord):
        return str(coords)
    return separator.join(str(c) for c in coords)
