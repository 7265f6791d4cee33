"""
Enumerated KML value types.
"""

from enum import Enum
from typing import Type, TypeVar

from kmlkit.core.errors import InvalidValueError

E = TypeVar("E", bound=Enum)


class AltitudeMode(str, Enum):
    """``kml:altitudeModeEnumType`` plus the ``gx`` sea-floor extensions."""

    CLAMP_TO_GROUND = "clampToGround"
    RELATIVE_TO_GROUND = "relativeToGround"
    ABSOLUTE = "absolute"
    CLAMP_TO_SEA_FLOOR = "clampToSeaFloor"
    RELATIVE_TO_SEA_FLOOR = "relativeToSeaFloor"


class ColorMode(str, Enum):
    """``kml:colorModeEnumType``."""

    NORMAL = "normal"
    RANDOM = "random"


class DisplayMode(str, Enum):
    """``kml:displayModeEnumType`` used by BalloonStyle."""

    DEFAULT = "default"
    HIDE = "hide"


class ListItemType(str, Enum):
    """``kml:listItemTypeEnumType``."""

    CHECK = "check"
    CHECK_OFF_ONLY = "checkOffOnly"
    CHECK_HIDE_CHILDREN = "checkHideChildren"
    RADIO_FOLDER = "radioFolder"


class RefreshMode(str, Enum):
    """``kml:refreshModeEnumType``."""

    ON_CHANGE = "onChange"
    ON_INTERVAL = "onInterval"
    ON_EXPIRE = "onExpire"


class ViewRefreshMode(str, Enum):
    """``kml:viewRefreshModeEnumType``."""

    NEVER = "never"
    ON_REQUEST = "onRequest"
    ON_STOP = "onStop"
    ON_REGION = "onRegion"


class Units(str, Enum):
    """Units of a Vec2 component (``kml:unitsEnumType``)."""

    FRACTION = "fraction"
    PIXELS = "pixels"
    INSET_PIXELS = "insetPixels"
    PIXELS_FROM_EDGE = "pixelsFromEdge"


def parse_enum(enum_cls: Type[E], text: str, field: str) -> E:
    """
    Look up an enum member by its KML text value.

    Raises:
        InvalidValueError: If the text is not a member value
    """
    value = text.strip()
    try:
        return enum_cls(value)
    except ValueError as e:
        expected = ", ".join(member.value for member in enum_cls)
        raise InvalidValueError(field, text, expected=f"one of {expected}") from e
