"""
Typed and untyped extension data attached to Features.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class SimpleData:
    """``kml:SimpleData``: one typed field value; ``name`` is an attribute."""

    name: str = ""
    value: str = ""
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class SimpleArrayData:
    """``gx:SimpleArrayData``: an ordered list of values for one field."""

    name: str = ""
    values: List[str] = field(default_factory=list)
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class SchemaData:
    """
    ``kml:SchemaData``: values conforming to a Schema.

    Attributes:
        schema_url: Reference to the Schema (``schemaUrl`` attribute)
        data: SimpleData values, in source order
        arrays: SimpleArrayData values, in source order
    """

    schema_url: Optional[str] = None
    data: List[SimpleData] = field(default_factory=list)
    arrays: List[SimpleArrayData] = field(default_factory=list)
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Data:
    """``kml:Data``: an untyped name/value pair."""

    name: Optional[str] = None
    display_name: Optional[str] = None
    value: Optional[str] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class ExtendedData:
    """``kml:ExtendedData``: Data pairs followed by SchemaData blocks."""

    data: List[Data] = field(default_factory=list)
    schema_data: List[SchemaData] = field(default_factory=list)
    attrs: Dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Optional[str]]:
        """Flatten Data and SimpleData values into one name to value mapping."""
        properties: Dict[str, Optional[str]] = {}
        for item in self.data:
            if item.name:
                properties[item.name] = item.value
        for schema_data in self.schema_data:
            for simple in schema_data.data:
                if simple.name:
                    properties[simple.name] = simple.value
        return properties
