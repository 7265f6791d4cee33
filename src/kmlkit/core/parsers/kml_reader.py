"""
KML reader.

Builds the typed document tree from a stream of XML events with an explicit
stack of frames, one per open element, so arbitrarily deep documents never
recurse in Python. Element names are matched on their local part only.

Unknown elements, and known elements in a position their parent does not
accept, are skipped together with their subtree. This is permissiveness, not
validation: a document that reads cleanly may still be invalid KML.
"""

import logging
from pathlib import Path
from typing import IO, Any, Dict, Iterable, Iterator, List, Optional, Union

from kmlkit.core.config import KmlConfig, default_config
from kmlkit.core.errors import (
    InvalidValueError,
    KmlSchemaError,
    MismatchedTagError,
    MissingElementError,
    UnexpectedEndOfDocumentError,
)
from kmlkit.models.coord import coords_from_str, parse_scalar
from kmlkit.models.enums import parse_enum
from kmlkit.models.kml import Kml, KmlDocument, KmlVersion
from kmlkit.models.schema import ELEMENT_SPECS, ElementSpec, Slot, SlotKind, ValueType
from kmlkit.utils.logging import PerformanceTimer

from .events import EndElement, EventSource, StartElement, Text, XmlEvent

logger = logging.getLogger(__name__)

_TRUE = ("1", "true")
_FALSE = ("0", "false")


def parse_bool(text: str, field: str) -> bool:
    """
    Parse an ``xsd:boolean``.

    Raises:
        InvalidValueError: If the text is not 1, 0, true or false
    """
    value = text.strip()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise InvalidValueError(field, text, expected="1, 0, true or false")


class Frame:
    """
    One open element on the reader stack.

    Attributes:
        name: Local name of the element
        slot: Slot of the parent this element fills, if any
    """

    def __init__(self, name: str, slot: Optional[Slot] = None) -> None:
        self.name = name
        self.slot = slot

    def child(self, event: StartElement, reader: "KmlReader") -> "Frame":
        """Return the frame for a child start-tag."""
        return SkipFrame(event.name)

    def text(self, text: str) -> None:
        pass

    def add(self, frame: "Frame", value: Any) -> None:
        """Receive the finished value of a child frame."""

    def finish(self, reader: "KmlReader") -> Any:
        """Close the element and return its value."""
        return None


class SkipFrame(Frame):
    """Swallows an element and everything inside it."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        logger.debug(f"Skipping unsupported element <{name}>")

    def child(self, event: StartElement, reader: "KmlReader") -> Frame:
        return _NestedSkipFrame(event.name)


class _NestedSkipFrame(Frame):
    """Descendant of a skipped element; skipped silently."""

    def child(self, event: StartElement, reader: "KmlReader") -> Frame:
        return _NestedSkipFrame(event.name)


class TextFrame(Frame):
    """Leaf element whose text fills a field of the parent."""

    def __init__(self, name: str, slot: Slot) -> None:
        super().__init__(name, slot)
        self._parts: List[str] = []

    def text(self, text: str) -> None:
        self._parts.append(text)

    def finish(self, reader: "KmlReader") -> str:
        return "".join(self._parts).strip()


class BoundaryFrame(Frame):
    """``outerBoundaryIs`` / ``innerBoundaryIs``: collects LinearRings."""

    def __init__(self, name: str, slot: Slot) -> None:
        super().__init__(name, slot)
        self.rings: List[Any] = []

    def child(self, event: StartElement, reader: "KmlReader") -> Frame:
        if event.name == "LinearRing":
            return NodeFrame(ELEMENT_SPECS["LinearRing"], event, reader)
        return SkipFrame(event.name)

    def add(self, frame: Frame, value: Any) -> None:
        if value is not None:
            self.rings.append(value)

    def finish(self, reader: "KmlReader") -> List[Any]:
        return self.rings


class NodeFrame(Frame):
    """
    Builds one node from its ElementSpec.

    Attributes are routed to typed fields or kept in ``attrs``; children are
    routed by the spec's slots and appended in source order.
    """

    def __init__(
        self,
        spec: ElementSpec,
        event: StartElement,
        reader: "KmlReader",
        slot: Optional[Slot] = None,
    ) -> None:
        super().__init__(event.name, slot)
        self.spec = spec
        self._reader = reader
        self.values: Dict[str, Any] = {}
        self.attrs: Dict[str, str] = {}
        self._content: List[str] = []

        for key, value in event.attrs.items():
            attr_slot = spec.slot_for_attr(key)
            if attr_slot is not None:
                self.values[attr_slot.field] = reader.convert(attr_slot, value)
            else:
                self.attrs[key] = value

        if spec.cls is KmlDocument:
            version = KmlVersion.from_namespace(event.namespace)
            self.values["version"] = version
            if version != KmlVersion.UNKNOWN and self.attrs.get("xmlns") == event.namespace:
                del self.attrs["xmlns"]

    def child(self, event: StartElement, reader: "KmlReader") -> Frame:
        slot = self.spec.slot_for_child(event.name)
        if slot is None:
            return SkipFrame(event.name)
        if slot.kind in (SlotKind.TEXT, SlotKind.TEXT_LIST):
            return TextFrame(event.name, slot)
        if slot.kind in (SlotKind.BOUNDARY, SlotKind.BOUNDARY_LIST):
            return BoundaryFrame(event.name, slot)
        return NodeFrame(ELEMENT_SPECS[event.name], event, reader, slot)

    def text(self, text: str) -> None:
        if self.spec.content_slot is not None:
            self._content.append(text)

    def add(self, frame: Frame, value: Any) -> None:
        slot = frame.slot
        if slot is None:
            return
        if isinstance(frame, TextFrame):
            value = self._reader.convert(slot, value)
        self._set(slot, value)

    def _set(self, slot: Slot, value: Any) -> None:
        if slot.kind in (SlotKind.TEXT_LIST, SlotKind.NODE_LIST):
            self.values.setdefault(slot.field, []).append(value)
        elif slot.kind == SlotKind.BOUNDARY_LIST:
            self.values.setdefault(slot.field, []).extend(value)
        elif slot.kind == SlotKind.BOUNDARY:
            if value:
                self.values[slot.field] = value[0]
        else:
            self.values[slot.field] = value

    def finish(self, reader: "KmlReader") -> Any:
        content_slot = self.spec.content_slot
        if content_slot is not None:
            self.values[content_slot.field] = "".join(self._content).strip()

        for slot in self.spec.slots:
            if slot.required and slot.field not in self.values:
                raise MissingElementError(
                    f"<{self.name}> requires a <{slot.tag}> element",
                    field=slot.tag,
                    parent=self.name,
                )

        return self.spec.cls(attrs=self.attrs, **self.values)


class KmlReader:
    """
    Read KML into the typed document tree.

    Handles:
    - Complete ``<kml>`` documents and bare fragments
    - Every node kind in kmlkit.models, nested to any depth
    - Unrecognized attributes and namespace declarations (kept in ``attrs``)
    - Unknown elements (skipped with their subtree)

    Example:
        >>> reader = KmlReader.from_string("<Point><coordinates>1,1</coordinates></Point>")
        >>> reader.read().coord
        Coord(x=1.0, y=1.0, z=None)
    """

    def __init__(
        self,
        source: Union[str, bytes, Iterable[XmlEvent]],
        config: Optional[KmlConfig] = None,
    ) -> None:
        """
        Initialize KML reader.

        Args:
            source: KML text, raw bytes, or an iterable of XmlEvents
            config: Settings to use; the module default when omitted
        """
        self.config = config or default_config
        self.scalar = self.config.scalar
        self._source = source
        self.node_count = 0

    @classmethod
    def from_string(cls, content: Union[str, bytes], config: Optional[KmlConfig] = None) -> "KmlReader":
        """Create a reader over KML text or bytes."""
        return cls(content, config)

    @classmethod
    def from_path(cls, path: Union[str, Path], config: Optional[KmlConfig] = None) -> "KmlReader":
        """
        Create a reader over a KML file.

        Raises:
            OSError: If the file cannot be read
        """
        path = Path(path)
        logger.info(f"Reading KML file: {path}")
        with open(path, "rb") as f:
            data = f.read()
        return cls(data, config)

    @classmethod
    def from_file(cls, stream: IO, config: Optional[KmlConfig] = None) -> "KmlReader":
        """Create a reader over an open file object (binary or text)."""
        return cls(stream.read(), config)

    @classmethod
    def from_kmz_file(
        cls,
        path: Union[str, Path],
        entry: Optional[str] = None,
        config: Optional[KmlConfig] = None,
    ) -> "KmlReader":
        """
        Create a reader over a KML entry of a KMZ archive.

        Args:
            path: Path to the KMZ archive
            entry: Entry name; the primary KML entry when omitted
            config: Settings to use

        Raises:
            KmzEntryNotFoundError: If the entry (or any KML entry) is missing
            zipfile.BadZipFile: If the file is not a ZIP archive
        """
        from .kmz_reader import KMZReader

        kmz = KMZReader(path, config=config)
        return cls(kmz.read_entry(entry), config)

    def events(self) -> Iterator[XmlEvent]:
        """Return an iterator over the source's XML events."""
        if isinstance(self._source, (str, bytes)):
            return iter(EventSource(self._source))
        return iter(self._source)

    def read(self) -> Kml:
        """
        Read the whole source.

        Returns:
            The single top-level node, or a KmlDocument of version UNKNOWN
            wrapping the top-level nodes of a multi-root fragment

        Raises:
            KmlDecodingError: If bytes cannot be decoded
            KmlSyntaxError: If the markup is malformed
            KmlSchemaError: If the tree is structurally invalid, or the source
                contains no KML element at all
        """
        with PerformanceTimer("KML read") as timer:
            self.node_count = 0
            events = self.events()
            nodes: List[Kml] = []
            while True:
                node = self.read_node(events)
                if node is None:
                    break
                nodes.append(node)
            timer.count = self.node_count

        if not nodes:
            raise KmlSchemaError(
                "No KML elements found in input",
                error_code="NO_ELEMENTS",
                suggestions=["Check that the input contains KML markup"],
            )

        if len(nodes) == 1:
            result = nodes[0]
        else:
            logger.info(f"Input is a fragment with {len(nodes)} top-level elements")
            result = KmlDocument(version=KmlVersion.UNKNOWN, elements=nodes)

        if isinstance(result, KmlDocument):
            logger.info(
                f"Read KML document: version {result.version.value}, "
                f"{len(result.elements)} top-level element(s)"
            )
        else:
            logger.info(f"Read KML {type(result).__name__}")
        return result

    def read_node(self, events: Iterator[XmlEvent]) -> Optional[Kml]:
        """
        Consume exactly one top-level element from an event iterator.

        Unknown top-level elements are skipped and reading moves on to the next
        one. The iterator is left positioned after the element that was read.

        Args:
            events: Iterator of XmlEvents

        Returns:
            The node, or None when the iterator is exhausted

        Raises:
            MismatchedTagError: If an end-tag does not close the open element
            UnexpectedEndOfDocumentError: If input ends inside an element
            KmlSchemaError: If the element is structurally invalid
        """
        stack: List[Frame] = []
        for event in events:
            if isinstance(event, StartElement):
                if stack:
                    frame = stack[-1].child(event, self)
                else:
                    frame = self._root_frame(event)
                stack.append(frame)

            elif isinstance(event, Text):
                if stack:
                    stack[-1].text(event.text)

            elif isinstance(event, EndElement):
                if not stack:
                    raise MismatchedTagError(expected="", found=event.name)
                frame = stack[-1]
                if frame.name != event.name:
                    raise MismatchedTagError(
                        expected=frame.name,
                        found=event.name,
                        path=[f.name for f in stack],
                    )
                stack.pop()
                value = frame.finish(self)
                if isinstance(frame, NodeFrame):
                    self.node_count += 1
                if stack:
                    stack[-1].add(frame, value)
                elif value is not None:
                    return value

        if stack:
            raise UnexpectedEndOfDocumentError([f.name for f in stack])
        return None

    def _root_frame(self, event: StartElement) -> Frame:
        spec = ELEMENT_SPECS.get(event.name)
        if spec is None:
            return SkipFrame(event.name)
        return NodeFrame(spec, event, self)

    def convert(self, slot: Slot, text: str) -> Any:
        """
        Convert attribute or element text to the slot's value type.

        Raises:
            InvalidValueError: If the text cannot be interpreted
            MissingElementError: If a single coordinate is required but absent
        """
        if slot.value == ValueType.STRING:
            return text
        if slot.value == ValueType.BOOL:
            return parse_bool(text, slot.tag)
        if slot.value == ValueType.SCALAR:
            return parse_scalar(text, self.scalar, field=slot.tag)
        if slot.value == ValueType.INT:
            try:
                return int(text.strip())
            except ValueError as e:
                raise InvalidValueError(slot.tag, text, expected="an integer") from e
        if slot.value == ValueType.ENUM:
            return parse_enum(slot.enum, text, slot.tag)
        if slot.value == ValueType.COORDS:
            return coords_from_str(text, self.scalar)
        if slot.value == ValueType.COORD:
            coords = coords_from_str(text, self.scalar)
            if not coords:
                raise MissingElementError(
                    "<Point> requires one coordinate", field="coordinates", parent="Point"
                )
            if len(coords) > 1:
                raise InvalidValueError(slot.tag, text, expected="exactly one coordinate")
            return coords[0]
        raise ValueError(f"Unknown value type: {slot.value}")


def parse_kml_string(content: Union[str, bytes], config: Optional[KmlConfig] = None) -> Kml:
    """
    Convenience function to parse KML text or bytes.

    Args:
        content: KML content
        config: Settings to use

    Returns:
        The parsed node (see KmlReader.read)
    """
    return KmlReader.from_string(content, config).read()


def parse_kml_file(file_path: Union[str, Path], config: Optional[KmlConfig] = None) -> Kml:
    """
    Convenience function to parse a KML file.

    Args:
        file_path: Path to KML file
        config: Settings to use

    Returns:
        The parsed node (see KmlReader.read)
    """
    return KmlReader.from_path(file_path, config).read()
