"""
KML writer.

Builds an ``xml.etree.ElementTree`` element for the typed document tree and
serializes it. Child elements follow the fixed schema order of each node type,
absent optional fields are omitted, and recognized attributes are written
before the node's other attributes in their original order. Output read back
with KmlReader compares equal to the tree that was written.

Both building and serializing walk the tree with an explicit stack, so any
tree the reader can produce can be written, however deeply it nests.
"""

import io
import logging
import xml.etree.ElementTree as ET
from enum import Enum
from pathlib import Path
from typing import IO, AbstractSet, Any, Dict, List, Optional, Tuple, Union

from kmlkit.core.config import KmlConfig, default_config
from kmlkit.core.errors import KmlWriteError
from kmlkit.models.coord import Coord, coords_to_str, format_scalar
from kmlkit.models.kml import KNOWN_PREFIXES, Kml, KmlDocument, KmlVersion
from kmlkit.models.schema import ANY_NODE, ELEMENT_SPECS, TYPE_SPECS, ElementSpec, Slot, SlotKind, ValueType
from kmlkit.utils.logging import PerformanceTimer

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'

_TEXT_ESCAPES = (("&", "&amp;"), ("<", "&lt;"), (">", "&gt;"))
_ATTR_ESCAPES = _TEXT_ESCAPES + (('"', "&quot;"), ("\r", "&#13;"), ("\n", "&#10;"), ("\t", "&#09;"))

# An element waiting for its attributes and children, with the namespace
# prefixes declared by the elements around it.
_Pending = Tuple[ET.Element, Any, AbstractSet[str]]


def _escape(value: str, escapes: Tuple[Tuple[str, str], ...]) -> str:
    for char, entity in escapes:
        value = value.replace(char, entity)
    return value


def format_value(slot: Slot, value: Any) -> str:
    """Format a field value as attribute or element text."""
    if slot.value == ValueType.BOOL:
        return "1" if value else "0"
    if slot.value == ValueType.COORDS:
        return coords_to_str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Coord):
        return str(value)
    if isinstance(value, str):
        return value
    return format_scalar(value)


class KmlWriter:
    """
    Write KML nodes to a stream.

    Handles:
    - Every node kind in kmlkit.models, nested to any depth
    - Optional XML declaration and indentation (from KmlConfig)
    - Namespace of KmlDocument derived from its version
    - Prefixed attributes: a known prefix (gx, atom, xal, xsi) that no
      enclosing written element declares is declared where it is used

    The whole element is built before anything is written, so a tree the
    writer rejects leaves the stream untouched.
    """

    def __init__(self, stream: IO, config: Optional[KmlConfig] = None) -> None:
        """
        Initialize KML writer.

        Args:
            stream: Text stream, or binary stream receiving UTF-8
            config: Settings to use; the module default when omitted
        """
        self.config = config or default_config
        self.stream = stream
        self.node_count = 0

    def write(self, node: Kml) -> None:
        """
        Write one node as a complete document.

        Args:
            node: Root node to write

        Raises:
            KmlWriteError: If the tree holds an object that is not a KML node,
                a node in a position KML does not allow, or an attribute with
                an undeclared namespace prefix
        """
        with PerformanceTimer("KML write") as timer:
            root = self.to_element(node)
            timer.count = self.node_count

            text = self.serialize(root)
            if self.config.xml_declaration:
                text = XML_DECLARATION + text
            if self.config.indent is not None:
                text += "\n"

            if isinstance(self.stream, io.TextIOBase):
                self.stream.write(text)
            else:
                self.stream.write(text.encode("utf-8"))

        logger.debug(f"Wrote KML {type(node).__name__}")

    def to_element(self, node: Kml) -> ET.Element:
        """
        Build the ElementTree element for a node.

        Raises:
            KmlWriteError: If the node or one of its children cannot be written
        """
        root = ET.Element(self._tag_for(node))
        pending: List[_Pending] = [(root, node, frozenset())]
        self.node_count = 0

        while pending:
            element, current, scope = pending.pop()
            spec = ELEMENT_SPECS[element.tag]
            attrs, scope = self._attributes(spec, current, scope)
            element.attrib.update(attrs)
            pending.extend(self._fill(element, spec, current, scope))
            self.node_count += 1

        return root

    def serialize(self, root: ET.Element) -> str:
        """
        Serialize an element built by ``to_element`` to text.

        Elements without children are written inline; with ``indent`` set,
        each child starts on its own line, indented one level deeper.
        """
        indent = self.config.indent
        parts: List[str] = []
        # Each entry: element, nesting level, whether only its end-tag remains
        stack: List[Tuple[ET.Element, int, bool]] = [(root, 0, False)]

        while stack:
            element, level, closing = stack.pop()
            if closing:
                if indent is not None:
                    parts.append("\n" + " " * (indent * level))
                parts.append(f"</{element.tag}>")
                continue

            if indent is not None and level:
                parts.append("\n" + " " * (indent * level))
            attrs = "".join(f' {key}="{_escape(value, _ATTR_ESCAPES)}"' for key, value in element.attrib.items())
            parts.append(f"<{element.tag}{attrs}>")
            if element.text:
                parts.append(_escape(element.text, _TEXT_ESCAPES))

            if len(element):
                stack.append((element, level, True))
                stack.extend((child, level + 1, False) for child in reversed(element))
            else:
                parts.append(f"</{element.tag}>")

        return "".join(parts)

    def _tag_for(self, node: Any) -> str:
        spec = TYPE_SPECS.get(type(node))
        if spec is None:
            raise KmlWriteError(
                f"Cannot write object of type {type(node).__name__} as KML",
                node_type=type(node).__name__,
            )
        return spec.tag

    def _attributes(
        self, spec: ElementSpec, node: Any, scope: AbstractSet[str]
    ) -> Tuple[Dict[str, str], AbstractSet[str]]:
        attrs: Dict[str, str] = {}
        if isinstance(node, KmlDocument) and node.version != KmlVersion.UNKNOWN:
            attrs["xmlns"] = node.version.namespace

        for slot in spec.attr_slots:
            value = getattr(node, slot.field)
            if value is not None:
                attrs[slot.tag] = format_value(slot, value)

        attrs.update(node.attrs)

        declared = {key[len("xmlns:"):] for key in attrs if key.startswith("xmlns:")}
        scope = scope | declared
        missing: Dict[str, str] = {}
        for key in attrs:
            prefix, sep, _ = key.partition(":")
            if not sep or prefix in ("xml", "xmlns") or prefix in scope or prefix in missing:
                continue
            if prefix not in KNOWN_PREFIXES:
                raise KmlWriteError(
                    f"Attribute '{key}' of <{spec.tag}> uses undeclared namespace prefix '{prefix}'",
                    node_type=type(node).__name__,
                )
            missing[prefix] = KNOWN_PREFIXES[prefix]

        if missing:
            logger.debug(f"Declaring namespace prefixes {sorted(missing)} on <{spec.tag}>")
            declarations = {f"xmlns:{prefix}": uri for prefix, uri in missing.items()}
            attrs = {**declarations, **attrs}
            scope = scope | set(missing)

        return attrs, scope

    def _fill(self, element: ET.Element, spec: ElementSpec, node: Any, scope: AbstractSet[str]) -> List[_Pending]:
        pending: List[_Pending] = []
        for slot in spec.slots:
            if slot.kind == SlotKind.ATTR:
                continue
            value = getattr(node, slot.field)

            if slot.kind == SlotKind.CONTENT:
                element.text = value
            elif slot.kind == SlotKind.TEXT:
                if value is not None:
                    ET.SubElement(element, slot.tag).text = format_value(slot, value)
            elif slot.kind == SlotKind.TEXT_LIST:
                for item in value:
                    ET.SubElement(element, slot.tag).text = format_value(slot, item)
            elif slot.kind == SlotKind.NODE:
                if value is not None:
                    pending.append(self._add_child(element, slot, value, scope))
            elif slot.kind == SlotKind.NODE_LIST:
                for item in value:
                    pending.append(self._add_child(element, slot, item, scope))
            elif slot.kind == SlotKind.BOUNDARY:
                if value is not None:
                    pending.append(self._add_boundary(element, slot.tag, value, scope))
            elif slot.kind == SlotKind.BOUNDARY_LIST:
                for ring in value:
                    pending.append(self._add_boundary(element, slot.tag, ring, scope))
        return pending

    def _add_child(self, parent: ET.Element, slot: Slot, node: Any, scope: AbstractSet[str]) -> _Pending:
        tag = self._tag_for(node)
        if tag == "kml" or (slot.accepts != ANY_NODE and tag not in slot.accepts):
            raise KmlWriteError(
                f"<{tag}> is not allowed in '{slot.field}'",
                node_type=type(node).__name__,
            )
        return ET.SubElement(parent, tag), node, scope

    def _add_boundary(self, parent: ET.Element, tag: str, ring: Any, scope: AbstractSet[str]) -> _Pending:
        if self._tag_for(ring) != "LinearRing":
            raise KmlWriteError(f"<{tag}> must hold a LinearRing", node_type=type(ring).__name__)
        return ET.SubElement(ET.SubElement(parent, tag), "LinearRing"), ring, scope


def write_kml_string(node: Kml, config: Optional[KmlConfig] = None) -> str:
    """
    Serialize a node to a KML string.

    Args:
        node: Root node to write
        config: Settings to use

    Returns:
        The KML document text
    """
    buffer = io.StringIO()
    KmlWriter(buffer, config).write(node)
    return buffer.getvalue()


def write_kml_bytes(node: Kml, config: Optional[KmlConfig] = None) -> bytes:
    """Serialize a node to UTF-8 encoded KML."""
    buffer = io.BytesIO()
    KmlWriter(buffer, config).write(node)
    return buffer.getvalue()


def write_kml_file(node: Kml, file_path: Union[str, Path], config: Optional[KmlConfig] = None) -> None:
    """
    Write a node to a KML file.

    Args:
        node: Root node to write
        file_path: Path to output file
        config: Settings to use

    Raises:
        KmlWriteError: If the tree cannot be written (no file is created)
        OSError: If the file cannot be written
    """
    file_path = Path(file_path)
    logger.info(f"Exporting to KML: {file_path}")
    data = write_kml_bytes(node, config)
    with open(file_path, "wb") as f:
        f.write(data)
    logger.info(f"KML export completed: {file_path}")
