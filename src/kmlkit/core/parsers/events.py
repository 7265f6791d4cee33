"""
XML token source for the KML reader.

Turns raw KML text or bytes into a flat stream of start / text / end events
using ``xml.etree.ElementTree.XMLPullParser``. Element names are split into a
local name and a namespace URI; attributes are returned in document order with
namespace declarations first, as ``xmlns`` / ``xmlns:prefix`` entries.

The input is wrapped in a synthetic root element so that fragments with several
top-level elements tokenize like a single document. Finished elements are
discarded as soon as their end event is produced.
"""

import codecs
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union
from xml.parsers import expat

from kmlkit.core.errors import KmlDecodingError, KmlSyntaxError, MismatchedTagError

logger = logging.getLogger(__name__)

FRAGMENT_ROOT = "kmlkit-fragment"
DEFAULT_CHUNK_SIZE = 64 * 1024

_FRAGMENT_OPEN = f"<{FRAGMENT_ROOT}>"
_FRAGMENT_CLOSE = f"</{FRAGMENT_ROOT}>"

_DECLARATION = re.compile(r"<\?xml\b.*?\?>", re.DOTALL)
_DECLARED_ENCODING = re.compile(rb"""^\s*<\?xml[^>]*?encoding\s*=\s*["']([A-Za-z0-9._-]+)["']""")
_END_TAG = re.compile(r"</\s*([^\s>]+)")

_TAG_MISMATCH = expat.errors.codes[expat.errors.XML_ERROR_TAG_MISMATCH]

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


@dataclass
class StartElement:
    """
    An element start-tag.

    Attributes:
        name: Local element name (prefix removed)
        namespace: Namespace URI of the element, if any
        attrs: Attributes in document order, keys as ``name`` or ``prefix:name``
    """

    name: str
    namespace: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Text:
    """Character data of an element that has no child elements."""

    text: str


@dataclass
class EndElement:
    """An element end-tag."""

    name: str
    namespace: Optional[str] = None


XmlEvent = Union[StartElement, Text, EndElement]


def split_tag(tag: str) -> Tuple[str, Optional[str]]:
    """
    Split an ElementTree ``{uri}local`` tag into ``(local, uri)``.

    Examples:
        >>> split_tag("{http://www.opengis.net/kml/2.2}Point")
        ('Point', 'http://www.opengis.net/kml/2.2')
        >>> split_tag("Point")
        ('Point', None)
    """
    if tag.startswith("{"):
        uri, _, local = tag[1:].partition("}")
        return local, uri
    return tag, None


def decode_kml_bytes(data: bytes) -> str:
    """
    Decode KML bytes to text.

    A byte order mark wins, then the encoding named in the XML declaration,
    then UTF-8. Undecodable input is an error, never replaced.

    Raises:
        KmlDecodingError: If the bytes are not valid in the chosen encoding
    """
    encoding = "utf-8"
    for bom, bom_encoding in _BOMS:
        if data.startswith(bom):
            encoding = bom_encoding
            break
    else:
        match = _DECLARED_ENCODING.match(data[:1024])
        if match:
            encoding = match.group(1).decode("ascii")

    logger.debug(f"Decoding KML input as {encoding}")

    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise KmlDecodingError(
            f"Input is not valid {encoding}: {e.reason}",
            encoding=encoding,
            position=e.start,
        ) from e
    except LookupError as e:
        raise KmlDecodingError(
            f"Unknown encoding declared: {encoding}", encoding=encoding
        ) from e


class EventSource:
    """
    Iterable stream of XmlEvents over one KML document or fragment.

    Handles:
    - Byte decoding with BOM / declaration detection
    - Fragments with zero, one or many top-level elements
    - Namespace declarations and prefixed attributes
    - Mapping tokenizer errors to KmlSyntaxError with line/column

    Input that ends while elements are still open simply stops producing
    events; the consumer decides how to report the unterminated elements.
    """

    def __init__(self, source: Union[str, bytes], chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        """
        Initialize the event source.

        Args:
            source: KML text, or raw bytes to be decoded
            chunk_size: Number of characters fed to the tokenizer at a time
        """
        text = decode_kml_bytes(source) if isinstance(source, bytes) else source
        if text.startswith("\ufeff"):
            text = text[1:]

        # The declaration is only legal at the very start; blank it out so the
        # wrapper root can precede it without moving any line or column.
        declaration = _DECLARATION.match(text)
        if declaration:
            blank = re.sub(r"[^\n]", " ", declaration.group())
            text = blank + text[declaration.end():]

        self._text = text
        self._chunk_size = chunk_size

    def __iter__(self) -> Iterator[XmlEvent]:
        parser = ET.XMLPullParser(events=("start", "end", "start-ns"))
        # Each entry: element, local name, whether it has had a child element
        open_elements: List[List] = []
        scopes: List[Dict[str, str]] = [{}]
        pending_ns: List[Tuple[str, str]] = []
        seen_root = False

        def drain() -> Iterator[XmlEvent]:
            nonlocal seen_root
            for event, payload in parser.read_events():
                if event == "start-ns":
                    pending_ns.append(payload)
                elif event == "start":
                    if not seen_root:
                        seen_root = True
                        continue
                    yield self._start(payload, open_elements, scopes, pending_ns)
                    pending_ns.clear()
                elif event == "end":
                    if not open_elements:
                        continue
                    yield from self._end(payload, open_elements, scopes)

        def feed(data: str) -> Iterator[XmlEvent]:
            try:
                parser.feed(data)
            except ET.ParseError as e:
                yield from drain()
                raise self._syntax_error(e, open_elements) from e
            yield from drain()

        yield from feed(_FRAGMENT_OPEN)
        for offset in range(0, len(self._text), self._chunk_size):
            yield from feed(self._text[offset:offset + self._chunk_size])

        if open_elements:
            logger.debug(f"Input ended with {len(open_elements)} open element(s)")
            return

        yield from feed(_FRAGMENT_CLOSE)
        try:
            parser.close()
        except ET.ParseError as e:
            raise self._syntax_error(e, open_elements) from e
        yield from drain()

    def _start(
        self,
        element: ET.Element,
        open_elements: List[List],
        scopes: List[Dict[str, str]],
        pending_ns: List[Tuple[str, str]],
    ) -> StartElement:
        scope = scopes[-1]
        attrs: Dict[str, str] = {}
        if pending_ns:
            scope = dict(scope)
            for prefix, uri in pending_ns:
                attrs[f"xmlns:{prefix}" if prefix else "xmlns"] = uri
                scope[uri] = prefix
        scopes.append(scope)

        for key, value in element.attrib.items():
            local, uri = split_tag(key)
            if uri is None:
                attrs[local] = value
            elif uri == "http://www.w3.org/XML/1998/namespace":
                attrs[f"xml:{local}"] = value
            else:
                prefix = scope.get(uri)
                attrs[f"{prefix}:{local}" if prefix else local] = value

        if open_elements:
            open_elements[-1][2] = True

        name, namespace = split_tag(element.tag)
        open_elements.append([element, name, False])
        return StartElement(name=name, namespace=namespace, attrs=attrs)

    def _end(
        self,
        element: ET.Element,
        open_elements: List[List],
        scopes: List[Dict[str, str]],
    ) -> Iterator[XmlEvent]:
        _, name, has_children = open_elements.pop()
        scopes.pop()
        if not has_children and element.text is not None:
            yield Text(element.text)

        _, namespace = split_tag(element.tag)
        yield EndElement(name=name, namespace=namespace)

        element.clear()
        if open_elements:
            parent = open_elements[-1][0]
            if len(parent) and parent[-1] is element:
                del parent[-1]

    def _syntax_error(self, error: ET.ParseError, open_elements: List[List]) -> KmlSyntaxError:
        line, raw_column = error.position
        column = raw_column - len(_FRAGMENT_OPEN) if line == 1 else raw_column
        column = max(column, 0) + 1

        if error.code == _TAG_MISMATCH and open_elements:
            found = self._end_tag_near(line, raw_column)
            if found and found != FRAGMENT_ROOT:
                return MismatchedTagError(
                    expected=open_elements[-1][1],
                    found=found.rpartition(":")[2],
                    path=[entry[1] for entry in open_elements],
                    line_number=line,
                    column=column,
                )

        return KmlSyntaxError(
            f"Malformed KML: {expat.ErrorString(error.code)} (line {line}, column {column})",
            line_number=line,
            column=column,
        )

    def _end_tag_near(self, line: int, column: int) -> Optional[str]:
        lines = (_FRAGMENT_OPEN + self._text + _FRAGMENT_CLOSE).split("\n")
        if not 0 < line <= len(lines):
            return None
        match = _END_TAG.search(lines[line - 1], max(column, 0))
        return match.group(1) if match else None


def iter_events(source: Union[str, bytes], chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[XmlEvent]:
    """
    Tokenize KML text or bytes into XmlEvents.

    Args:
        source: KML text, or raw bytes to be decoded
        chunk_size: Number of characters fed to the tokenizer at a time

    Returns:
        Iterator over StartElement, Text and EndElement events

    Raises:
        KmlDecodingError: If bytes cannot be decoded
        KmlSyntaxError: If the markup is malformed
    """
    return iter(EventSource(source, chunk_size=chunk_size))
