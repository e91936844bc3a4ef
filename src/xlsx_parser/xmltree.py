import logging
from typing import Dict, Iterator, Optional

from lxml import etree

from xlsx_parser.exceptions import FileFormatError

logger = logging.getLogger(__name__)
debug = logger.debug


def parse_xml(blob: bytes, entry: str) -> etree._Element:
    """
    Parse the bytes of an archive entry and return the root element.

    Raises
    ------
    FileFormatError:
        If the bytes are not well-formed XML.
    """
    debug("parse_xml: entry=%s, size=%d", entry, len(blob))
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
        return etree.fromstring(blob, parser=parser)
    except etree.XMLSyntaxError as e:
        raise FileFormatError(f"{entry}: invalid XML at line {e.lineno}: {e.msg}") from None


def local_name(node: etree._Element) -> str:
    """str: The element's tag without any namespace."""
    return etree.QName(node).localname


def children(node: etree._Element, name: Optional[str] = None) -> Iterator[etree._Element]:
    for element in node:
        if not isinstance(element.tag, str):
            # Processing instructions and entities
            continue
        if name is None or local_name(element) == name:
            yield element


def child(node: etree._Element, name: str) -> Optional[etree._Element]:
    return next(children(node, name), None)


def attributes(node: etree._Element) -> Dict[str, str]:
    """Dict[str, str]: The element's attributes keyed by name without namespace."""
    return {etree.QName(key).localname: value for key, value in node.attrib.items()}


def text(node: etree._Element) -> str:
    return node.text or ""
