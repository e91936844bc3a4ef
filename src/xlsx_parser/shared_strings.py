import logging
from typing import Dict, Optional
from zipfile import ZipFile

from lxml import etree

from xlsx_parser.archive import read_xml_entry
from xlsx_parser.constants import (
    RUN_TAG,
    SHARED_STRINGS_ENTRY,
    SST_TAG,
    TEXT_TAG,
    ErrorKind,
)
from xlsx_parser.diagnostics import Diagnostics
from xlsx_parser.exceptions import FileError, FileFormatError, StructureError
from xlsx_parser.xmltree import child, children, local_name, text

logger = logging.getLogger(__name__)
debug = logger.debug


def load_shared_strings(zipf: ZipFile, diagnostics: Diagnostics) -> Dict[int, str]:
    """
    Read the shared string table of an archive.

    A workbook need not contain any shared strings so a missing or unreadable
    entry is recorded in ``diagnostics`` and an empty table returned.
    """
    try:
        root = read_xml_entry(zipf, SHARED_STRINGS_ENTRY)
    except FileError as e:
        diagnostics.add(ErrorKind.ARCHIVE, str(e), SHARED_STRINGS_ENTRY)
        return {}
    except FileFormatError as e:
        diagnostics.add(ErrorKind.PARSE, str(e), SHARED_STRINGS_ENTRY)
        return {}
    return read_shared_strings(root, diagnostics)


def read_shared_strings(root: etree._Element, diagnostics: Diagnostics) -> Dict[int, str]:
    """
    Decode a shared string table into a map of index to text.

    Indexes follow the order of entries in the table, starting at 0. Entries
    that cannot be decoded are left out of the map without changing the
    indexes of the entries that follow them.
    """
    if local_name(root) != SST_TAG:
        diagnostics.add(
            ErrorKind.STRUCTURE,
            f"expected <{SST_TAG}> but found <{local_name(root)}>",
            SHARED_STRINGS_ENTRY,
        )
        return {}

    strings = {}
    for index, item in enumerate(children(root)):
        try:
            strings[index] = _string_item_text(item)
        except StructureError as e:
            diagnostics.add(
                ErrorKind.STRUCTURE, f"shared string {index}: {e}", SHARED_STRINGS_ENTRY
            )
    debug("read_shared_strings: %d strings", len(strings))
    return strings


def _string_item_text(item: etree._Element) -> str:
    runs = list(children(item, RUN_TAG))
    if runs:
        # Rich text: the text of every run in document order
        return "".join(_text_of(run) for run in runs)
    return _text_of(item)


def _text_of(node: etree._Element) -> str:
    text_node: Optional[etree._Element] = child(node, TEXT_TAG)
    if text_node is None:
        raise StructureError(f"<{local_name(node)}> has no <{TEXT_TAG}> element")
    return text(text_node)
