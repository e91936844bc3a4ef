import logging
from typing import List, Tuple
from zipfile import ZipFile

from lxml import etree

from xlsx_parser.archive import read_xml_entry
from xlsx_parser.constants import (
    NAME_ATTR,
    REL_ID_ATTR,
    REL_ID_PREFIX_LEN,
    SHEET_ENTRY_FORMAT,
    SHEET_TAG,
    SHEETS_TAG,
    WORKBOOK_ENTRY,
    WORKBOOK_TAG,
    ErrorKind,
)
from xlsx_parser.diagnostics import Diagnostics
from xlsx_parser.exceptions import EntryNotFoundError, FileFormatError
from xlsx_parser.xmltree import attributes, child, children, local_name

logger = logging.getLogger(__name__)
debug = logger.debug


def load_workbook(zipf: ZipFile, diagnostics: Diagnostics) -> List[Tuple[str, int]]:
    """
    Read the sheets declared by an archive's workbook entry.

    Raises
    ------
    FileFormatError:
        If the workbook entry is missing or is not valid XML.
    """
    try:
        root = read_xml_entry(zipf, WORKBOOK_ENTRY)
    except EntryNotFoundError:
        raise FileFormatError(
            f"{zipf.filename}: invalid xlsx document (missing {WORKBOOK_ENTRY})"
        ) from None
    except FileFormatError as e:
        raise FileFormatError(f"{zipf.filename}: {e}") from None
    return read_workbook(root, diagnostics)


def read_workbook(root: etree._Element, diagnostics: Diagnostics) -> List[Tuple[str, int]]:
    """
    Return the name and relationship id of every sheet declared in a
    workbook, in declaration order.

    Declarations without a name or a usable relationship id are recorded in
    ``diagnostics`` and skipped.
    """
    if local_name(root) != WORKBOOK_TAG:
        diagnostics.add(
            ErrorKind.STRUCTURE,
            f"expected <{WORKBOOK_TAG}> but found <{local_name(root)}>",
            WORKBOOK_ENTRY,
        )
        return []

    sheets_node = child(root, SHEETS_TAG)
    if sheets_node is None:
        diagnostics.add(ErrorKind.STRUCTURE, f"no <{SHEETS_TAG}> element", WORKBOOK_ENTRY)
        return []

    declared = []
    for sheet_node in children(sheets_node, SHEET_TAG):
        attrs = attributes(sheet_node)
        if NAME_ATTR not in attrs or REL_ID_ATTR not in attrs:
            diagnostics.add(
                ErrorKind.STRUCTURE,
                f"sheet declaration missing '{NAME_ATTR}' or '{REL_ID_ATTR}': {attrs}",
                WORKBOOK_ENTRY,
            )
            continue
        try:
            rel_id = parse_rel_id(attrs[REL_ID_ATTR])
        except ValueError:
            diagnostics.add(
                ErrorKind.STRUCTURE,
                f"sheet '{attrs[NAME_ATTR]}': invalid relationship id '{attrs[REL_ID_ATTR]}'",
                WORKBOOK_ENTRY,
            )
            continue
        declared.append((attrs[NAME_ATTR], rel_id))

    debug("read_workbook: sheets=%s", declared)
    return declared


def parse_rel_id(value: str) -> int:
    """Return the number following the ``rId`` prefix of a relationship id."""
    return int(value[REL_ID_PREFIX_LEN:])


def sheet_entry_name(rel_id: int) -> str:
    """
    Return the name of the archive entry holding the sheet with the
    relationship id ``rel_id``.

    The workbook's relationships entry is not consulted: sheet entries are
    assumed to be numbered to match their relationship ids, as they are in
    files saved by Excel.
    """
    return SHEET_ENTRY_FORMAT.format(rel_id)
