import logging
from typing import Optional

from lxml import etree

from xlsx_parser.cell import Cell, Row, Sheet, column_reference
from xlsx_parser.constants import (
    CELL_TAG,
    REF_ATTR,
    ROW_TAG,
    SHEET_DATA_TAG,
    TYPE_ATTR,
    VALUE_TAG,
    CellKind,
    ErrorKind,
)
from xlsx_parser.diagnostics import Diagnostics
from xlsx_parser.exceptions import StructureError
from xlsx_parser.xmltree import attributes, child, children, text

logger = logging.getLogger(__name__)
debug = logger.debug


def decode_sheet(
    root: etree._Element, diagnostics: Diagnostics, entry: Optional[str] = None
) -> Sheet:
    """
    Decode the XML of a worksheet into rows of cells.

    Parameters
    ----------
    root: lxml.etree._Element
        Root element of the worksheet entry.
    diagnostics: Diagnostics
        Receives a record of every row that could not be decoded.
    entry: str, optional
        Name of the worksheet entry, used in diagnostics.

    Returns
    -------
    Sheet:
        Rows keyed by the row number declared in the worksheet. Rows that are
        not declared, or whose row number is invalid, are absent.

    Raises
    ------
    StructureError:
        If the worksheet has no ``sheetData`` element.
    """
    sheet_data = child(root, SHEET_DATA_TAG)
    if sheet_data is None:
        raise StructureError(f"{entry}: no <{SHEET_DATA_TAG}> element")

    sheet: Sheet = {}
    for row_node in children(sheet_data, ROW_TAG):
        row_ref = attributes(row_node).get(REF_ATTR)
        try:
            row_num = int(row_ref)
        except (TypeError, ValueError):
            diagnostics.add(ErrorKind.STRUCTURE, f"invalid row number {row_ref!r}", entry)
            continue
        sheet[row_num] = decode_row(row_node)

    debug("decode_sheet: entry=%s, rows=%d", entry, len(sheet))
    return sheet


def decode_row(row_node: etree._Element) -> Row:
    row: Row = {}
    for cell_node in children(row_node, CELL_TAG):
        value_node = child(cell_node, VALUE_TAG)
        attrs = attributes(cell_node)
        if value_node is None or REF_ATTR not in attrs:
            continue
        # Any type marker means the value indexes the shared strings
        kind = CellKind.TEXT if TYPE_ATTR in attrs else CellKind.NUMBER
        row[column_reference(attrs[REF_ATTR])] = Cell(kind, text(value_node))
    return row
