import pytest

from conftest import sheet_xml

from xlsx_parser import Cell, CellKind
from xlsx_parser.constants import ErrorKind
from xlsx_parser.diagnostics import Diagnostics
from xlsx_parser.exceptions import StructureError
from xlsx_parser.sheet import decode_sheet
from xlsx_parser.xmltree import parse_xml


def decode(rows):
    diagnostics = Diagnostics()
    root = parse_xml(sheet_xml(rows).encode(), "sheet1.xml")
    return decode_sheet(root, diagnostics, "sheet1.xml"), diagnostics


def test_cell_kinds():
    sheet, diagnostics = decode(
        '<row r="1">'
        '<c r="A1" t="s"><v>0</v></c>'
        '<c r="B1"><v>1.5</v></c>'
        '<c r="C1" s="3"><v>not a number</v></c>'
        '<c r="D1" t="n"><v>7</v></c>'
        '<c r="E1" t="str"><f>A1</f><v>formula text</v></c>'
        "</row>"
    )
    assert sheet == {
        1: {
            "A": Cell(CellKind.TEXT, "0"),
            "B": Cell(CellKind.NUMBER, "1.5"),
            "C": Cell(CellKind.NUMBER, "not a number"),
            "D": Cell(CellKind.TEXT, "7"),
            "E": Cell(CellKind.TEXT, "formula text"),
        }
    }
    assert diagnostics == []


def test_sparse_rows():
    sheet, _ = decode('<row r="2"><c r="A2"><v>2</v></c></row><row r="10"><c r="AB10"><v>10</v></c></row>')
    assert list(sheet.keys()) == [2, 10]
    assert sheet[10] == {"AB": Cell(CellKind.NUMBER, "10")}


def test_invalid_row_numbers():
    sheet, diagnostics = decode(
        '<row r="1"><c r="A1"><v>1</v></c></row>'
        '<row r="x"><c r="A2"><v>2</v></c></row>'
        '<row><c r="A3"><v>3</v></c></row>'
        '<row r="4"><c r="A4"><v>4</v></c></row>'
    )
    assert list(sheet.keys()) == [1, 4]
    assert len(diagnostics) == 2
    assert diagnostics[0].kind == ErrorKind.STRUCTURE
    assert diagnostics[0].entry == "sheet1.xml"
    assert "invalid row number 'x'" in diagnostics[0].message
    assert "invalid row number None" in diagnostics[1].message


def test_skipped_cells():
    sheet, diagnostics = decode(
        '<row r="1">'
        '<c r="A1" s="1"/>'
        '<c r="B1" t="inlineStr"><is><t>inline</t></is></c>'
        '<c><v>no reference</v></c>'
        '<c r="D1"><v>4</v></c>'
        '<c r="E1"><v/></c>'
        "</row>"
        '<row r="2"/>'
    )
    assert sheet == {1: {"D": Cell(CellKind.NUMBER, "4"), "E": Cell(CellKind.NUMBER, "")}, 2: {}}
    assert diagnostics == []


def test_duplicates_overwrite():
    sheet, _ = decode(
        '<row r="1"><c r="A1"><v>first</v></c><c r="A1"><v>second</v></c></row>'
        '<row r="1"><c r="B1"><v>later row</v></c></row>'
    )
    assert sheet == {1: {"B": Cell(CellKind.NUMBER, "later row")}}


def test_column_references():
    sheet, _ = decode('<row r="3"><c r="$C$3"><v>1</v></c><c r="xfd3"><v>2</v></c></row>')
    assert list(sheet[3].keys()) == ["C", "xfd"]


def test_missing_sheet_data():
    root = parse_xml(b"<worksheet><dimension ref='A1'/></worksheet>", "sheet2.xml")
    with pytest.raises(StructureError) as e:
        _ = decode_sheet(root, Diagnostics(), "sheet2.xml")
    assert "sheet2.xml: no <sheetData> element" in str(e.value)
