import pytest

from xlsx_parser import Cell, CellKind, column_reference, xl_col_to_index


def test_column_reference():
    assert column_reference("A1") == "A"
    assert column_reference("AB123") == "AB"
    assert column_reference("$XFD$1048576") == "XFD"
    assert column_reference("12") == ""


def test_col_conversion():
    assert xl_col_to_index("A") == 0
    assert xl_col_to_index("Z") == 25
    assert xl_col_to_index("AA") == 26
    assert xl_col_to_index("ab") == 27
    assert xl_col_to_index("XFD") == 16383

    with pytest.raises(IndexError) as e:
        _ = xl_col_to_index("")
    assert "invalid column reference ''" in str(e.value)
    with pytest.raises(IndexError):
        _ = xl_col_to_index("A1")


def test_cell_index():
    assert Cell(CellKind.TEXT, "12").index == 12
    with pytest.raises(ValueError) as e:
        _ = Cell(CellKind.NUMBER, "12").index
    assert "number cell has no shared string index" in str(e.value)
    with pytest.raises(ValueError):
        _ = Cell(CellKind.TEXT, "#N/A").index


def test_cell_immutable():
    cell = Cell(CellKind.NUMBER, "1")
    with pytest.raises(AttributeError):
        cell.payload = "2"
    assert cell == Cell(CellKind.NUMBER, "1")
    assert len({cell, Cell(CellKind.NUMBER, "1")}) == 1
