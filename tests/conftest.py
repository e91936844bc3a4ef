import struct
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

import pytest

MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

TEST_BOOK_STRINGS = ["TestColumn", "row 1", "row 2", "Other"]
TEST_BOOK_SHEETS = {
    "sheet": (
        '<row r="1"><c r="A1" t="s"><v>0</v></c><c r="B1"><v>42</v></c></row>'
        '<row r="2"><c r="A2" t="s"><v>1</v></c><c r="B2"><v>3.5</v></c></row>'
        '<row r="3"><c r="A3" t="s"><v>2</v></c><c r="B3" t="e"><v>#DIV/0!</v></c></row>'
    ),
    "2sheetOrNot2sheet": '<row r="1"><c r="C1" t="s"><v>3</v></c></row>',
}


def workbook_xml(declarations):
    sheets = "".join(
        f'<sheet name="{name}" sheetId="{num}" r:id="{rel_id}"/>'
        for num, (name, rel_id) in enumerate(declarations, start=1)
    )
    return (
        XML_HEADER
        + f'<workbook xmlns="{MAIN_NS}" xmlns:r="{REL_NS}"><sheets>{sheets}</sheets></workbook>'
    )


def sheet_xml(rows):
    return XML_HEADER + f'<worksheet xmlns="{MAIN_NS}"><sheetData>{rows}</sheetData></worksheet>'


def shared_strings_xml(items):
    entries = "".join(item if item.startswith("<") else f"<si><t>{item}</t></si>" for item in items)
    return XML_HEADER + f'<sst xmlns="{MAIN_NS}" count="{len(items)}">{entries}</sst>'


def write_xlsx(filepath, sheets, shared_strings=None, entries=None):
    """
    Write a minimal xlsx archive. ``sheets`` maps sheet names to the rows
    of the sheet's ``sheetData``; sheets are stored as ``sheet1.xml``,
    ``sheet2.xml``, etc. ``entries`` adds or, with a value of ``None``,
    removes archive entries.
    """
    files = {
        "[Content_Types].xml": XML_HEADER + "<Types/>",
        "xl/workbook.xml": workbook_xml(
            [(name, f"rId{num}") for num, name in enumerate(sheets, start=1)]
        ),
    }
    for num, rows in enumerate(sheets.values(), start=1):
        files[f"xl/worksheets/sheet{num}.xml"] = sheet_xml(rows)
    if shared_strings is not None:
        files["xl/sharedStrings.xml"] = shared_strings_xml(shared_strings)
    for name, contents in (entries or {}).items():
        if contents is None:
            files.pop(name, None)
        else:
            files[name] = contents

    with ZipFile(filepath, "w", compression=ZIP_DEFLATED) as zipf:
        for name, contents in files.items():
            zipf.writestr(name, contents)
    return filepath


def set_compression_method(filepath, name, method):
    """Rewrite the compression method of entry ``name`` in the central directory."""
    data = bytearray(Path(filepath).read_bytes())
    encoded = name.encode()
    pos = data.find(b"PK\x01\x02")
    while pos >= 0:
        (name_len,) = struct.unpack_from("<H", data, pos + 28)
        if data[pos + 46 : pos + 46 + name_len] == encoded:
            struct.pack_into("<H", data, pos + 10, method)
            Path(filepath).write_bytes(bytes(data))
            return
        pos = data.find(b"PK\x01\x02", pos + 4)
    raise KeyError(name)


@pytest.fixture(name="xlsx_factory")
def xlsx_factory_fixture(tmp_path):
    def factory(sheets, shared_strings=None, entries=None, filename="test.xlsx"):
        return str(write_xlsx(tmp_path / filename, sheets, shared_strings, entries))

    yield factory


@pytest.fixture(name="test_book")
def test_book_fixture(xlsx_factory):
    yield xlsx_factory(TEST_BOOK_SHEETS, TEST_BOOK_STRINGS, filename="TestBook.xlsx")
