from enum import Enum

__all__ = ["CellKind", "ErrorKind"]


# Archive entries, located by file name regardless of directory
SHARED_STRINGS_ENTRY = "sharedStrings.xml"
WORKBOOK_ENTRY = "workbook.xml"
SHEET_ENTRY_FORMAT = "sheet{}.xml"

# Element names (namespace-free)
SST_TAG = "sst"
WORKBOOK_TAG = "workbook"
RUN_TAG = "r"
TEXT_TAG = "t"
SHEETS_TAG = "sheets"
SHEET_TAG = "sheet"
SHEET_DATA_TAG = "sheetData"
ROW_TAG = "row"
CELL_TAG = "c"
VALUE_TAG = "v"

# Attribute names (namespace-free)
NAME_ATTR = "name"
REL_ID_ATTR = "id"
REF_ATTR = "r"
TYPE_ATTR = "t"

# Relationship ids are "rId" followed by a decimal number
REL_ID_PREFIX_LEN = 3

# Right-most column of a worksheet, "XFD"
MAX_COL_INDEX = 16383


class CellKind(Enum):
    NUMBER = "number"
    TEXT = "text"


class ErrorKind(Enum):
    ARCHIVE = "archive"
    PARSE = "parse"
    STRUCTURE = "structure"
