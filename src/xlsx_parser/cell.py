from dataclasses import dataclass
from typing import Dict

import regex

from xlsx_parser.constants import CellKind

__all__ = [
    "Cell",
    "CellKind",
    "Row",
    "Sheet",
    "column_reference",
    "xl_col_to_index",
]

_NON_ALPHA = regex.compile(r"[^A-Za-z]+")


@dataclass(frozen=True)
class Cell:
    """
    A single decoded cell.

    Cells are not converted to Python values. ``payload`` is the text of
    the cell's value exactly as stored in the archive:

    * for :py:attr:`CellKind.TEXT` cells it is the index of the cell's text
      in the document's shared string table.
    * for :py:attr:`CellKind.NUMBER` cells it is the literal stored value,
      which need not be numeric.

    .. code-block:: python

        cell = registry.get_sheet("book.xlsx", "Sheet1")[1]["A"]
        if cell.kind == CellKind.TEXT:
            print(registry.get_shared_string("book.xlsx", cell.index))
    """

    kind: CellKind
    payload: str

    @property
    def index(self) -> int:
        """int: The shared string index of a text cell.

        Raises
        ------
        ValueError:
            If the cell is not a text cell or its payload is not an integer.
        """
        if self.kind != CellKind.TEXT:
            raise ValueError(f"{self.kind.value} cell has no shared string index")
        return int(self.payload)


Row = Dict[str, Cell]
Sheet = Dict[int, Row]


def column_reference(cell_ref: str) -> str:
    """Strip the row number and any other non-letters from a cell reference.

    ``"AB12"`` becomes ``"AB"`` and ``"$C$3"`` becomes ``"C"``.
    """
    return _NON_ALPHA.sub("", cell_ref)


# Cell reference conversion from  https://github.com/jmcnamara/XlsxWriter
# Copyright (c) 2013-2021, John McNamara <jmcnamara@cpan.org>
def xl_col_to_index(col_str: str) -> int:
    """Convert a column reference to a zero indexed column number.

    Parameters
    ----------
    col_str:  str
        Column in A1 notation, e.g. ``"AB"``.

    Returns
    -------
    col: int
        Column number (zero indexed).
    """
    if not col_str or _NON_ALPHA.search(col_str):
        msg = f"invalid column reference '{col_str}'"
        raise IndexError(msg)

    # Convert base26 column string to number.
    expn = 0
    col = 0
    for char in reversed(col_str.upper()):
        col += (ord(char) - ord("A") + 1) * (26**expn)
        expn += 1

    return col - 1

