import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

from xlsx_parser.archive import open_zipfile, read_xml_entry
from xlsx_parser.cell import Cell, CellKind, Sheet
from xlsx_parser.constants import ErrorKind
from xlsx_parser.diagnostics import Diagnostic, Diagnostics
from xlsx_parser.exceptions import (
    DocumentNotFoundError,
    FileError,
    FileFormatError,
    SheetNotFoundError,
    StringNotFoundError,
    StructureError,
)
from xlsx_parser.shared_strings import load_shared_strings
from xlsx_parser.sheet import decode_sheet
from xlsx_parser.workbook import load_workbook, sheet_entry_name

__all__ = ["Document", "Registry", "load_document"]

logger = logging.getLogger(__name__)
debug = logger.debug

PathLike = Union[str, Path]


@dataclass
class Document:
    """The decoded contents of one xlsx archive.

    Parameters
    ----------
    path: str
        Path the archive was read from.
    sheets: Dict[str, Sheet]
        Decoded sheets keyed by name, in workbook order.
    shared_strings: Dict[int, str]
        The archive's shared string table.
    diagnostics: List[Diagnostic]
        Failures that caused parts of the archive to be left out.
    """

    path: str
    sheets: Dict[str, Sheet] = field(default_factory=dict)
    shared_strings: Dict[int, str] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def load_document(filepath: PathLike) -> Document:
    """
    Read and decode an xlsx archive.

    Only a missing or invalid archive or workbook entry is fatal. Shared
    strings, sheets and rows that cannot be decoded are left out of the
    returned document and described in its ``diagnostics``.

    Raises
    ------
    FileError:
        If the archive does not exist or cannot be read.
    FileFormatError:
        If the archive is not a zip file or its workbook entry is missing or
        invalid.
    """
    path = os.fspath(filepath)
    diagnostics = Diagnostics()
    debug("load_document: path=%s", path)

    with open_zipfile(path) as zipf:
        shared_strings = load_shared_strings(zipf, diagnostics)
        sheets = {}
        for sheet_name, rel_id in load_workbook(zipf, diagnostics):
            entry = sheet_entry_name(rel_id)
            try:
                sheets[sheet_name] = decode_sheet(read_xml_entry(zipf, entry), diagnostics, entry)
            except FileError as e:
                diagnostics.add(ErrorKind.ARCHIVE, f"sheet '{sheet_name}': {e}", entry)
            except StructureError as e:
                diagnostics.add(ErrorKind.STRUCTURE, f"sheet '{sheet_name}': {e}", entry)
            except FileFormatError as e:
                diagnostics.add(ErrorKind.PARSE, f"sheet '{sheet_name}': {e}", entry)

    return Document(path, sheets, shared_strings, list(diagnostics))


class Registry:
    """
    A thread-safe store of decoded xlsx documents keyed by path.

    Every operation holds a single lock for its whole duration, including
    the decode performed by :py:meth:`open_document`. Values returned to
    callers are copies and are unaffected by later changes to the registry.

    .. code-block:: python

        registry = Registry()
        registry.open_document("book.xlsx")
        for name in registry.sheet_names("book.xlsx"):
            sheet = registry.get_sheet("book.xlsx", name)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: Dict[str, Document] = {}

    def __contains__(self, filepath: PathLike) -> bool:
        with self._lock:
            return os.fspath(filepath) in self._documents

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    def open_document(self, filepath: PathLike) -> List[Diagnostic]:
        """
        Decode and store an xlsx archive unless it is already open.

        Opening an already open path does not re-read the archive.

        Returns
        -------
        List[Diagnostic]:
            Failures recorded when the document was decoded.

        Raises
        ------
        FileError:
            If the archive does not exist or cannot be read.
        FileFormatError:
            If the archive or its workbook entry is invalid.
        """
        path = os.fspath(filepath)
        with self._lock:
            if path not in self._documents:
                self._documents[path] = load_document(path)
            else:
                debug("open_document: %s already open", path)
            return list(self._documents[path].diagnostics)

    def close_document(self, filepath: PathLike) -> None:
        """Discard a document. Does nothing if the document is not open."""
        with self._lock:
            self._documents.pop(os.fspath(filepath), None)

    def get_sheet(self, filepath: PathLike, sheet_name: str) -> Sheet:
        """
        Return a copy of a decoded sheet.

        Raises
        ------
        DocumentNotFoundError:
            If the document is not open.
        SheetNotFoundError:
            If the document has no decoded sheet called ``sheet_name``.
        """
        with self._lock:
            document = self._document(filepath)
            if sheet_name not in document.sheets:
                raise SheetNotFoundError(document.path, sheet_name)
            sheet = document.sheets[sheet_name]
            return {row_num: dict(row) for row_num, row in sheet.items()}

    def get_shared_string(self, filepath: PathLike, index: int) -> str:
        """
        Return the shared string at ``index`` in a document.

        Raises
        ------
        DocumentNotFoundError:
            If the document is not open.
        StringNotFoundError:
            If there is no string at ``index``.
        """
        with self._lock:
            return self._shared_string(self._document(filepath), index)

    def shared_strings(self, filepath: PathLike) -> Dict[int, str]:
        """Dict[int, str]: A copy of the shared string table of a document."""
        with self._lock:
            return dict(self._document(filepath).shared_strings)

    def sheet_names(self, filepath: PathLike) -> List[str]:
        """List[str]: Names of the decoded sheets of a document, in workbook order."""
        with self._lock:
            return list(self._document(filepath).sheets.keys())

    def diagnostics(self, filepath: PathLike) -> List[Diagnostic]:
        """List[Diagnostic]: Failures recorded when a document was decoded."""
        with self._lock:
            return list(self._document(filepath).diagnostics)

    def cell_text(self, filepath: PathLike, cell: Cell) -> str:
        """
        Return the text of a cell from a document: the shared string for text
        cells and the stored value for all others.

        Raises
        ------
        DocumentNotFoundError:
            If the document is not open.
        StringNotFoundError:
            If a text cell does not refer to a shared string.
        """
        with self._lock:
            document = self._document(filepath)
            if cell.kind != CellKind.TEXT:
                return cell.payload
            try:
                index = int(cell.payload)
            except ValueError:
                raise StringNotFoundError(document.path, cell.payload) from None
            return self._shared_string(document, index)

    def _document(self, filepath: PathLike) -> Document:
        path = os.fspath(filepath)
        if path not in self._documents:
            raise DocumentNotFoundError(path)
        return self._documents[path]

    def _shared_string(self, document: Document, index: int) -> str:
        if index not in document.shared_strings:
            raise StringNotFoundError(document.path, index)
        return document.shared_strings[index]
