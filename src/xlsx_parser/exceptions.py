__all__ = [
    "XlsxError",
    "FileError",
    "EntryNotFoundError",
    "FileFormatError",
    "StructureError",
    "DocumentNotFoundError",
    "SheetNotFoundError",
    "StringNotFoundError",
]


class XlsxError(Exception):
    """Base class for other exceptions."""


class FileError(XlsxError):
    """Raised for IO and other OS errors."""


class EntryNotFoundError(FileError):
    """Raised when a named entry is missing from an archive."""

    def __init__(self, entry: str) -> None:
        super().__init__(f"no entry named '{entry}' in archive")
        self.entry = entry


class FileFormatError(XlsxError):
    """Raised for parsing errors during file load."""


class StructureError(FileFormatError):
    """Raised when a parsed entry lacks a required element or attribute."""


class DocumentNotFoundError(XlsxError, LookupError):
    """Raised when looking up a document that is not open."""

    def __init__(self, path: str) -> None:
        super().__init__(f"document '{path}' not found")
        self.path = path


class SheetNotFoundError(XlsxError, LookupError):
    """Raised when looking up a sheet that was not decoded."""

    def __init__(self, path: str, sheet_name: str) -> None:
        super().__init__(f"sheet '{sheet_name}' not found in '{path}'")
        self.path = path
        self.sheet_name = sheet_name


class StringNotFoundError(XlsxError, LookupError):
    """Raised when a shared string index is not in a document's string table."""

    def __init__(self, path: str, index) -> None:
        super().__init__(f"shared string {index} not found in '{path}'")
        self.path = path
        self.index = index
