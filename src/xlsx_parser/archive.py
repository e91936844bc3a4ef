import logging
import zlib
from pathlib import Path
from sys import version_info
from typing import Union
from zipfile import BadZipFile, ZipFile

from lxml import etree

from xlsx_parser.exceptions import EntryNotFoundError, FileError, FileFormatError
from xlsx_parser.xmltree import parse_xml

logger = logging.getLogger(__name__)
debug = logger.debug


def open_zipfile(filepath: Union[str, Path]) -> ZipFile:
    """
    Open an xlsx archive for reading.

    Raises
    ------
    FileError:
        If the file does not exist or cannot be read.
    FileFormatError:
        If the file is not a zip archive.
    """
    debug("open_zipfile: path=%s", filepath)
    try:
        # Coverage is python version dependent, so one path with always fail coverage
        if version_info.minor >= 11:  # pragma: no cover
            return ZipFile(filepath, metadata_encoding="utf-8")
        else:  # pragma: no cover
            return ZipFile(filepath)
    except FileNotFoundError:
        raise FileError(f"{filepath}: no such file or directory") from None
    except BadZipFile:
        raise FileFormatError(f"{filepath}: invalid xlsx document") from None
    except OSError as e:
        raise FileError(f"{filepath}: {e.strerror or e}") from None


def locate_entry(zipf: ZipFile, name: str) -> str:
    """
    Return the full name of the first archive entry whose file name,
    ignoring any directories, is ``name``.

    Raises
    ------
    EntryNotFoundError:
        If no entry matches.
    """
    for info in zipf.infolist():
        if not info.is_dir() and info.filename.rsplit("/", 1)[-1] == name:
            return info.filename
    raise EntryNotFoundError(name)


def read_entry(zipf: ZipFile, name: str) -> bytes:
    """Return the uncompressed contents of the archive entry ``name``."""
    filename = locate_entry(zipf, name)
    debug("read_entry: name=%s, filename=%s", name, filename)
    try:
        return zipf.read(filename)
    except (BadZipFile, zlib.error) as e:
        raise FileFormatError(f"{filename}: corrupt archive entry") from e
    except (NotImplementedError, RuntimeError, EOFError) as e:
        raise FileError(f"{filename}: cannot extract archive entry ({e})") from e


def read_xml_entry(zipf: ZipFile, name: str) -> etree._Element:
    """Read the archive entry ``name`` and return its parsed XML root."""
    return parse_xml(read_entry(zipf, name), name)
