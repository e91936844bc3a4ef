import logging
from dataclasses import dataclass
from typing import List, Optional

from xlsx_parser.constants import ErrorKind

__all__ = ["Diagnostic"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal failure recorded while decoding a document.

    Parameters
    ----------
    kind: ErrorKind
        Whether the failure came from the archive, the XML parser or the
        structure of a parsed entry.
    message: str
        Human readable description of the failure.
    entry: str, optional
        Name of the archive entry being decoded, if known.
    """

    kind: ErrorKind
    message: str
    entry: Optional[str] = None

    def __str__(self) -> str:
        if self.entry is None:
            return f"{self.kind.value}: {self.message}"
        return f"{self.entry}: {self.kind.value}: {self.message}"


class Diagnostics(List[Diagnostic]):
    def add(self, kind: ErrorKind, message: str, entry: Optional[str] = None) -> Diagnostic:
        """Record and log a diagnostic, returning the new record."""
        diagnostic = Diagnostic(kind, message, entry)
        logger.warning("%s", diagnostic)
        self.append(diagnostic)
        return diagnostic
