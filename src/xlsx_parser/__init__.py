"""Decode Office Open XML spreadsheets into rows of typed cells."""

from xlsx_parser._version import __version__
from xlsx_parser.cell import *  # noqa: F403
from xlsx_parser.constants import *  # noqa: F403
from xlsx_parser.diagnostics import *  # noqa: F403
from xlsx_parser.document import *  # noqa: F403
from xlsx_parser.exceptions import *  # noqa: F403


def _get_version() -> str:
    return __version__
