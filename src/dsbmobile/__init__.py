"""DSBmobile substitution plan client.

Fetches the GetData menu for an account, downloads the timetable pages and
images it references, and turns them into lesson records keyed by a
caller-supplied column mapping.
"""

from dsbmobile.client import DSBClient
from dsbmobile.codec import PayloadCodec
from dsbmobile.config import DSBConfig, get_config
from dsbmobile.dispatch import DocumentDispatcher, classify
from dsbmobile.errors import (
    ApiError,
    DecodeError,
    DocumentError,
    DocumentParseError,
    DSBError,
    EmptyResultError,
    OcrError,
)
from dsbmobile.menu import collect_leaves
from dsbmobile.models import ColumnMapping, DocumentKind, DocumentResult, LessonRecord
from dsbmobile.pages.timetable import TimetablePage, parse_timetable

__all__ = [
    "DSBClient",
    "DSBConfig",
    "get_config",
    "PayloadCodec",
    "DocumentDispatcher",
    "classify",
    "collect_leaves",
    "TimetablePage",
    "parse_timetable",
    "ColumnMapping",
    "DocumentKind",
    "DocumentResult",
    "LessonRecord",
    "DSBError",
    "DecodeError",
    "ApiError",
    "EmptyResultError",
    "DocumentError",
    "DocumentParseError",
    "OcrError",
]
