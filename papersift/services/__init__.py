"""Service layer."""

from papersift.services.discovery_service import SourceProbe
from papersift.services.export_service import MarkdownExporter
from papersift.services.normalizer import PayloadUnwrapError, RecordNormalizer
from papersift.services.pager import ResultPager
from papersift.services.search_service import RankedSearchEngine, SearchKeywordSet
from papersift.services.session import InvalidCoordinateError, SearchSession
from papersift.services.transport import FileTransport, HttpTransport, TransportError, make_transport

__all__ = [
    "FileTransport",
    "HttpTransport",
    "InvalidCoordinateError",
    "MarkdownExporter",
    "PayloadUnwrapError",
    "RankedSearchEngine",
    "RecordNormalizer",
    "ResultPager",
    "SearchKeywordSet",
    "SearchSession",
    "SourceProbe",
    "TransportError",
    "make_transport",
]
