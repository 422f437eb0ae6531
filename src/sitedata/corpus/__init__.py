"""Content corpus access — source reader, data-literal parser, record extractor."""

from sitedata.corpus.extractor import (
    EXPORT_PATTERN,
    ExtractionError,
    as_records,
    declaration_pattern,
    extract_literal,
)
from sitedata.corpus.literal import LiteralSyntaxError, loads, parse_literal
from sitedata.corpus.reader import (
    SourceDirectoryError,
    SourceError,
    SourceFile,
    SourceReadError,
    list_source_files,
    read_source,
    read_sources,
)

__all__ = [
    "EXPORT_PATTERN",
    "ExtractionError",
    "LiteralSyntaxError",
    "SourceDirectoryError",
    "SourceError",
    "SourceFile",
    "SourceReadError",
    "as_records",
    "declaration_pattern",
    "extract_literal",
    "list_source_files",
    "loads",
    "parse_literal",
    "read_source",
    "read_sources",
]
