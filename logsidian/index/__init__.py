"""Identifier index: build once over a corpus, read by every convert pass."""

from .builder import IndexBuilder, build_index, index_directory, iter_page_files, read_page
from .models import DuplicateIdentifier, IdentifierIndex, IndexBuildReport, IndexEntry

__all__ = [
    "DuplicateIdentifier",
    "IdentifierIndex",
    "IndexBuildReport",
    "IndexBuilder",
    "IndexEntry",
    "build_index",
    "index_directory",
    "iter_page_files",
    "read_page",
]
