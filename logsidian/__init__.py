"""logsidian - convert a Logseq graph into an Obsidian vault."""

from logsidian.config import LogsidianConfig, load_config
from logsidian.converter import PageConverter, convert_directory
from logsidian.errors import (
    ConversionError,
    FileAccessError,
    IndexFileError,
    MissingAssetDirectoryError,
)
from logsidian.index import IdentifierIndex, build_index, index_directory
from logsidian.outline import Block, Page, parse_page
from logsidian.output import Emitter, render_page

__version__ = "0.1.0"

__all__ = [
    "Block",
    "ConversionError",
    "Emitter",
    "FileAccessError",
    "IdentifierIndex",
    "IndexFileError",
    "LogsidianConfig",
    "MissingAssetDirectoryError",
    "Page",
    "PageConverter",
    "build_index",
    "convert_directory",
    "index_directory",
    "load_config",
    "parse_page",
    "render_page",
]
