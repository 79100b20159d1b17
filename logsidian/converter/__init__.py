"""Convert pass: parse, transform, emit and write one page at a time."""

from logsidian.converter.converter import PageConverter, convert_directory
from logsidian.converter.models import BatchReport, ConversionResult, PageError

__all__ = [
    "BatchReport",
    "ConversionResult",
    "PageConverter",
    "PageError",
    "convert_directory",
]
