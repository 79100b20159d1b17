"""Outline parsing: Logseq page text to a tree of blocks."""

from .models import Block, BlockPath, Page, split_property_list
from .parser import find_tags, page_title_from_filename, parse_page

__all__ = [
    "Block",
    "BlockPath",
    "Page",
    "find_tags",
    "page_title_from_filename",
    "parse_page",
    "split_property_list",
]
