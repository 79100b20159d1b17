"""Output subsystem: renders and writes Obsidian pages."""

from logsidian.output.emitter import (
    Emitter,
    page_filename,
    page_path,
    render_frontmatter,
    render_page,
)
from logsidian.output.writer import VaultWriter

__all__ = [
    "Emitter",
    "VaultWriter",
    "page_filename",
    "page_path",
    "render_frontmatter",
    "render_page",
]
