"""Index-build pass: walk every page of a corpus and record block ids."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Iterator
from pathlib import Path

from logsidian.errors import FileAccessError
from logsidian.outline import Page, parse_page

from .models import DuplicateIdentifier, IdentifierIndex, IndexBuildReport, IndexEntry

logger = logging.getLogger(__name__)

# Logseq housekeeping folders inside a graph
DEFAULT_IGNORE = {"logseq", ".recycle", ".git", "bak"}


class IndexBuilder:
    """Collects block ids page by page, then freezes them into an index.

    Duplicate ids are resolved by keeping the address with the smallest
    (page title, path), so the result does not depend on page order.
    """

    def __init__(self) -> None:
        self._seen: dict[str, list[IndexEntry]] = defaultdict(list)
        self._pages = 0

    def add_page(self, page: Page) -> None:
        self._pages += 1
        for path, block in page.walk():
            if block.id:
                self._seen[block.id].append(IndexEntry(page=page.title, path=path))

    def build(self) -> tuple[IdentifierIndex, IndexBuildReport]:
        entries: dict[str, IndexEntry] = {}
        duplicates: list[DuplicateIdentifier] = []

        for block_id in sorted(self._seen):
            candidates = sorted(self._seen[block_id], key=IndexEntry.sort_key)
            entries[block_id] = candidates[0]
            if len(candidates) > 1:
                dup = DuplicateIdentifier(id=block_id, kept=candidates[0], discarded=candidates[1:])
                duplicates.append(dup)
                logger.warning(
                    "Duplicate block id %s on %s; keeping %r",
                    block_id,
                    ", ".join(repr(c.page) for c in candidates),
                    candidates[0].page,
                )

        report = IndexBuildReport(
            pages=self._pages,
            identifiers=len(entries),
            duplicates=duplicates,
        )
        return IdentifierIndex(entries=entries), report


def build_index(pages: Iterable[Page]) -> tuple[IdentifierIndex, IndexBuildReport]:
    builder = IndexBuilder()
    for page in pages:
        builder.add_page(page)
    return builder.build()


def iter_page_files(source_dir: Path, ignore: Iterable[str] | None = None) -> list[Path]:
    """All ``*.md`` files below *source_dir*, sorted, skipping ignored folders."""
    skip = set(DEFAULT_IGNORE if ignore is None else ignore)
    if not source_dir.is_dir():
        raise FileAccessError(
            source_dir, "read directory", NotADirectoryError(f"not a directory: {source_dir}")
        )
    files: list[Path] = []
    for p in sorted(source_dir.rglob("*.md")):
        rel = p.relative_to(source_dir)
        if any(part in skip for part in rel.parts[:-1]):
            continue
        if p.is_file():
            files.append(p)
    return files


def read_page(path: Path) -> Page:
    """Read and parse one page file."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        cause = e if isinstance(e, OSError) else OSError(str(e))
        raise FileAccessError(path, "read page", cause) from e
    return parse_page(text, source_path=path)


def _iter_pages(files: Iterable[Path]) -> Iterator[Page]:
    for path in files:
        logger.info("Extracting ids from %s", path)
        yield read_page(path)


def index_directory(
    source_dir: Path, ignore: Iterable[str] | None = None
) -> tuple[IdentifierIndex, IndexBuildReport]:
    """Parse every page below *source_dir* and build its identifier index."""
    return build_index(_iter_pages(iter_page_files(source_dir, ignore)))
