"""Rewrites Logseq page links, block references and embeds to Obsidian wikilinks."""

from __future__ import annotations

import logging
import re

from logsidian.index import IdentifierIndex, IndexEntry
from logsidian.outline import Block, Page
from logsidian.output.emitter import page_path

from .models import ResolvedText
from .pipeline import BlockTransform, map_outside_code

logger = logging.getLogger(__name__)

_ID = r"[A-Za-z0-9_\-]+"

# One alternation so that every token is matched exactly once, left to right.
_REFERENCE_RE = re.compile(
    r"\{\{embed\s+\(\((?P<embed_id>" + _ID + r")\)\)\s*\}\}"
    r"|\{\{embed\s+\[\[(?P<embed_page>[^\]]+)\]\]\s*\}\}"
    r"|(?<!!)\[(?P<block_label>[^\]\[]+)\]\(\(\((?P<labelled_id>" + _ID + r")\)\)\)"
    r"|(?<!!)\[(?P<page_label>[^\]\[]+)\]\(\[\[(?P<labelled_page>[^\]]+)\]\]\)"
    r"|\(\((?P<ref_id>" + _ID + r")\)\)"
    r"|(?<![!#])\[\[(?P<page>[^\]\[]+)\]\]"
    r"|#\[\[(?P<tag_page>[^\]\[]+)\]\]",
    re.IGNORECASE,
)

UNRESOLVED_MARK = "=={token}=="


def page_link(name: str, label: str | None = None, *, embed: bool = False) -> str:
    target = page_path(name)
    # A name that is not its own vault path keeps it as the display text
    shown = label.strip() if label and label.strip() else name.strip()
    alias = f"|{shown}" if shown and shown != target else ""
    return f"{'!' if embed else ''}[[{target}{alias}]]"


def _block_target(entry: IndexEntry, block_id: str, block_anchors: bool) -> str:
    target = page_path(entry.page)
    return f"{target}#^{block_id}" if block_anchors else target


def resolve_references(
    content: str, index: IdentifierIndex, *, block_anchors: bool = True
) -> ResolvedText:
    """Rewrite every reference token in *content*.

    Block ids found in *index* become links to the owning page (anchored to
    the block when *block_anchors* is set). Unknown ids keep their original
    token, wrapped in a highlight so they stay visible in the vault.
    """
    unresolved: list[str] = []

    def _block(token: str, block_id: str, label: str | None, embed: bool) -> str:
        entry = index.lookup(block_id)
        if entry is None:
            unresolved.append(block_id)
            return UNRESOLVED_MARK.format(token=token)
        return page_link(_block_target(entry, block_id, block_anchors), label, embed=embed)

    def _rewrite(m: re.Match) -> str:
        token = m.group(0)
        if m.group("embed_id"):
            return _block(token, m.group("embed_id"), None, embed=True)
        if m.group("embed_page"):
            return page_link(m.group("embed_page"), embed=True)
        if m.group("labelled_id"):
            return _block(token, m.group("labelled_id"), m.group("block_label"), embed=False)
        if m.group("labelled_page"):
            return page_link(m.group("labelled_page"), m.group("page_label"))
        if m.group("ref_id"):
            return _block(token, m.group("ref_id"), None, embed=False)
        if m.group("page"):
            return page_link(m.group("page"))
        # #[[Multi Word]] is a page reference; Obsidian tags cannot hold spaces
        tag_page = m.group("tag_page")
        if re.fullmatch(r"[\w\-/]+", tag_page):
            return f"#{tag_page}"
        return page_link(tag_page)

    def _segment(text: str) -> str:
        return _REFERENCE_RE.sub(_rewrite, text)

    return ResolvedText(text=map_outside_code(content, _segment), unresolved=unresolved)


class ReferenceResolver(BlockTransform):
    """Pipeline adapter around resolve_references; collects misses per page."""

    def __init__(self, index: IdentifierIndex, *, block_anchors: bool = True):
        self.index = index
        self.block_anchors = block_anchors
        self.unresolved: list[str] = []

    def apply(self, block: Block, page: Page) -> None:
        result = resolve_references(block.content, self.index, block_anchors=self.block_anchors)
        block.content = result.text
        for block_id in result.unresolved:
            logger.warning("Unresolved block reference ((%s)) in page %r", block_id, page.title)
            self.unresolved.append(block_id)
