"""Outline parser: turns Logseq page text into a Page of nested Blocks.

Parsing never fails. Anything the parser does not understand is kept
verbatim in the content of the block it appears in.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from urllib.parse import unquote

from .models import Block, Page, split_property_list

logger = logging.getLogger(__name__)

_BULLET_RE = re.compile(r"^(?P<indent>[ \t]*)-(?:[ \t]+(?P<text>.*))?$")
_PROPERTY_RE = re.compile(r"^(?P<key>[A-Za-z0-9_\-]+)::(?:[ \t]+(?P<value>.*?))?[ \t]*$")
# An opening fence must not close on the same line (```inline``` is a code span)
_FENCE_OPEN_RE = re.compile(r"^[ \t]*(?P<marker>```|~~~)(?!.*(?P=marker))")
_FENCE_CLOSE_RE = re.compile(r"^[ \t]*(?P<marker>```|~~~)[ \t]*$")
_CODE_RE = re.compile(r"```.*?```|`[^`\n]*`", re.DOTALL)
_TAG_RE = re.compile(
    r"(?:(?<=\s)|^)#(?:\[\[(?P<page>[^\]]+)\]\]|(?P<word>\.?[\w\-/]+(?:\.[\w\-/]+)*))"
)

# Logseq writes continuation lines two columns past the bullet's indentation.
_CONTINUATION_MARGIN = "  "
_TAB_WIDTH = 4


def page_title_from_filename(path: str | Path) -> str:
    """Derive a page title from a Logseq file name.

    ``___`` encodes the namespace separator and percent escapes are used
    for characters that are not allowed in file names.
    """
    stem = Path(path).stem
    return unquote(stem.replace("___", "/"))


def find_tags(content: str) -> set[str]:
    """Collect lower-cased ``#tag`` and ``#[[tag]]`` markers outside code."""
    tags: set[str] = set()
    for segment in _CODE_RE.split(content):
        for m in _TAG_RE.finditer(segment):
            name = m.group("page") or m.group("word")
            tags.add(name.strip().lower())
    return tags


def parse_page(
    text: str,
    *,
    source_path: str | Path | None = None,
    title: str | None = None,
) -> Page:
    """Parse one page.

    Args:
        text: Raw page text.
        source_path: File the text was read from; its name supplies the
            default title.
        title: Explicit fallback title, used when there is no ``title::``
            property. Required when *source_path* is not given.
    """
    properties: dict[str, str] = {}
    preamble: list[str] = []
    roots: list[_BlockBuilder] = []
    stack: list[tuple[int, _BlockBuilder]] = []
    current: _BlockBuilder | None = None

    for line in text.splitlines():
        if current is not None and current.in_fence:
            current.add_continuation(line)
            continue

        m = _BULLET_RE.match(line)
        if m:
            indent = m.group("indent")
            width = len(indent.expandtabs(_TAB_WIDTH))
            builder = _BlockBuilder(indent)
            builder.add_line(m.group("text") or "")

            while stack and stack[-1][0] >= width:
                stack.pop()
            if stack:
                stack[-1][1].children.append(builder)
            else:
                roots.append(builder)
            stack.append((width, builder))
            current = builder
            continue

        if current is not None:
            current.add_continuation(line)
            continue

        # Before the first bullet: page properties, then verbatim text.
        prop = _PROPERTY_RE.match(line.strip())
        if prop and not preamble:
            properties[prop.group("key").lower()] = prop.group("value") or ""
        elif line.strip() or preamble:
            preamble.append(line)

    root_blocks = [b.build() for b in roots]
    while preamble and not preamble[-1].strip():
        preamble.pop()
    if preamble:
        root_blocks.insert(0, Block(content="\n".join(preamble), bullet=False))

    resolved_title = properties.get("title", "").strip() or title
    if not resolved_title and source_path is not None:
        resolved_title = page_title_from_filename(source_path)
    if not resolved_title:
        raise ValueError("page title cannot be derived: pass source_path or title")

    page = Page(
        title=resolved_title,
        properties=properties,
        root_blocks=root_blocks,
        source_path=str(source_path) if source_path is not None else None,
    )
    logger.debug("parsed page %r (%d root blocks)", page.title, len(page.root_blocks))
    return page


class _BlockBuilder:
    """Accumulates the lines of one bullet while the page is scanned."""

    def __init__(self, indent: str) -> None:
        self.indent = indent
        self.lines: list[str] = []
        self.properties: dict[str, str] = {}
        self.children: list[_BlockBuilder] = []
        self.fence: str | None = None

    @property
    def in_fence(self) -> bool:
        return self.fence is not None

    def add_continuation(self, line: str) -> None:
        self.add_line(self._dedent(line))

    def add_line(self, text: str) -> None:
        if self.fence is not None:
            closing = _FENCE_CLOSE_RE.match(text)
            if closing and closing.group("marker") == self.fence:
                self.fence = None
            self.lines.append(text)
            return

        opening = _FENCE_OPEN_RE.match(text)
        if opening:
            self.fence = opening.group("marker")
        else:
            m = _PROPERTY_RE.match(text)
            if m:
                self.properties[m.group("key").lower()] = m.group("value") or ""
                return
        self.lines.append(text)

    def _dedent(self, line: str) -> str:
        if line.startswith(self.indent):
            rest = line[len(self.indent):]
        elif not line.strip():
            return ""
        else:
            # Indentation written differently from the bullet (mixed tabs
            # and spaces); keep the text, drop the leading whitespace.
            rest = line.lstrip(" \t")
        if rest.startswith(_CONTINUATION_MARGIN):
            rest = rest[len(_CONTINUATION_MARGIN):]
        return rest

    def build(self) -> Block:
        lines = list(self.lines)
        while lines and not lines[-1].strip():
            lines.pop()
        content = "\n".join(lines)

        properties = dict(self.properties)
        block_id = properties.pop("id", "").strip() or None
        tags = find_tags(content)
        if "tags" in properties:
            tags.update(t.lower() for t in split_property_list(properties["tags"]))

        return Block(
            content=content,
            id=block_id,
            properties=properties,
            tags=tags,
            children=[c.build() for c in self.children],
        )
