"""Serializes a transformed Page as Obsidian markdown."""

from __future__ import annotations

import re

import yaml

from logsidian.config.models import OutputConfig
from logsidian.outline import Block, Page, split_property_list

_CLOSING_FENCE_RE = re.compile(r"^[ \t]*(```|~~~)[ \t]*$")
_LIST_PROPERTIES = {"alias": "aliases", "aliases": "aliases", "tags": "tags"}


def page_path(title: str) -> str:
    """Vault-relative path of a page title, without extension.

    Namespaces (``a/b``) become folders; empty, ``.`` and ``..`` segments are
    dropped so a title can never point outside the vault. Links use the same
    path so they always reach the written file.
    """
    segments = [s.strip() for s in title.split("/")]
    segments = [s for s in segments if s and s not in (".", "..")]
    if not segments:
        segments = ["_unnamed"]
    return "/".join(segments)


def page_filename(title: str) -> str:
    return page_path(title) + ".md"


def render_frontmatter(page: Page) -> str:
    fm: dict = {}
    for key, value in page.properties.items():
        if key == "title":
            # The title is the file name
            continue
        if key in _LIST_PROPERTIES:
            items = split_property_list(value)
            if items:
                fm.setdefault(_LIST_PROPERTIES[key], []).extend(items)
        else:
            fm[key] = value
    if not fm:
        return ""
    dumped = yaml.dump(fm, default_flow_style=False, sort_keys=False, allow_unicode=True).rstrip()
    return f"---\n{dumped}\n---\n\n"


class Emitter:
    """Renders blocks as nested ``- `` bullets, one tab per level.

    Callout blocks render as ``> [!kind] header`` with their remaining text
    and all descendants quoted beneath. Every block follows the same policy.
    """

    def __init__(self, config: OutputConfig | None = None) -> None:
        self.config = config or OutputConfig()

    def render(self, page: Page) -> str:
        head = render_frontmatter(page) if self.config.frontmatter else ""
        lines: list[str] = []
        for block in page.root_blocks:
            lines.extend(self.render_block(block))
        body = "\n".join(lines)
        return f"{head}{body}\n" if body else head

    def render_block(self, block: Block) -> list[str]:
        """Lines for *block* and its subtree, relative to the block's own depth."""
        if not block.bullet:
            return block.content.split("\n")
        if block.callout is not None:
            return self._render_callout(block)

        props = self._property_lines(block)
        text = self._content_lines(block) + props
        first = text[0] if text else ""
        lines = [f"- {first}" if first else "-"]
        lines.extend(f"  {line}" if line else "" for line in text[1:])
        self._add_anchor(block, lines, own_line=bool(props))

        for child in block.children:
            lines.extend(_indent(self.render_block(child)))
        return lines

    def _render_callout(self, block: Block) -> list[str]:
        text = self._content_lines(block) + self._property_lines(block)
        header = text[0] if text else ""
        body = list(text[1:])
        for child in block.children:
            body.extend(self.render_block(child))

        lines = [f"> [!{block.callout}] {header}".rstrip()]
        lines.extend(f"> {line}" if line else ">" for line in body)
        if block.id and self.config.block_anchors:
            # A quote's anchor goes on its own line after a blank line
            lines.extend(["", f"^{block.id}"])
        return lines

    def _content_lines(self, block: Block) -> list[str]:
        return block.content.split("\n") if block.content else []

    def _property_lines(self, block: Block) -> list[str]:
        dropped = set(self.config.drop_block_properties)
        return [
            f"{key}:: {value}".rstrip()
            for key, value in block.properties.items()
            if key not in dropped
        ]

    def _add_anchor(self, block: Block, lines: list[str], *, own_line: bool = False) -> None:
        if not block.id or not self.config.block_anchors:
            return
        # Appending to a closing fence or a key:: value line would change it
        if own_line or (len(lines) > 1 and _CLOSING_FENCE_RE.match(lines[-1])):
            lines.append(f"  ^{block.id}")
        else:
            lines[-1] = f"{lines[-1]} ^{block.id}"


def _indent(lines: list[str]) -> list[str]:
    return [f"\t{line}" if line else line for line in lines]


def render_page(page: Page, config: OutputConfig | None = None) -> str:
    return Emitter(config).render(page)
