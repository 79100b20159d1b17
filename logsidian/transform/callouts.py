"""Turns blocks carrying a recognized tag into Obsidian callouts."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from logsidian.config.models import DEFAULT_CALLOUT_TAGS
from logsidian.outline import Block, Page, split_property_list

from .pipeline import BlockTransform, map_outside_code

logger = logging.getLogger(__name__)


def _tag_token_re(tag: str) -> re.Pattern[str]:
    name = re.escape(tag)
    return re.compile(
        r"[ \t]*(?:(?<=\s)|^)#(?:\[\[\s*" + name + r"\s*\]\]|" + name + r"(?![\w\-/]|\.[\w\-/]))",
        re.IGNORECASE,
    )


def strip_tag(content: str, tag: str) -> str:
    """Remove every ``#tag`` / ``#[[tag]]`` marker of *tag* from *content*."""
    pattern = _tag_token_re(tag)
    return map_outside_code(content, lambda text: pattern.sub("", text)).strip()


class TagTransformer(BlockTransform):
    """Table-driven tag -> callout conversion.

    The first tag of *callout_tags* (in table order) found on a block wins.
    The marker is consumed, so running the transform again is a no-op.
    """

    def __init__(self, callout_tags: Mapping[str, str] | None = None):
        table = DEFAULT_CALLOUT_TAGS if callout_tags is None else callout_tags
        self.callout_tags = {tag.lstrip("#").lower(): kind for tag, kind in table.items()}
        self.converted = 0

    def apply(self, block: Block, page: Page) -> None:
        if block.callout is not None:
            return
        for tag, kind in self.callout_tags.items():
            if tag in block.tags:
                self._convert(block, tag, kind)
                logger.debug("Block in %r became a %s callout", page.title, kind)
                return

    def _convert(self, block: Block, tag: str, kind: str) -> None:
        block.content = strip_tag(block.content, tag)
        block.tags.discard(tag)
        if "tags" in block.properties:
            remaining = [
                t for t in split_property_list(block.properties["tags"]) if t.lower() != tag
            ]
            if remaining:
                block.properties["tags"] = ", ".join(remaining)
            else:
                del block.properties["tags"]
        block.callout = kind
        self.converted += 1
