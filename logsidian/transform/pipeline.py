"""TransformPipeline: runs ordered block transforms over a page tree."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable

from logsidian.outline import Block, Page

_CODE_RE = re.compile(r"(```.*?```|`[^`\n]*`)", re.DOTALL)


class BlockTransform(ABC):
    @abstractmethod
    def apply(self, block: Block, page: Page) -> None:
        """Rewrite *block* in place. The pipeline visits children itself."""
        ...


class TransformPipeline:
    def __init__(self, transforms: list[BlockTransform]):
        self.transforms = transforms

    def apply(self, page: Page) -> Page:
        for block in page.root_blocks:
            self._apply_block(block, page)
        return page

    def _apply_block(self, block: Block, page: Page) -> None:
        for t in self.transforms:
            t.apply(block, page)
        for child in block.children:
            self._apply_block(child, page)


def map_outside_code(text: str, fn: Callable[[str], str]) -> str:
    """Apply *fn* to the parts of *text* that are not code spans or fences."""
    parts = _CODE_RE.split(text)
    # split() with one capture group alternates text / code
    return "".join(fn(part) if i % 2 == 0 else part for i, part in enumerate(parts))
