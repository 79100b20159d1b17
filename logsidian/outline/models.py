"""Pydantic models for parsed outline pages."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, Field, field_validator

BlockPath = tuple[int, ...]


class Block(BaseModel):
    """One outline bullet and its nested children."""

    content: str = ""
    id: str | None = None
    properties: dict[str, str] = Field(default_factory=dict)
    tags: set[str] = Field(default_factory=set)
    children: list[Block] = Field(default_factory=list)
    callout: str | None = None
    bullet: bool = True

    def walk(self, path: BlockPath = ()) -> Iterator[tuple[BlockPath, Block]]:
        """Depth-first pre-order traversal yielding (path, block) pairs."""
        yield path, self
        for i, child in enumerate(self.children):
            yield from child.walk(path + (i,))


class Page(BaseModel):
    """A parsed source page."""

    title: str = Field(min_length=1)
    properties: dict[str, str] = Field(default_factory=dict)
    root_blocks: list[Block] = Field(default_factory=list)
    source_path: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title cannot be empty or whitespace")
        return v.strip()

    def walk(self) -> Iterator[tuple[BlockPath, Block]]:
        for i, block in enumerate(self.root_blocks):
            yield from block.walk((i,))

    @property
    def aliases(self) -> list[str]:
        raw = self.properties.get("alias") or self.properties.get("aliases") or ""
        return split_property_list(raw)


def split_property_list(value: str) -> list[str]:
    """Split a Logseq list property (``a, [[b c]], #d``) into plain names."""
    items: list[str] = []
    for part in value.split(","):
        name = part.strip().lstrip("#").strip()
        if name.startswith("[[") and name.endswith("]]"):
            name = name[2:-2].strip()
        if name and name not in items:
            items.append(name)
    return items


Block.model_rebuild()
