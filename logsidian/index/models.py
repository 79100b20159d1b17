"""Identifier index: block id -> address of the block in the corpus."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from logsidian.errors import FileAccessError, IndexFileError

INDEX_VERSION = 1


class IndexEntry(BaseModel):
    """Where a block lives: owning page title and child-index path."""

    model_config = ConfigDict(frozen=True)

    page: str = Field(min_length=1)
    path: tuple[int, ...] = ()

    def sort_key(self) -> tuple[str, tuple[int, ...]]:
        return (self.page, self.path)


class DuplicateIdentifier(BaseModel):
    """An id found on more than one block. *kept* is the winning address."""

    id: str
    kept: IndexEntry
    discarded: list[IndexEntry] = Field(default_factory=list)


class IndexBuildReport(BaseModel):
    pages: int = 0
    identifiers: int = 0
    duplicates: list[DuplicateIdentifier] = Field(default_factory=list)


class IdentifierIndex(BaseModel):
    """Immutable mapping consumed read-only by convert passes."""

    model_config = ConfigDict(frozen=True)

    version: int = INDEX_VERSION
    entries: dict[str, IndexEntry] = Field(default_factory=dict)

    def lookup(self, block_id: str) -> IndexEntry | None:
        return self.entries.get(block_id)

    def __contains__(self, block_id: object) -> bool:
        return block_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> str:
        """Serialize to an indented JSON document, ids sorted for stable diffs."""
        data = {
            "version": self.version,
            "entries": {
                block_id: {"page": e.page, "path": list(e.path)}
                for block_id, e in sorted(self.entries.items())
            },
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, data: str, source: str | Path = "<string>") -> IdentifierIndex:
        try:
            obj = json.loads(data)
        except json.JSONDecodeError as e:
            raise IndexFileError(source, f"not valid JSON ({e})") from e
        if not isinstance(obj, dict):
            raise IndexFileError(source, "expected a JSON object")
        version = obj.get("version", INDEX_VERSION)
        if version != INDEX_VERSION:
            raise IndexFileError(source, f"unsupported version {version!r}")
        try:
            return cls.model_validate(obj)
        except ValidationError as e:
            raise IndexFileError(source, str(e)) from e

    def save(self, path: Path) -> None:
        """Write the index to a JSON file."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.to_json() + "\n", encoding="utf-8")
        except OSError as e:
            raise FileAccessError(path, "write identifier index", e) from e

    @classmethod
    def load(cls, path: Path) -> IdentifierIndex:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise FileAccessError(path, "read identifier index", e) from e
        return cls.from_json(text, source=path)
