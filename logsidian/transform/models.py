"""Pydantic models for the transform subsystem."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ResolvedText(BaseModel):
    """Content after reference resolution plus the ids that did not resolve."""

    text: str
    unresolved: list[str] = Field(default_factory=list)


class AssetCopy(BaseModel):
    """A planned copy of one referenced asset into the vault."""

    source: str
    destination: str
    link: str
