"""Pydantic models for the convert pass."""

from __future__ import annotations

from pydantic import BaseModel, Field

from logsidian.transform.models import AssetCopy


class ConversionResult(BaseModel):
    """Result of converting one page."""

    source_path: str
    destination: str
    title: str
    unresolved: list[str] = Field(default_factory=list)
    assets: list[AssetCopy] = Field(default_factory=list)
    callouts: int = 0
    dry_run: bool = False


class PageError(BaseModel):
    file: str
    error: str


class BatchReport(BaseModel):
    converted: int = 0
    unresolved: int = 0
    assets: int = 0
    errors: list[PageError] = Field(default_factory=list)
    duration: float = 0.0
