from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_CALLOUT_TAGS: dict[str, str] = {
    ".border": "definition",
    "definition": "definition",
}


class IndexConfig(BaseModel):
    path: str = "ids.json"
    ignore: list[str] = Field(default_factory=lambda: ["logseq", ".recycle", ".git", "bak"])


class AssetConfig(BaseModel):
    directory: str = "assets"

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        v = v.strip().strip("/")
        if not v or ".." in v.split("/"):
            raise ValueError("assets.directory must be a relative path inside the vault")
        return v


class CalloutConfig(BaseModel):
    tags: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CALLOUT_TAGS))

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: dict[str, str]) -> dict[str, str]:
        table: dict[str, str] = {}
        for tag, kind in v.items():
            tag = tag.strip().lstrip("#").lower()
            if not tag or not kind.strip():
                raise ValueError("callout tags and kinds cannot be empty")
            table[tag] = kind.strip()
        return table


class OutputConfig(BaseModel):
    block_anchors: bool = True
    frontmatter: bool = True
    drop_block_properties: list[str] = Field(default_factory=lambda: ["collapsed"])


class LogsidianConfig(BaseModel):
    index: IndexConfig = Field(default_factory=IndexConfig)
    assets: AssetConfig = Field(default_factory=AssetConfig)
    callouts: CalloutConfig = Field(default_factory=CalloutConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
